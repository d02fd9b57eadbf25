from django.conf import settings
from rest_framework import serializers
from django.contrib.auth import get_user_model

User = get_user_model()


class UserSerializer(serializers.ModelSerializer):
    password = serializers.CharField(write_only=True, min_length=8)
    role = serializers.ChoiceField(choices=User.ROLE_CHOICES, default=User.ROLE_USER)

    class Meta:
        model = User
        fields = ('id', 'email', 'password', 'full_name', 'company', 'role',
                  'account_status', 'manager', 'date_joined')
        read_only_fields = ('account_status', 'manager', 'date_joined')
        # validate_email owns uniqueness, case-insensitively
        extra_kwargs = {'email': {'validators': []}}

    def validate_email(self, value):
        if User.objects.filter(email__iexact=value).exists():
            raise serializers.ValidationError(f"User with email {value} already exists")
        return value

    def create(self, validated_data):
        password = validated_data.pop('password')
        return User.objects.create_user(password=password, **validated_data)


class ProfileSerializer(serializers.ModelSerializer):
    manager_name = serializers.CharField(source='manager.full_name', read_only=True, default=None)

    class Meta:
        model = User
        fields = ('id', 'email', 'full_name', 'company', 'phone', 'bio', 'avatar_url',
                  'role', 'account_status', 'manager', 'manager_name')
        read_only_fields = ('email', 'avatar_url', 'role', 'account_status', 'manager')


class ClientSerializer(serializers.ModelSerializer):
    manager_name = serializers.CharField(source='manager.full_name', read_only=True, default=None)

    class Meta:
        model = User
        fields = ('id', 'email', 'full_name', 'company', 'phone', 'avatar_url',
                  'account_status', 'manager', 'manager_name')
        read_only_fields = fields


class RoleSerializer(serializers.Serializer):
    role = serializers.ChoiceField(choices=User.ROLE_CHOICES)


class AccountStatusSerializer(serializers.Serializer):
    account_status = serializers.ChoiceField(choices=User.STATUS_CHOICES)


class ManagerAssignSerializer(serializers.Serializer):
    manager = serializers.PrimaryKeyRelatedField(
        queryset=User.objects.filter(role__in=[User.ROLE_ADMIN, User.ROLE_MODERATOR]),
        allow_null=True,
    )


class AvatarUploadSerializer(serializers.Serializer):
    avatar = serializers.FileField()

    def validate_avatar(self, value):
        if not (value.content_type or '').startswith('image/'):
            raise serializers.ValidationError('Avatar must be an image')
        if value.size > settings.AVATAR_MAX_UPLOAD_SIZE:
            raise serializers.ValidationError('Avatar must be at most 2MB')
        return value


class LoginSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField()

    def validate(self, data):
        try:
            # Look the user up by email
            user = User.objects.get(email__iexact=data['email'])
        except User.DoesNotExist:
            raise serializers.ValidationError('Invalid credentials')

        if not user.check_password(data['password']):
            raise serializers.ValidationError('Invalid credentials')
        if not user.is_active:
            raise serializers.ValidationError('User account is disabled')

        data['user'] = user
        return data
