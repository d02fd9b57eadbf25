import logging
import time

from django.contrib.auth import get_user_model
from django.db import transaction
from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action, api_view, permission_classes, parser_classes
from rest_framework.exceptions import ValidationError
from rest_framework.parsers import MultiPartParser
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.tokens import RefreshToken

from apps.strategies.storage import ObjectStorage
from .permissions import IsAdmin, IsStaffMember
from .serializers import (
    AccountStatusSerializer,
    AvatarUploadSerializer,
    ClientSerializer,
    LoginSerializer,
    ManagerAssignSerializer,
    ProfileSerializer,
    RoleSerializer,
    UserSerializer,
)

logger = logging.getLogger(__name__)

User = get_user_model()


def tokens_for(user):
    refresh = RefreshToken.for_user(user)
    return {
        'refresh': str(refresh),
        'access': str(refresh.access_token),
    }


@api_view(['POST'])
@permission_classes([AllowAny])
def login(request):
    serializer = LoginSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    user = serializer.validated_data['user']

    return Response({
        **tokens_for(user),
        'user': ProfileSerializer(user).data,
    })


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def logout(request):
    try:
        RefreshToken(request.data.get('refresh')).blacklist()
    except TokenError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
    return Response(status=status.HTTP_205_RESET_CONTENT)


@api_view(['GET', 'PATCH'])
@permission_classes([IsAuthenticated])
def me(request):
    if request.method == 'GET':
        return Response(ProfileSerializer(request.user).data)

    serializer = ProfileSerializer(request.user, data=request.data, partial=True)
    serializer.is_valid(raise_exception=True)
    serializer.save()
    return Response(serializer.data)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
@parser_classes([MultiPartParser])
def upload_avatar(request):
    serializer = AvatarUploadSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    avatar = serializer.validated_data['avatar']

    extension = avatar.name.rsplit('.', 1)[-1].lower() if '.' in avatar.name else 'png'
    blob_name = f"{request.user.pk}/{int(time.time() * 1000)}.{extension}"

    try:
        url = ObjectStorage.for_avatars().upload(
            avatar.read(), blob_name, content_type=avatar.content_type, public=True
        )
    except Exception as e:
        logger.error(f"Avatar upload failed for user {request.user.pk}: {e}")
        return Response({'error': 'Avatar upload failed'}, status=status.HTTP_502_BAD_GATEWAY)

    request.user.avatar_url = url
    request.user.save(update_fields=['avatar_url', 'updated_at'])
    return Response({'avatar_url': url})


class UserViewSet(mixins.ListModelMixin,
                  mixins.CreateModelMixin,
                  mixins.RetrieveModelMixin,
                  mixins.DestroyModelMixin,
                  viewsets.GenericViewSet):
    """Admin-only user management."""

    permission_classes = [IsAdmin]
    serializer_class = UserSerializer
    queryset = User.objects.all()

    def perform_create(self, serializer):
        with transaction.atomic():
            user = serializer.save()
        logger.info(f"User {user.email} created with role {user.role} by {self.request.user.email}")

    def perform_destroy(self, instance):
        if instance.pk == self.request.user.pk:
            raise ValidationError({'error': 'You cannot delete your own account'})
        logger.info(f"User {instance.email} deleted by {self.request.user.email}")
        instance.delete()

    @action(detail=True, methods=['post'])
    def role(self, request, pk=None):
        user = self.get_object()
        serializer = RoleSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        user.role = serializer.validated_data['role']
        user.save(update_fields=['role', 'updated_at'])
        return Response(UserSerializer(user).data)


class ClientViewSet(mixins.ListModelMixin,
                    mixins.RetrieveModelMixin,
                    viewsets.GenericViewSet):
    """Staff view over client accounts; moderators only see their own portfolio."""

    permission_classes = [IsStaffMember]
    serializer_class = ClientSerializer

    def get_queryset(self):
        return self.request.user.visible_clients().select_related('manager')

    @action(detail=True, methods=['post'], permission_classes=[IsAdmin])
    def manager(self, request, pk=None):
        client = self.get_object()
        serializer = ManagerAssignSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        client.manager = serializer.validated_data['manager']
        client.save(update_fields=['manager', 'updated_at'])
        return Response(ClientSerializer(client).data)

    @action(detail=True, methods=['post'], url_path='status')
    def account_status(self, request, pk=None):
        client = self.get_object()
        serializer = AccountStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        client.account_status = serializer.validated_data['account_status']
        client.save(update_fields=['account_status', 'updated_at'])
        logger.info(f"Client {client.email} set to {client.account_status} by {request.user.email}")
        return Response(ClientSerializer(client).data)
