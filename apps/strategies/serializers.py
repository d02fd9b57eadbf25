from django.conf import settings
from rest_framework import serializers
from apps.dashboards.serializers import ManagedClientField
from .models import StrategyDocument

PDF_CONTENT_TYPE = 'application/pdf'


class StrategyDocumentSerializer(serializers.ModelSerializer):
    client_name = serializers.CharField(source='client.full_name', read_only=True)

    class Meta:
        model = StrategyDocument
        fields = ('id', 'client', 'client_name', 'title', 'description', 'file_name', 'file_size',
                  'uploaded_by', 'created_at')
        read_only_fields = fields


class StrategyUploadSerializer(serializers.Serializer):
    client = ManagedClientField()
    title = serializers.CharField(max_length=200)
    description = serializers.CharField(required=False, allow_blank=True, default='')
    file = serializers.FileField()

    def validate_file(self, value):
        is_pdf = value.content_type == PDF_CONTENT_TYPE or value.name.lower().endswith('.pdf')
        if not is_pdf:
            raise serializers.ValidationError('Only PDF files are allowed')
        if value.size > settings.STRATEGY_MAX_UPLOAD_SIZE:
            raise serializers.ValidationError('File must be 10MB or smaller')
        return value
