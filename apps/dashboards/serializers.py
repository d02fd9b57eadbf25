from django.contrib.auth import get_user_model
from rest_framework import serializers

from .exceptions import InvalidSpreadsheetUrl
from .models import CampaignNameMapping, CampaignRecord, Dashboard
from .sheets import extract_spreadsheet_id

User = get_user_model()


def validate_sheet_url(value):
    try:
        extract_spreadsheet_id(value)
    except InvalidSpreadsheetUrl as e:
        raise serializers.ValidationError(str(e))
    return value


class ManagedClientField(serializers.PrimaryKeyRelatedField):
    """A client account the requesting staff member is allowed to manage."""

    def get_queryset(self):
        request = self.context.get('request')
        if request is None:
            return User.objects.filter(role=User.ROLE_USER)
        return request.user.visible_clients()


class DashboardSerializer(serializers.ModelSerializer):
    client = ManagedClientField()
    client_name = serializers.CharField(source='client.full_name', read_only=True)
    sheet_url = serializers.URLField(max_length=500, validators=[validate_sheet_url])

    class Meta:
        model = Dashboard
        fields = ('id', 'client', 'client_name', 'name', 'sheet_url', 'daily_tab', 'weekly_tab',
                  'monthly_tab', 'created_by', 'last_synced_at', 'created_at', 'updated_at')
        read_only_fields = ('created_by', 'last_synced_at', 'created_at', 'updated_at')


class CampaignRecordSerializer(serializers.ModelSerializer):
    display_name = serializers.SerializerMethodField()

    class Meta:
        model = CampaignRecord
        fields = ('id', 'client', 'dashboard', 'campaign_name', 'display_name', 'reach', 'impressions',
                  'frequency', 'results', 'conversations_started', 'link_clicks', 'amount_spent',
                  'cpm', 'cpc', 'ctr', 'cost_per_result', 'cost_per_conversation', 'report_type',
                  'period_start', 'period_end')
        read_only_fields = fields

    def get_display_name(self, obj):
        names = self.context.get('display_names', {}).get(obj.client_id, {})
        return names.get(obj.campaign_name, obj.campaign_name)


class CampaignNameMappingSerializer(serializers.ModelSerializer):
    client = ManagedClientField()
    display_name = serializers.CharField(max_length=255, trim_whitespace=True, allow_blank=False)

    class Meta:
        model = CampaignNameMapping
        fields = ('id', 'client', 'original_name', 'display_name', 'created_by', 'updated_at')
        read_only_fields = ('created_by', 'updated_at')
        # Upserted on (client, original_name) in the view
        validators = []


class RecordFilterSerializer(serializers.Serializer):
    report_type = serializers.ChoiceField(choices=CampaignRecord.REPORT_TYPE_CHOICES, required=False)
    period_start = serializers.DateField(required=False)


class SummaryFilterSerializer(serializers.Serializer):
    report_type = serializers.ChoiceField(choices=CampaignRecord.REPORT_TYPE_CHOICES, default='weekly')
    period_start = serializers.DateField(required=False)


class SyncRequestSerializer(serializers.Serializer):
    user_id = serializers.IntegerField()
    dashboard_id = serializers.IntegerField()
    sheet_url = serializers.CharField(max_length=500)
    daily_tab = serializers.CharField(max_length=30, required=False, allow_blank=True, default='')
    weekly_tab = serializers.CharField(max_length=30, required=False, allow_blank=True, default='')
    monthly_tab = serializers.CharField(max_length=30, required=False, allow_blank=True, default='')

    def tabs(self):
        return {
            'daily': self.validated_data['daily_tab'],
            'weekly': self.validated_data['weekly_tab'],
            'monthly': self.validated_data['monthly_tab'],
        }
