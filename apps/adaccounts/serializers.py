from rest_framework import serializers
from apps.dashboards.serializers import ManagedClientField
from .models import AdAccountMapping, MetaReport


class AdAccountMappingSerializer(serializers.ModelSerializer):
    client = ManagedClientField()
    client_name = serializers.CharField(source='client.full_name', read_only=True)
    company = serializers.CharField(source='client.company', read_only=True)

    class Meta:
        model = AdAccountMapping
        fields = ('id', 'account_id', 'client', 'client_name', 'company', 'account_name', 'created_at')
        read_only_fields = ('created_at',)


class MetaReportSerializer(serializers.ModelSerializer):
    class Meta:
        model = MetaReport
        fields = ('id', 'account_id', 'campaign_name', 'report_type', 'reach', 'impressions',
                  'link_clicks', 'conversations_started', 'amount_spent', 'date_start', 'date_end')
        read_only_fields = fields
