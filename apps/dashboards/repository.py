import logging

from django.conf import settings
from django.core.cache import cache
from django.db.models import Count, Max, Sum

from .models import CampaignNameMapping, CampaignRecord

logger = logging.getLogger(__name__)


class CampaignRepository:
    """Read-side queries behind the customer dashboards."""

    @staticmethod
    def records(client=None, dashboard=None, report_type=None, period_start=None):
        queryset = CampaignRecord.objects.all()
        if client is not None:
            queryset = queryset.filter(client=client)
        if dashboard is not None:
            queryset = queryset.filter(dashboard=dashboard)
        if report_type:
            queryset = queryset.filter(report_type=report_type)
        if period_start:
            queryset = queryset.filter(period_start=period_start)
        return queryset

    @staticmethod
    def display_names(client_id):
        return dict(
            CampaignNameMapping.objects
            .filter(client_id=client_id)
            .values_list('original_name', 'display_name')
        )

    @staticmethod
    def summary_cache_key(dashboard, report_type, period_start):
        # Count catches deletes, which leave the latest timestamp unchanged
        mappings = (
            CampaignNameMapping.objects
            .filter(client_id=dashboard.client_id)
            .aggregate(latest=Max('updated_at'), total=Count('id'))
        )
        mappings_version = mappings['latest']
        synced = dashboard.last_synced_at.timestamp() if dashboard.last_synced_at else 0
        mapped = mappings_version.timestamp() if mappings_version else 0
        return f"dashboard_summary:{dashboard.pk}:{synced}:{mapped}:{mappings['total']}:{report_type}:{period_start or 'all'}"

    @classmethod
    def summary(cls, dashboard, report_type='weekly', period_start=None):
        cache_key = cls.summary_cache_key(dashboard, report_type, period_start)
        cached = cache.get(cache_key)
        if cached is not None:
            return cached

        records = cls.records(dashboard=dashboard, report_type=report_type, period_start=period_start)
        totals = records.aggregate(
            conversations=Sum('conversations_started'),
            spent=Sum('amount_spent'),
            reach=Sum('reach'),
            impressions=Sum('impressions'),
            clicks=Sum('link_clicks'),
        )
        conversations = totals['conversations'] or 0
        spent = float(totals['spent'] or 0)
        impressions = totals['impressions'] or 0
        clicks = totals['clicks'] or 0

        names = cls.display_names(dashboard.client_id)
        chart = [{
            'name': names.get(record.campaign_name, record.campaign_name),
            'period_start': record.period_start.isoformat(),
            'conversations': record.conversations_started,
            'spent': float(record.amount_spent),
            'reach': record.reach,
            'impressions': record.impressions,
            'clicks': record.link_clicks,
        } for record in records]

        data = {
            'dashboard_id': dashboard.pk,
            'report_type': report_type,
            'period_start': period_start,
            'last_synced_at': dashboard.last_synced_at.isoformat() if dashboard.last_synced_at else None,
            'totals': {
                'conversations': conversations,
                'spent': spent,
                'reach': totals['reach'] or 0,
                'impressions': impressions,
                'clicks': clicks,
            },
            'averages': {
                'cost_per_conversation': spent / conversations if conversations else 0.0,
                'cpc': spent / clicks if clicks else 0.0,
                'ctr': clicks / impressions * 100 if impressions else 0.0,
            },
            'campaigns': chart,
        }

        cache.set(cache_key, data, settings.SUMMARY_CACHE_TIMEOUT)
        return data
