import strawberry_django
from strawberry import auto
from apps.dashboards.models import CampaignRecord, Dashboard


@strawberry_django.type(Dashboard)
class DashboardType:
    id: auto
    name: auto
    last_synced_at: auto


@strawberry_django.type(CampaignRecord)
class CampaignRecordType:
    id: auto
    campaign_name: auto
    reach: auto
    impressions: auto
    frequency: auto
    results: auto
    conversations_started: auto
    link_clicks: auto
    amount_spent: auto
    cpm: auto
    cpc: auto
    ctr: auto
    report_type: auto
    period_start: auto
    period_end: auto
