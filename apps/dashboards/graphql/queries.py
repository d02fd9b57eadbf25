import strawberry
from typing import List, Optional
from strawberry.types import Info
from apps.accounts.graphql.auth import resolve_user
from apps.dashboards.models import Dashboard
from apps.dashboards.repository import CampaignRepository
from .types import CampaignRecordType, DashboardType


@strawberry.type
class DashboardQueries:

    @strawberry.field
    def dashboards(self, info: Info) -> List[DashboardType]:
        user = resolve_user(info)
        if user.is_staff_member:
            return Dashboard.objects.filter(client__in=user.visible_clients())
        return Dashboard.objects.filter(client=user)

    @strawberry.field
    def campaign_records(self, info: Info, report_type: Optional[str] = None,
                         dashboard_id: Optional[int] = None) -> List[CampaignRecordType]:
        user = resolve_user(info)
        queryset = CampaignRepository.records(report_type=report_type)
        if dashboard_id is not None:
            queryset = queryset.filter(dashboard_id=dashboard_id)
        if user.is_staff_member:
            return queryset.filter(client__in=user.visible_clients())
        return queryset.filter(client=user)
