from django.db.models import Count, Min, Q
from rest_framework import mixins, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from apps.accounts.permissions import IsStaffMember
from .models import AdAccountMapping, MetaReport
from .serializers import AdAccountMappingSerializer, MetaReportSerializer


class AdAccountMappingViewSet(mixins.ListModelMixin,
                              mixins.CreateModelMixin,
                              mixins.DestroyModelMixin,
                              viewsets.GenericViewSet):
    permission_classes = [IsStaffMember]
    serializer_class = AdAccountMappingSerializer

    def get_queryset(self):
        return (
            AdAccountMapping.objects
            .filter(client__in=self.request.user.visible_clients())
            .select_related('client')
        )

    @action(detail=False, methods=['get'])
    def unmapped(self, request):
        """Ad accounts that report data but are not linked to any client yet."""
        mapped = AdAccountMapping.objects.values_list('account_id', flat=True)
        accounts = (
            MetaReport.objects
            .exclude(account_id__in=mapped)
            .values('account_id')
            .annotate(campaign_count=Count('id'), first_report_type=Min('report_type', filter=~Q(report_type='')))
            .order_by('account_id')
        )
        return Response({
            'accounts': [{
                'account_id': row['account_id'],
                'campaign_count': row['campaign_count'],
                'report_type': row['first_report_type'] or '-',
            } for row in accounts]
        })


class MetaReportViewSet(viewsets.ReadOnlyModelViewSet):
    """Reports of the ad accounts mapped to the requesting client."""

    serializer_class = MetaReportSerializer

    def get_queryset(self):
        user = self.request.user
        if user.is_staff_member:
            accounts = AdAccountMapping.objects.filter(client__in=user.visible_clients())
        else:
            accounts = AdAccountMapping.objects.filter(client=user)

        queryset = MetaReport.objects.filter(account_id__in=accounts.values('account_id'))
        report_type = self.request.query_params.get('report_type')
        if report_type:
            queryset = queryset.filter(report_type=report_type)
        return queryset
