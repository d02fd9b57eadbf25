import logging

from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action, api_view, permission_classes
from rest_framework.exceptions import NotFound
from rest_framework.response import Response

from apps.accounts.permissions import IsStaffMember, IsStaffOrReadOnly
from .exceptions import InvalidSpreadsheetUrl, SheetsSyncError
from .models import CampaignNameMapping, Dashboard
from .repository import CampaignRepository
from .serializers import (
    CampaignNameMappingSerializer,
    CampaignRecordSerializer,
    DashboardSerializer,
    RecordFilterSerializer,
    SummaryFilterSerializer,
    SyncRequestSerializer,
)
from .sync import sync_dashboard

logger = logging.getLogger(__name__)


def run_sync(dashboard, **overrides):
    """Run a sync and translate its failures into the error payload of the API."""
    try:
        result = sync_dashboard(dashboard, **overrides)
    except InvalidSpreadsheetUrl as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
    except SheetsSyncError as e:
        return Response({'error': str(e)}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)
    except Exception as e:
        logger.exception(f"Error in sync-google-sheets for dashboard {dashboard.pk}")
        return Response({'error': str(e)}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

    return Response(result.as_response())


@api_view(['POST'])
@permission_classes([IsStaffMember])
def sync_google_sheets(request):
    """Sync a dashboard from an explicit spreadsheet URL and tab ids."""
    serializer = SyncRequestSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    data = serializer.validated_data

    dashboard = (
        Dashboard.objects
        .filter(pk=data['dashboard_id'], client__in=request.user.visible_clients())
        .first()
    )
    if dashboard is None:
        return Response({'error': 'Dashboard not found'}, status=status.HTTP_404_NOT_FOUND)
    if dashboard.client_id != data['user_id']:
        return Response({'error': 'Dashboard does not belong to this user'},
                        status=status.HTTP_400_BAD_REQUEST)

    return run_sync(dashboard, sheet_url=data['sheet_url'], tabs=serializer.tabs())


class DashboardViewSet(viewsets.ModelViewSet):
    """Staff manage dashboards of their clients; clients read their own."""

    permission_classes = [IsStaffOrReadOnly]
    serializer_class = DashboardSerializer

    def get_queryset(self):
        user = self.request.user
        queryset = Dashboard.objects.select_related('client')
        if user.is_staff_member:
            queryset = queryset.filter(client__in=user.visible_clients())
            client_id = self.request.query_params.get('client')
            if client_id:
                queryset = queryset.filter(client_id=client_id)
            return queryset
        return queryset.filter(client=user)

    def perform_create(self, serializer):
        serializer.save(created_by=self.request.user)

    @action(detail=True, methods=['post'], permission_classes=[IsStaffMember])
    def sync(self, request, pk=None):
        return run_sync(self.get_object())

    @action(detail=True, methods=['get'])
    def summary(self, request, pk=None):
        dashboard = self.get_object()
        filters = SummaryFilterSerializer(data=request.query_params)
        filters.is_valid(raise_exception=True)

        period_start = filters.validated_data.get('period_start')
        data = CampaignRepository.summary(
            dashboard,
            report_type=filters.validated_data['report_type'],
            period_start=period_start.isoformat() if period_start else None,
        )
        return Response(data)


class CampaignRecordViewSet(viewsets.ReadOnlyModelViewSet):
    serializer_class = CampaignRecordSerializer

    def get_queryset(self):
        user = self.request.user
        filters = RecordFilterSerializer(data=self.request.query_params)
        filters.is_valid(raise_exception=True)

        queryset = CampaignRepository.records(
            report_type=filters.validated_data.get('report_type'),
            period_start=filters.validated_data.get('period_start'),
        )
        if user.is_staff_member:
            queryset = queryset.filter(client__in=user.visible_clients())
            client_id = self.request.query_params.get('client')
            if client_id:
                queryset = queryset.filter(client_id=client_id)
        else:
            queryset = queryset.filter(client=user)

        dashboard_id = self.request.query_params.get('dashboard')
        if dashboard_id:
            queryset = queryset.filter(dashboard_id=dashboard_id)
        return queryset

    def get_serializer_context(self):
        context = super().get_serializer_context()
        user = self.request.user
        if user.is_authenticated and user.is_client:
            context['display_names'] = {user.pk: CampaignRepository.display_names(user.pk)}
        return context


class CampaignNameMappingViewSet(mixins.ListModelMixin,
                                 mixins.CreateModelMixin,
                                 mixins.DestroyModelMixin,
                                 viewsets.GenericViewSet):
    permission_classes = [IsStaffMember]
    serializer_class = CampaignNameMappingSerializer

    def get_queryset(self):
        queryset = CampaignNameMapping.objects.filter(client__in=self.request.user.visible_clients())
        client_id = self.request.query_params.get('client')
        if client_id:
            queryset = queryset.filter(client_id=client_id)
        return queryset

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        mapping, created = CampaignNameMapping.objects.update_or_create(
            client=data['client'],
            original_name=data['original_name'],
            defaults={'display_name': data['display_name'], 'created_by': request.user},
        )
        return Response(
            self.get_serializer(mapping).data,
            status=status.HTTP_201_CREATED if created else status.HTTP_200_OK,
        )

    def client_campaign_names(self, client_id):
        names = (
            CampaignRepository.records(client=client_id)
            .values_list('campaign_name', flat=True)
            .distinct()
            .order_by('campaign_name')
        )
        return list(names)

    @action(detail=False, methods=['get'])
    def campaigns(self, request):
        """Distinct campaign names of a client, to pick which to rename."""
        client_id = request.query_params.get('client')
        if not client_id or not request.user.visible_clients().filter(pk=client_id).exists():
            raise NotFound('Client not found')
        return Response({'campaigns': self.client_campaign_names(client_id)})
