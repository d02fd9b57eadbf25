from celery import shared_task
import logging

from .exceptions import SheetsSyncError
from .models import Dashboard
from .sync import sync_dashboard

logger = logging.getLogger(__name__)


@shared_task
def sync_dashboard_task(dashboard_id):
    """Sync one dashboard in the background. Failures are not retried."""
    dashboard = Dashboard.objects.get(pk=dashboard_id)
    return sync_dashboard(dashboard).as_response()


@shared_task
def sync_all_dashboards():
    """Nightly sync of every dashboard; one failing spreadsheet does not stop the rest."""
    synced = []
    failed = {}

    for dashboard in Dashboard.objects.exclude(sheet_url='').select_related('client'):
        try:
            result = sync_dashboard(dashboard)
        except SheetsSyncError as e:
            logger.error(f"Nightly sync failed for dashboard {dashboard.pk}: {e}")
            failed[dashboard.pk] = str(e)
            continue
        synced.append(result.dashboard_id)

    logger.info(f"Nightly sync finished: {len(synced)} synced, {len(failed)} failed")
    return {'synced': synced, 'failed': failed}
