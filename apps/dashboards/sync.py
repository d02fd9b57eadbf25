import logging
from dataclasses import dataclass, field

from django.db import DatabaseError, transaction
from django.utils import timezone

from .exceptions import SyncPersistenceError
from .models import CampaignRecord
from .sheets import REPORT_TYPES, derive_metrics, extract_spreadsheet_id, fetch_tabs, parse_csv

logger = logging.getLogger(__name__)


@dataclass
class SyncResult:
    dashboard_id: int
    total: int = 0
    counts: dict = field(default_factory=dict)

    def as_response(self):
        return {
            'success': True,
            'dashboard_id': self.dashboard_id,
            'total_records': self.total,
            'counts': self.counts,
        }


TAB_FIELDS = {
    'daily': 'daily_tab',
    'weekly': 'weekly_tab',
    'monthly': 'monthly_tab',
}


def replace_dashboard_records(dashboard, rows, config=None):
    """
    Swap every stored row of the dashboard for ``rows`` and stamp the sync time.

    ``config`` maps Dashboard fields to new values (sheet URL, tab gids) that
    are saved in the same transaction, so later syncs read the sheet the rows
    came from.
    """
    records = [
        CampaignRecord(client_id=dashboard.client_id, dashboard=dashboard, **row)
        for row in rows
    ]
    config = config or {}

    try:
        with transaction.atomic():
            deleted, _ = CampaignRecord.objects.filter(dashboard=dashboard).delete()
            CampaignRecord.objects.bulk_create(records, batch_size=500)
            for name, value in config.items():
                setattr(dashboard, name, value)
            dashboard.last_synced_at = timezone.now()
            dashboard.save(update_fields=[*config, 'last_synced_at', 'updated_at'])
    except DatabaseError as e:
        logger.error(f"Error replacing records of dashboard {dashboard.pk}: {e}")
        raise SyncPersistenceError(f"Failed to store campaign data: {e}") from e

    logger.info(f"Dashboard {dashboard.pk}: replaced {deleted} rows with {len(records)}")
    return len(records)


def sync_dashboard(dashboard, sheet_url=None, tabs=None):
    """
    Pull the dashboard's spreadsheet tabs and replace its campaign rows.

    ``sheet_url`` and ``tabs`` override the dashboard's stored configuration
    and become the stored configuration once the rows are replaced. Raises InvalidSpreadsheetUrl before any request when the URL is unusable,
    and SyncPersistenceError when the replace fails. Tabs that cannot be
    fetched contribute no rows.
    """
    sheet_url = sheet_url or dashboard.sheet_url
    tabs = tabs if tabs is not None else dashboard.tabs

    logger.info(f"Starting Google Sheets sync for dashboard {dashboard.pk} (client {dashboard.client_id})")
    sheet_id = extract_spreadsheet_id(sheet_url)

    csv_by_type = fetch_tabs(sheet_id, tabs)

    result = SyncResult(dashboard_id=dashboard.pk)
    rows = []
    for report_type in REPORT_TYPES:
        parsed = [derive_metrics(row) for row in parse_csv(csv_by_type[report_type], report_type)]
        result.counts[report_type] = len(parsed)
        rows.extend(parsed)

    config = {'sheet_url': sheet_url}
    config.update({TAB_FIELDS[report_type]: gid or '' for report_type, gid in tabs.items()})
    config = {name: value for name, value in config.items() if getattr(dashboard, name) != value}

    result.total = replace_dashboard_records(dashboard, rows, config=config)

    logger.info(f"Sync completed for dashboard {dashboard.pk}: {result.counts}")
    return result
