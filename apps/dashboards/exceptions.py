class SheetsSyncError(Exception):
    """Base error for a failed spreadsheet sync."""


class InvalidSpreadsheetUrl(SheetsSyncError):
    """The URL carries no recognizable spreadsheet id."""


class SyncPersistenceError(SheetsSyncError):
    """Replacing the dashboard's rows failed in the database."""
