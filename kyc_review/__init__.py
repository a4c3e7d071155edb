"""Review console for pending KYC verification records."""
from kyc_review.core import (
    KYCRecord,
    Notification,
    Outcome,
    ReviewSettings,
    ReviewSnapshot,
    configure_logging,
    load_settings,
)
from kyc_review.review import (
    ActionCoordinator,
    NotificationQueue,
    RecordStore,
    ReviewSessionController,
    SessionManager,
    records_to_rows,
)
from kyc_review.service import FileTokenStore, KYCServiceClient, MemoryTokenStore

__all__ = [
    "ActionCoordinator",
    "FileTokenStore",
    "KYCRecord",
    "KYCServiceClient",
    "MemoryTokenStore",
    "Notification",
    "NotificationQueue",
    "Outcome",
    "RecordStore",
    "ReviewSessionController",
    "ReviewSettings",
    "ReviewSnapshot",
    "SessionManager",
    "configure_logging",
    "load_settings",
    "records_to_rows",
]
