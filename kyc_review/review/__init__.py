"""Review workflow: session, pending queue, actions, and notifications."""
from kyc_review.review.actions import ActionCoordinator
from kyc_review.review.controller import ReviewSessionController
from kyc_review.review.notifications import NotificationQueue
from kyc_review.review.session import SessionManager
from kyc_review.review.store import RecordStore
from kyc_review.review.workflow import (
    display_value,
    record_details,
    records_to_rows,
    status_label,
)

__all__ = [
    "ActionCoordinator",
    "NotificationQueue",
    "RecordStore",
    "ReviewSessionController",
    "SessionManager",
    "display_value",
    "record_details",
    "records_to_rows",
    "status_label",
]
