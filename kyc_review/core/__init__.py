"""Core building blocks for the review console."""
from kyc_review.core.config import ReviewSettings, load_settings
from kyc_review.core.errors import (
    ActionInProgress,
    AlreadyProcessed,
    AuthFailure,
    FetchFailure,
    InvalidCredentials,
    KYCReviewError,
    NetworkFailure,
    NotFound,
    ServerError,
    Unauthorized,
)
from kyc_review.core.logging import configure_logging
from kyc_review.core.models import (
    Credentials,
    KYCRecord,
    Notification,
    Outcome,
    ReviewSelection,
    ReviewSnapshot,
)

__all__ = [
    "ActionInProgress",
    "AlreadyProcessed",
    "AuthFailure",
    "Credentials",
    "FetchFailure",
    "InvalidCredentials",
    "KYCRecord",
    "KYCReviewError",
    "NetworkFailure",
    "NotFound",
    "Notification",
    "Outcome",
    "ReviewSelection",
    "ReviewSettings",
    "ReviewSnapshot",
    "ServerError",
    "Unauthorized",
    "configure_logging",
    "load_settings",
]
