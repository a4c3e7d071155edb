"""Failure taxonomy for calls against the KYC service.

The service client raises these; the session, store, and action components
catch them where the call is made and turn them into notifications.
"""
from __future__ import annotations

from typing import Optional


class KYCReviewError(Exception):
    """Base class for every failure the review workflow knows how to handle."""

    user_message = "Something went wrong. Please retry."

    def __init__(self, detail: Optional[str] = None) -> None:
        super().__init__(detail or self.user_message)
        self.detail = detail


class InvalidCredentials(KYCReviewError):
    user_message = "Invalid admin credentials."


class AuthFailure(KYCReviewError):
    """Login failed for any reason other than rejected credentials."""

    user_message = "Login failed. Please check your credentials."


class Unauthorized(KYCReviewError):
    """A protected endpoint answered 401 or no session is active."""

    user_message = "Session expired. Please login again."


class AlreadyProcessed(KYCReviewError):
    user_message = "KYC already processed. Refreshing list..."


class NotFound(KYCReviewError):
    user_message = "Record not found."


class ServerError(KYCReviewError):
    user_message = "Server error. Please retry."

    def __init__(self, detail: Optional[str] = None, status_code: Optional[int] = None) -> None:
        super().__init__(detail)
        self.status_code = status_code


class NetworkFailure(KYCReviewError):
    """The request never produced an HTTP response."""

    user_message = "Server error. Please retry."


class FetchFailure(KYCReviewError):
    user_message = "Failed to load KYC records. Please try again."


class ActionInProgress(KYCReviewError):
    user_message = "Another KYC action is still in progress."
