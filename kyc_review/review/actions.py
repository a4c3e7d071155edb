"""Approve/reject coordination with a single system-wide in-flight action."""
from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, Dict, Optional

from kyc_review.core.errors import (
    ActionInProgress,
    AlreadyProcessed,
    KYCReviewError,
    ServerError,
    Unauthorized,
)
from kyc_review.core.models import Outcome, ReviewSelection
from kyc_review.review.notifications import NotificationQueue
from kyc_review.review.session import SessionManager
from kyc_review.review.store import RecordStore
from kyc_review.service.client import KYCServiceClient

logger = logging.getLogger(__name__)

DEFAULT_APPROVE_MESSAGE = "KYC approved successfully."
DEFAULT_REJECT_MESSAGE = "KYC rejected successfully."


class ActionCoordinator:
    """Resolve pending records one at a time across the whole console.

    ``processing_id`` names the record whose approve/reject call is in flight
    and is ``None`` otherwise. A second action issued while one is running is
    refused with ``ActionInProgress``. Store and selection changes are applied
    only after the service confirms the decision.
    """

    def __init__(
        self,
        client: KYCServiceClient,
        session: SessionManager,
        store: RecordStore,
        notifications: NotificationQueue,
        selection: ReviewSelection,
        on_change: Optional[Callable[[], None]] = None,
    ) -> None:
        self.client = client
        self.session = session
        self.store = store
        self.notifications = notifications
        self.selection = selection
        self.processing_id: Optional[int] = None
        self._on_change = on_change

    async def approve(self, kyc_id: int) -> Outcome:
        def call(auth_header: str) -> Dict[str, Any]:
            return self.client.approve(kyc_id, auth_header)

        def on_success(payload: Dict[str, Any]) -> str:
            message = payload.get("message") or DEFAULT_APPROVE_MESSAGE
            self._evict(kyc_id)
            self.notifications.push("success", str(message))
            return str(message)

        return await self._resolve("approve", kyc_id, call, on_success)

    async def reject(self, kyc_id: int, reason: str = "") -> Outcome:
        cleaned = (reason or "").strip() or None

        def call(auth_header: str) -> Dict[str, Any]:
            return self.client.reject(kyc_id, auth_header, reason=cleaned)

        def on_success(payload: Dict[str, Any]) -> Optional[str]:
            self._evict(kyc_id)
            self.selection.close_prompt()
            self.notifications.push("success", DEFAULT_REJECT_MESSAGE)
            return cleaned

        return await self._resolve("reject", kyc_id, call, on_success)

    async def _resolve(
        self,
        action: str,
        kyc_id: int,
        call: Callable[[str], Dict[str, Any]],
        on_success: Callable[[Dict[str, Any]], Any],
    ) -> Outcome:
        if not self.session.authenticated:
            logger.info("Ignoring %s for KYC %s; no authenticated session", action, kyc_id)
            return Outcome.failure(Unauthorized("No authenticated session"))
        if self.processing_id is not None:
            error = ActionInProgress(f"KYC {self.processing_id} is still being processed")
            logger.info("Refusing %s for KYC %s: %s", action, kyc_id, error)
            self.notifications.push("info", error.user_message)
            return Outcome.failure(error)

        generation = self.session.generation
        self.processing_id = kyc_id
        self._changed()
        try:
            payload = await asyncio.to_thread(call, self.session.authorization_header())
        except Unauthorized as exc:
            if self.session.generation == generation:
                self.session.expire()
            return Outcome.failure(exc)
        except AlreadyProcessed as exc:
            logger.info("KYC %s was already processed; reconciling queue", kyc_id)
            self.notifications.push("error", exc.user_message)
            await self.store.refresh()
            return Outcome.failure(exc)
        except KYCReviewError as exc:
            logger.warning("Failed to %s KYC %s: %s", action, kyc_id, exc)
            self.notifications.push("error", exc.user_message)
            return Outcome.failure(exc)
        except Exception as exc:
            logger.exception("Unexpected error during %s of KYC %s", action, kyc_id)
            error = ServerError(str(exc))
            self.notifications.push("error", error.user_message)
            return Outcome.failure(error)
        else:
            logger.info("KYC %s %s", kyc_id, "approved" if action == "approve" else "rejected")
            return Outcome.success(on_success(payload))
        finally:
            self.processing_id = None
            self._changed()

    def _evict(self, kyc_id: int) -> None:
        self.store.remove(kyc_id)
        if self.selection.matches(kyc_id):
            self.selection.clear()

    def _changed(self) -> None:
        if self._on_change:
            self._on_change()
