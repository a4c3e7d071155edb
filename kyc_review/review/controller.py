"""Top-level review session: the entry points a presentation layer calls."""
from __future__ import annotations

import asyncio
import logging
from typing import Callable, List, Optional, Union

from kyc_review.core.config import ReviewSettings
from kyc_review.core.errors import NotFound
from kyc_review.core.models import KYCRecord, Outcome, ReviewSelection, ReviewSnapshot
from kyc_review.review.actions import ActionCoordinator
from kyc_review.review.notifications import DEFAULT_TTL, NotificationQueue
from kyc_review.review.session import SessionManager
from kyc_review.review.store import RecordStore
from kyc_review.service.client import KYCServiceClient
from kyc_review.service.storage import FileTokenStore, MemoryTokenStore

logger = logging.getLogger(__name__)

SnapshotListener = Callable[[ReviewSnapshot], None]


class ReviewSessionController:
    """Compose session, queue, actions, and notifications for one reviewer.

    All methods must run on the event loop thread. Failures never raise: each
    operation returns an ``Outcome`` and reports problems through the
    notification queue.
    """

    def __init__(
        self,
        client: KYCServiceClient,
        token_store=None,
        notification_ttl: float = DEFAULT_TTL,
        loop: Optional[asyncio.AbstractEventLoop] = None,
    ) -> None:
        self._listeners: List[SnapshotListener] = []
        self.selection = ReviewSelection()
        self.notifications = NotificationQueue(ttl=notification_ttl, loop=loop, on_change=self._emit)
        self.session = SessionManager(
            client, token_store or MemoryTokenStore(), self.notifications, on_change=self._emit
        )
        self.store = RecordStore(client, self.session, self.notifications, on_change=self._emit)
        self.actions = ActionCoordinator(
            client, self.session, self.store, self.notifications, self.selection, on_change=self._emit
        )
        self.session.add_teardown_listener(self.store.clear)
        self.session.add_teardown_listener(self.selection.clear)

    @classmethod
    def from_settings(
        cls, settings: ReviewSettings, loop: Optional[asyncio.AbstractEventLoop] = None
    ) -> "ReviewSessionController":
        client = KYCServiceClient(settings.api_base_url, timeout=settings.request_timeout)
        return cls(
            client,
            token_store=FileTokenStore(settings.token_file),
            notification_ttl=settings.notification_ttl,
            loop=loop,
        )

    @property
    def loading(self) -> bool:
        return self.session.busy or self.store.loading

    @property
    def processing_id(self) -> Optional[int]:
        return self.actions.processing_id

    async def login(self, username: str, password: str) -> Outcome:
        outcome = await self.session.login(username, password)
        if outcome.ok:
            await self.store.refresh()
        return outcome

    async def refresh(self) -> Outcome:
        return await self.store.refresh()

    def open_details(self, target: Union[int, KYCRecord]) -> Outcome:
        record = target if isinstance(target, KYCRecord) else self.store.get(target)
        if record is None:
            return Outcome.failure(NotFound(f"KYC {target} is not in the pending queue"))
        self.selection.open(record)
        self._emit()
        return Outcome.success(record)

    def close_details(self) -> None:
        self.selection.clear()
        self._emit()

    def open_reject_prompt(self, target: Union[int, KYCRecord, None] = None) -> Outcome:
        if target is not None:
            opened = self.open_details(target)
            if not opened.ok:
                return opened
        if self.selection.record is None:
            return Outcome.failure(NotFound("No KYC record selected"))
        self.selection.reject_prompt_open = True
        self._emit()
        return Outcome.success(self.selection.record)

    def close_reject_prompt(self) -> None:
        self.selection.close_prompt()
        self._emit()

    def set_reject_reason(self, reason: str) -> None:
        self.selection.reject_reason = reason
        self._emit()

    async def approve(self, kyc_id: int) -> Outcome:
        return await self.actions.approve(kyc_id)

    async def reject(self, kyc_id: int, reason: Optional[str] = None) -> Outcome:
        """Reject a record, defaulting the reason to the text typed into the prompt."""

        if reason is None:
            reason = self.selection.reject_reason if self.selection.matches(kyc_id) else ""
        return await self.actions.reject(kyc_id, reason)

    def logout(self) -> None:
        self.session.logout()

    def dismiss_notification(self, notification_id: int) -> bool:
        return self.notifications.dismiss(notification_id)

    def snapshot(self) -> ReviewSnapshot:
        return ReviewSnapshot(
            authenticated=self.session.authenticated,
            username=self.session.username,
            records=tuple(self.store.records),
            selected_record=self.selection.record,
            processing_id=self.actions.processing_id,
            notifications=tuple(self.notifications.items),
            loading=self.loading,
            reject_prompt_open=self.selection.reject_prompt_open,
            reject_reason=self.selection.reject_reason,
        )

    def subscribe(self, listener: SnapshotListener) -> Callable[[], None]:
        """Call ``listener`` with a fresh snapshot after every state change."""

        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _emit(self) -> None:
        if not self._listeners:
            return
        snapshot = self.snapshot()
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception:  # pragma: no cover - exercised via caplog
                logger.exception("Snapshot listener %r failed", listener)
