"""In-memory queue of KYC records still awaiting a decision."""
from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, Iterable, List, Optional

from kyc_review.core.errors import FetchFailure, KYCReviewError, Unauthorized
from kyc_review.core.models import KYCRecord, Outcome
from kyc_review.review.notifications import NotificationQueue
from kyc_review.review.session import SessionManager
from kyc_review.service.client import KYCServiceClient

logger = logging.getLogger(__name__)


class RecordStore:
    """Ordered pending records, replaced wholesale on every successful refresh.

    The store is a queue of work remaining: resolved records are removed, never
    updated in place, and only come back through a later refresh.
    """

    def __init__(
        self,
        client: KYCServiceClient,
        session: SessionManager,
        notifications: NotificationQueue,
        on_change: Optional[Callable[[], None]] = None,
    ) -> None:
        self.client = client
        self.session = session
        self.notifications = notifications
        self.alerts: List[str] = []
        self._records: List[KYCRecord] = []
        self._inflight = 0
        self._on_change = on_change

    @property
    def records(self) -> List[KYCRecord]:
        return list(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def get(self, kyc_id: int) -> Optional[KYCRecord]:
        for record in self._records:
            if record.id == kyc_id:
                return record
        return None

    @property
    def loading(self) -> bool:
        return self._inflight > 0

    async def refresh(self) -> Outcome:
        if not self.session.authenticated:
            logger.info("Skipping refresh; no authenticated session")
            return Outcome.failure(Unauthorized("No authenticated session"))

        generation = self.session.generation
        self._inflight += 1
        self._changed()
        try:
            payload = await asyncio.to_thread(
                self.client.list_pending, self.session.authorization_header()
            )
        except Unauthorized as exc:
            if self._is_current(generation):
                self.session.expire()
            return Outcome.failure(exc)
        except KYCReviewError as exc:
            logger.warning("Failed to fetch pending KYC records: %s", exc)
            return self._fetch_failed(FetchFailure(str(exc)), generation)
        except Exception as exc:
            logger.exception("Unexpected error while fetching pending KYC records")
            return self._fetch_failed(FetchFailure(str(exc)), generation)
        finally:
            self._inflight -= 1
            self._changed()

        if not self._is_current(generation):
            logger.info("Discarding pending queue fetched for a session that has ended")
            return Outcome.failure(Unauthorized("Session ended during refresh"))
        self.replace(payload)
        return Outcome.success(self.records)

    def _is_current(self, generation: int) -> bool:
        return self.session.authenticated and self.session.generation == generation

    def _fetch_failed(self, error: FetchFailure, generation: int) -> Outcome:
        if self._is_current(generation):
            self.notifications.push("error", error.user_message)
        return Outcome.failure(error)

    def replace(self, payload: Iterable[Any]) -> None:
        """Swap in a freshly fetched queue, skipping entries that do not parse."""

        records: List[KYCRecord] = []
        alerts: List[str] = []
        for index, item in enumerate(payload):
            try:
                record = KYCRecord.from_dict(item)
            except ValueError as exc:
                logger.error("Skipping malformed KYC record at position %d: %s", index, exc)
                alerts.append(f"Skipped malformed record at position {index}")
                continue
            if record.status != "pending":
                logger.warning("Skipping KYC record %s with status %s", record.id, record.status)
                alerts.append(f"Skipped record {record.id} with status {record.status}")
                continue
            records.append(record)

        self._records = records
        self.alerts = alerts
        logger.info("Loaded %d pending KYC records", len(records))
        self._changed()

    def remove(self, kyc_id: int) -> bool:
        remaining = [record for record in self._records if record.id != kyc_id]
        if len(remaining) == len(self._records):
            return False
        self._records = remaining
        self._changed()
        return True

    def clear(self) -> None:
        self._records = []
        self.alerts = []
        self._changed()

    def _changed(self) -> None:
        if self._on_change:
            self._on_change()
