"""Admin session state: credentials, bearer token, and the 401 expiry path."""
from __future__ import annotations

import asyncio
import base64
import logging
from typing import Callable, List, Optional

from kyc_review.core.errors import AuthFailure, KYCReviewError
from kyc_review.core.models import Credentials, Outcome
from kyc_review.review.notifications import NotificationQueue
from kyc_review.service.client import KYCServiceClient

logger = logging.getLogger(__name__)


class SessionManager:
    """Own login/logout transitions and the header used on protected calls.

    The bearer token returned by login is persisted through ``token_store`` but
    the record endpoints are authorized with a Basic header derived from the
    credentials entered at login. A token found in storage at start-up does not
    authenticate the session; only an interactive login does.
    """

    def __init__(
        self,
        client: KYCServiceClient,
        token_store,
        notifications: NotificationQueue,
        on_change: Optional[Callable[[], None]] = None,
    ) -> None:
        self.client = client
        self.token_store = token_store
        self.notifications = notifications
        self.credentials: Optional[Credentials] = None
        self.authenticated = False
        self.token: Optional[str] = token_store.load()
        self.busy = False
        # Bumped on every login, logout and expiry; in-flight fetches compare it.
        self.generation = 0
        self._on_change = on_change
        self._teardown_listeners: List[Callable[[], None]] = []

    @property
    def username(self) -> Optional[str]:
        return self.credentials.username if self.credentials else None

    def add_teardown_listener(self, listener: Callable[[], None]) -> None:
        """Register state to clear when the session ends by logout or expiry."""

        self._teardown_listeners.append(listener)

    async def login(self, username: str, password: str) -> Outcome:
        self.busy = True
        self._changed()
        try:
            payload = await asyncio.to_thread(self.client.login, username, password)
        except KYCReviewError as exc:
            logger.info("Admin login for %s failed: %s", username, exc)
            self.notifications.push("error", exc.user_message)
            return Outcome.failure(exc)
        except Exception as exc:
            logger.exception("Unexpected error during admin login")
            error = AuthFailure(str(exc))
            self.notifications.push("error", error.user_message)
            return Outcome.failure(error)
        finally:
            self.busy = False
            self._changed()

        self.token = payload["access_token"]
        self.token_store.save(self.token)
        self.credentials = Credentials(username=username, password=password)
        self.authenticated = True
        self.generation += 1
        logger.info("Admin %s logged in (role=%s)", username, payload.get("role"))
        self.notifications.push("success", "Login successful")
        self._changed()
        return Outcome.success(payload)

    def logout(self) -> None:
        self.credentials = None
        self.authenticated = False
        self.token = None
        self.generation += 1
        self.token_store.clear()
        self._teardown()
        logger.info("Admin logged out")
        self.notifications.push("info", "Logged out successfully")
        self._changed()

    def expire(self) -> None:
        """Drop back to the login state after a protected call answered 401."""

        logger.warning("Session for %s expired; forcing re-login", self.username)
        self.credentials = None
        self.authenticated = False
        self.generation += 1
        self._teardown()
        self.notifications.push("error", "Session expired. Please login again.")
        self._changed()

    def authorization_header(self) -> str:
        credentials = self.credentials or Credentials(username="", password="")
        raw = f"{credentials.username}:{credentials.password}".encode("utf-8")
        return f"Basic {base64.b64encode(raw).decode('ascii')}"

    def _teardown(self) -> None:
        for listener in self._teardown_listeners:
            listener()

    def _changed(self) -> None:
        if self._on_change:
            self._on_change()
