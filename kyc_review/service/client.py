"""HTTP client for the remote KYC service."""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import requests

from kyc_review.core.errors import (
    AlreadyProcessed,
    AuthFailure,
    InvalidCredentials,
    NetworkFailure,
    NotFound,
    ServerError,
    Unauthorized,
)

logger = logging.getLogger(__name__)

LOGIN_PATH = "/admin/login"
PENDING_PATH = "/admin/kyc/pending"
APPROVE_PATH = "/admin/kyc/{kyc_id}/approve"
REJECT_PATH = "/admin/kyc/{kyc_id}/reject"


def _is_success(response: requests.Response) -> bool:
    return 200 <= response.status_code < 300


def _json_or_none(response: requests.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return None


class KYCServiceClient:
    """Blocking client for the admin endpoints of the KYC service.

    Every method either returns the decoded payload or raises one of the
    ``kyc_review.core.errors`` types. Callers on the event loop run these
    methods through ``asyncio.to_thread``.
    """

    def __init__(
        self,
        base_url: str = "",
        timeout: float = 15.0,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    def url(self, path: str) -> str:
        return f"{self.base_url}{path}"

    def login(self, username: str, password: str) -> Dict[str, Any]:
        """Exchange admin credentials for a bearer token payload."""

        try:
            response = self.session.post(
                self.url(LOGIN_PATH),
                headers={"Content-Type": "application/json"},
                json={"username": username, "password": password},
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            logger.warning("Login request failed: %s", exc)
            raise AuthFailure(f"Login request failed: {exc}") from exc

        if response.status_code == 401:
            raise InvalidCredentials()
        if not _is_success(response):
            raise AuthFailure(f"Login returned HTTP {response.status_code}: {response.text[:200]}")

        data = _json_or_none(response)
        if not isinstance(data, dict) or not data.get("access_token"):
            raise AuthFailure("Missing access token in response")
        return data

    def list_pending(self, auth_header: str) -> List[Dict[str, Any]]:
        """Return the raw pending-queue payload."""

        response = self._send("GET", PENDING_PATH, auth_header)
        data = _json_or_none(response)
        if not isinstance(data, list):
            raise ServerError("Pending queue response is not a JSON array", status_code=response.status_code)
        return data

    def approve(self, kyc_id: int, auth_header: str) -> Dict[str, Any]:
        response = self._send("POST", APPROVE_PATH.format(kyc_id=kyc_id), auth_header)
        data = _json_or_none(response)
        return data if isinstance(data, dict) else {}

    def reject(self, kyc_id: int, auth_header: str, reason: Optional[str] = None) -> Dict[str, Any]:
        """Reject a record; ``reason`` is sent as a form field only when given."""

        form = {"reason": reason} if reason else None
        response = self._send("POST", REJECT_PATH.format(kyc_id=kyc_id), auth_header, data=form)
        data = _json_or_none(response)
        return data if isinstance(data, dict) else {}

    def _send(self, method: str, path: str, auth_header: str, **kwargs: Any) -> requests.Response:
        kwargs = {key: value for key, value in kwargs.items() if value is not None}
        try:
            response = self.session.request(
                method,
                self.url(path),
                headers={"Authorization": auth_header},
                timeout=self.timeout,
                **kwargs,
            )
        except requests.RequestException as exc:
            logger.warning("%s %s failed: %s", method, path, exc)
            raise NetworkFailure(str(exc)) from exc

        logger.debug("%s %s -> %s", method, path, response.status_code)
        if _is_success(response):
            return response

        status = response.status_code
        if status == 401:
            raise Unauthorized(f"{method} {path} returned 401")
        if status == 400:
            raise AlreadyProcessed(f"{method} {path} returned 400")
        if status == 404:
            raise NotFound(f"{method} {path} returned 404")
        raise ServerError(f"{method} {path} returned HTTP {status}", status_code=status)
