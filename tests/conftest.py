"""Pytest configuration: importable package plus a scripted fake of the KYC service."""
import sys
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List

import pytest

# Ensure repository root is on sys.path for module resolution
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from kyc_review.review.controller import ReviewSessionController
from kyc_review.service.client import KYCServiceClient
from kyc_review.service.storage import MemoryTokenStore

BASE_URL = "http://kyc.test"
_NO_BODY = object()


class FakeResponse:
    """Just enough of ``requests.Response`` for the service client."""

    def __init__(self, status_code: int = 200, payload: Any = _NO_BODY, text: str = "") -> None:
        self.status_code = status_code
        self._payload = payload
        self.text = text

    def json(self) -> Any:
        if self._payload is _NO_BODY:
            raise ValueError("No JSON body")
        return self._payload


@dataclass
class Call:
    method: str
    path: str
    kwargs: Dict[str, Any] = field(default_factory=dict)

    @property
    def headers(self) -> Dict[str, str]:
        return self.kwargs.get("headers") or {}


class FakeHTTPSession:
    """Scripted stand-in for ``requests.Session``.

    Each route holds a list of responses consumed in order; the last one is
    reused for further calls. An entry may be a ``FakeResponse``, an exception
    to raise, or a callable receiving the request kwargs.
    """

    def __init__(self) -> None:
        self.routes: Dict[tuple, List[Any]] = {}
        self.calls: List[Call] = []
        self._lock = threading.Lock()

    def add(self, method: str, path: str, *responses: Any) -> None:
        self.routes[(method, path)] = list(responses)

    def request(self, method: str, url: str, **kwargs: Any) -> FakeResponse:
        path = url[len(BASE_URL):] if url.startswith(BASE_URL) else url
        with self._lock:
            self.calls.append(Call(method, path, kwargs))
            queue = self.routes.get((method, path))
            if not queue:
                return FakeResponse(599, text=f"no route for {method} {path}")
            item = queue.pop(0) if len(queue) > 1 else queue[0]
        if isinstance(item, BaseException):
            raise item
        if callable(item):
            return item(kwargs)
        return item

    def post(self, url: str, **kwargs: Any) -> FakeResponse:
        return self.request("POST", url, **kwargs)

    def get(self, url: str, **kwargs: Any) -> FakeResponse:
        return self.request("GET", url, **kwargs)

    def calls_to(self, method: str, path: str) -> List[Call]:
        return [call for call in self.calls if call.method == method and call.path == path]


def kyc_payload(kyc_id: int, **overrides: Any) -> Dict[str, Any]:
    """Build a pending-queue entry shaped like the service response."""

    payload = {
        "id": kyc_id,
        "user_id": 1000 + kyc_id,
        "customer_email": f"user{kyc_id}@example.com",
        "first_name": "Ada",
        "last_name": f"Tester{kyc_id}",
        "phone_number": "+30 210 0000000",
        "id_type": "passport",
        "id_number": f"P{kyc_id:06d}",
        "country": "GR",
        "city": "Athens",
        "status": "pending",
    }
    payload.update(overrides)
    return payload


LOGIN_OK = FakeResponse(
    200,
    {"access_token": "jwt-token", "token_type": "bearer", "username": "admin", "role": "admin"},
)


@pytest.fixture
def http() -> FakeHTTPSession:
    return FakeHTTPSession()


@pytest.fixture
def client(http: FakeHTTPSession) -> KYCServiceClient:
    return KYCServiceClient(BASE_URL, timeout=2, session=http)


@pytest.fixture
def token_store() -> MemoryTokenStore:
    return MemoryTokenStore()


@pytest.fixture
def make_controller(client: KYCServiceClient, token_store: MemoryTokenStore):
    """Build a controller inside the running test loop."""

    def _make(ttl: float = 5.0) -> ReviewSessionController:
        return ReviewSessionController(client, token_store=token_store, notification_ttl=ttl)

    return _make


@pytest.fixture
def service(http: FakeHTTPSession) -> FakeHTTPSession:
    """Fake service that accepts admin/secret and serves records 7, 42, and 99."""

    http.add("POST", "/admin/login", LOGIN_OK)
    http.add(
        "GET",
        "/admin/kyc/pending",
        FakeResponse(200, [kyc_payload(7), kyc_payload(42), kyc_payload(99)]),
    )
    return http
