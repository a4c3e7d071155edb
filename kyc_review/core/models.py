"""Data models for the KYC review workflow."""
from __future__ import annotations

from dataclasses import dataclass, asdict, field, fields
from typing import Any, Dict, Optional, Tuple

KYC_STATUSES = ("pending", "approved", "rejected")
NOTIFICATION_KINDS = ("success", "error", "info")


@dataclass(frozen=True)
class Credentials:
    """Username/password pair held in memory for the session lifetime."""

    username: str
    password: str = field(repr=False)


@dataclass(frozen=True)
class KYCRecord:
    """A single KYC application as returned by the pending-queue endpoint."""

    id: int
    user_id: int
    customer_email: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone_number: Optional[str] = None
    date_of_birth: Optional[str] = None
    id_type: Optional[str] = None
    id_number: Optional[str] = None
    country: Optional[str] = None
    city: Optional[str] = None
    state_province: Optional[str] = None
    zip_code: Optional[str] = None
    line1: Optional[str] = None
    house_name: Optional[str] = None
    id_front_image: Optional[str] = None
    selfie_image: Optional[str] = None
    status: str = "pending"

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "KYCRecord":
        """Build a record from a service payload, ignoring unknown keys.

        Raises ``ValueError`` when the identifiers or the email are missing or
        malformed. Empty optional strings are stored as ``None``.
        """

        if not isinstance(payload, dict):
            raise ValueError(f"Expected a JSON object, got {type(payload).__name__}")

        try:
            record_id = int(payload["id"])
            user_id = int(payload["user_id"])
        except (KeyError, TypeError, ValueError) as exc:
            raise ValueError(f"Record is missing a numeric id or user_id: {exc}") from exc

        email = payload.get("customer_email")
        if not isinstance(email, str) or not email.strip():
            raise ValueError(f"Record {record_id} has no customer_email")

        optional: Dict[str, Optional[str]] = {}
        for item in fields(cls):
            if item.name in {"id", "user_id", "customer_email", "status"}:
                continue
            value = payload.get(item.name)
            if value is None or value == "":
                continue
            optional[item.name] = str(value)

        status = str(payload.get("status") or "pending").strip().lower()
        return cls(
            id=record_id,
            user_id=user_id,
            customer_email=email.strip(),
            status=status,
            **optional,
        )

    @property
    def full_name(self) -> Optional[str]:
        name = f"{self.first_name or ''} {self.last_name or ''}".strip()
        return name or None

    @property
    def address(self) -> Optional[str]:
        parts = [
            self.line1,
            self.house_name,
            self.city,
            self.state_province,
            self.zip_code,
            self.country,
        ]
        joined = ", ".join(part for part in parts if part)
        return joined or None

    @property
    def has_documents(self) -> bool:
        return bool(self.id_front_image or self.selfie_image)

    def to_dict(self) -> Dict[str, Any]:
        """Return a plain dictionary representation for tables and exports."""

        return asdict(self)


@dataclass(frozen=True)
class Notification:
    """A transient status message shown to the reviewer."""

    id: int
    kind: str
    message: str


@dataclass
class ReviewSelection:
    """The record open in the details view and the rejection prompt state.

    ``record`` is a copy taken when the view was opened; a refresh may drop the
    same record from the store while it stays selected here.
    """

    record: Optional[KYCRecord] = None
    reject_prompt_open: bool = False
    reject_reason: str = ""

    def open(self, record: KYCRecord) -> None:
        self.record = record
        self.reject_prompt_open = False
        self.reject_reason = ""

    def clear(self) -> None:
        self.record = None
        self.close_prompt()

    def close_prompt(self) -> None:
        self.reject_prompt_open = False
        self.reject_reason = ""

    def matches(self, kyc_id: int) -> bool:
        return self.record is not None and self.record.id == kyc_id


@dataclass
class Outcome:
    """Result of a workflow operation; failures carry a taxonomy error."""

    ok: bool
    value: Any = None
    error: Optional[Exception] = None

    @classmethod
    def success(cls, value: Any = None) -> "Outcome":
        return cls(ok=True, value=value)

    @classmethod
    def failure(cls, error: Exception) -> "Outcome":
        return cls(ok=False, error=error)


@dataclass(frozen=True)
class ReviewSnapshot:
    """Read-only view of the controller state handed to the presentation layer."""

    authenticated: bool
    username: Optional[str]
    records: Tuple[KYCRecord, ...]
    selected_record: Optional[KYCRecord]
    processing_id: Optional[int]
    notifications: Tuple[Notification, ...]
    loading: bool
    reject_prompt_open: bool = False
    reject_reason: str = ""
