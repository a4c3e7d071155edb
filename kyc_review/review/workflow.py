"""Review helpers used by the Streamlit console and the CLI."""
from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional

from kyc_review.core.models import KYCRecord

MISSING_VALUE = "N/A"

QUEUE_COLUMNS = [
    "ID",
    "User ID",
    "Name",
    "Email",
    "Phone",
    "ID Type",
    "Date of Birth",
    "Status",
]


def display_value(value: Optional[Any]) -> str:
    """Render an optional field for humans, falling back to ``N/A``."""

    if value is None:
        return MISSING_VALUE
    text = " ".join(str(value).split())
    return text or MISSING_VALUE


def status_label(status: Optional[str]) -> str:
    """Return a capitalized status, treating a missing status as pending."""

    normalized = (status or "pending").strip().lower() or "pending"
    return normalized[:1].upper() + normalized[1:]


def record_to_row(record: KYCRecord) -> Dict[str, Any]:
    """Convert one record into a queue-table row."""

    return {
        "ID": record.id,
        "User ID": record.user_id,
        "Name": display_value(record.full_name),
        "Email": record.customer_email,
        "Phone": display_value(record.phone_number),
        "ID Type": display_value(record.id_type),
        "Date of Birth": display_value(record.date_of_birth),
        "Status": status_label(record.status),
    }


def records_to_rows(records: Iterable[KYCRecord]) -> List[Dict[str, Any]]:
    """Convert records to dictionaries for tabular rendering and export."""

    def _sanitize(value: Any) -> Any:
        if isinstance(value, str):
            return " ".join(value.split())
        return value

    sanitized_rows = []
    for record in records:
        row = record_to_row(record)
        sanitized_rows.append({key: _sanitize(value) for key, value in row.items()})
    return sanitized_rows


def record_details(record: KYCRecord) -> List[tuple[str, str]]:
    """Label/value pairs for the details view, in display order."""

    return [
        ("Full name", display_value(record.full_name)),
        ("Email", record.customer_email),
        ("Phone", display_value(record.phone_number)),
        ("User ID", str(record.user_id)),
        ("Date of birth", display_value(record.date_of_birth)),
        ("ID type", display_value(record.id_type)),
        ("ID number", display_value(record.id_number)),
        ("Country", display_value(record.country)),
        ("City", display_value(record.city)),
        ("State/Province", display_value(record.state_province)),
        ("Zip code", display_value(record.zip_code)),
        ("Address", display_value(record.address)),
    ]
