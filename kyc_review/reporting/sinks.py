"""Export sinks for handing the pending queue off outside the console."""
import csv
from pathlib import Path
from typing import Iterable, Dict, Any

from kyc_review.review.workflow import QUEUE_COLUMNS


def ensure_output_dir(output_path: Path) -> None:
    """Create parent folders for sink outputs when missing."""

    output_path.parent.mkdir(parents=True, exist_ok=True)


def write_excel(rows: Iterable[Dict[str, Any]], output_path: Path) -> None:
    """Write queue rows to an Excel workbook using openpyxl."""

    from openpyxl import Workbook

    rows = list(rows)
    ensure_output_dir(output_path)
    workbook = Workbook()
    sheet = workbook.active
    sheet.title = "pending_kyc"
    sheet.append(QUEUE_COLUMNS)
    for row in rows:
        sheet.append([row.get(header, "") for header in QUEUE_COLUMNS])
    workbook.save(output_path)


def write_csv(rows: Iterable[Dict[str, Any]], output_path: Path) -> None:
    """Write queue rows to a CSV file with consistent headers."""

    rows = list(rows)
    ensure_output_dir(output_path)

    with output_path.open("w", newline="", encoding="utf-8") as csvfile:
        writer = csv.DictWriter(csvfile, fieldnames=QUEUE_COLUMNS)
        writer.writeheader()
        writer.writerows(rows)
