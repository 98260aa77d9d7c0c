# inquiry_admin/services/csv_export.py
from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Iterable, Optional

from inquiry_admin.schemas.inquiry import Inquiry

CSV_HEADERS = [
    "ID",
    "Name",
    "Email",
    "Company",
    "Subject",
    "Message",
    "Status",
    "Timestamp",
]


def _quoted(value: str) -> str:
    return '"' + value.replace('"', '""') + '"'


def _plain(value: str) -> str:
    # only quote free-form fields when they would break the row
    if any(ch in value for ch in (",", '"', "\n", "\r")):
        return _quoted(value)
    return value


def inquiries_to_csv(inquiries: Iterable[Inquiry]) -> str:
    """
    CSV of exactly the inquiries passed in (the page on screen, not the full result set).
    Name, subject and message are always quoted.
    """
    lines = [",".join(CSV_HEADERS)]
    for inquiry in inquiries:
        lines.append(
            ",".join(
                [
                    _plain(inquiry.id),
                    _quoted(inquiry.name),
                    _plain(inquiry.email),
                    _plain(inquiry.company or ""),
                    _quoted(inquiry.subject),
                    _quoted(inquiry.message),
                    inquiry.display_status,
                    _plain(inquiry.timestamp),
                ]
            )
        )
    return "\n".join(lines)


def export_filename(today: Optional[date] = None) -> str:
    # UTC date, same as an ISO timestamp cut at the "T"
    today = today or datetime.now(timezone.utc).date()
    return f"inquiries-{today.isoformat()}.csv"
