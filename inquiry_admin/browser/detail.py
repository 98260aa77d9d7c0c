# inquiry_admin/browser/detail.py
from __future__ import annotations

import urllib.parse
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from inquiry_admin.schemas.inquiry import Inquiry

# en-US names, independent of the process locale
MONTH_ABBR = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)

STATUS_TONES = {
    "replied": "green",
    "read": "blue",
    "new": "gray",
}


def format_date(value: str) -> str:
    """
    Render an ISO timestamp like 'Mar 5, 2024, 02:30 PM'.
    Anything unparseable is shown as-is.
    """
    raw = (value or "").strip()
    if raw.endswith("Z"):
        raw = raw[:-1] + "+00:00"
    try:
        dt = datetime.fromisoformat(raw)
    except ValueError:
        return value
    hour12 = dt.hour % 12 or 12
    meridiem = "AM" if dt.hour < 12 else "PM"
    return f"{MONTH_ABBR[dt.month - 1]} {dt.day}, {dt.year}, {hour12:02d}:{dt.minute:02d} {meridiem}"


def status_tone(status: Optional[str]) -> str:
    return STATUS_TONES.get(status or "new", "gray")


def reply_mailto(inquiry: Inquiry) -> str:
    """Pre-filled reply: To = sender, Subject = 'Re: <subject>', short greeting."""
    subject = f"Re: {inquiry.subject}"
    body = (
        f"Hello {inquiry.name},\r\n\r\n"
        f"Thank you for your inquiry about {inquiry.subject}.\r\n\r\n"
    )
    query = urllib.parse.urlencode(
        {"subject": subject, "body": body},
        quote_via=urllib.parse.quote,
    )
    return f"mailto:{urllib.parse.quote(inquiry.email, safe='@')}?{query}"


@dataclass(frozen=True)
class InquiryDetail:
    """Read-only projection of one inquiry for the detail panel."""

    id: str
    name: str
    email: str
    company: Optional[str]
    subject: str
    message: str
    date: str
    status: str
    status_tone: str
    reply_url: str

    @classmethod
    def from_inquiry(cls, inquiry: Inquiry) -> "InquiryDetail":
        return cls(
            id=inquiry.id,
            name=inquiry.name,
            email=inquiry.email,
            company=inquiry.company or None,
            subject=inquiry.subject,
            message=inquiry.message,
            date=format_date(inquiry.timestamp),
            status=inquiry.display_status,
            status_tone=status_tone(inquiry.status),
            reply_url=reply_mailto(inquiry),
        )
