"""
Pytest configuration and fixtures
"""
import sys
from pathlib import Path

import pytest
import requests

# Make the repo root importable when pytest is run from elsewhere
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from inquiry_admin.services.contact_api import ContactApiClient


def inquiry_dict(n: int = 1, **overrides) -> dict:
    data = {
        "_id": f"inq{n}",
        "name": f"Customer {n}",
        "email": f"customer{n}@example.com",
        "subject": f"Question {n}",
        "message": f"Hello, this is message {n}.",
        "timestamp": "2024-03-05T14:30:00.000Z",
    }
    data.update(overrides)
    return data


def pagination_dict(current: int = 1, total_pages: int = 1, total_count: int = 0, limit: int = 10) -> dict:
    return {
        "currentPage": current,
        "totalPages": total_pages,
        "totalCount": total_count,
        "hasNextPage": current < total_pages,
        "hasPreviousPage": current > 1,
        "limit": limit,
    }


def paginated_payload(current: int = 1, total_pages: int = 1, rows: int = 2) -> dict:
    return {
        "data": [inquiry_dict(i) for i in range(1, rows + 1)],
        "pagination": pagination_dict(current, total_pages, total_count=total_pages * 10),
    }


_NO_JSON = object()


class FakeResponse:
    def __init__(self, status_code: int = 200, json_body=None, text: str = ""):
        self.status_code = status_code
        self._json = json_body
        self.text = text

    def json(self):
        if self._json is _NO_JSON:
            raise ValueError("No JSON object could be decoded")
        return self._json


class FakeSession:
    """Stands in for requests.Session; replays queued responses/exceptions."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls = []

    def get(self, url, **kwargs):
        self.calls.append({"url": url, **kwargs})
        item = self.responses.pop(0) if len(self.responses) > 1 else self.responses[0]
        if isinstance(item, Exception):
            raise item
        return item


@pytest.fixture
def no_json():
    return _NO_JSON


@pytest.fixture
def make_client():
    def _make(*responses, access_token=None):
        session = FakeSession(*responses)
        client = ContactApiClient("http://contact.test", access_token=access_token, session=session)
        return client, session

    return _make


@pytest.fixture
def connection_error():
    return requests.ConnectionError("connection refused")
