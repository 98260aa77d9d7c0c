# inquiry_admin/web/deps.py
from typing import Optional

from fastapi import Request

from inquiry_admin.services.contact_api import ContactApiClient

# Cookie set by the contact site's login; forwarded as-is to its API
COOKIE_NAME = "access_token"


# ---- Flash messages (for Jinja templates) ----
def flash(request: Request, text: str, type_: str = "info") -> None:
    request.session.setdefault("flashes", []).append({"text": text, "type": type_})

def pop_flashes(request: Request):
    return request.session.pop("flashes", [])


# ---- Upstream API ----
def get_access_token(request: Request) -> Optional[str]:
    """Raw access cookie of the admin, or None when not logged in."""
    raw = request.cookies.get(COOKIE_NAME)
    return raw or None

def get_contact_client(request: Request) -> ContactApiClient:
    """
    Per-request client that carries the admin's cookie upstream.
    Override this dependency in tests to fake the contact API.
    """
    return ContactApiClient(access_token=get_access_token(request))
