# inquiry_admin/services/contact_api.py
from __future__ import annotations

import logging
from typing import Any, Optional

import requests
from pydantic import ValidationError

from inquiry_admin.core.config import settings
from inquiry_admin.schemas.inquiry import PAGE_LIMIT, Inquiry, InquiryPage, PaginationInfo

logger = logging.getLogger(__name__)

CONTACT_PATH = "/api/contact"


class ContactApiError(Exception):
    """Base class for everything the listing call can raise."""


class Unauthenticated(ContactApiError):
    """Upstream answered 401: the admin has to log in again."""


class InquiryFetchError(ContactApiError):
    """Transport failure or a non-2xx answer (other than 401)."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class MalformedResponseError(InquiryFetchError):
    """2xx answer whose body is neither {data, pagination} nor a bare list."""


def build_params(page: int, search: str) -> dict[str, str]:
    if page < 1:
        raise ValueError("page must be >= 1")
    params = {"page": str(page), "limit": str(PAGE_LIMIT)}
    if search:
        params["search"] = search
    return params


def parse_listing(payload: Any) -> InquiryPage:
    """
    Normalize the two payload layouts the contact API has shipped:
    - {"data": [...], "pagination": {...}}  (current)
    - [...]                                 (legacy, no pagination: page 1 of 1)
    Anything else is rejected.
    """
    try:
        if isinstance(payload, dict) and "data" in payload and "pagination" in payload:
            if not isinstance(payload["data"], list):
                raise MalformedResponseError("'data' is not a list")
            pagination = PaginationInfo.model_validate(payload["pagination"])
            if not pagination.is_consistent():
                raise MalformedResponseError("Pagination flags contradict currentPage/totalPages")
            return InquiryPage(
                data=tuple(Inquiry.model_validate(item) for item in payload["data"]),
                pagination=pagination,
            )

        if isinstance(payload, list):
            items = tuple(Inquiry.model_validate(item) for item in payload)
            return InquiryPage(
                data=items,
                pagination=PaginationInfo.single_page(len(items)),
                legacy_format=True,
            )
    except ValidationError as e:
        raise MalformedResponseError(f"Invalid inquiry payload: {e.error_count()} error(s)") from e

    raise MalformedResponseError(f"Unexpected payload type: {type(payload).__name__}")


class ContactApiClient:
    """
    Thin blocking client for GET /api/contact.
    Pass `session` to reuse connections (or to fake the transport in tests).
    """

    def __init__(
        self,
        base_url: str | None = None,
        *,
        access_token: str | None = None,
        timeout: float | None = None,
        session: requests.Session | None = None,
    ):
        self.base_url = (base_url or settings.CONTACT_API_BASE_URL).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.CONTACT_API_TIMEOUT
        self.session = session or requests.Session()
        self.access_token = access_token

    @property
    def url(self) -> str:
        return f"{self.base_url}{CONTACT_PATH}"

    def _cookies(self) -> dict[str, str]:
        # the contact site authenticates its admin API with the same cookie we receive
        if not self.access_token:
            return {}
        return {"access_token": self.access_token}

    def list_inquiries(self, page: int, search: str = "") -> InquiryPage:
        params = build_params(page, search)

        try:
            resp = self.session.get(
                self.url,
                params=params,
                cookies=self._cookies(),
                headers={"accept": "application/json"},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.warning("Contact API unreachable (%s): %s", self.url, e)
            raise InquiryFetchError("Failed to fetch inquiries") from e

        if resp.status_code == 401:
            logger.info("Contact API returned 401 for page=%s", page)
            raise Unauthenticated("Not authenticated")

        if not 200 <= resp.status_code < 300:
            logger.warning("Contact API error %s: %s", resp.status_code, resp.text[:200])
            raise InquiryFetchError("Failed to fetch inquiries", status_code=resp.status_code)

        try:
            payload = resp.json()
        except ValueError as e:
            logger.warning("Contact API returned non-JSON body (status %s)", resp.status_code)
            raise MalformedResponseError("Response body is not JSON", status_code=resp.status_code) from e

        try:
            return parse_listing(payload)
        except MalformedResponseError as e:
            logger.warning("Malformed contact API payload: %s", e)
            e.status_code = resp.status_code
            raise
