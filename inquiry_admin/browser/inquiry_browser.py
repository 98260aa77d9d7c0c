from __future__ import annotations

import logging
from typing import Awaitable, Callable, Optional

from starlette.concurrency import run_in_threadpool

from inquiry_admin.browser import state as ev
from inquiry_admin.browser.debounce import DEFAULT_QUIET_MS, DebouncedSearch
from inquiry_admin.browser.detail import InquiryDetail
from inquiry_admin.browser.state import BrowserState, reduce
from inquiry_admin.core.config import settings
from inquiry_admin.schemas.inquiry import Inquiry, InquiryPage
from inquiry_admin.services.contact_api import (
    ContactApiClient,
    InquiryFetchError,
    Unauthenticated,
)
from inquiry_admin.services.csv_export import inquiries_to_csv

logger = logging.getLogger(__name__)

Fetcher = Callable[[int, str], Awaitable[InquiryPage]]


class InquiryBrowser:
    """
    Owns the admin inquiry view: debounced search, page loads, detail selection.

    State only changes through `dispatch()`; see `browser.state.reduce`.
    Pass `fetch` to replace the HTTP client (it must be an async callable
    taking (page, search)). `navigate` is called with the login URL on a 401.
    """

    def __init__(
        self,
        client: Optional[ContactApiClient] = None,
        *,
        fetch: Optional[Fetcher] = None,
        navigate: Optional[Callable[[str], None]] = None,
        login_url: Optional[str] = None,
        quiet_ms: Optional[int] = None,
    ):
        if fetch is None:
            client = client or ContactApiClient()
            fetch = self._threadpool_fetch(client)
        self._fetch = fetch
        self._navigate = navigate
        self.login_url = login_url or settings.ADMIN_LOGIN_URL
        self.state = BrowserState()
        self._seq = 0
        self._started = False
        self.search = DebouncedSearch(
            self._on_search_committed,
            quiet_ms=quiet_ms if quiet_ms is not None else settings.SEARCH_DEBOUNCE_MS or DEFAULT_QUIET_MS,
        )

    @staticmethod
    def _threadpool_fetch(client: ContactApiClient) -> Fetcher:
        async def fetch(page: int, search: str) -> InquiryPage:
            return await run_in_threadpool(client.list_inquiries, page, search)

        return fetch

    def dispatch(self, event: ev.Event) -> BrowserState:
        self.state = reduce(self.state, event)
        return self.state

    # ---------------------------
    # Loading
    # ---------------------------
    async def start(self) -> None:
        """Initial load: page 1, no search. Runs once."""
        if self._started:
            return
        self._started = True
        await self.load(1, "")

    async def load(self, page: int, search: str) -> BrowserState:
        self._seq += 1
        seq = self._seq
        self.dispatch(ev.RequestStarted(seq=seq, page=page, search=search))

        try:
            result = await self._fetch(page, search)
        except Unauthenticated:
            logger.info("Session expired; sending admin to %s", self.login_url)
            self.dispatch(ev.Unauthenticated(seq=seq, login_url=self.login_url))
            if self._navigate is not None:
                self._navigate(self.login_url)
            return self.state
        except InquiryFetchError as e:
            logger.warning("Loading page %s (search=%r) failed: %s", page, search, e)
            return self.dispatch(ev.RequestFailed(seq=seq))
        except BaseException:
            # keep the loading flag honest, then let the caller see the bug
            self.dispatch(ev.RequestFailed(seq=seq))
            raise

        return self.dispatch(ev.RequestSucceeded(seq=seq, result=result))

    async def refresh(self) -> BrowserState:
        """Replay the last (page, committed search). Also the 'Try again' action."""
        return await self.load(self.state.current_page, self.state.committed_search)

    # ---------------------------
    # Search
    # ---------------------------
    def on_search_input(self, value: str) -> None:
        self.dispatch(ev.SearchInputChanged(value))
        self.search.push(value)

    def commit_search(self, value: str) -> None:
        """Set input and committed term at once (form submits, no typing to debounce)."""
        self.search.cancel()
        self.search.value = self.search.committed = value
        self.dispatch(ev.SearchInputChanged(value))
        self.dispatch(ev.SearchCommitted(value))

    async def _on_search_committed(self, value: str) -> None:
        self.dispatch(ev.SearchCommitted(value))
        await self.load(1, value)

    async def wait_idle(self) -> None:
        """Wait for a pending debounced search (and the load it triggers)."""
        await self.search.wait()

    # ---------------------------
    # Pagination
    # ---------------------------
    async def _go(self, allowed: bool, page: int) -> bool:
        if not allowed:
            return False
        await self.load(page, self.state.committed_search)
        return True

    async def first_page(self) -> bool:
        return await self._go(self.state.pagination.has_previous_page, 1)

    async def previous_page(self) -> bool:
        p = self.state.pagination
        return await self._go(p.has_previous_page, p.current_page - 1)

    async def next_page(self) -> bool:
        p = self.state.pagination
        return await self._go(p.has_next_page, p.current_page + 1)

    async def last_page(self) -> bool:
        p = self.state.pagination
        return await self._go(p.has_next_page, p.total_pages)

    # ---------------------------
    # Detail + export
    # ---------------------------
    def select(self, inquiry: Inquiry) -> None:
        self.dispatch(ev.InquirySelected(inquiry))

    def select_by_id(self, inquiry_id: str) -> Optional[Inquiry]:
        for inquiry in self.state.inquiries:
            if inquiry.id == inquiry_id:
                self.select(inquiry)
                return inquiry
        return None

    def close_detail(self) -> None:
        self.dispatch(ev.DetailClosed())

    @property
    def detail(self) -> Optional[InquiryDetail]:
        if not self.state.is_detail_open or self.state.selected is None:
            return None
        return InquiryDetail.from_inquiry(self.state.selected)

    def export_csv(self) -> str:
        return inquiries_to_csv(self.state.inquiries)
