"""
View state of the inquiry browser and the single transition function that changes it.

Every change goes through `reduce(state, event)`. Requests carry a sequence
stamp; a response is applied only when it is newer than the last applied one,
so a slow stale response can never overwrite a fresher page.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Optional, Union

from inquiry_admin.schemas.inquiry import Inquiry, InquiryPage, PaginationInfo

logger = logging.getLogger(__name__)

LOAD_ERROR_MESSAGE = "Failed to load inquiries"


@dataclass(frozen=True)
class BrowserState:
    inquiries: tuple[Inquiry, ...] = ()
    pagination: PaginationInfo = field(default_factory=PaginationInfo)
    current_page: int = 1

    search_input: str = ""
    committed_search: str = ""
    is_searching: bool = False

    in_flight: frozenset[int] = frozenset()
    last_applied_seq: int = 0
    error: str = ""
    redirect_to: Optional[str] = None

    selected: Optional[Inquiry] = None
    is_detail_open: bool = False

    @property
    def loading(self) -> bool:
        return bool(self.in_flight)


# ---- events ----

@dataclass(frozen=True)
class SearchInputChanged:
    value: str


@dataclass(frozen=True)
class SearchCommitted:
    value: str


@dataclass(frozen=True)
class RequestStarted:
    seq: int
    page: int
    search: str


@dataclass(frozen=True)
class RequestSucceeded:
    seq: int
    result: InquiryPage


@dataclass(frozen=True)
class RequestFailed:
    seq: int
    message: str = LOAD_ERROR_MESSAGE


@dataclass(frozen=True)
class Unauthenticated:
    seq: int
    login_url: str


@dataclass(frozen=True)
class InquirySelected:
    inquiry: Inquiry


@dataclass(frozen=True)
class DetailClosed:
    pass


Event = Union[
    SearchInputChanged,
    SearchCommitted,
    RequestStarted,
    RequestSucceeded,
    RequestFailed,
    Unauthenticated,
    InquirySelected,
    DetailClosed,
]


def _settle(state: BrowserState, seq: int) -> BrowserState:
    return replace(state, in_flight=state.in_flight - {seq})


def reduce(state: BrowserState, event: Event) -> BrowserState:
    if isinstance(event, SearchInputChanged):
        return replace(
            state,
            search_input=event.value,
            is_searching=event.value != state.committed_search,
        )

    if isinstance(event, SearchCommitted):
        # a new query never keeps the old page offset
        return replace(
            state,
            committed_search=event.value,
            is_searching=False,
            current_page=1,
        )

    if isinstance(event, RequestStarted):
        return replace(
            state,
            in_flight=state.in_flight | {event.seq},
            current_page=event.page,
        )

    if isinstance(event, RequestSucceeded):
        state = _settle(state, event.seq)
        if event.seq <= state.last_applied_seq:
            logger.debug("Dropping stale response #%s (applied #%s)", event.seq, state.last_applied_seq)
            return state
        # list and pagination are swapped together
        return replace(
            state,
            inquiries=event.result.data,
            pagination=event.result.pagination,
            current_page=event.result.pagination.current_page,
            last_applied_seq=event.seq,
            error="",
        )

    if isinstance(event, RequestFailed):
        state = _settle(state, event.seq)
        if event.seq <= state.last_applied_seq:
            logger.debug("Ignoring failure of superseded request #%s", event.seq)
            return state
        # the failure is the newest outcome; older in-flight responses are now stale
        return replace(state, error=event.message, last_applied_seq=event.seq)

    if isinstance(event, Unauthenticated):
        return replace(_settle(state, event.seq), redirect_to=event.login_url)

    if isinstance(event, InquirySelected):
        return replace(state, selected=event.inquiry, is_detail_open=True)

    if isinstance(event, DetailClosed):
        return replace(state, selected=None, is_detail_open=False)

    raise TypeError(f"Unknown browser event: {event!r}")
