import asyncio

import pytest

from conftest import FakeResponse, inquiry_dict, paginated_payload
from inquiry_admin.browser import InquiryBrowser
from inquiry_admin.services.contact_api import (
    InquiryFetchError,
    Unauthenticated,
    parse_listing,
)

QUIET_MS = 40


class FakeFetcher:
    """Async (page, search) -> InquiryPage with scripted outcomes."""

    def __init__(self, total_pages: int = 5):
        self.total_pages = total_pages
        self.calls = []
        self.errors = {}
        self.gates = {}
        self.server_page = {}

    async def __call__(self, page, search):
        self.calls.append((page, search))
        gate = self.gates.get(page)
        if gate is not None:
            await gate.wait()
        if page in self.errors:
            raise self.errors[page]
        current = self.server_page.get(page, page)
        return parse_listing(paginated_payload(current=current, total_pages=self.total_pages))


def _browser(fetcher, **kwargs):
    return InquiryBrowser(fetch=fetcher, quiet_ms=QUIET_MS, **kwargs)


@pytest.mark.asyncio
async def test_start_loads_first_page_once():
    fetcher = FakeFetcher()
    browser = _browser(fetcher)

    await browser.start()
    await browser.start()

    assert fetcher.calls == [(1, "")]
    assert browser.state.pagination.current_page == 1
    assert len(browser.state.inquiries) == 2


@pytest.mark.asyncio
async def test_fast_keystrokes_trigger_a_single_fetch():
    fetcher = FakeFetcher()
    browser = _browser(fetcher)
    await browser.start()

    for value in ["j", "jo", "joh", "john"]:
        browser.on_search_input(value)
        assert browser.state.is_searching
        await asyncio.sleep(0.005)
    await browser.wait_idle()

    assert fetcher.calls == [(1, ""), (1, "john")]
    assert browser.state.committed_search == "john"
    assert not browser.state.is_searching


@pytest.mark.asyncio
async def test_new_search_resets_to_first_page():
    fetcher = FakeFetcher()
    browser = _browser(fetcher)
    await browser.start()
    await browser.load(3, "")
    assert browser.state.current_page == 3

    browser.on_search_input("acme")
    await browser.wait_idle()

    assert fetcher.calls[-1] == (1, "acme")
    assert browser.state.current_page == 1


@pytest.mark.asyncio
async def test_clearing_search_fetches_unfiltered_list():
    fetcher = FakeFetcher()
    browser = _browser(fetcher)
    await browser.start()

    browser.on_search_input("acme")
    await browser.wait_idle()
    browser.on_search_input("")
    await browser.wait_idle()

    assert fetcher.calls == [(1, ""), (1, "acme"), (1, "")]


@pytest.mark.asyncio
async def test_previous_and_first_are_noops_on_first_page():
    fetcher = FakeFetcher()
    browser = _browser(fetcher)
    await browser.start()
    before = browser.state

    assert await browser.previous_page() is False
    assert await browser.first_page() is False

    assert fetcher.calls == [(1, "")]
    assert browser.state == before


@pytest.mark.asyncio
async def test_next_and_last_are_noops_on_last_page():
    fetcher = FakeFetcher(total_pages=1)
    browser = _browser(fetcher)
    await browser.start()

    assert await browser.next_page() is False
    assert await browser.last_page() is False
    assert fetcher.calls == [(1, "")]


@pytest.mark.asyncio
async def test_navigation_uses_committed_search():
    fetcher = FakeFetcher(total_pages=5)
    browser = _browser(fetcher)
    await browser.start()
    browser.on_search_input("acme")
    await browser.wait_idle()

    assert await browser.next_page() is True
    assert await browser.last_page() is True
    assert await browser.previous_page() is True
    assert await browser.first_page() is True

    assert fetcher.calls[2:] == [(2, "acme"), (5, "acme"), (4, "acme"), (1, "acme")]


@pytest.mark.asyncio
async def test_server_page_wins_over_requested_page():
    fetcher = FakeFetcher()
    fetcher.server_page[2] = 3
    browser = _browser(fetcher)

    await browser.load(2, "")

    assert browser.state.pagination.current_page == 3
    assert browser.state.current_page == 3


@pytest.mark.asyncio
async def test_401_navigates_to_login_without_error():
    fetcher = FakeFetcher()
    fetcher.errors[1] = Unauthenticated("nope")
    visited = []
    browser = _browser(fetcher, navigate=visited.append, login_url="/admin/login")

    await browser.start()

    assert visited == ["/admin/login"]
    assert browser.state.redirect_to == "/admin/login"
    assert browser.state.error == ""
    assert not browser.state.loading


@pytest.mark.asyncio
async def test_fetch_failure_sets_error_and_keeps_list():
    fetcher = FakeFetcher()
    browser = _browser(fetcher)
    await browser.start()
    loaded = browser.state.inquiries

    fetcher.errors[2] = InquiryFetchError("Failed to fetch inquiries", status_code=500)
    await browser.next_page()

    assert browser.state.error == "Failed to load inquiries"
    assert browser.state.inquiries == loaded
    assert not browser.state.loading


@pytest.mark.asyncio
async def test_refresh_replays_last_page_and_search():
    fetcher = FakeFetcher()
    browser = _browser(fetcher)
    await browser.start()
    browser.on_search_input("acme")
    await browser.wait_idle()
    await browser.next_page()

    fetcher.errors[2] = InquiryFetchError("down")
    await browser.refresh()
    assert browser.state.error

    del fetcher.errors[2]
    await browser.refresh()

    assert fetcher.calls[-2:] == [(2, "acme"), (2, "acme")]
    assert browser.state.error == ""


@pytest.mark.asyncio
async def test_slow_stale_response_does_not_overwrite_newer_page():
    fetcher = FakeFetcher()
    fetcher.gates[1] = asyncio.Event()
    fetcher.gates[2] = asyncio.Event()
    browser = _browser(fetcher)

    first = asyncio.create_task(browser.load(1, ""))
    second = asyncio.create_task(browser.load(2, ""))
    await asyncio.sleep(0)
    assert browser.state.loading

    fetcher.gates[2].set()
    await second
    fetcher.gates[1].set()
    await first

    assert browser.state.pagination.current_page == 2
    assert not browser.state.loading


@pytest.mark.asyncio
async def test_slow_older_success_does_not_hide_newer_failure():
    fetcher = FakeFetcher()
    fetcher.gates[2] = asyncio.Event()
    fetcher.errors[3] = InquiryFetchError("Failed to fetch inquiries", status_code=500)
    browser = _browser(fetcher)

    older = asyncio.create_task(browser.load(2, ""))
    await asyncio.sleep(0)
    await browser.load(3, "")
    assert browser.state.error == "Failed to load inquiries"

    fetcher.gates[2].set()
    await older

    assert browser.state.error == "Failed to load inquiries"
    assert browser.state.current_page == 3
    assert browser.state.inquiries == ()
    assert not browser.state.loading


@pytest.mark.asyncio
async def test_unexpected_errors_propagate_and_clear_loading():
    fetcher = FakeFetcher()
    fetcher.errors[1] = RuntimeError("bug")
    browser = _browser(fetcher)

    with pytest.raises(RuntimeError):
        await browser.start()
    assert not browser.state.loading


@pytest.mark.asyncio
async def test_detail_selection_and_export():
    fetcher = FakeFetcher()
    browser = _browser(fetcher)
    await browser.start()

    assert browser.detail is None
    assert browser.select_by_id("inq2") is not None
    detail = browser.detail
    assert detail.email == "customer2@example.com"
    assert detail.reply_url.startswith("mailto:customer2@example.com?subject=Re%3A%20Question%202")

    browser.close_detail()
    assert browser.detail is None
    assert browser.select_by_id("missing") is None

    lines = browser.export_csv().split("\n")
    assert len(lines) == 3
    assert lines[0] == "ID,Name,Email,Company,Subject,Message,Status,Timestamp"


@pytest.mark.asyncio
async def test_default_fetch_runs_http_client_in_threadpool(make_client):
    client, session = make_client(FakeResponse(200, [inquiry_dict(1), inquiry_dict(2)]))
    browser = InquiryBrowser(client, quiet_ms=QUIET_MS)

    await browser.start()

    assert session.calls[0]["params"] == {"page": "1", "limit": "10"}
    assert browser.state.pagination.total_count == 2
