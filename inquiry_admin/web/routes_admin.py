# inquiry_admin/web/routes_admin.py
from __future__ import annotations

import logging
import urllib.parse
from pathlib import Path

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import HTMLResponse, RedirectResponse, Response
from fastapi.templating import Jinja2Templates

from inquiry_admin.browser import InquiryBrowser, InquiryDetail
from inquiry_admin.browser.state import BrowserState
from inquiry_admin.services.contact_api import ContactApiClient
from inquiry_admin.services.csv_export import export_filename
from inquiry_admin.web.context import ctx as _ctx
from inquiry_admin.web.deps import flash, get_contact_client

logger = logging.getLogger(__name__)

router = APIRouter()
templates = Jinja2Templates(directory=str(Path(__file__).parent / "templates"))
# ids become one path segment; "/" must be escaped too
templates.env.filters["path_segment"] = lambda value: urllib.parse.quote(str(value), safe="")


# ---------------------------
# Helpers
# ---------------------------

def _list_url(page: int, search: str = "") -> str:
    params = {"page": page}
    if search:
        params["search"] = search
    return f"/admin/inquiries?{urllib.parse.urlencode(params)}"


def _page_links(state: BrowserState) -> dict:
    """URLs for the four pager buttons; None means the button is disabled."""
    p = state.pagination
    search = state.committed_search
    return {
        "first": _list_url(1, search) if p.has_previous_page else None,
        "previous": _list_url(p.current_page - 1, search) if p.has_previous_page else None,
        "next": _list_url(p.current_page + 1, search) if p.has_next_page else None,
        "last": _list_url(p.total_pages, search) if p.has_next_page else None,
    }


async def _load(client: ContactApiClient, page: int, search: str) -> InquiryBrowser:
    browser = InquiryBrowser(client)
    browser.commit_search(search)
    await browser.load(page, search)
    return browser


# ---------------------------
# Admin: Inquiries list
# ---------------------------
@router.get("/admin/inquiries", response_class=HTMLResponse)
async def admin_inquiries(
    request: Request,
    page: int = Query(1, ge=1),
    search: str = Query(""),
    client: ContactApiClient = Depends(get_contact_client),
):
    browser = await _load(client, page, search)
    state = browser.state
    if state.redirect_to:
        return RedirectResponse(state.redirect_to, status_code=303)

    response = templates.TemplateResponse(
        "admin/inquiries_list.html",
        _ctx(
            request,
            title="Contact Inquiries",
            state=state,
            rows=[InquiryDetail.from_inquiry(i) for i in state.inquiries],
            pagination=state.pagination,
            links=_page_links(state),
            search=state.committed_search,
            detail_query=urllib.parse.urlencode({"page": state.current_page, "search": state.committed_search}),
            # "Try again" / Refresh replays the same page and search
            refresh_url=_list_url(state.current_page, state.committed_search),
            export_url=(
                "/admin/inquiries/export.csv?"
                + urllib.parse.urlencode({"page": state.current_page, "search": state.committed_search})
            ),
        ),
    )
    response.headers["Cache-Control"] = "no-store"
    return response


# ---------------------------
# Admin: CSV export (current page only)
# ---------------------------
@router.get("/admin/inquiries/export.csv")
async def admin_inquiries_export(
    request: Request,
    page: int = Query(1, ge=1),
    search: str = Query(""),
    client: ContactApiClient = Depends(get_contact_client),
):
    browser = await _load(client, page, search)
    state = browser.state
    if state.redirect_to:
        return RedirectResponse(state.redirect_to, status_code=303)
    if state.error:
        flash(request, "Export failed: could not load inquiries.", "error")
        return RedirectResponse(_list_url(page, search), status_code=303)

    return Response(
        content=browser.export_csv(),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{export_filename()}"'},
    )


# ---------------------------
# Admin: Inquiry detail
# ---------------------------
@router.get("/admin/inquiries/{inquiry_id:path}", response_class=HTMLResponse)
async def admin_inquiry_detail(
    inquiry_id: str,
    request: Request,
    page: int = Query(1, ge=1),
    search: str = Query(""),
    client: ContactApiClient = Depends(get_contact_client),
):
    browser = await _load(client, page, search)
    if browser.state.redirect_to:
        return RedirectResponse(browser.state.redirect_to, status_code=303)

    if browser.state.error:
        flash(request, browser.state.error, "error")
        return RedirectResponse(_list_url(page, search), status_code=303)

    if browser.select_by_id(inquiry_id) is None:
        logger.info("Inquiry %s not on page %s (search=%r)", inquiry_id, page, search)
        flash(request, "Inquiry not found on this page.", "error")
        return RedirectResponse(_list_url(page, search), status_code=303)

    return templates.TemplateResponse(
        "admin/inquiry_detail.html",
        _ctx(
            request,
            title="Inquiry Details",
            detail=browser.detail,
            back_url=_list_url(browser.state.current_page, search),
        ),
    )
