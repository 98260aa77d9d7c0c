# inquiry_admin/web/context.py
from __future__ import annotations

from fastapi import Request

from inquiry_admin.core.config import settings
from inquiry_admin.web.deps import pop_flashes


def ctx(request: Request, **extra):
    """
    Shared template context: request, flashes, app name.
    """
    context = {
        "request": request,
        "flashes": pop_flashes(request),
        "app_name": settings.APP_NAME,
    }
    context.update(extra or {})
    return context
