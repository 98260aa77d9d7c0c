# inquiry_admin/main.py
import logging

from fastapi import FastAPI
from fastapi.responses import RedirectResponse
from starlette.middleware.sessions import SessionMiddleware

from inquiry_admin.core.config import settings
from inquiry_admin.core.logging_config import setup_logging

# Routers
from inquiry_admin.web.routes_admin import router as admin_router

logger = logging.getLogger(__name__)

app = FastAPI(title=settings.APP_NAME)

@app.on_event("startup")
def on_startup():
    setup_logging()
    logger.info("%s started; contact API at %s", settings.APP_NAME, settings.CONTACT_API_BASE_URL)

# Middleware (flash messages live in the session)
app.add_middleware(
    SessionMiddleware,
    secret_key=settings.SECRET_KEY,
    same_site="lax",
    https_only=False,
)

# Routers
app.include_router(admin_router)

@app.get("/", include_in_schema=False)
def index():
    return RedirectResponse(url="/admin/inquiries", status_code=303)

@app.get("/health")
def health():
    return {"status": "ok", "app": settings.APP_NAME}
