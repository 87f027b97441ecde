"""Baebe Boo storefront FastAPI application.

Storefront catalogue, checkout, payment webhook and admin console behind one
server. Requests under the payments routes are wrapped in the payments
domain context.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 8000 --reload
"""

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# The domain is initialized at module level so uvicorn workers share it.
from uuid import uuid4

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from payments.domain import payments  # noqa: E402
from shared.logging import bind_request_context, clear_request_context
from shared.config import get_settings
from shared.exceptions import register_error_handlers

payments.init()

# ---------------------------------------------------------------------------
# Route-to-domain mapping
# ---------------------------------------------------------------------------
_ROUTE_DOMAIN_MAP = {
    "/checkout": payments,
    "/payments": payments,
    "/admin/payments": payments,
    "/admin/purchasers": payments,
}


def _resolve_domain(path: str):
    """Return the domain for the given request path, or None."""
    for prefix, domain in _ROUTE_DOMAIN_MAP.items():
        if path.startswith(prefix):
            return domain
    return None


# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
settings = get_settings()

app = FastAPI(
    title="Baebe Boo Storefront API",
    description="Catalogue, checkout, payment confirmation and admin console",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.site_url] if settings.site_url else ["*"],
    allow_credentials=bool(settings.site_url),
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)


@app.middleware("http")
async def domain_context_middleware(request: Request, call_next):
    """Push the payments domain context where needed and tag log lines with the request."""
    bind_request_context(request.headers.get("x-request-id") or uuid4().hex, request.url.path)
    try:
        domain = _resolve_domain(request.url.path)
        if domain is not None:
            with domain.domain_context():
                return await call_next(request)
        # No domain match, pass through
        return await call_next(request)
    finally:
        clear_request_context()


# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
from catalogue.api import admin_router, category_router, product_router  # noqa: E402
from identity.api.routes import router as session_router  # noqa: E402
from payments.api import checkout_router, payment_router, report_router  # noqa: E402

app.include_router(product_router)
app.include_router(category_router)
app.include_router(checkout_router)
app.include_router(payment_router)
app.include_router(session_router)
app.include_router(admin_router)
app.include_router(report_router)

if settings.media_root:
    app.mount("/media", StaticFiles(directory=settings.media_root, check_dir=False), name="media")


# ---------------------------------------------------------------------------
# Health / root
# ---------------------------------------------------------------------------
@app.get("/health")
async def health():
    return JSONResponse(
        content={
            "status": "ok",
            "domains": {
                "payments": {"name": payments.name},
            },
        }
    )
