"""Trading-card storefront FastAPI application.

Serves cart pricing for the Storefront domain and orders, stock holds and
the reservation expiry sweep for the Checkout domain. Each request is
wrapped in the correct domain context based on URL prefix.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 8000 --reload

The expiry sweep is triggered by the scheduler with
``GET /cron/cleanup-reservations`` (``Authorization: Bearer $CRON_SECRET``)
or by an operator with ``POST`` (``ADMIN_API_KEY``).
"""

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# PROTEAN_ENV selects the config overlay (memory stores by default,
# PostgreSQL under "production").
from checkout.domain import checkout  # noqa: E402
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from protean.integrations.fastapi import register_exception_handlers
from storefront.domain import storefront  # noqa: E402

storefront.init()
checkout.init()

# ---------------------------------------------------------------------------
# Route-to-domain mapping
# ---------------------------------------------------------------------------
_ROUTE_DOMAIN_MAP = {
    "/cart": storefront,
    "/orders": checkout,
    "/reservations": checkout,
    "/cron": checkout,
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
app = FastAPI(
    title="Card Storefront API",
    description="Trading-card shop — cart rules, checkout and stock reservations",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)


@app.middleware("http")
async def domain_context_middleware(request: Request, call_next):
    """Push the correct Protean domain context for each request."""
    domain = _resolve_domain(request.url.path)
    if domain is not None:
        with domain.domain_context():
            response = await call_next(request)
        return response
    # No domain match: health check, docs
    return await call_next(request)


# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
from checkout.api import maintenance_router, order_router, reservation_router  # noqa: E402
from storefront.api import cart_router  # noqa: E402

app.include_router(cart_router)
app.include_router(order_router)
app.include_router(reservation_router)
app.include_router(maintenance_router)


# ---------------------------------------------------------------------------
# Health / root
# ---------------------------------------------------------------------------
@app.get("/health")
async def health():
    return JSONResponse(
        content={
            "status": "ok",
            "domains": {
                "storefront": {"name": storefront.name},
                "checkout": {"name": checkout.name},
            },
        }
    )
