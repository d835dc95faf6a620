"""Verified Ratings FastAPI application.

Processes rating commands synchronously via HTTP. Each request under
``/ratings`` runs inside the ratings domain context.

Usage:
    uvicorn src.app:app --host 0.0.0.0 --port 8000 --reload
"""

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# The domain is initialized at module level so uvicorn workers share it.
# PROTEAN_ENV controls which config overlay from domain.toml is applied:
#   - "test"/unset  → memory providers, event_processing = "sync"
#   - "production"  → PostgreSQL + Redis, event_processing = "async"
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from protean.integrations.fastapi import register_exception_handlers
from ratings.domain import ratings
from ratings.utils.logging import add_context, clear_context

ratings.init()

_DOMAIN_PREFIX = "/ratings"


# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(
    title="Verified Ratings API",
    description="Rating admissibility checks and provider reputation statistics",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def domain_context_middleware(request: Request, call_next):
    """Push the ratings domain context for each rating request."""
    clear_context()
    if request.url.path.startswith(_DOMAIN_PREFIX):
        add_context(path=request.url.path, method=request.method)
        with ratings.domain_context():
            response = await call_next(request)
        return response
    # Health check, docs, etc.
    return await call_next(request)


# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
from ratings.api.routes import rating_router, register_error_handlers  # noqa: E402

app.include_router(rating_router)
register_exception_handlers(app)
register_error_handlers(app)


# ---------------------------------------------------------------------------
# Health / root
# ---------------------------------------------------------------------------
@app.get("/health")
async def health():
    return JSONResponse(content={"status": "ok", "domains": {"ratings": {"name": ratings.name}}})
