# seva_kendra/main.py

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .catalog import Catalog
from .config import DEFAULT_SECRET_KEY, Settings, get_settings
from .database import make_engine, make_session_factory
from .dependencies import get_store
from .exceptions import register_exception_handlers
from .routers import auth, requests, services
from .store import MemoryStore, SqlStore, Store

logger = logging.getLogger(__name__)

ENDPOINTS = [
    "POST /api/auth/register",
    "POST /api/auth/login",
    "GET  /api/services",
    "GET  /api/services/:id",
    "POST /api/services",
    "PUT  /api/services/:id",
    "DELETE /api/services/:id",
    "GET  /api/requests",
    "POST /api/requests",
    "GET  /api/requests/user/:phone",
    "GET  /api/requests/track/:registrationNo",
    "PUT  /api/requests/:id/status",
]


def build_store(settings: Settings) -> Store:
    if settings.store_backend == "memory":
        return MemoryStore()
    if settings.store_backend != "sql":
        raise ValueError(f"Unknown STORE_BACKEND {settings.store_backend!r}")
    engine = make_engine(settings.database_url)
    return SqlStore(make_session_factory(engine))


def create_app(settings: Optional[Settings] = None, store: Optional[Store] = None) -> FastAPI:
    settings = settings or get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    store = store if store is not None else build_store(settings)
    if settings.secret_key == DEFAULT_SECRET_KEY:
        logger.warning("SECRET_KEY is not set; tokens are signed with the built-in development key")

    # ────────────────────────────── STORE LIFECYCLE ──────────────────────────────

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        store.setup()
        if settings.seed_services:
            Catalog(store).seed_defaults()
        logger.info("%s %s started (%s store)", settings.project_name, settings.api_version, type(store).__name__)
        yield
        logger.info("%s shutting down", settings.project_name)

    app = FastAPI(
        title=settings.project_name,
        description="User registration, service catalog and application tracking for Seva Kendra",
        version=settings.api_version,
        lifespan=lifespan,
    )
    app.state.store = store
    app.dependency_overrides[get_settings] = lambda: settings

    # ────────────────────────────── CORS ──────────────────────────────
    origins = settings.cors_origin_list
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials="*" not in origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    app.include_router(auth.router, prefix="/api")
    app.include_router(services.router, prefix="/api")
    app.include_router(requests.router, prefix="/api")

    # ────────────────────────────── SERVICE ROUTES ──────────────────────────────

    @app.get("/", tags=["Meta"])
    def root():
        return {
            "message": f"{settings.project_name} is running",
            "version": settings.api_version,
            "endpoints": ENDPOINTS,
        }

    @app.get("/health", tags=["Meta"])
    def health():
        return {
            "status": "OK",
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

    @app.get("/api/test-db", tags=["Meta"])
    def test_db(store: Store = Depends(get_store)):
        store.ping()
        return {"success": True, "message": "Database connection successful!"}

    return app


def run() -> None:
    import uvicorn

    settings = get_settings()
    uvicorn.run("seva_kendra.main:app", host=settings.host, port=settings.port)


app = create_app()
