"""
FitDash Backend - FastAPI Application
"""
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from fitdash.core.config import Settings, settings as default_settings
from fitdash.core.database import Database
from fitdash.core.logging import setup_logging, get_logger
from fitdash.api import dashboard, insights, records, reports
from fitdash.services.adapter import AIProviderAdapter, get_ai_adapter
from fitdash.services.dashboard import (
    DashboardSession,
    SessionNotReadyError,
    SetupNotAllowedError,
)
from fitdash.services.external import ReportExportService
from fitdash.services.identity import AnonymousIdentityProvider, IdentityProvider
from fitdash.services.insights import InsightService
from fitdash.services.store import DocumentStore, SqlDocumentStore

logger = get_logger(__name__)


def create_app(
    config: Settings = default_settings,
    store: Optional[DocumentStore] = None,
    identity: Optional[IdentityProvider] = None,
    ai_adapter: Optional[AIProviderAdapter] = None,
) -> FastAPI:
    """
    Build the application.

    Collaborators not passed in are built from `config` at startup.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan events."""
        # Startup
        setup_logging(config)
        logger.info("Starting FitDash Backend", version="1.0.0")

        document_store = store or SqlDocumentStore(Database(config.DATABASE_URL))
        adapter = ai_adapter
        if adapter is None:
            try:
                adapter = get_ai_adapter(config)
            except ValueError as e:
                logger.warning("AI insights unavailable", error=str(e))

        session = DashboardSession(
            store=document_store,
            identity=identity or AnonymousIdentityProvider(user_id=config.USER_ID),
            insights=InsightService(adapter),
            exporter=ReportExportService(),
            namespace=config.DOCUMENT_NAMESPACE,
            app_id=config.APP_ID,
        )
        app.state.session = session

        try:
            await document_store.init()
            logger.info("Record store initialized")
        except Exception as e:
            # The dashboard stays in the loading state
            logger.error("Record store initialization failed", error=str(e))
        else:
            await session.start()

        yield

        # Shutdown
        session.close()
        await document_store.dispose()
        logger.info("Shutting down FitDash Backend")

    app = FastAPI(
        title="FitDash API",
        description="Personal fitness dashboard backend",
        version="1.0.0",
        lifespan=lifespan,
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(SessionNotReadyError)
    async def session_not_ready(request: Request, exc: SessionNotReadyError):
        return JSONResponse(status_code=503, content={"detail": str(exc)})

    @app.exception_handler(SetupNotAllowedError)
    async def setup_not_allowed(request: Request, exc: SetupNotAllowedError):
        return JSONResponse(status_code=409, content={"detail": str(exc)})

    # Include routers
    app.include_router(dashboard.router, prefix="/api", tags=["dashboard"])
    app.include_router(records.router, prefix="/api", tags=["records"])
    app.include_router(insights.router, prefix="/api", tags=["insights"])
    app.include_router(reports.router, prefix="/api", tags=["reports"])

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {"status": "healthy", "service": "fitdash-backend"}

    return app


app = create_app()
