# ============================================================================
# FILE: videotube/main.py
# ============================================================================
from typing import Optional
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from videotube.api.v1.router import api_router
from videotube.config import Settings, get_settings
from videotube.core.errors import register_exception_handlers
from videotube.core.logging import setup_logging
from videotube.core.media import MediaUploader
from videotube.core.security import TokenService
from videotube.db.base import Base, import_models
from videotube.db.session import create_db_engine, create_session_factory
import logging

logger = logging.getLogger(__name__)

def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the application; every secret-bearing component gets `settings` explicitly"""
    settings = settings or get_settings()
    setup_logging(settings.LOG_LEVEL)

    app = FastAPI(
        title=settings.APP_NAME,
        description="User accounts, sessions and channel profiles for VideoTube",
        version="1.0.0",
        debug=settings.DEBUG,
    )

    engine = create_db_engine(settings.DATABASE_URL, echo=settings.DEBUG)
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = create_session_factory(engine)
    app.state.token_service = TokenService(settings)
    app.state.media_uploader = MediaUploader(settings)

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    # Include API v1 router
    app.include_router(api_router, prefix="/api/v1")

    @app.on_event("startup")
    async def startup_event():
        """Create database tables on startup"""
        logger.info(f"Starting {settings.APP_NAME}")
        import_models()
        Base.metadata.create_all(bind=engine)

    @app.on_event("shutdown")
    async def shutdown_event():
        logger.info(f"Shutting down {settings.APP_NAME}")
        engine.dispose()

    @app.get("/health")
    async def health_check():
        return {"status": "healthy"}

    return app

app = create_app()
