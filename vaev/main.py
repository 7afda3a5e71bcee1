import logging
from pathlib import Path
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, RedirectResponse
from fastapi.staticfiles import StaticFiles
from sqlalchemy.exc import SQLAlchemyError

from vaev.config import Settings, get_settings
from vaev.db.database import build_engine, build_session_factory
from vaev.db.init_db import init_database
from vaev.domain.errors import AuthRedirectError, NotFoundError, UnauthorizedError, ValidationError
from vaev.routers import auth, health, pages, sse_project, vapi
from vaev.security.identity import IdentityMiddleware
from vaev.security.session import SessionMiddleware
from vaev.security.signed_cookie import SignedCookieCodec
from vaev.services.identity_provider import IdentityProvider

logger = logging.getLogger(__name__)

UNAUTHORIZED_MESSAGE = "You are not authorized to access this resource"


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()

    app = FastAPI(
        title="Vaev",
        description="Multi-user editor for typed property graphs",
        version=settings.VERSION,
    )

    engine = build_engine(settings.DATABASE_URL)
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = build_session_factory(engine)
    app.state.identity_provider = IdentityProvider(settings.token_secret, settings.AUTH_MAX_AGE_DAYS)

    @app.on_event("startup")
    def startup_event():
        init_database(engine)
        if settings.is_development:
            logger.info("Development mode: assets are served by %s", settings.DEV_ASSET_SERVER)

    @app.on_event("shutdown")
    def shutdown_event():
        engine.dispose()

    # Added last runs first: identity wraps session wraps the routers
    app.add_middleware(
        SessionMiddleware,
        codec=SignedCookieCodec(settings.SESSION_KEY.encode("utf-8")),
        cookie_name=settings.SESSION_COOKIE_NAME,
        max_age_days=settings.SESSION_MAX_AGE_DAYS,
        max_form_bytes=settings.MAX_FORM_BYTES,
    )
    app.add_middleware(
        IdentityMiddleware,
        cookie_name=settings.AUTH_COOKIE_NAME,
        context_key=settings.AUTH_CONTEXT_KEY,
    )

    # Domain error handlers
    @app.exception_handler(AuthRedirectError)
    async def auth_redirect_handler(request: Request, exc: AuthRedirectError):
        return RedirectResponse(exc.location, status_code=303)

    @app.exception_handler(UnauthorizedError)
    async def unauthorized_handler(request: Request, exc: UnauthorizedError):
        logger.info("Unauthorized %s %s: %s", request.method, request.url.path, exc)
        return JSONResponse(status_code=401, content={"message": UNAUTHORIZED_MESSAGE})

    @app.exception_handler(NotFoundError)
    async def not_found_handler(request: Request, exc: NotFoundError):
        return JSONResponse(status_code=404, content={"message": "Not found"})

    @app.exception_handler(ValidationError)
    async def validation_error_handler(request: Request, exc: ValidationError):
        return JSONResponse(status_code=400, content={"message": str(exc)})

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        logger.info("Malformed request to %s: %s", request.url.path, exc.errors())
        return JSONResponse(status_code=400, content={"message": "Malformed request"})

    @app.exception_handler(SQLAlchemyError)
    async def store_error_handler(request: Request, exc: SQLAlchemyError):
        logger.error("Store failure on %s %s", request.method, request.url.path, exc_info=exc)
        return JSONResponse(status_code=500, content={"message": "Internal server error"})

    # Include routers
    app.include_router(health.router, tags=["Health"])
    app.include_router(pages.router, tags=["Pages"])
    app.include_router(auth.router, tags=["Auth"])
    app.include_router(sse_project.router, tags=["Projects"])
    app.include_router(vapi.router, tags=["Graph API"])

    if not settings.is_development and settings.STATIC_DIR and Path(settings.STATIC_DIR).is_dir():
        app.mount("/dist", StaticFiles(directory=settings.STATIC_DIR), name="dist")

    return app
