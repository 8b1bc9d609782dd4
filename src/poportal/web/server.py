from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from poportal.app import App
from poportal.config import Config
from poportal.errors import UserError
from poportal.web.error_handlers import general_exception_handler, user_error_handler
from poportal.web.middleware import SessionAuthorityMiddleware
from poportal.web.openapi import set_custom_openapi
from poportal.web.routers import auth_router, session_router


def create_fastapi_app(app_instance: App, config: Config) -> FastAPI:
    """Create and configure FastAPI application."""

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
        """FastAPI application lifespan management."""
        async with app_instance.lifespan():
            yield

    app = FastAPI(
        title="PO Portal API",
        lifespan=lifespan,
    )
    # Set eagerly so handlers work even when the lifespan is not run
    app.state.app = app_instance
    app.state.config = config

    # Session gate runs inside CORS so preflight requests are answered first
    app.middleware("http")(SessionAuthorityMiddleware(app_instance))

    if config.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=config.cors_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    # Health check endpoint (at root level, not behind the session gate)
    @app.get("/health")
    async def health_check() -> dict[str, str]:
        return {"status": "healthy"}

    app.include_router(auth_router, prefix="/api")
    app.include_router(session_router, prefix="/api")

    # Register error handlers
    app.add_exception_handler(UserError, user_error_handler)
    app.add_exception_handler(Exception, general_exception_handler)

    set_custom_openapi(app, config)

    return app
