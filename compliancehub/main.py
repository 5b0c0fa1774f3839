"""FastAPI application entry point.

Wiring only: lifespan, exception handlers, middleware, routers.
No business logic here. See compliancehub.core.lifespan and
compliancehub.core.exception_handlers.

Settings are loaded inside create_app() so that tests can set env (and
optionally clear the get_settings cache) before calling create_app().
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from compliancehub.api.v1 import api_router
from compliancehub.core.config import get_settings
from compliancehub.core.exception_handlers import register_exception_handlers
from compliancehub.core.lifespan import create_lifespan


def create_app() -> FastAPI:
    """Build and return the FastAPI application. Settings are resolved here, not at import."""
    settings = get_settings()
    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        debug=settings.debug,
        lifespan=create_lifespan,
    )
    app.state.record_store = None

    register_exception_handlers(app)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[o.strip() for o in settings.allowed_origins.split(",") if o.strip()],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(api_router, prefix="/api/v1")
    return app


app = create_app()
