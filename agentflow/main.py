"""FastAPI application entry point.

Wiring only: logging, lifespan, exception handlers, middleware, routers.
See agentflow.core.lifespan and agentflow.core.exception_handlers.

Settings are loaded inside create_app() so that tests can set env (and
clear the get_settings cache) before calling create_app().
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from agentflow.api.v1 import api_router
from agentflow.core.config import get_settings
from agentflow.core.exception_handlers import register_exception_handlers
from agentflow.core.lifespan import create_lifespan
from agentflow.core.limiter import limiter
from agentflow.middleware import CorrelationIDMiddleware
from agentflow.shared.telemetry.logging import setup_logging


def create_app() -> FastAPI:
    """Build and return the FastAPI application. Settings are resolved here, not at import."""
    settings = get_settings()
    setup_logging()
    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        debug=settings.debug,
        lifespan=create_lifespan,
    )

    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    register_exception_handlers(app)

    # First added = innermost; correlation id wraps CORS so every response carries it.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[o.strip() for o in settings.allowed_origins.split(",") if o.strip()],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(CorrelationIDMiddleware, header_name=settings.correlation_id_header)

    app.include_router(api_router, prefix="/api/v1")

    return app


app = create_app()
