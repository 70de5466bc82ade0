from __future__ import annotations

from fastapi import FastAPI

from error_boundary.api.router import api_router
from error_boundary.core.context import ErrorContext, create_error_context
from error_boundary.core.logging import configure_logging
from error_boundary.core.settings import get_settings
from error_boundary.middleware import install_error_boundary


def create_app(context: ErrorContext | None = None) -> FastAPI:
    settings = get_settings()
    configure_logging(settings.log_level)

    # Malformed status overrides fail here, before any traffic.
    if context is None:
        context = create_error_context(settings)

    app = FastAPI(title=settings.app_title)
    install_error_boundary(app, context)
    app.include_router(api_router)
    return app


app = create_app()
