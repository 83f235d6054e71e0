"""Main entry point for the Hoàn Hảo web front FastAPI application.

This module creates and configures the FastAPI app instance that serves the
localized pages of the Hoàn Hảo social network: authentication, profiles,
friends, groups and the news feed. Page data comes from the Hoàn Hảo
backend through the client library.

To run the development server:
    uvicorn main:app --reload

To run in production:
    APP_ENV=production uvicorn main:app --host 0.0.0.0 --port 3000
"""

import logging
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request

from api.exceptions import (
    form_validation_handler,
    generic_exception_handler,
    not_authenticated_handler,
    unsupported_locale_handler,
)
from api.routes import auth as auth_routes
from api.routes import friends as friends_routes
from api.routes import groups as groups_routes
from api.routes import locale as locale_routes
from api.routes import posts as posts_routes
from api.routes import profile as profile_routes
from client import AuthenticationError, NotAuthenticatedError
from config import get_settings
from logging_config import request_id_var, setup_logging
from web.forms import FormValidationError
from web.i18n import LocaleMiddleware, UnsupportedLocaleError

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application lifespan events.

    Configures logging at startup and reports which backend the pages are
    served from.

    Args:
        app: The FastAPI application instance.

    Yields:
        Control back to FastAPI to handle requests.
    """
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_file)
    logger.info(
        "Starting Hoàn Hảo web (%s), backend %s%s",
        settings.app_env,
        settings.api_base_url,
        ", mock auth" if settings.use_mock_auth else "",
    )

    yield  # App runs and handles requests here

    logger.info("Shutdown complete")


# Create the FastAPI application instance
app = FastAPI(
    title="Hoàn Hảo Web",
    description="Localized pages of the Hoàn Hảo social network",
    version="0.1.0",
    lifespan=lifespan,
)

# Register exception handlers
# These convert exceptions into localized JSON responses
app.add_exception_handler(FormValidationError, form_validation_handler)
app.add_exception_handler(NotAuthenticatedError, not_authenticated_handler)
app.add_exception_handler(AuthenticationError, not_authenticated_handler)
app.add_exception_handler(UnsupportedLocaleError, unsupported_locale_handler)
app.add_exception_handler(Exception, generic_exception_handler)

# Pages without a locale prefix are redirected to a localized URL
app.add_middleware(LocaleMiddleware, default_locale=get_settings().default_locale)


@app.middleware("http")
async def request_id_middleware(request: Request, call_next):
    """Tag the request's log records and response with a request ID."""
    request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex[:12]
    token = request_id_var.set(request_id)
    try:
        response = await call_next(request)
    finally:
        request_id_var.reset(token)
    response.headers[REQUEST_ID_HEADER] = request_id
    return response


@app.get("/health")
async def health_check():
    """Health check endpoint for monitoring.

    Returns:
        A dictionary indicating the service is healthy.
    """
    return {"status": "healthy"}


# Register route modules
# Each router groups the pages of one area. /health is declared first so
# the /{locale} home page does not capture it.
app.include_router(auth_routes.router)
app.include_router(locale_routes.router)
app.include_router(profile_routes.router)
app.include_router(friends_routes.router)
app.include_router(groups_routes.router)
app.include_router(posts_routes.router)
