import logging

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from .core.config import get_settings, Settings
from .core.logging import init_logging, request_context_middleware
from .core import errors
from .db.store import SqliteRateStore
from .routers import convert, health
from .services.rates.cache_key import today
from .services.rates.conversion import ConversionService
from .services.rates.providers import make_rate_provider


def build_conversion_service(settings: Settings) -> ConversionService:
    """Wire the rate store, provider and clock selected by ``settings``."""
    store = SqliteRateStore(settings.db_path)  # type: ignore[arg-type]
    provider = make_rate_provider(settings.exchange_rate_provider, settings)
    use_utc = settings.cache_day_utc
    return ConversionService(store, provider, clock=lambda: today(use_utc))


def create_app(
    settings_override: Settings | None = None,
    service: ConversionService | None = None,
) -> FastAPI:
    """Application factory.

    settings_override: pass an already constructed Settings instance for tests
    to isolate environment (e.g., temp DB). Falls back to cached get_settings().
    service: a pre-built ConversionService (tests inject fakes here); built
    from settings when omitted.
    """
    settings = settings_override or get_settings()
    settings.init_post_load()
    init_logging(debug=settings.debug)

    if service is None:
        try:
            service = build_conversion_service(settings)
        except Exception:
            # Failing to open the rate cache is fatal; re-raise after logging
            logging.getLogger("xrate").exception("failed to initialise conversion service")
            raise

    app = FastAPI(
        title=settings.app_name, debug=settings.debug, version=settings.version
    )
    app.state.conversion_service = service

    # Middleware (request id / structured logging)
    app.middleware("http")(request_context_middleware)

    # Error handlers
    app.add_exception_handler(StarletteHTTPException, errors.http_error_handler)
    app.add_exception_handler(RequestValidationError, errors.validation_error_handler)
    app.add_exception_handler(Exception, errors.server_error_handler)

    # Routers
    app.include_router(health.router)
    app.include_router(convert.router)

    @app.get("/")
    async def root():
        return {"message": f"{settings.app_name} API", "version": settings.version}

    return app
