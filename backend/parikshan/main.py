from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text

from .components.callbacks.api import router as callbacks_router
from .components.candidates.api import router as candidates_router
from .components.companies.api import router as companies_router
from .components.contact.api import router as contact_router
from .components.questions.api import router as questions_router
from .components.submissions.api import router as submissions_router
from .components.test_library.api import router as test_library_router
from .components.test_sessions.api import router as test_sessions_router
from .components.uploads.api import router as uploads_router
from .components.webhooks.config import current_env
from .platform.brand import BRAND_APP_DESCRIPTION, BRAND_NAME
from .platform.config import settings
from .platform.database import SessionLocal
from .platform.errors import register_exception_handlers
from .platform.logging import setup_logging
from .platform.middleware import RateLimitMiddleware, RequestLoggingMiddleware, SecurityHeadersMiddleware

logger = setup_logging()

# Local Supabase ships a well-known JWT secret; never accept it in production
_INSECURE_JWT_SECRETS = {
    "",
    "secret",
    "changeme",
    "super-secret-jwt-token-with-at-least-32-characters-long",
}
if settings.is_production and settings.SUPABASE_JWT_SECRET in _INSECURE_JWT_SECRETS:
    raise RuntimeError("SUPABASE_JWT_SECRET is an insecure default; refusing to start in production")

ROUTERS = (
    uploads_router,
    submissions_router,
    callbacks_router,
    candidates_router,
    companies_router,
    questions_router,
    test_library_router,
    test_sessions_router,
    contact_router,
)


def _cors_origins() -> list:
    origins = [settings.FRONTEND_URL, "http://localhost:5173", "http://localhost:8080"]
    if settings.CORS_EXTRA_ORIGINS:
        origins += [o.strip() for o in settings.CORS_EXTRA_ORIGINS.split(",")]
    return [o for o in origins if o]


def _init_sentry() -> None:
    if not (settings.SENTRY_DSN and settings.SENTRY_DSN.startswith("https://")):
        return
    import sentry_sdk
    from sentry_sdk.integrations.fastapi import FastApiIntegration
    from sentry_sdk.integrations.sqlalchemy import SqlalchemyIntegration

    sentry_sdk.init(
        dsn=settings.SENTRY_DSN,
        environment=settings.DEPLOYMENT_ENV,
        traces_sample_rate=0.1,
        integrations=[FastApiIntegration(), SqlalchemyIntegration()],
    )


@asynccontextmanager
async def _lifespan(_app: FastAPI):
    logger.info("%s API started env=%s webhooks=%s", BRAND_NAME, settings.DEPLOYMENT_ENV, current_env())
    yield
    logger.info("%s API stopped", BRAND_NAME)


def create_app() -> FastAPI:
    application = FastAPI(
        title=f"{BRAND_NAME} API",
        description=BRAND_APP_DESCRIPTION,
        version="1.0.0",
        docs_url=None if settings.is_production else "/api/docs",
        openapi_url=None if settings.is_production else "/api/openapi.json",
        lifespan=_lifespan,
    )
    register_exception_handlers(application)

    # Starlette runs the last-added middleware first
    application.add_middleware(SecurityHeadersMiddleware, hsts=settings.is_production)
    application.add_middleware(
        CORSMiddleware,
        allow_origins=_cors_origins(),
        allow_credentials=True,
        allow_methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["Authorization", "Content-Type", "X-Requested-With", "X-N8N-Secret"],
    )
    application.add_middleware(RateLimitMiddleware)
    application.add_middleware(RequestLoggingMiddleware)

    for router in ROUTERS:
        application.include_router(router, prefix="/api")
    application.add_api_route("/health", health_check, methods=["GET"], tags=["Health"])
    return application


def _database_ok() -> bool:
    db = SessionLocal()
    try:
        db.execute(text("SELECT 1"))
        return True
    except Exception:
        logger.exception("Health check: database unreachable")
        return False
    finally:
        db.close()


def _redis_ok() -> bool:
    import redis

    try:
        client = redis.from_url(settings.REDIS_URL, socket_connect_timeout=2, socket_timeout=2)
        return bool(client.ping())
    except redis.RedisError:
        return False


def health_check():
    database = _database_ok()
    redis_up = _redis_ok()
    return {
        "status": "healthy" if database and redis_up else "degraded",
        "service": "parikshan-api",
        "database": database,
        "redis": redis_up,
        "webhook_env": current_env(),
    }


_init_sentry()
app = create_app()
