"""FastAPI application factory and setup."""

import time
import uuid
from contextlib import asynccontextmanager

import redis.asyncio as redis_async
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from fastapi_limiter import FastAPILimiter
from loguru import logger
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse

from src.farmconnect.api.http.app_data import ApplicationDependencies
from src.farmconnect.api.http.middleware.limiter import (
    close_rate_limiter,
    configure_rate_limiter,
    use_local_rate_limiter,
)
from src.farmconnect.api.http.routers import auth, functions, health
from src.farmconnect.api.http.routers.service import (
    cart,
    dashboard,
    farmers,
    feedback,
    follows,
    market,
    products,
    profile,
)
from src.farmconnect.api.utils.app_startup import configure_logging
from src.farmconnect.core.security import client_ip
from src.farmconnect.core.services import (
    ChatService,
    DbManageService,
    DbSessionService,
    FileStorageService,
    JwtGeneratorService,
    JwtVerificationService,
    MarketPriceService,
    UserSessionService,
)
from src.farmconnect.core.services.market import build_provider
from src.farmconnect.core.storage.session_storage import create_session_storage
from src.farmconnect.runtime.context import get_config

configure_logging()


# --- Security middleware ---
class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)
        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        response.headers.setdefault("X-Frame-Options", "DENY")
        response.headers.setdefault("Referrer-Policy", "strict-origin-when-cross-origin")
        # Farmers share their farm location from the browser
        response.headers.setdefault("Permissions-Policy", "geolocation=(self), microphone=()")
        if get_config().app.environment == "production":
            response.headers.setdefault(
                "Strict-Transport-Security",
                "max-age=31536000; includeSubDomains; preload",
            )
        return response


# --- FastAPI app setup ---
@asynccontextmanager
async def lifespan(app: FastAPI):
    await startup()
    try:
        yield
    finally:
        await shutdown()


app = FastAPI(
    title="FarmConnect API",
    lifespan=lifespan,
    docs_url=None if get_config().app.environment == "production" else "/docs",
    redoc_url=None if get_config().app.environment == "production" else "/redoc",
)

app.add_middleware(SecurityHeadersMiddleware)

__all__ = ["app", "startup", "shutdown"]

# --- CORS configuration ---
if get_config().app.environment == "production" and "*" in get_config().app.cors.origins:
    raise RuntimeError(
        "CORS misconfigured: cannot use '*' with allow_credentials=True in production"
    )

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_config().app.cors.origins,
    allow_credentials=get_config().app.cors.allow_credentials,
    allow_methods=get_config().app.cors.allow_methods,
    allow_headers=get_config().app.cors.allow_headers,
)


# --- Request logging middleware ---
@app.middleware("http")
async def log_requests(request: Request, call_next):
    request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())

    base_ctx = {
        "request_id": request_id,
        "method": request.method,
        "path": request.url.path,
        "client_ip": client_ip(request) or "unknown",
        "user_agent": request.headers.get("user-agent", "unknown"),
    }

    start = time.perf_counter()
    with logger.contextualize(**base_ctx):
        try:
            logger.info("request.start")
            response = await call_next(request)

            duration_ms = (time.perf_counter() - start) * 1000
            logger.bind(
                status_code=response.status_code,
                duration_ms=round(duration_ms, 1),
            ).info("request.end")

            response.headers.setdefault("X-Request-ID", request_id)
            return response

        except Exception as exc:
            duration_ms = (time.perf_counter() - start) * 1000
            logger.bind(
                status_code=500,
                duration_ms=round(duration_ms, 1),
                error_type=type(exc).__name__,
            ).exception("request.error")
            return JSONResponse(
                status_code=500,
                content={"detail": "Internal Server Error", "request_id": request_id},
                headers={"X-Request-ID": request_id},
            )


# --- Router registration ---
app.include_router(health.router)
app.include_router(auth.router)
app.include_router(functions.router)

for service_router in (
    farmers.router,
    products.router,
    feedback.router,
    follows.router,
    cart.router,
    dashboard.router,
    profile.router,
    market.router,
):
    app.include_router(service_router, prefix="/api/v1")

# Uploaded product and profile images
app.mount(
    "/storage",
    StaticFiles(directory=get_config().storage.root, check_dir=False),
    name="storage",
)


# --- Rate limiter setup ---
async def _initialize_rate_limiter() -> None:
    config = get_config()
    if not config.redis.enabled or not config.redis.url:
        logger.info("Redis not configured; using in-memory rate limiter")
        use_local_rate_limiter()
        return

    try:
        client = redis_async.from_url(
            config.redis.connection_string,
            encoding="utf-8",
            decode_responses=config.redis.decode_responses,
        )
        await FastAPILimiter.init(client)
        app.state.redis = client
        configure_rate_limiter()
        logger.info("FastAPI limiter initialized with Redis")
    except Exception:
        logger.exception("Failed to initialize FastAPI limiter with Redis")
        if config.app.environment == "production":
            raise
        logger.warning("Falling back to in-memory rate limiter")
        use_local_rate_limiter()


# --- Lifecycle hooks ---
async def startup() -> None:
    config = get_config()
    logger.info("Starting up application in {} environment", config.app.environment)

    database_service = DbSessionService()
    DbManageService(database_service.engine).create_all()

    session_storage = await create_session_storage(config)
    file_storage = FileStorageService(config.storage)
    for bucket in file_storage.buckets:
        (file_storage.root / bucket).mkdir(parents=True, exist_ok=True)

    app.state.app_dependencies = ApplicationDependencies(
        database_service=database_service,
        session_storage=session_storage,
        user_session_service=UserSessionService(session_storage),
        jwt_generation_service=JwtGeneratorService(),
        jwt_verify_service=JwtVerificationService(),
        file_storage=file_storage,
        chat_service=ChatService(config.llm),
        market_price_service=MarketPriceService(
            build_provider(config.market_prices), config.market_prices
        ),
    )

    if not config.llm.api_key:
        logger.warning("Gemini API key not configured; chat requests must supply one")

    await _initialize_rate_limiter()


async def shutdown() -> None:
    logger.info("Shutting down application")
    await close_rate_limiter()
    app_dependencies: ApplicationDependencies = app.state.app_dependencies
    purged = await app_dependencies.user_session_service.purge_expired()
    logger.info("Purged {} expired sessions", purged)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        app,
        host=get_config().app.host,
        port=get_config().app.port,
        access_log=False,
    )
