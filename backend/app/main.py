from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.openapi.utils import get_openapi
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
import time

from app.core.config import settings
from app.core.logging import setup_logging, get_logger
from app.infrastructure.database import models  # noqa: F401
from app.infrastructure.database.session import Base, engine
from app.infrastructure.events.bus import event_bus
from app.infrastructure.scheduler import start_scheduler, shutdown_scheduler
from app.application.reactions import register_reactions
from app.api.dependencies.rate_limit import limiter
from app.api.routes import analytics, goals, badges, activity

# ──── Init ────────────────────────────────────────────────────────────────────
setup_logging()
logger = get_logger(__name__)
Base.metadata.create_all(bind=engine)


@asynccontextmanager
async def lifespan(app: FastAPI):
    unsubscribe = register_reactions(event_bus)
    if settings.SCHEDULER_ENABLED:
        start_scheduler()
    logger.info("Application started", app=settings.APP_NAME, version=settings.APP_VERSION)
    yield
    if settings.SCHEDULER_ENABLED:
        shutdown_scheduler()
    event_bus.flush()
    for fn in unsubscribe:
        fn()
    event_bus.shutdown()
    logger.info("Application stopped")


# ──── App ─────────────────────────────────────────────────────────────────────
app = FastAPI(
    title="LOCKIN Analytics API",
    version=settings.APP_VERSION,
    description="""
## LOCKIN productivity analytics

Daily metrics, scores, streaks, period comparisons, goal progress and badges.

Authenticate with a Bearer access token (paste the token only, Swagger adds `Bearer`).
    """,
    lifespan=lifespan,
    swagger_ui_parameters={
        "persistAuthorization": True,
        "displayRequestDuration": True,
    },
)

# ──── Middleware ──────────────────────────────────────────────────────────────
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def request_logger(request: Request, call_next):
    start = time.time()
    response = await call_next(request)
    duration = round((time.time() - start) * 1000, 2)
    logger.info(
        "HTTP request",
        method=request.method,
        path=request.url.path,
        status=response.status_code,
        duration_ms=duration
    )
    return response


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error("Unhandled exception", error=str(exc), path=request.url.path)
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


def custom_openapi():
    if app.openapi_schema:
        return app.openapi_schema

    schema = get_openapi(
        title=app.title,
        version=app.version,
        description=app.description,
        routes=app.routes,
    )
    schema.setdefault("components", {})
    schema["components"]["securitySchemes"] = {
        "bearerAuth": {"type": "http", "scheme": "bearer", "bearerFormat": "JWT"}
    }

    public_paths = {"/health", "/"}
    for path, path_data in schema["paths"].items():
        for operation in path_data.values():
            operation["security"] = [] if path in public_paths else [{"bearerAuth": []}]

    app.openapi_schema = schema
    return app.openapi_schema


app.openapi = custom_openapi


# ──── Routers ─────────────────────────────────────────────────────────────────
app.include_router(analytics.router, prefix="/api/v1")
app.include_router(goals.router, prefix="/api/v1")
app.include_router(badges.router, prefix="/api/v1")
app.include_router(activity.router, prefix="/api/v1")


# ──── Health ──────────────────────────────────────────────────────────────────
@app.get("/health", tags=["System"])
def health_check():
    return {"status": "ok", "app": settings.APP_NAME, "version": settings.APP_VERSION}


@app.get("/", tags=["System"])
def root():
    return {
        "message": f"Welcome to {settings.APP_NAME} API",
        "docs": "/docs",
        "version": settings.APP_VERSION,
    }
