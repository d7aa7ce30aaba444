import asyncio
import logging
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.config import settings
from app.modules.auth import routes as auth_routes
from app.modules.profile import routes as profile_routes
from app.modules.users import routes as users_routes
from app.modules.settings import routes as settings_routes
from app.modules.categories import routes as categories_routes
from app.modules.templates import routes as templates_routes
from app.modules.subscriptions import routes as subscriptions_routes
from app.modules.analytics import routes as analytics_routes
from app.modules.downloads import routes as downloads_routes
from app.modules.creators import routes as creators_routes
from app.modules.payments import routes as payments_routes
from app.modules.sfx import routes as sfx_routes

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)

limiter = Limiter(key_func=get_remote_address, default_limits=[settings.rate_limit])
app = FastAPI(
    title=settings.app_name,
    debug=settings.debug,
    redirect_slashes=False,
)
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"ok": False, "error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    message = errors[0].get("msg", "Invalid request") if errors else "Invalid request"
    return JSONResponse(status_code=400, content={"ok": False, "error": message})


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled exception: %s", exc)
    if settings.is_production:
        return JSONResponse(status_code=500, content={"ok": False, "error": "Internal server error"})
    return JSONResponse(status_code=500, content={"ok": False, "error": str(exc)})


class SecurityHeadersMiddleware:
    def __init__(self, app):
        self.app = app

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        async def send_with_headers(message):
            if message["type"] == "http.response.start":
                message.setdefault("headers", [])
                message["headers"].extend([
                    (b"X-Content-Type-Options", b"nosniff"),
                    (b"X-Frame-Options", b"DENY"),
                    (b"Referrer-Policy", b"strict-origin-when-cross-origin"),
                ])
            await send(message)

        await self.app(scope, receive, send_with_headers)


app.add_middleware(SlowAPIMiddleware)
app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_cors_origins_list(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include module routes
app.include_router(auth_routes.router, prefix="/api")
app.include_router(profile_routes.router, prefix="/api")
app.include_router(users_routes.router, prefix="/api")
app.include_router(settings_routes.router, prefix="/api")
app.include_router(categories_routes.router, prefix="/api")
app.include_router(templates_routes.router, prefix="/api")
app.include_router(subscriptions_routes.router, prefix="/api")
app.include_router(analytics_routes.router, prefix="/api")
app.include_router(downloads_routes.router, prefix="/api")
app.include_router(creators_routes.router, prefix="/api")
app.include_router(payments_routes.router, prefix="/api")
app.include_router(payments_routes.webhook_router, prefix="/api")
app.include_router(sfx_routes.router, prefix="/api")


@app.on_event("startup")
async def startup_event():
    logger.info("Application startup")

    app.state.expiry_task = None
    if settings.expiry_scheduler_enabled:
        from app.modules.subscriptions.expiry_scheduler import expiry_scheduler_loop
        app.state.expiry_task = asyncio.create_task(expiry_scheduler_loop())
        logger.info(
            f"Expiry scheduler started - will check for expiring subscriptions every "
            f"{settings.expiry_scheduler_interval_seconds}s"
        )


@app.on_event("shutdown")
async def shutdown_event():
    task = getattr(app.state, "expiry_task", None)
    if task is not None:
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        logger.info("Expiry scheduler stopped")
    logger.info("Application shutdown")


@app.get("/")
async def root():
    return {"message": f"Welcome to {settings.app_name}", "status": "healthy"}


@app.get("/health")
@limiter.exempt
async def health():
    return {"status": "healthy"}


@app.get("/ready")
@limiter.exempt
async def ready():
    return {"status": "ready"}
