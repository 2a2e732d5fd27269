"""Punto de entrada de la API usando FastAPI.

Este módulo crea la aplicación, configura el logging, los middlewares
(CORS, cabeceras de seguridad, límite de peticiones, compresión) y los
manejadores de error, y registra los routers bajo `/api`.

El orden de los middlewares importa: el último que se registra es el más
externo. Queda así, de fuera hacia dentro:
log de peticiones → CORS → cabeceras de seguridad → rate limit →
errores no controlados → GZip.
"""

import logging
import time
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from http import HTTPStatus

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.api.analytics import router as analytics_router
from app.api.jobs import router as jobs_router
from app.api.memes import router as memes_router
from app.core.config import get_settings
from app.core.errors import AppError, RateLimitError, ValidationError, classify_exception, error_body
from app.core.logging_config import configure_logging
from app.services.rate_limiter import rate_limiter

settings = get_settings()
configure_logging(settings)

logger = logging.getLogger(__name__)

_started_at = time.monotonic()

AVAILABLE_ENDPOINTS = [
    "GET /health",
    "GET /",
    "POST /api/jobs/analyze",
    "GET /api/jobs/random",
    "GET /api/jobs/categories",
    "GET /api/memes/daily",
    "POST /api/analytics/track",
]

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "SAMEORIGIN",
    "Referrer-Policy": "no-referrer",
    "X-DNS-Prefetch-Control": "off",
    "Content-Security-Policy": (
        "default-src 'self'; "
        "style-src 'self' 'unsafe-inline' https://cdn.jsdelivr.net https://fonts.googleapis.com; "
        "script-src 'self' 'unsafe-inline' https://cdn.jsdelivr.net; "
        "font-src 'self' https://fonts.gstatic.com https://cdn.jsdelivr.net; "
        "img-src 'self' data: https:; "
        "connect-src 'self'"
    ),
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("%s v%s starting on port %s", settings.app_name, settings.version, settings.port)
    logger.info("Environment: %s", settings.environment)
    yield
    logger.info("Shutting down gracefully")


# Instancia principal de FastAPI; aquí es donde se montan rutas y middleware.
app = FastAPI(
    title=settings.app_name,
    version=settings.version,
    lifespan=lifespan,
)


def _json_error(status_code: int, body: dict, headers: dict | None = None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=body, headers=headers)


# ---------- MIDDLEWARES (de dentro hacia fuera) ----------

app.add_middleware(GZipMiddleware, minimum_size=1000)


@app.middleware("http")
async def catch_unexpected_errors(request: Request, call_next):
    """Errores no controlados; su respuesta pasa por CORS, cabeceras y log."""
    try:
        return await call_next(request)
    except Exception as exc:
        return unexpected_error_response(request, exc)


@app.middleware("http")
async def rate_limit(request: Request, call_next):
    """Ventana fija por IP, sólo para `/api/`."""
    if not settings.rate_limit_enabled or not request.url.path.startswith("/api/"):
        return await call_next(request)

    client_ip = request.client.host if request.client else "unknown"
    decision = rate_limiter.hit(client_ip)
    if not decision.allowed:
        exc = RateLimitError(retry_after=decision.retry_after)
        logger.warning("Rate limit exceeded for %s on %s", client_ip, request.url.path)
        return _json_error(
            exc.status_code,
            error_body(
                error=exc.error,
                message=exc.message,
                path=request.url.path,
                method=request.method,
                extra=exc.extra,
            ),
            headers={"Retry-After": str(decision.retry_after)},
        )

    response = await call_next(request)
    response.headers["X-RateLimit-Limit"] = str(rate_limiter.max_requests)
    response.headers["X-RateLimit-Remaining"] = str(decision.remaining)
    return response


@app.middleware("http")
async def security_headers(request: Request, call_next):
    response = await call_next(request)
    for name, value in SECURITY_HEADERS.items():
        response.headers.setdefault(name, value)
    return response


app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=settings.allow_credentials,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    started_at = time.perf_counter()
    response = await call_next(request)
    duration_ms = (time.perf_counter() - started_at) * 1000

    level = logging.WARNING if response.status_code >= 400 else logging.INFO
    logger.log(
        level,
        "%s %s %s %.0fms ip=%s ua=%s",
        request.method,
        request.url.path,
        response.status_code,
        duration_ms,
        request.client.host if request.client else "unknown",
        request.headers.get("user-agent", "unknown"),
    )
    return response


# ---------- MANEJADORES DE ERROR ----------


@app.exception_handler(AppError)
async def handle_app_error(request: Request, exc: AppError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s on %s %s: %s", exc.error, request.method, request.url.path, exc.message)
    headers = None
    if isinstance(exc, RateLimitError) and exc.retry_after:
        headers = {"Retry-After": str(exc.retry_after)}
    return _json_error(
        exc.status_code,
        error_body(
            error=exc.error,
            message=exc.message,
            path=request.url.path,
            method=request.method,
            include_debug=not settings.is_production,
            details=exc.details,
            extra=exc.extra,
        ),
        headers=headers,
    )


def _validation_message(error: dict) -> str:
    """El mensaje de nuestros validadores viaja en `ctx["error"]`."""
    ctx = error.get("ctx") or {}
    if isinstance(ctx.get("error"), Exception):
        return str(ctx["error"])
    if error.get("type") == "missing" and tuple(error.get("loc", ())) == ("body",):
        return "Request body is required"
    field = error.get("loc", ("",))[-1]
    return f"{field}: {error.get('msg', 'Invalid value')}" if field else error.get("msg", "Invalid value")


@app.exception_handler(RequestValidationError)
async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    message = _validation_message(errors[0]) if errors else ValidationError.default_message
    # `ctx` puede llevar excepciones que no se serializan; se reconstruye a mano
    details = [
        {"loc": [str(part) for part in err.get("loc", ())], "msg": err.get("msg"), "type": err.get("type")}
        for err in errors
    ]
    logger.warning("Validation failed on %s %s: %s", request.method, request.url.path, message)
    return _json_error(
        ValidationError.status_code,
        error_body(
            error=ValidationError.error,
            message=message,
            path=request.url.path,
            method=request.method,
            include_debug=not settings.is_production,
            details=details,
        ),
    )


@app.exception_handler(StarletteHTTPException)
async def handle_http_exception(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code == 404:
        return _json_error(
            404,
            error_body(
                error="Not Found",
                message=f"Route {request.method} {request.url.path} not found",
                path=request.url.path,
                method=request.method,
                extra={"availableEndpoints": AVAILABLE_ENDPOINTS},
            ),
        )

    label = HTTPStatus(exc.status_code).phrase
    return _json_error(
        exc.status_code,
        error_body(
            error=label,
            message=str(exc.detail) if exc.detail else label,
            path=request.url.path,
            method=request.method,
            include_debug=not settings.is_production,
        ),
        headers=getattr(exc, "headers", None),
    )


def unexpected_error_response(request: Request, exc: Exception) -> JSONResponse:
    status_code, label = classify_exception(exc)
    logger.error(
        "Error occurred on %s %s: %s", request.method, request.url.path, exc, exc_info=exc
    )
    return _json_error(
        status_code,
        error_body(
            error=label,
            message=str(exc) or AppError.default_message,
            path=request.url.path,
            method=request.method,
            include_debug=not settings.is_production,
            exc=exc,
        ),
    )


# ---------- RUTAS ----------


@app.get("/health")
async def health():
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "uptime": round(time.monotonic() - _started_at, 3),
        "environment": settings.environment,
    }


@app.get("/")
async def root():
    return {
        "message": "🔥 IsMyJobCooked API is running!",
        "version": settings.version,
        "endpoints": {
            "jobs": "/api/jobs",
            "memes": "/api/memes",
            "analytics": "/api/analytics",
        },
        "documentation": "/docs",
    }


app.include_router(jobs_router, prefix="/api")
app.include_router(memes_router, prefix="/api")
app.include_router(analytics_router, prefix="/api")

# Frontend estático sólo en producción; se monta al final para no tapar la API
if settings.is_production and settings.static_dir.is_dir():
    app.mount("/", StaticFiles(directory=settings.static_dir, html=True), name="static")


if __name__ == "__main__":
    uvicorn.run("app.main:app", host="0.0.0.0", port=settings.port)
