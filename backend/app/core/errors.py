"""Jerarquía de errores de la API y traducción a respuestas JSON.

Cada error conoce su código HTTP y su etiqueta (`error`). Los fallos de red o
de tiempo de espera de librerías externas se clasifican por tipo, nunca
buscando palabras dentro del mensaje.
"""

from __future__ import annotations

import traceback
from datetime import datetime, timezone
from typing import Any

import httpx
import openai
from fastapi import status


class AppError(Exception):
    """Error base con código HTTP asociado."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    error: str = "Internal Server Error"
    default_message: str = "An unexpected error occurred"

    def __init__(
        self,
        message: str | None = None,
        details: Any = None,
        extra: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message or self.default_message)
        self.message = message or self.default_message
        self.details = details  # sólo visible fuera de producción
        self.extra = extra or {}  # siempre visible en la respuesta


class ValidationError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    error = "Validation Error"
    default_message = "Invalid request"


class UnauthorizedError(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    error = "Unauthorized"
    default_message = "Unauthorized access"


class ForbiddenError(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    error = "Forbidden"
    default_message = "Access forbidden"


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    error = "Not Found"
    default_message = "Resource not found"


class RequestTimeoutError(AppError):
    status_code = status.HTTP_408_REQUEST_TIMEOUT
    error = "Request Timeout"
    default_message = "The upstream service took too long to answer"


class RateLimitError(AppError):
    status_code = status.HTTP_429_TOO_MANY_REQUESTS
    error = "Too Many Requests"
    default_message = "Too many requests from this IP, please try again later."

    def __init__(self, message: str | None = None, retry_after: int | None = None) -> None:
        super().__init__(message, extra={"retryAfter": retry_after} if retry_after else None)
        self.retry_after = retry_after


class ServiceUnavailableError(AppError):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    error = "Service Unavailable"
    default_message = "An upstream service is unavailable"


# Orden importante: APITimeoutError hereda de APIConnectionError
_TIMEOUT_TYPES = (openai.APITimeoutError, httpx.TimeoutException, TimeoutError)
_UNAVAILABLE_TYPES = (openai.APIConnectionError, httpx.ConnectError, ConnectionError)


def classify_exception(exc: BaseException) -> tuple[int, str]:
    """Devuelve `(status_code, etiqueta)` para cualquier excepción."""
    if isinstance(exc, AppError):
        return exc.status_code, exc.error
    if isinstance(exc, _TIMEOUT_TYPES):
        return RequestTimeoutError.status_code, RequestTimeoutError.error
    if isinstance(exc, _UNAVAILABLE_TYPES):
        return ServiceUnavailableError.status_code, ServiceUnavailableError.error
    return AppError.status_code, AppError.error


def error_body(
    *,
    error: str,
    message: str,
    path: str,
    method: str,
    include_debug: bool = False,
    details: Any = None,
    exc: BaseException | None = None,
    extra: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Cuerpo JSON común a todas las respuestas de error."""
    body: dict[str, Any] = {
        "error": error,
        "message": message or AppError.default_message,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "path": path,
        "method": method,
    }
    if extra:
        body.update(extra)
    if include_debug:
        body["details"] = details
        if exc is not None:
            body["stack"] = "".join(
                traceback.format_exception(type(exc), exc, exc.__traceback__)
            )
    return body
