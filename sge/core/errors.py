# sge/core/errors.py

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from loguru import logger
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException

from sge.core.config import settings
from sge.core.logging_config import trace_id_var
from sge.models.api_common import ErrorResponse


def _error_response(status_code: int, body: ErrorResponse, headers=None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=body.model_dump(exclude_none=True), headers=headers)


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    log = logger.bind(trace_id=trace_id_var.get())
    if exc.status_code >= 500:
        log.error(f"HTTP {exc.status_code} on {request.method} {request.url.path}: {exc.detail}")
    else:
        log.warning(f"HTTP {exc.status_code} on {request.method} {request.url.path}: {exc.detail}")
    return _error_response(exc.status_code, ErrorResponse(error=str(exc.detail)), headers=getattr(exc, "headers", None))


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    log = logger.bind(trace_id=trace_id_var.get())
    details = [
        {"loc": list(err.get("loc", [])), "msg": err.get("msg"), "type": err.get("type")}
        for err in exc.errors()
    ]
    log.warning(f"Validation Error on {request.url.path}: {details}")
    return _error_response(
        status.HTTP_422_UNPROCESSABLE_ENTITY,
        ErrorResponse(error="Dados inválidos", details=details),
    )


async def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded):
    logger.bind(trace_id=trace_id_var.get()).warning(f"Rate limit exceeded on {request.url.path}: {exc.detail}")
    return _error_response(
        status.HTTP_429_TOO_MANY_REQUESTS,
        ErrorResponse(error="Muitas requisições. Tente novamente em instantes."),
    )


async def generic_exception_handler(request: Request, exc: Exception):
    log = logger.bind(trace_id=trace_id_var.get())
    log.opt(exception=exc).error(f"Unhandled Exception on {request.method} {request.url.path}: {exc}")
    body = ErrorResponse(
        error="Erro interno do servidor",
        message=str(exc) if settings.is_development else None,
    )
    return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, body)


exception_handlers = {
    StarletteHTTPException: http_exception_handler,
    RequestValidationError: validation_exception_handler,
    RateLimitExceeded: rate_limit_exceeded_handler,
    Exception: generic_exception_handler,
}
