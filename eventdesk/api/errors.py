import structlog
from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from eventdesk.services.error_codes import ErrorCode
from eventdesk.services.exceptions import (
    AuthError,
    CapacityError,
    ConflictError,
    NotFoundError,
    SendError,
    ServiceError,
    TransientError,
    ValidationError,
)

logger = structlog.get_logger()


def http_error_from_service(err: ServiceError) -> HTTPException:
    if isinstance(err, ValidationError):
        status = 400
    elif isinstance(err, AuthError):
        status = 401
    elif isinstance(err, NotFoundError):
        status = 404
    elif isinstance(err, (ConflictError, CapacityError)):
        status = 409
    elif isinstance(err, SendError):
        status = 502
    elif isinstance(err, TransientError):
        status = 503
    else:
        status = 500

    detail = {"code": err.code, "message": err.message}
    if isinstance(err, CapacityError):
        detail["remaining"] = err.remaining

    return HTTPException(status_code=status, detail=detail)


async def _request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = [
        {"loc": list(e.get("loc", ())), "message": e.get("msg", "invalid value")}
        for e in exc.errors()
    ]
    return JSONResponse(
        status_code=400,
        content={
            "detail": {
                "code": ErrorCode.VALIDATION_ERROR.value,
                "message": "invalid request",
                "errors": errors,
            }
        },
    )


async def _unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    # Details stay in the log; the client only sees the generic message.
    logger.exception("unhandled_error", method=request.method, path=request.url.path)
    return JSONResponse(
        status_code=500,
        content={
            "detail": {
                "code": ErrorCode.INTERNAL_ERROR.value,
                "message": "Internal server error",
            }
        },
    )


def install_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RequestValidationError, _request_validation_handler)
    app.add_exception_handler(Exception, _unhandled_error_handler)
