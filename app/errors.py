import logging

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)

BAD_REQUEST_MESSAGE = "Error en la solicitud"
UNAUTHORIZED_MESSAGE = "Acceso no autorizado"
INTERNAL_ERROR_MESSAGE = "Error interno del servidor"


def internal_error(exc: Exception, operation: str) -> HTTPException:
    logger.error(
        "service_call_failed",
        extra={"operation": operation, "error_type": type(exc).__name__, "error": str(exc)},
    )
    return HTTPException(status_code=500, detail=INTERNAL_ERROR_MESSAGE)


def map_service_error(exc: Exception, operation: str) -> HTTPException:
    """
    Collapse a failure raised while calling a service into one of the
    public responses: 400 and 401 keep their status, everything else is 500.
    """
    if isinstance(exc, HTTPException):
        if exc.status_code == 400:
            return HTTPException(status_code=400, detail=BAD_REQUEST_MESSAGE)
        if exc.status_code == 401:
            return HTTPException(status_code=401, detail=UNAUTHORIZED_MESSAGE)

    return internal_error(exc, operation)


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=400,
        content={"detail": BAD_REQUEST_MESSAGE, "errors": jsonable_errors(exc)},
    )


async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error(
        "unhandled_error",
        extra={"path": request.url.path, "error_type": type(exc).__name__, "error": str(exc)},
    )
    return JSONResponse(status_code=500, content={"detail": INTERNAL_ERROR_MESSAGE})


def jsonable_errors(exc: RequestValidationError) -> list:
    return [
        {"loc": list(error.get("loc", ())), "msg": error.get("msg"), "type": error.get("type")}
        for error in exc.errors()
    ]


def register_exception_handlers(app: FastAPI):
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
