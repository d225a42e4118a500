"""
API Error Handling

Translates domain failures into JSON error responses. Every error body has
the shape ``{"error": "<message>"}``.
"""

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
import structlog

from binflow.shifts.errors import BinFlowError

logger = structlog.get_logger(__name__)


async def handle_binflow_error(request: Request, exc: BinFlowError) -> JSONResponse:
    """Domain failures carry their own status code"""
    log = logger.error if exc.status_code >= 500 else logger.info
    log(
        "Request failed",
        path=request.url.path,
        method=request.method,
        error_type=type(exc).__name__,
        error=exc.message,
        status_code=exc.status_code,
    )
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


async def handle_database_error(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    """Storage errors that escaped the service layer"""
    logger.error(
        "Database error",
        path=request.url.path,
        method=request.method,
        error_type=type(exc).__name__,
        error=str(exc),
    )
    return JSONResponse(status_code=500, content={"error": str(exc)})


async def handle_request_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed or incomplete request payloads are client errors"""
    details = jsonable_encoder(exc.errors())
    fields = sorted({".".join(str(p) for p in err.get("loc", ())[1:]) for err in details} - {""})
    message = f"Invalid request: {', '.join(fields)}" if fields else "Invalid request"
    logger.info("Request validation failed", path=request.url.path, fields=fields)
    return JSONResponse(status_code=400, content={"error": message, "details": details})


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(BinFlowError, handle_binflow_error)
    app.add_exception_handler(SQLAlchemyError, handle_database_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)
