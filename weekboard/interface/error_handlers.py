"""Exception handlers rendering errors as {"error": message} bodies."""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

from weekboard.core.config import constants
from weekboard.core.errors import WeekboardError, error_response_for


logger = logging.getLogger(__name__)


async def handle_weekboard_error(request: Request, exc: Exception) -> JSONResponse:
    """Map domain and store errors to 4xx/5xx responses."""
    status_code, body = error_response_for(exc)
    logger.log(
        logging.ERROR if status_code >= constants.HTTP_SERVER_ERROR else logging.INFO,
        "request_failed",
        extra={"path": request.url.path, "code": body.code, "error": body.error},
    )
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"))


async def handle_http_exception(_request: Request, exc: Exception) -> JSONResponse:
    """Render HTTPException details in the same error shape."""
    assert isinstance(exc, HTTPException)  # noqa: S101
    return JSONResponse(status_code=exc.status_code, content={"error": exc.detail}, headers=exc.headers)


async def handle_request_validation_error(request: Request, exc: Exception) -> JSONResponse:
    """Malformed request bodies and query parameters are 400s."""
    assert isinstance(exc, RequestValidationError)  # noqa: S101
    messages = [f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in exc.errors()]
    logger.info("request_validation_failed", extra={"path": request.url.path, "errors": messages})
    return JSONResponse(
        status_code=constants.HTTP_BAD_REQUEST,
        content={"error": "Invalid request", "details": messages},
    )


def register_error_handlers(app: FastAPI) -> None:
    """Install the error handlers on an application."""
    app.add_exception_handler(WeekboardError, handle_weekboard_error)
    app.add_exception_handler(HTTPException, handle_http_exception)
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)
