"""weekboard - weekly team task and capacity tracker."""

import logging
import sys
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.responses import JSONResponse

from weekboard.core import sheets_client
from weekboard.core.config import constants, settings
from weekboard.core.logging import configure_logfire, instrument_fastapi
from weekboard.interface.error_handlers import register_error_handlers
from weekboard.interface.member_router import router as member_router
from weekboard.interface.report_router import router as report_router
from weekboard.interface.task_router import router as task_router


logger = logging.getLogger(__name__)


async def check_sheets_connectivity() -> None:
    """Verify the backing spreadsheet is reachable.

    Raises:
        ConnectionError: If the tasks tab cannot be read
    """
    try:
        await sheets_client.get_rows(settings.tasks_tab)
        logger.info("startup_validation", extra={"service": "sheets", "status": "ok"})
    except sheets_client.SheetsAPIError as e:
        logger.error("startup_validation", extra={"service": "sheets", "status": "failed", "error": str(e)})
        raise ConnectionError(f"Sheets connectivity check failed: {e}") from e


async def validate_startup_configuration() -> None:
    """Validate required credentials and store connectivity, exiting on failure.

    Raises:
        SystemExit: If a credential is missing or the store is unreachable
    """
    logger.info("startup_validation_begin")

    try:
        settings.require_credential("sheets_spreadsheet_id", "Google Sheets spreadsheet ID")
        settings.require_credential("sheets_access_token", "Google Sheets access token")
        logger.info("startup_validation", extra={"stage": "credentials", "status": "ok"})

        await check_sheets_connectivity()

        logger.info("startup_validation_complete", extra={"status": "ok"})

    except (ValueError, ConnectionError) as e:
        logger.error("startup_validation_failed", extra={"error": str(e)})
        print(f"\n❌ Startup validation failed: {e}\n", file=sys.stderr)  # noqa: T201
        sys.exit(1)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan context manager."""
    # Configure logging first so validation logs are captured
    configure_logfire()
    await validate_startup_configuration()
    yield


app = FastAPI(
    title="weekboard",
    description="Weekly team task and capacity tracker",
    version="0.1.0",
    lifespan=lifespan,
)

instrument_fastapi(app)
register_error_handlers(app)

app.include_router(task_router)
app.include_router(member_router)
app.include_router(report_router)


@app.get("/health")
async def health_check() -> JSONResponse:
    """Health check endpoint."""
    return JSONResponse(content={"status": "healthy"}, status_code=constants.HTTP_OK)
