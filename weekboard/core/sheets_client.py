"""Google Sheets values API client used as the backing record store.

Each logical table is one sheet tab. Rows are lists of string cells; row 1 is
the header. Row numbers passed to this module are 1-based sheet rows, row
indexes are 0-based positions in the list returned by get_rows().
"""

import logging
from typing import Any

import httpx

from weekboard.core.config import constants, settings


logger = logging.getLogger(__name__)


class SheetsAPIError(Exception):
    """Raised when a Sheets API request fails for any reason."""


def _base_url() -> str:
    spreadsheet_id = settings.require_credential("sheets_spreadsheet_id", "Google Sheets spreadsheet ID")
    return f"{settings.sheets_api_url.rstrip('/')}/{spreadsheet_id}"


def _headers() -> dict[str, str]:
    headers = {"Content-Type": "application/json"}
    if settings.sheets_access_token:
        headers["Authorization"] = f"Bearer {settings.sheets_access_token}"
    return headers


def get_http_client() -> httpx.AsyncClient:
    """Build the HTTP client used for Sheets requests."""
    return httpx.AsyncClient(timeout=constants.API_TIMEOUT_SECONDS, headers=_headers())


async def _request(method: str, path: str, **kwargs: Any) -> dict[str, Any]:
    url = f"{_base_url()}{path}"
    try:
        async with get_http_client() as client:
            response = await client.request(method, url, **kwargs)
            response.raise_for_status()
            return response.json() if response.content else {}
    except httpx.HTTPStatusError as e:
        logger.error(
            "sheets_request_failed",
            extra={"method": method, "path": path, "status_code": e.response.status_code},
        )
        msg = f"Sheets API returned {e.response.status_code} for {method} {path}"
        raise SheetsAPIError(msg) from e
    except httpx.HTTPError as e:
        logger.error("sheets_request_failed", extra={"method": method, "path": path, "error": str(e)})
        msg = f"Sheets API request failed for {method} {path}: {e}"
        raise SheetsAPIError(msg) from e


async def get_rows(tab: str) -> list[list[str]]:
    """Return every row of a tab, header included."""
    data = await _request("GET", f"/values/{tab}")
    rows = data.get("values", [])
    logger.debug("Fetched rows", extra={"tab": tab, "count": len(rows)})
    return [[str(cell) for cell in row] for row in rows]


async def append_row(tab: str, row: list[str]) -> None:
    """Append one row after the last non-empty row of a tab."""
    await _request(
        "POST",
        f"/values/{tab}:append",
        params={"valueInputOption": "RAW"},
        json={"values": [row]},
    )
    logger.info("Appended row", extra={"tab": tab})


async def update_row(tab: str, row_number: int, row: list[str]) -> None:
    """Overwrite the cells of a 1-based sheet row starting at column A."""
    await _request(
        "PUT",
        f"/values/{tab}!A{row_number}",
        params={"valueInputOption": "RAW"},
        json={"values": [row]},
    )
    logger.info("Updated row", extra={"tab": tab, "row_number": row_number})


async def _get_sheet_id(tab: str) -> int | None:
    meta = await _request("GET", "", params={"fields": "sheets.properties"})
    for sheet in meta.get("sheets", []):
        properties = sheet.get("properties", {})
        if properties.get("title") == tab:
            return properties.get("sheetId")
    return None


async def delete_row(tab: str, row_index: int) -> None:
    """Delete the row at a 0-based index, shifting the rows below it up."""
    sheet_id = await _get_sheet_id(tab)
    if sheet_id is None:
        msg = f"Sheet tab not found: {tab}"
        raise SheetsAPIError(msg)

    await _request(
        "POST",
        ":batchUpdate",
        json={
            "requests": [
                {
                    "deleteDimension": {
                        "range": {
                            "sheetId": sheet_id,
                            "dimension": "ROWS",
                            "startIndex": row_index,
                            "endIndex": row_index + 1,
                        }
                    }
                }
            ]
        },
    )
    logger.info("Deleted row", extra={"tab": tab, "row_index": row_index})


async def ensure_header(tab: str, header: list[str]) -> None:
    """Write the header row if the tab is empty."""
    rows = await get_rows(tab)
    if not rows:
        await append_row(tab, header)
        logger.info("Initialized header row", extra={"tab": tab})
