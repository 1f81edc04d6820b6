"""
CSV/PDF export helpers.

Exports are generated by the backend; the client only names the file and
writes the returned bytes to disk.
"""

import logging
import os
from datetime import date
from typing import Any, Mapping, Optional

import httpx

from hrms_portal.core.config import settings
from hrms_portal.core.exceptions import HRMSError

logger = logging.getLogger("hrms_portal.exports")

SUPPORTED_FORMATS = ("csv", "pdf")


class ExportError(HRMSError):
    """The export endpoint did not return a file."""


def generate_filename(
    module: str,
    fmt: str,
    filters: Optional[Mapping[str, Any]] = None,
    today: Optional[date] = None,
) -> str:
    """
    Build the download name for an export.

    Format: `{module}-{YYYY-MM-DD}[-{start}_to_{end} | -{month}-{year}].{fmt}`.
    A date range wins over a month/year filter.

    Args:
        module: Export area, e.g. "attendance"
        fmt: "csv" or "pdf"
        filters: Filters sent with the export request
        today: Date stamp (defaults to today)

    Returns:
        File name without directory
    """
    fmt = fmt.lower()
    if fmt not in SUPPORTED_FORMATS:
        raise ValueError(f"Unsupported export format: {fmt}")

    filters = filters or {}
    stamp = (today or date.today()).isoformat()
    name = f"{module}-{stamp}"

    start, end = filters.get("startDate"), filters.get("endDate")
    month, year = filters.get("month"), filters.get("year")
    if start and end:
        name += f"-{start}_to_{end}"
    elif month and year:
        name += f"-{month}-{year}"

    return f"{name}.{fmt}"


def _is_file_payload(response: httpx.Response) -> bool:
    content_type = response.headers.get("content-type", "").lower()
    return "application/json" not in content_type and "text/html" not in content_type


def save_export(response: httpx.Response, filename: str, directory: Optional[str] = None) -> str:
    """
    Write an export response to disk.

    Raises:
        ExportError: the backend answered with JSON/HTML instead of a file

    Returns:
        Absolute path of the written file
    """
    if not _is_file_payload(response) or not response.content:
        raise ExportError("Invalid response format")

    directory = directory or settings.EXPORT_DIR
    os.makedirs(directory, exist_ok=True)
    path = os.path.abspath(os.path.join(directory, filename))
    with open(path, "wb") as fh:
        fh.write(response.content)

    logger.info(f"Saved export {filename} ({len(response.content)} bytes)")
    return path
