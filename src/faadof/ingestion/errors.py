from __future__ import annotations

from dataclasses import dataclass

import httpx

from faadof.ingestion.archive import DofArchiveError
from faadof.ingestion.faa_client import DownloadFailedError, FaaClientError
from faadof.parsing.errors import LINE_ERRORS, DofError, DofFormatError, DofStreamError


@dataclass(frozen=True)
class LoadErrorInfo:
    code: str
    kind: str
    message: str


def classify_load_error(exc: BaseException) -> LoadErrorInfo:
    """Classify DOF loading failures into stable codes for scripts and monitoring."""

    text = str(exc)

    if isinstance(exc, DownloadFailedError):
        if exc.status_code == 404:
            return LoadErrorInfo(code="not_published", kind="http", message=f"HTTP 404: {text}")
        return LoadErrorInfo(code=f"http_{exc.status_code}", kind="http", message=text)
    if isinstance(exc, FaaClientError):
        return LoadErrorInfo(code="download_failed", kind="network", message=text)
    if isinstance(exc, httpx.TimeoutException):
        return LoadErrorInfo(code="timeout", kind="network", message=text)
    if isinstance(exc, httpx.TransportError):
        return LoadErrorInfo(code="connect_error", kind="network", message=text)
    if isinstance(exc, DofArchiveError):
        return LoadErrorInfo(code="archive", kind="archive", message=text)
    if isinstance(exc, DofStreamError):
        return LoadErrorInfo(code="stream", kind="io", message=text)
    if isinstance(exc, LINE_ERRORS):
        return LoadErrorInfo(code="line", kind="parse", message=text)
    if isinstance(exc, DofFormatError):
        return LoadErrorInfo(code="format", kind="parse", message=text)
    if isinstance(exc, DofError):
        return LoadErrorInfo(code="dof", kind="parse", message=text)
    if isinstance(exc, FileNotFoundError):
        return LoadErrorInfo(code="file_not_found", kind="io", message=text)
    if isinstance(exc, OSError):
        return LoadErrorInfo(code="os_error", kind="io", message=text)

    return LoadErrorInfo(code="unknown", kind="unknown", message=text)
