"""
Structured errors raised by hubexport
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

import httpx

# Status codes below 500 worth another attempt; every 5xx is retried as well
RETRIABLE_STATUS = {408, 429}

# ------------------------------------------------------------------ #
# 1.  Structured error envelope
# ------------------------------------------------------------------ #


class ErrorCode:
    TRANSPORT = "TRANSPORT"
    NOT_FOUND = "NOT_FOUND"
    CONFIG = "CONFIG"
    WRITE = "WRITE"


@dataclass
class StructuredError(Exception):
    code: str
    message: str
    details: Optional[Dict[str, Any]] = None

    def __str__(self) -> str:
        return f"{self.code}: {self.message}"


class IndexNotFoundError(StructuredError):
    def __init__(self, name: str) -> None:
        super().__init__(ErrorCode.NOT_FOUND, f"No index named '{name}'", {"name": name})


class ConfigurationError(StructuredError):
    def __init__(self, errors: Dict[str, str]) -> None:
        super().__init__(ErrorCode.CONFIG, "; ".join(errors.values()), dict(errors))


class ExportWriteError(StructuredError):
    def __init__(self, path: str) -> None:
        super().__init__(ErrorCode.WRITE, f"Unable to write file: {path}, aborting export", {"path": path})


# ------------------------------------------------------------------ #
# 2.  Retry classification
# ------------------------------------------------------------------ #


def is_retriable(exc: BaseException) -> bool:
    """True for transient transport failures: timeouts, dropped connections, 408/429/5xx."""
    if isinstance(exc, httpx.HTTPStatusError):
        status = exc.response.status_code
        return status in RETRIABLE_STATUS or 500 <= status < 600
    return isinstance(exc, (httpx.TimeoutException, httpx.NetworkError, httpx.RemoteProtocolError))


def describe_error(exc: BaseException) -> str:
    """One-line, user-facing description of a failed run."""
    if isinstance(exc, httpx.HTTPStatusError):
        request = exc.request
        return f"{request.method} {request.url} failed with HTTP {exc.response.status_code}"
    if isinstance(exc, httpx.RequestError):
        return f"Request failed: {exc}"
    return str(exc) or exc.__class__.__name__
