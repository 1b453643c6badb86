from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass
class HttpwrapApiError(Exception):
    """
    Typed API error carrying a stable machine-readable code.
    """

    code: str
    message: str
    status_code: int = 400
    details: Optional[Dict[str, Any]] = None


class NotFoundError(HttpwrapApiError):
    def __init__(self, message: str, *, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(code="not_found", message=message, status_code=404, details=details)

