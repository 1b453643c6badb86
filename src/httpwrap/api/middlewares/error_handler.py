from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from httpwrap.api.errors import HttpwrapApiError
from httpwrap.utils.logger import get_logger

logger = get_logger("httpwrap.api")


def _err_payload(
    *,
    code: str,
    message: str,
    status: int,
    details: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    return {
        "error": message,
        "status": status,
        "code": code,
        "details": details or {},
    }


def install_error_handlers(app: FastAPI) -> None:
    """
    Stable error JSON for typed API errors.

    Unexpected exceptions are not handled here: they propagate to the
    WrappingHandler, which recovers, forces a 500 and logs the traceback.
    """

    @app.exception_handler(HttpwrapApiError)
    async def _handle_api_error(request: Request, exc: HttpwrapApiError) -> JSONResponse:
        logger.info(f"API_ERROR code={exc.code} status={exc.status_code} msg={exc.message}")
        logger.debug(f"API_ERROR details={exc.details}")
        return JSONResponse(
            status_code=exc.status_code,
            content=_err_payload(code=exc.code, message=exc.message, status=exc.status_code, details=exc.details),
        )
