# src/httpwrap/core/errors.py
from __future__ import annotations

import html
import json
from typing import Union

from starlette.requests import Request
from starlette.responses import Response
from starlette.types import Send

from httpwrap.core.writer import ResponseWriter

PLAIN_TEXT = "text/plain; charset=utf-8"


def _media_type(content_type: str) -> str:
    return content_type.split(";", 1)[0].strip().lower()


def format_error(message: str, status: int, content_type: str) -> str:
    """
    Render an error message for the given response content type.

    With "application/json" and "oops!" the body is
    `{"error":"oops!","status":500}`.
    """
    media = _media_type(content_type or "")
    if media == "application/json":
        return json.dumps({"error": message, "status": status}, separators=(",", ":"), ensure_ascii=True)
    if media == "text/html":
        return html.escape(message)
    return "error: " + message


async def write_error(writer: Union[ResponseWriter, Send], message: str, status: int) -> None:
    """
    Send a complete error response through `writer`.

    A ResponseWriter formats the body after its configured content type.
    Any other ASGI send gets the raw message as text/plain.
    """
    if isinstance(writer, ResponseWriter):
        body = format_error(message, status, writer.content_type)
        writer.headers["content-type"] = writer.content_type or PLAIN_TEXT
        writer.headers["x-content-type-options"] = "nosniff"
        await writer.write_header(status)
        await writer.write((body + "\n").encode("utf-8"), more_body=False)
        return

    payload = (message + "\n").encode("utf-8")
    await writer(
        {
            "type": "http.response.start",
            "status": status,
            "headers": [
                (b"content-type", PLAIN_TEXT.encode("latin-1")),
                (b"x-content-type-options", b"nosniff"),
                (b"content-length", str(len(payload)).encode("latin-1")),
            ],
        }
    )
    await writer({"type": "http.response.body", "body": payload})


def get_response_writer(request: Request) -> ResponseWriter | None:
    return getattr(request.state, "response_writer", None)


def error_response(request: Request, message: str, status: int) -> Response:
    """
    Starlette/FastAPI flavour of write_error(): build the response object
    instead of sending it, using the wrapping handler's content type.
    """
    rw = get_response_writer(request)
    if rw is None:
        return Response(content=message + "\n", status_code=status, media_type="text/plain")
    content_type = rw.content_type or PLAIN_TEXT
    return Response(
        content=format_error(message, status, rw.content_type) + "\n",
        status_code=status,
        headers={"content-type": content_type, "x-content-type-options": "nosniff"},
    )
