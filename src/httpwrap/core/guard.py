# src/httpwrap/core/guard.py
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional, Tuple

from starlette.datastructures import Headers
from starlette.types import Scope

from httpwrap.core.errors import write_error
from httpwrap.core.writer import ResponseWriter


class NegotiationHeader(str, Enum):
    # What the client wants back
    ACCEPT = "accept"
    # What the client sent
    CONTENT_TYPE = "content-type"


@dataclass(frozen=True)
class Rejection:
    status: int
    message: str
    header: str
    value: str


def _media(v: str) -> str:
    return v.split(";", 1)[0].strip().lower()


def _refused(media_range: str) -> bool:
    # q=0 means "not acceptable"
    for param in media_range.split(";")[1:]:
        name, _, value = param.partition("=")
        if name.strip().lower() == "q":
            try:
                return float(value.strip()) == 0.0
            except ValueError:
                return False
    return False


def _media_matches(offered: str, wanted: str) -> bool:
    if offered in ("", "*/*") or offered == wanted:
        return True
    if offered.endswith("/*"):
        return wanted.split("/", 1)[0] == offered[:-2]
    return False


class AdmissionGuard:
    """
    Pre-checks run before the inner app:
    1) method allow-list -> 405 + Allow
    2) media type        -> 406 + Accept
    Method is checked first; a request is rejected at most once.
    """

    def __init__(
        self,
        *,
        allow: Iterable[str] = (),
        accept: str = "",
        header: NegotiationHeader | str = NegotiationHeader.ACCEPT,
    ) -> None:
        self.allow: Tuple[str, ...] = tuple(m.upper() for m in allow)
        self.accept = accept
        self.header = NegotiationHeader(header)

    def check(self, scope: Scope) -> Optional[Rejection]:
        if self.allow and scope.get("method", "").upper() not in self.allow:
            return Rejection(405, "method not allowed", "allow", ", ".join(self.allow))

        if self.accept and not self._type_acceptable(Headers(scope=scope).get(self.header.value, "")):
            return Rejection(406, "not acceptable", "accept", self.accept)

        return None

    def _type_acceptable(self, declared: str) -> bool:
        if not declared.strip():
            return True
        wanted = _media(self.accept)
        if self.header is NegotiationHeader.CONTENT_TYPE:
            return _media_matches(_media(declared), wanted)
        ranges = [p for p in declared.split(",") if p.strip() and not _refused(p)]
        return any(_media_matches(_media(p), wanted) for p in ranges)

    async def reject(self, writer: ResponseWriter, rejection: Rejection) -> None:
        writer.headers[rejection.header] = rejection.value
        await write_error(writer, rejection.message, rejection.status)
