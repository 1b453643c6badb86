from __future__ import annotations

import asyncio

from _helpers import SendRecorder

from httpwrap.core.writer import ResponseWriter


def test_first_status_wins_but_every_start_is_forwarded() -> None:
    rec = SendRecorder()
    rw = ResponseWriter(rec)

    async def go() -> None:
        assert not rw.has_status()
        await rw.write_header(201)
        await rw.write_header(500)

    asyncio.run(go())

    assert rw.has_status()
    assert rw.status_code == 201
    assert [m["status"] for m in rec.starts()] == [201, 500]


def test_write_without_status_sends_implicit_200() -> None:
    rec = SendRecorder()
    rw = ResponseWriter(rec)

    n = asyncio.run(rw.write(b"abc", more_body=False))

    assert n == 3
    assert rw.status_code == 200
    assert rec.messages[0]["type"] == "http.response.start"
    assert rec.messages[0]["status"] == 200
    assert rec.body() == b"abc"
    assert rw.bytes_sent == 3


def test_fixed_content_type_is_applied_to_outgoing_headers() -> None:
    rec = SendRecorder()
    rw = ResponseWriter(rec, content_type="application/json")
    rw.headers["allow"] = "GET"

    asyncio.run(rw.write_header(200))

    headers = dict(rec.starts()[0]["headers"])
    assert headers[b"content-type"] == b"application/json"
    assert headers[b"allow"] == b"GET"


def test_inner_app_content_type_wins_over_fixed_one() -> None:
    rec = SendRecorder()
    rw = ResponseWriter(rec, content_type="application/json")

    async def go() -> None:
        await rw({"type": "http.response.start", "status": 200, "headers": [(b"content-type", b"text/csv")]})
        await rw({"type": "http.response.body", "body": b"a,b\n"})

    asyncio.run(go())

    headers = rec.starts()[0]["headers"]
    assert [v for k, v in headers if k == b"content-type"] == [b"text/csv"]
    assert rw.bytes_sent == 4


def test_body_is_forwarded_unchanged() -> None:
    rec = SendRecorder()
    rw = ResponseWriter(rec)
    msg = {"type": "http.response.body", "body": b"\x00\xffraw", "more_body": True}

    asyncio.run(rw.send(msg))

    assert rec.messages == [msg]
    # a body message alone does not record a status
    assert not rw.has_status()


def test_finished_tracks_final_body_message() -> None:
    rec = SendRecorder()
    rw = ResponseWriter(rec)

    async def go() -> None:
        await rw.write(b"a")
        assert not rw.finished
        await rw.finish()

    asyncio.run(go())

    assert rw.finished
    assert rec.messages[-1]["more_body"] is False
