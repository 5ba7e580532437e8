"""Tests for meddle.server.sender response emission rules."""

import pytest

from meddle.http.response import Response
from meddle.server.sender import send_response

pytestmark = pytest.mark.anyio


async def _send(response: Response) -> list[dict]:
    messages: list[dict] = []

    async def send(message: dict) -> None:
        messages.append(message)

    await send_response(response, send)
    return messages


class TestSendResponse:
    async def test_200_preserves_body(self) -> None:
        messages = await _send(Response(body="ok"))
        headers = dict(messages[0]["headers"])
        assert headers[b"content-length"] == b"2"
        assert messages[1]["body"] == b"ok"

    async def test_header_names_lowercased(self) -> None:
        messages = await _send(Response(headers={"Server": "Meddle/0.1"}))
        assert (b"server", b"Meddle/0.1") in messages[0]["headers"]

    async def test_user_content_length_replaced(self) -> None:
        messages = await _send(Response(body="abc", headers={"Content-Length": "99"}))
        lengths = [v for k, v in messages[0]["headers"] if k == b"content-length"]
        assert lengths == [b"3"]

    @pytest.mark.parametrize("status", [204, 304])
    async def test_no_body_statuses(self, status: int) -> None:
        messages = await _send(Response(status, body="unexpected-body"))
        headers = dict(messages[0]["headers"])
        assert headers[b"content-length"] == b"0"
        assert messages[1]["body"] == b""
