"""Shared fixtures for the test suite."""

from __future__ import annotations

import dataclasses
import json
from collections.abc import AsyncIterator, Iterator, Mapping
from typing import Any

import pytest
import pytest_asyncio
from aiohttp import test_utils, web

from sendblue import Sendblue
from sendblue.utils import logger

PUBLIC_KEY = "pk_test_123"
SECRET_KEY = "sk_test_456"


@dataclasses.dataclass
class RecordedRequest:
    """A request received by the fake Sendblue API."""

    method: str
    path: str
    headers: Mapping[str, str]
    body: str


class FakeSendblueAPI:
    """Local stand-in for api.sendblue.co.

    Responses are registered per path with ``respond``; unknown
    paths answer 404 with a Sendblue-style error body.
    """

    def __init__(self) -> None:
        self.base_url = ""
        self.requests: list[RecordedRequest] = []
        self._routes: dict[str, tuple[int, bytes, str, dict[str, str]]] = {}

    def respond(
        self,
        path: str,
        *,
        status: int = 200,
        json_body: Any = None,
        text: str | None = None,
        raw: bytes | None = None,
        content_type: str = "application/json",
        headers: dict[str, str] | None = None,
    ) -> None:
        """Register the response served for *path*.

        The body is *raw* bytes when given, else *text*, else *json_body*
        serialized as JSON.
        """
        if raw is not None:
            body = raw
        elif text is not None:
            body = text.encode("utf-8")
        else:
            body = json.dumps(json_body).encode("utf-8")
        self._routes[path] = (status, body, content_type, headers or {})

    @property
    def last_request(self) -> RecordedRequest:
        return self.requests[-1]

    async def handle(self, request: web.Request) -> web.Response:
        self.requests.append(
            RecordedRequest(
                method=request.method,
                path=request.path_qs,
                headers=request.headers.copy(),
                body=await request.text(),
            )
        )
        status, body, content_type, headers = self._routes.get(
            request.path, (404, b'{"message": "Not found"}', "application/json", {})
        )
        return web.Response(status=status, body=body, content_type=content_type, headers=headers)


@pytest_asyncio.fixture()
async def fake_api() -> AsyncIterator[FakeSendblueAPI]:
    """A running fake Sendblue API on a random local port."""
    fake = FakeSendblueAPI()
    app = web.Application()
    app.router.add_route("*", "/{tail:.*}", fake.handle)
    server = test_utils.TestServer(app)
    await server.start_server()
    fake.base_url = f"http://{server.host}:{server.port}"
    try:
        yield fake
    finally:
        await server.close()


@pytest.fixture()
def client(fake_api: FakeSendblueAPI) -> Sendblue:
    """A client pointed at the fake API."""
    instance = Sendblue(PUBLIC_KEY, SECRET_KEY)
    instance.base_url = fake_api.base_url
    return instance


@pytest.fixture(autouse=True)
def _reset_log_level() -> Iterator[None]:
    """Keep log level overrides from leaking between tests."""
    yield
    logger.set_level(None)
