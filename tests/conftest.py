"""Shared fixtures: a scripted RPC channel and a mocked upload endpoint."""

import json
from typing import Any, Callable, Optional

import httpx
import pytest

from kt_client import AsyncKTClient

SERVER = "https://kt.example.com"
UPLOAD_URL = f"{SERVER}/ktwebservice/upload.php"


class FakeChannel:
    """RpcChannel that records calls and answers from a script.

    ``responses`` maps an operation name to either a response object or a
    callable taking the parameter list.
    """

    def __init__(self, responses: Optional[dict[str, Any]] = None, fail_connect: bool = False):
        self.responses = responses or {}
        self.fail_connect = fail_connect
        self.calls: list[tuple[str, list[Any]]] = []
        self._connected = False
        self.closed = False

    @property
    def connected(self) -> bool:
        return self._connected

    async def connect(self) -> None:
        if self.fail_connect:
            from kt_client.errors import ConnectionError
            raise ConnectionError("Unable to connect to the KnowledgeTree SOAP webservice")
        self._connected = True

    async def call(self, operation: str, params: list[Any]) -> Any:
        self.calls.append((operation, list(params)))
        response = self.responses.get(operation)
        if callable(response):
            return response(params)
        return response

    def last_request(self):
        return None

    def last_response(self):
        return None

    async def close(self) -> None:
        self.closed = True

    def operations(self) -> list[str]:
        return [operation for operation, _ in self.calls]


def ok(**fields: Any) -> dict[str, Any]:
    return {"status_code": 0, "message": "", **fields}


def upload_ok(tmp_name: str = "/tmp/php3Xk9a") -> dict[str, Any]:
    return {
        "status_code": 0,
        "upload_status": {"upload": {"name": "report.pdf", "error": 0, "tmp_name": tmp_name, "size": 11}},
    }


class UploadRecorder:
    """httpx.MockTransport handler for the upload endpoint."""

    def __init__(self, status: int = 200, body: Any = None):
        self.status = status
        self.body = upload_ok() if body is None else body
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        content = self.body if isinstance(self.body, (str, bytes)) else json.dumps(self.body)
        return httpx.Response(self.status, content=content)


@pytest.fixture
def channel() -> FakeChannel:
    return FakeChannel()


@pytest.fixture
def uploads() -> UploadRecorder:
    return UploadRecorder()


@pytest.fixture
def make_client(channel: FakeChannel, uploads: UploadRecorder) -> Callable[..., AsyncKTClient]:
    def _make(**kwargs: Any) -> AsyncKTClient:
        kwargs.setdefault("server", SERVER)
        kwargs.setdefault("channel", channel)
        kwargs.setdefault("http_client", httpx.AsyncClient(transport=httpx.MockTransport(uploads)))
        return AsyncKTClient(**kwargs)
    return _make
