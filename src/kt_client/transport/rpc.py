"""
RPC channel and invoker for the KnowledgeTree SOAP web service.

WSDL: {server}/ktwebservice/webservice.php?wsdl

Every call takes an ordered parameter list. Once a session exists its token
is always the first parameter. Every response carries ``status_code`` and
``message``; ``status_code == 0`` is the only success signal.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from typing import Any, Optional, Protocol

import httpx
from lxml import etree
from zeep import AsyncClient
from zeep.cache import InMemoryCache, SqliteCache
from zeep.exceptions import Error as ZeepError, Fault
from zeep.helpers import serialize_object
from zeep.plugins import HistoryPlugin
from zeep.transports import AsyncTransport

from kt_client.errors import ConnectionError, RemoteError
from kt_client.models import TraceRecord
from kt_client.normalize import normalize

logger = logging.getLogger(__name__)

WEBSERVICE_PATH = "/ktwebservice/webservice.php?"
EMPTY_RESPONSE_MESSAGE = "Received an empty response"
WSDL_CACHE_MODES = ("none", "memory", "disk")


class RpcChannel(Protocol):
    """A named-operation request/response transport."""

    @property
    def connected(self) -> bool: ...

    async def connect(self) -> None: ...

    async def call(self, operation: str, params: Sequence[Any]) -> Any: ...

    def last_request(self) -> Optional[TraceRecord]: ...

    def last_response(self) -> Optional[TraceRecord]: ...

    async def close(self) -> None: ...


class SoapChannel:
    """RpcChannel backed by zeep's async client over httpx."""

    def __init__(
        self,
        server: str,
        cache_wsdl: str = "disk",
        trace: bool = False,
        timeout: float = 30.0,
    ):
        if cache_wsdl not in WSDL_CACHE_MODES:
            raise ValueError(f"cache_wsdl must be one of {WSDL_CACHE_MODES}, got {cache_wsdl!r}")
        self._wsdl = f"{server.rstrip('/')}{WEBSERVICE_PATH}wsdl"
        self._cache_wsdl = cache_wsdl
        self._timeout = timeout
        self._history: Optional[HistoryPlugin] = HistoryPlugin() if trace else None
        self._client: Optional[AsyncClient] = None

    @property
    def wsdl(self) -> str:
        return self._wsdl

    @property
    def connected(self) -> bool:
        return self._client is not None

    def _cache(self) -> Any:
        if self._cache_wsdl == "disk":
            return SqliteCache()
        if self._cache_wsdl == "memory":
            return InMemoryCache()
        return None

    async def connect(self) -> None:
        if self._client is not None:
            return
        transport = AsyncTransport(
            client=httpx.AsyncClient(timeout=self._timeout),
            wsdl_client=httpx.Client(timeout=self._timeout),
            cache=self._cache(),
        )
        plugins = [self._history] if self._history else []
        try:
            # The WSDL is fetched with a blocking client; keep it off the event loop.
            self._client = await asyncio.to_thread(AsyncClient, self._wsdl, transport=transport, plugins=plugins)
        except (ZeepError, httpx.HTTPError, OSError) as e:
            await transport.aclose()
            raise ConnectionError(f"Unable to connect to the KnowledgeTree SOAP webservice: {e}")
        logger.debug("Loaded WSDL from %s", self._wsdl)

    async def call(self, operation: str, params: Sequence[Any]) -> Any:
        if self._client is None:
            raise ConnectionError("Not connected. Call connect() first.")
        try:
            response = await self._client.service[operation](*params)
        except Fault as e:
            raise RemoteError(e.message or EMPTY_RESPONSE_MESSAGE, {"operation": operation, "status_code": None})
        except (ZeepError, httpx.HTTPError) as e:
            raise ConnectionError(f"Call to {operation} failed: {e}", {"operation": operation})
        return serialize_object(response, target_cls=dict)

    def last_request(self) -> Optional[TraceRecord]:
        return self._trace_record(self._history.last_sent if self._history else None)

    def last_response(self) -> Optional[TraceRecord]:
        return self._trace_record(self._history.last_received if self._history else None)

    @staticmethod
    def _trace_record(entry: Optional[dict[str, Any]]) -> Optional[TraceRecord]:
        if not entry:
            return None
        envelope = entry.get("envelope")
        return TraceRecord(
            envelope=etree.tostring(envelope, encoding="unicode") if envelope is not None else None,
            http_headers=dict(entry.get("http_headers") or {}),
        )

    async def close(self) -> None:
        if self._client is not None:
            await self._client.transport.aclose()
            self._client = None


class RpcClient:
    """Invokes named operations, attaching the session token when one is held."""

    def __init__(self, channel: RpcChannel, token: Optional[str] = None):
        self._channel = channel
        self._token = token

    @property
    def channel(self) -> RpcChannel:
        return self._channel

    @property
    def token(self) -> Optional[str]:
        return self._token

    def set_token(self, token: Optional[str]) -> None:
        self._token = token

    async def ensure_connected(self) -> None:
        if not self._channel.connected:
            await self._channel.connect()

    async def invoke(self, operation: str, params: Sequence[Any] = ()) -> dict[str, Any]:
        args = list(params)
        if self._token:
            args.insert(0, self._token)

        await self.ensure_connected()
        logger.debug("Invoking %s", operation)
        response = await self._channel.call(operation, args)
        result = normalize(response) if response is not None else None

        if isinstance(result, dict) and _succeeded(result.get("status_code")):
            return result

        message = result.get("message") if isinstance(result, dict) else None
        status_code = result.get("status_code") if isinstance(result, dict) else None
        logger.debug("%s failed with status %s", operation, status_code)
        raise RemoteError(
            message or EMPTY_RESPONSE_MESSAGE,
            {"operation": operation, "status_code": status_code},
        )


def _succeeded(status_code: Any) -> bool:
    return isinstance(status_code, int) and not isinstance(status_code, bool) and status_code == 0
