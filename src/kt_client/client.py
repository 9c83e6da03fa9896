"""
AsyncKTClient / KTClient: main client entry points.
"""

from __future__ import annotations

import asyncio
import functools
import inspect
from typing import Any, Callable, Optional

import httpx

from kt_client.auth import DEFAULT_APPLICATION, Auth
from kt_client.config import ClientConfig
from kt_client.documents import DocumentsAPI
from kt_client.folders import FolderResolver, FoldersAPI
from kt_client.models import TraceRecord
from kt_client.transport.rpc import RpcChannel, RpcClient, SoapChannel
from kt_client.transport.upload import UPLOAD_PATH, UploadClient
from kt_client.users import UsersAPI


class AsyncKTClient:
    """Async KnowledgeTree client (primary).

    One instance holds one session. It is not meant to be shared between
    concurrently running tasks.
    """

    def __init__(
        self,
        server: Optional[str] = None,
        *,
        application: str = DEFAULT_APPLICATION,
        ip: Optional[str] = None,
        cache_wsdl: str = "disk",
        trace: bool = False,
        timeout: float = 30.0,
        session_id: Optional[str] = None,
        channel: Optional[RpcChannel] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        if channel is None:
            if not server:
                raise ValueError("server is required unless a channel is supplied")
            channel = SoapChannel(server, cache_wsdl=cache_wsdl, trace=trace, timeout=timeout)
        upload_url = f"{server.rstrip('/')}{UPLOAD_PATH}" if server else None

        self.rpc = RpcClient(channel, token=session_id)
        self.auth = Auth(self.rpc, application=application, ip=ip)
        self.uploads = UploadClient(
            upload_url, application, session_id=lambda: self.rpc.token, http=http_client, timeout=timeout,
        )
        self.resolver = FolderResolver(self.rpc)
        self.folders = FoldersAPI(self.rpc, self.resolver)
        self.documents = DocumentsAPI(self.rpc, self.uploads, self.resolver)
        self.users = UsersAPI(self.rpc)

    @classmethod
    def from_config(cls, cfg: ClientConfig, **kwargs: Any) -> "AsyncKTClient":
        return cls(**cfg.model_dump(), **kwargs)

    @property
    def session_id(self) -> Optional[str]:
        """Current session token; persist it and pass it to reuse_session() later."""
        return self.auth.session_id

    async def login(self, username: str, password: str) -> str:
        return await self.auth.login(username, password)

    def reuse_session(self, session_id: str) -> None:
        self.auth.reuse_session(session_id)

    async def logout(self) -> None:
        await self.auth.logout()

    def last_request(self) -> Optional[TraceRecord]:
        """Last request sent, when the client was created with trace=True."""
        return self.rpc.channel.last_request()

    def last_response(self) -> Optional[TraceRecord]:
        """Last response received, when the client was created with trace=True."""
        return self.rpc.channel.last_response()

    async def close(self) -> None:
        await self.uploads.close()
        await self.rpc.channel.close()

    async def __aenter__(self) -> "AsyncKTClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()


class _SyncAPI:
    """Exposes the coroutine methods of an async API group as blocking calls."""

    def __init__(self, api: Any, run: Callable[[Any], Any]):
        self._api = api
        self._run = run

    def __getattr__(self, name: str) -> Any:
        attr = getattr(self._api, name)
        if not inspect.iscoroutinefunction(attr):
            return attr

        @functools.wraps(attr)
        def call(*args: Any, **kwargs: Any) -> Any:
            return self._run(attr(*args, **kwargs))
        return call


class KTClient:
    """Sync wrapper around AsyncKTClient. Runs the event loop internally."""

    def __init__(self, server: Optional[str] = None, **kwargs: Any):
        self._async = AsyncKTClient(server, **kwargs)
        self._loop = asyncio.new_event_loop()
        self.folders = _SyncAPI(self._async.folders, self._run)
        self.documents = _SyncAPI(self._async.documents, self._run)
        self.users = _SyncAPI(self._async.users, self._run)

    @classmethod
    def from_config(cls, cfg: ClientConfig, **kwargs: Any) -> "KTClient":
        return cls(**cfg.model_dump(), **kwargs)

    def _run(self, coro: Any) -> Any:
        return self._loop.run_until_complete(coro)

    @property
    def session_id(self) -> Optional[str]:
        return self._async.session_id

    def login(self, username: str, password: str) -> str:
        return self._run(self._async.login(username, password))

    def reuse_session(self, session_id: str) -> None:
        self._async.reuse_session(session_id)

    def logout(self) -> None:
        self._run(self._async.logout())

    def last_request(self) -> Optional[TraceRecord]:
        return self._async.last_request()

    def last_response(self) -> Optional[TraceRecord]:
        return self._async.last_response()

    def close(self) -> None:
        try:
            self._run(self._async.close())
        finally:
            self._loop.close()

    def __enter__(self) -> "KTClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()
