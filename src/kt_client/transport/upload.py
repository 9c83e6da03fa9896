"""
Multipart upload channel: {server}/ktwebservice/upload.php

Document bytes never travel over the SOAP channel. They are posted here
first, and the temporary name the server hands back is passed to the
add_document / checkin_document call that follows. That name is single use.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Any, Callable, Optional

import httpx
from pydantic import BaseModel, StrictInt, ValidationError as SchemaError

from kt_client.errors import CapabilityError, UploadError

logger = logging.getLogger(__name__)

UPLOAD_PATH = "/ktwebservice/upload.php"
ADD_ACTION = "A"
USER_AGENT = "kt-client/0.1.0"


class UploadInfo(BaseModel):
    error: StrictInt
    tmp_name: Optional[str] = None
    name: Optional[str] = None
    size: Optional[int] = None


class UploadStatus(BaseModel):
    upload: UploadInfo


class UploadResponse(BaseModel):
    status_code: StrictInt
    upload_status: Optional[UploadStatus] = None


class UploadClient:
    def __init__(
        self,
        upload_url: Optional[str],
        application: str,
        session_id: Callable[[], Optional[str]],
        http: Optional[httpx.AsyncClient] = None,
        timeout: float = 30.0,
    ):
        self._upload_url = upload_url
        self._application = application
        self._session_id = session_id
        self._client = http
        self._owns_client = http is None and bool(upload_url)
        if self._owns_client:
            self._client = httpx.AsyncClient(headers={"User-Agent": USER_AGENT}, timeout=timeout)

    @property
    def available(self) -> bool:
        return bool(self._upload_url) and self._client is not None

    def _form_fields(self) -> dict[str, Any]:
        return {
            "output": "json",
            "session_id": self._session_id() or "",
            "apptype": self._application,
            "action": ADD_ACTION,
            "submit": "submit",
        }

    async def upload(self, local_path: str | Path) -> str:
        """Upload a local file and return the server's temporary name for it."""
        if not self.available:
            raise CapabilityError("HTTP upload support is required to upload documents")

        path = Path(local_path)
        logger.debug("Uploading %s", path.name)
        try:
            content = await asyncio.to_thread(path.read_bytes)
        except OSError as e:
            raise UploadError(f"Unable to read {path}: {e}", {"path": str(path)})

        try:
            resp = await self._client.post(  # type: ignore[union-attr]
                self._upload_url,  # type: ignore[arg-type]
                data=self._form_fields(),
                files={"upload": (path.name, content)},
            )
        except httpx.HTTPError as e:
            logger.error("Upload of %s failed: %s", path.name, e)
            raise UploadError(f"An error occurred while attempting to upload the file: {e}")

        tmp_name = self._parse(resp)
        logger.debug("Uploaded %s", path.name)
        return tmp_name

    @staticmethod
    def _parse(resp: httpx.Response) -> str:
        if resp.is_success and resp.content:
            try:
                parsed = UploadResponse.model_validate(resp.json())
            except (ValueError, SchemaError):
                parsed = None
            if (
                parsed is not None
                and parsed.status_code == 0
                and parsed.upload_status is not None
                and parsed.upload_status.upload.error == 0
                and parsed.upload_status.upload.tmp_name
            ):
                return parsed.upload_status.upload.tmp_name

        logger.error("Upload rejected: HTTP %s: %s", resp.status_code, resp.text[:200])
        raise UploadError(
            "An error occurred while attempting to upload the file",
            {"http_status": resp.status_code},
        )

    async def close(self) -> None:
        if self._owns_client and self._client is not None:
            await self._client.aclose()
