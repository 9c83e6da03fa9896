"""
Document operations: add/remove, search, check-out/in, download, metadata, comments.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

from kt_client.folders import ROOT_FOLDER_ID, FolderRef, FolderResolver
from kt_client.metadata import decode_metadata, encode_metadata
from kt_client.models import DownloadRedirect
from kt_client.normalize import normalize_list
from kt_client.transport.rpc import RpcClient
from kt_client.transport.upload import UploadClient


class DocumentsAPI:
    def __init__(self, rpc: RpcClient, uploads: UploadClient, resolver: FolderResolver):
        self._rpc = rpc
        self._uploads = uploads
        self._resolver = resolver

    async def add(
        self,
        filename: str,
        local_path: str | Path,
        folder: FolderRef = ROOT_FOLDER_ID,
        title: Optional[str] = None,
        document_type: str = "Default",
    ) -> int:
        """Upload a local file and add it as a new document. Returns the document id.

        ``document_type`` must name a type registered on the server, otherwise
        the server's default type is used. ``title`` defaults to ``filename``.
        """
        folder_id = await self._resolver.resolve(folder)
        tmp_name = await self._uploads.upload(local_path)
        result = await self._rpc.invoke(
            "add_document", [folder_id, title or filename, filename, document_type, tmp_name],
        )
        return result["document_id"]

    async def remove(self, document_id: int, reason: Optional[str] = None) -> None:
        """Mark a document deleted. It can still be restored by an administrator."""
        await self._rpc.invoke("delete_document", [document_id, reason])

    async def search(self, terms: str) -> list[Any]:
        """General text search, same as the web interface's quick search."""
        return await self.advanced_search(f'(GeneralText contains "{terms}")')

    async def advanced_search(self, query: str) -> list[Any]:
        """Run a query written in the server's search grammar, e.g.
        ``(Title contains "report" OR DocumentText contains "budget")``.
        """
        result = await self._rpc.invoke("search", [query, None])
        return normalize_list(result.get("hits"))

    async def check_out(self, document_id: int, reason: Optional[str] = None) -> None:
        await self._rpc.invoke("checkout_document", [document_id, reason, False])

    async def check_out_with_download(self, document_id: int, reason: Optional[str] = None) -> DownloadRedirect:
        await self.check_out(document_id, reason)
        return await self.download(document_id)

    async def download(self, document_id: int, version: Optional[str] = None) -> DownloadRedirect:
        """Ask the server where ``document_id`` (optionally a given version, e.g. "0.3") can be fetched."""
        result = await self._rpc.invoke("download_document", [document_id, version])
        return DownloadRedirect(document_id=document_id, location=result["message"], version=version)

    async def check_in(
        self,
        document_id: int,
        filename: str,
        local_path: str | Path,
        major_update: bool = False,
        reason: Optional[str] = None,
    ) -> None:
        """Upload a new version of a checked-out document and check it in.

        ``major_update`` bumps e.g. 0.6 to 1.0 instead of 0.6 to 0.7.
        """
        tmp_name = await self._uploads.upload(local_path)
        await self._rpc.invoke("checkin_document", [document_id, filename, reason, tmp_name, major_update])

    async def get_metadata(self, document_id: int) -> dict[str, dict[str, dict[str, Any]]]:
        result = await self._rpc.invoke("get_document_metadata", [document_id])
        return decode_metadata(result.get("metadata"))

    async def set_metadata(self, document_id: int, metadata: dict[str, dict[str, Any]]) -> None:
        """Set metadata on existing fieldsets.

        Metadata fetched with get_metadata() can be edited and passed back
        directly. Fieldsets cannot be created this way, and conditional
        metadata missing from ``metadata`` is unset by the server.
        """
        wire = encode_metadata(metadata)
        await self._rpc.invoke("simple_metadata_update", [document_id, wire])

    async def add_comment(self, document_id: int, comment: str) -> None:
        await self._rpc.invoke("add_document_comment", [document_id, comment])

    async def get_comments(self, document_id: int) -> list[Any]:
        result = await self._rpc.invoke("get_document_comments", [document_id])
        return normalize_list(result.get("comments"))
