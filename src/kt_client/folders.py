"""
Folder operations.

Folders can be referred to by id or by a root-anchored path such as
``/folderA/folderB``. Paths are resolved with one locate_folder_by_path call.
"""

from __future__ import annotations

from typing import Any, Union

from kt_client.normalize import normalize_list
from kt_client.transport.rpc import RpcClient

FolderRef = Union[int, str]

ROOT_FOLDER_ID = 1


class FolderResolver:
    def __init__(self, rpc: RpcClient):
        self._rpc = rpc

    async def locate(self, path: str) -> int:
        result = await self._rpc.invoke("locate_folder_by_path", [path])
        return result["folder_id"]

    async def resolve(self, folder: FolderRef) -> int:
        """Return the id for ``folder``. Ids are returned as-is without a call."""
        if isinstance(folder, int) and not isinstance(folder, bool):
            return folder
        if not isinstance(folder, str):
            raise TypeError(f"Folder must be an id or a path, got {type(folder).__name__}")
        return await self.locate(folder)


class FoldersAPI:
    def __init__(self, rpc: RpcClient, resolver: FolderResolver):
        self._rpc = rpc
        self._resolver = resolver

    async def add(self, name: str, parent: FolderRef = ROOT_FOLDER_ID) -> int:
        """Create a folder under ``parent`` (root by default). Returns the new folder id."""
        parent_id = await self._resolver.resolve(parent)
        result = await self._rpc.invoke("create_folder", [parent_id, name])
        return result["id"]

    async def locate(self, path: str) -> int:
        """Folder id for a path relative to the root, e.g. ``/folderA/folderB``."""
        return await self._resolver.locate(path)

    async def browse(self, folder: FolderRef = ROOT_FOLDER_ID, depth: int = -1, types: str = "DFS") -> list[Any]:
        """List the tree below ``folder``.

        ``depth`` of -1 walks all the way down. ``types`` combines
        D (documents), F (folders) and S (shortcuts).
        """
        folder_id = await self._resolver.resolve(folder)
        result = await self._rpc.invoke("get_folder_contents", [folder_id, depth, types])
        return normalize_list(result.get("items"))

    async def flat_content_list(self) -> dict[str, list[Any]]:
        """Every folder and document in the repository, ordered by id."""
        result = await self._rpc.invoke("get_flat_content_list")
        # The service drops the string keys: folders come first, documents second.
        items = result.get("items") or []
        if isinstance(items, dict):
            items = list(items.values())
        return {
            "folders": normalize_list(items[0] if len(items) > 0 else None),
            "documents": normalize_list(items[1] if len(items) > 1 else None),
        }

    async def get_permissions(self, folder_id: int) -> dict[str, Any]:
        """Permissions allocated on a folder, or the parent it inherits them from."""
        result = await self._rpc.invoke("get_folder_permissions", [folder_id])
        return {key: value for key, value in result.items() if key not in ("status_code", "message")}

    async def set_permissions(self, folder_id: int, permissions: dict[str, Any]) -> str:
        """Replace the folder's permissions.

        The update is applied asynchronously by the server; the returned
        message only says it has been started.
        """
        result = await self._rpc.invoke("set_folder_permissions", [folder_id, permissions])
        return result["message"]

    async def inherit_permissions(self, folder_id: int) -> str:
        """Make the folder inherit permissions from its parent (applied asynchronously)."""
        result = await self._rpc.invoke("inherit_parent_folder_permissions", [folder_id])
        return result["message"]
