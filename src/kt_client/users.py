"""
User, group and role administration.
"""

from __future__ import annotations

from typing import Any, Optional

from kt_client.normalize import normalize, normalize_list
from kt_client.transport.rpc import RpcClient


def _list_params(
    filter: Optional[str], orderby: Optional[str], limit: Optional[int], offset: Optional[int],
) -> list[Any]:
    options = {
        key: value
        for key, value in (("orderby", orderby), ("limit", limit), ("offset", offset))
        if value is not None
    }
    return [filter or None, options]


class UsersAPI:
    def __init__(self, rpc: RpcClient):
        self._rpc = rpc

    async def get_by_id(self, user_id: int) -> dict[str, Any]:
        """User info: email, username, name, notifications, mobile, max_sessions and user_id."""
        result = await self._rpc.invoke("get_user_by_id", [user_id])
        return self._user_info(result)

    async def get_by_username(self, username: str) -> dict[str, Any]:
        result = await self._rpc.invoke("get_user_by_username", [username])
        return self._user_info(result)

    @staticmethod
    def _user_info(result: dict[str, Any]) -> dict[str, Any]:
        info = normalize(result.get("user_info"))
        if not isinstance(info, dict):
            info = {}
        info["user_id"] = result.get("user_id")
        return info

    async def add(self, user_info: dict[str, Any]) -> int:
        """Create a user. Returns the new user id.

        ``user_info`` takes email, username, name, password and optionally
        notifications, mobile and max_sessions. The server ignores
        ``username`` when it uses email addresses as login names.
        """
        result = await self._rpc.invoke("add_user", [user_info])
        return result["user_id"]

    async def update(self, user_id: int, user_info: dict[str, Any]) -> int:
        """Update a user. Fields missing from ``user_info`` keep their current values."""
        current = await self.get_by_id(user_id)
        current.pop("user_id", None)
        result = await self._rpc.invoke("update_user", [user_id, {**current, **user_info}])
        return result["user_id"]

    async def delete(self, user_id: int) -> int:
        result = await self._rpc.invoke("delete_user", [user_id])
        return result["user_id"]

    async def add_to_group(self, user_id: int, group_id: int) -> int:
        result = await self._rpc.invoke("add_user_to_group", [user_id, group_id])
        return result["group_id"]

    async def remove_from_group(self, user_id: int, group_id: int) -> int:
        result = await self._rpc.invoke("remove_user_from_group", [user_id, group_id])
        return result["group_id"]

    async def list(
        self,
        filter: Optional[str] = None,
        orderby: Optional[str] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> list[Any]:
        """List users whose name matches ``filter``.

        ``orderby`` is a column with an optional direction ("name desc");
        the server orders by name when it is omitted.
        """
        result = await self._rpc.invoke("get_users", _list_params(filter, orderby, limit, offset))
        return normalize_list(result.get("users"))

    async def list_groups(
        self,
        filter: Optional[str] = None,
        orderby: Optional[str] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> list[Any]:
        result = await self._rpc.invoke("get_groups", _list_params(filter, orderby, limit, offset))
        return normalize_list(result.get("groups"))

    async def list_roles(
        self,
        filter: Optional[str] = None,
        orderby: Optional[str] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> list[Any]:
        result = await self._rpc.invoke("get_roles", _list_params(filter, orderby, limit, offset))
        return normalize_list(result.get("roles"))
