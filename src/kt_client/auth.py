"""
Session handling.

login -> token attached to every later call -> logout. A token may also be
reinstated with reuse_session(); it is never checked locally, so an expired
one only shows up as a RemoteError on the next call.
"""

import logging
import uuid
from typing import Optional

from kt_client.transport.rpc import RpcClient

logger = logging.getLogger(__name__)

DEFAULT_APPLICATION = "KTPythonClient"


class Auth:
    def __init__(self, rpc: RpcClient, application: str = DEFAULT_APPLICATION, ip: Optional[str] = None):
        self._rpc = rpc
        self.application = application
        # Any unique string identifies the client; it need not be an address.
        self.ip = ip or uuid.uuid4().hex

    @property
    def session_id(self) -> Optional[str]:
        return self._rpc.token

    @property
    def authenticated(self) -> bool:
        return self._rpc.token is not None

    async def login(self, username: str, password: str) -> str:
        """Open a session and attach its token to every following call."""
        await self._rpc.ensure_connected()
        # A token left over from reuse_session() must not be sent along with the credentials.
        self._rpc.set_token(None)
        result = await self._rpc.invoke("login", [username, password, self.ip, self.application])
        self._rpc.set_token(result["message"])
        logger.debug("Logged in as %s", username)
        return result["message"]

    def reuse_session(self, session_id: str) -> None:
        self._rpc.set_token(session_id)

    async def logout(self) -> None:
        """End the session. The local token is dropped even if the server call fails."""
        try:
            await self._rpc.invoke("logout")
        except Exception as e:
            logger.warning("Logout failed, dropping local session anyway: %s", e)
            raise
        finally:
            self._rpc.set_token(None)
