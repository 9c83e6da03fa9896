"""
Result models for operations that do not return plain response trees.
"""

from typing import Any, Optional
from pydantic import BaseModel


class DownloadRedirect(BaseModel):
    """Where to fetch a document from.

    The server does not stream the file over the RPC channel; it answers with
    a location the caller should redirect to (or fetch) itself.
    """
    document_id: int
    location: str
    version: Optional[str] = None


class TraceRecord(BaseModel):
    """Last request or response seen on the RPC channel (tracing enabled)."""
    envelope: Optional[str] = None
    http_headers: dict[str, Any] = {}
