"""
kt-client: KnowledgeTree client for Python.

SOAP web service client with document upload, metadata handling and
session management for KnowledgeTree document repositories.
"""

from kt_client.client import KTClient, AsyncKTClient
from kt_client.auth import Auth
from kt_client.config import ClientConfig, load_config, save_config
from kt_client.errors import (
    KTError,
    ConnectionError,
    RemoteError,
    CapabilityError,
    UploadError,
    ValidationError,
)
from kt_client.metadata import FieldValue, decode_metadata, encode_metadata
from kt_client.models import DownloadRedirect, TraceRecord
from kt_client.normalize import normalize

__version__ = "0.1.0"
__all__ = [
    "KTClient",
    "AsyncKTClient",
    "Auth",
    "ClientConfig",
    "load_config",
    "save_config",
    "KTError",
    "ConnectionError",
    "RemoteError",
    "CapabilityError",
    "UploadError",
    "ValidationError",
    "FieldValue",
    "decode_metadata",
    "encode_metadata",
    "DownloadRedirect",
    "TraceRecord",
    "normalize",
]
