"""
KnowledgeTree client error types.

Every public operation either completes or raises exactly one of these.
"""

from typing import Any, Optional


class KTError(Exception):
    def __init__(self, code: str, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details


class ConnectionError(KTError):
    """The RPC channel could not be established."""

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__("connection_error", message, details)


class RemoteError(KTError):
    """A remote call answered with a non-zero status code, or with nothing at all."""

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__("remote_error", message, details)

    @property
    def status_code(self) -> Optional[int]:
        return (self.details or {}).get("status_code")


class CapabilityError(KTError):
    def __init__(self, message: str):
        super().__init__("capability_error", message)


class UploadError(KTError):
    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__("upload_error", message, details)


class ValidationError(KTError):
    """A metadata value is not one of the options declared for its field."""

    def __init__(self, field: str, value: Any):
        super().__init__(
            "validation_error",
            f"'{value}' is not a valid option for '{field}'",
            {"field": field, "value": value},
        )
        self.field = field
        self.value = value
