"""
Document metadata encoding and decoding.

Locally, metadata is a plain nested dict::

    {
        "General information": {
            "Category": {"value": "Technical", "required": False,
                         "options": ["Administrative", "Technical"]},
            "Tag": {"value": ["alpha", "beta"], "required": False},
        },
    }

On the wire it is a list of fieldsets, each carrying a list of named fields.
``options`` is only present when the field is restricted to a set of values.
The ``Tag`` field holds a list locally and a comma-joined string on the wire.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel

from kt_client.errors import ValidationError
from kt_client.normalize import normalize

EMPTY_VALUE = "n/a"
TAG_FIELD = "Tag"
TAG_SEPARATOR = ","


class FieldValue(BaseModel):
    value: Any = None
    required: bool = False
    options: Optional[list[Any]] = None

    model_config = {"extra": "ignore"}


def decode_metadata(wire_fieldsets: Any) -> dict[str, dict[str, dict[str, Any]]]:
    """Decode the ``metadata`` list of a get_document_metadata response."""
    metadata: dict[str, dict[str, dict[str, Any]]] = {}
    for fieldset in _as_list(normalize(wire_fieldsets)):
        fields: dict[str, dict[str, Any]] = {}
        for field in _as_list(fieldset.get("fields")):
            fields[field["name"]] = _decode_field(field)
        metadata[fieldset["fieldset"]] = fields
    return metadata


def _decode_field(field: dict[str, Any]) -> dict[str, Any]:
    value = field.get("value")
    if value == EMPTY_VALUE:
        value = None
    if field["name"] == TAG_FIELD:
        value = _split_tags(value)

    options = None
    selection = _as_list(field.get("selection"))
    if selection:
        options = [option.get("value") if isinstance(option, dict) else option for option in selection]

    decoded = FieldValue(value=value, required=bool(field.get("required")), options=options).model_dump()
    if options is None:
        del decoded["options"]
    return decoded


def encode_metadata(metadata: dict[str, dict[str, Any]]) -> list[dict[str, Any]]:
    """Encode local metadata for simple_metadata_update.

    ``required`` and ``options`` are dropped. Restricted fields are checked
    against their options first, so an invalid value never leaves the client.
    """
    wire = []
    for fieldset, content in metadata.items():
        fields = []
        for name, data in content.items():
            field = data if isinstance(data, FieldValue) else FieldValue.model_validate(data)
            if field.options:
                _validate_option(name, field.value, field.options)
            fields.append({"name": name, "value": _encode_value(name, field.value)})
        wire.append({"fieldset": fieldset, "fields": fields})
    return wire


def _encode_value(name: str, value: Any) -> Any:
    if name == TAG_FIELD:
        tags = _unique(_split_tags(value))
        return TAG_SEPARATOR.join(str(tag) for tag in tags) if tags else EMPTY_VALUE
    if value is None:
        return EMPTY_VALUE
    if isinstance(value, tuple):
        return list(value)
    return value


def _validate_option(name: str, value: Any, options: list[Any]) -> None:
    selected = list(value) if isinstance(value, (list, tuple)) else [value]
    for item in selected:
        if item is None or item == "":
            continue
        if item not in options:
            raise ValidationError(name, item)


def _split_tags(value: Any) -> list[Any]:
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return list(value)
    return [tag for tag in str(value).split(TAG_SEPARATOR) if tag != ""]


def _unique(values: list[Any]) -> list[Any]:
    seen: list[Any] = []
    for value in values:
        if value not in seen:
            seen.append(value)
    return seen


def _as_list(value: Any) -> list[Any]:
    if value is None:
        return []
    if isinstance(value, list):
        return value
    return [value]
