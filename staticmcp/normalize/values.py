"""
Classification of remote field values.

Remote payloads are plain JSON-like values. Every walker in this package
(cloner, asset extractor, markdown renderer) dispatches on the closed set of
kinds defined here instead of sniffing shapes ad hoc.
"""

from enum import Enum
from typing import Any, Dict, Mapping, Optional


class ValueKind(Enum):
    NULL = "null"
    SCALAR = "scalar"
    ARRAY = "array"
    OBJECT = "object"
    ENTRY_LINK = "entry_link"
    ASSET_LINK = "asset_link"
    DOCUMENT_NODE = "document_node"


def _sys(value: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    sys_data = value.get("sys")
    return sys_data if isinstance(sys_data, dict) else None


def classify(value: Any) -> ValueKind:
    """
    Determine the kind of a remote value.

    Entry and asset links are recognized both unresolved
    (``sys.type == "Link"`` with a ``linkType``) and resolved
    (``sys.type`` is ``"Entry"`` or ``"Asset"``).
    """
    if value is None:
        return ValueKind.NULL
    if isinstance(value, (list, tuple)):
        return ValueKind.ARRAY
    if not isinstance(value, dict):
        return ValueKind.SCALAR

    sys_data = _sys(value)
    if sys_data is not None:
        link_type = sys_data.get("type")
        if link_type == "Link":
            link_type = sys_data.get("linkType")
        if link_type == "Entry":
            return ValueKind.ENTRY_LINK
        if link_type == "Asset":
            return ValueKind.ASSET_LINK

    if isinstance(value.get("nodeType"), str):
        return ValueKind.DOCUMENT_NODE
    return ValueKind.OBJECT


def is_document(value: Any) -> bool:
    """True for the root node of a rich document."""
    return isinstance(value, dict) and value.get("nodeType") == "document"


def is_resolved(value: Dict[str, Any]) -> bool:
    """True when a link value has been replaced by the linked entry or asset."""
    sys_data = _sys(value) or {}
    return sys_data.get("type") in ("Entry", "Asset")


def link_id(value: Dict[str, Any]) -> Optional[str]:
    return (_sys(value) or {}).get("id")


def content_type_id(entry: Dict[str, Any]) -> Optional[str]:
    """Content type id of a resolved entry, if the payload carries it."""
    content_type = (_sys(entry) or {}).get("contentType")
    if isinstance(content_type, dict):
        return link_id(content_type)
    if isinstance(content_type, str):
        return content_type
    return None


def entry_fields(value: Mapping[str, Any]) -> Dict[str, Any]:
    fields = value.get("fields")
    return fields if isinstance(fields, dict) else {}


def display_title(value: Dict[str, Any]) -> Any:
    """Best-effort title of a resolved entry: ``title``, ``name``, then id."""
    fields = entry_fields(value)
    for key in ("title", "name"):
        if fields.get(key) is not None:
            return fields[key]
    return link_id(value)
