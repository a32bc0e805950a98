"""
Cycle-safe structural cloning of remote values.

Resolved links make a remote entry graph cyclic (an author links to their
books, each book links back to the author). ``clone_value`` turns such a
graph into a plain acyclic structure that ``json.dumps`` accepts:

* resolved entries are flattened to ``{id, type, contentType, title}``;
* resolved assets are flattened to ``{id, title, file}``;
* a container met again while it is still being copied becomes
  ``CYCLE_MARKER``.

The flattened summaries carry no ``sys`` key, so cloning a clone returns an
equal value.
"""

from typing import Any, Callable, Dict, List, Optional, Set

from .values import (
    ValueKind,
    classify,
    content_type_id,
    display_title,
    entry_fields,
    is_resolved,
    link_id,
)

CYCLE_MARKER = "[Circular]"


def clone_value(value: Any, visited: Optional[Set[int]] = None) -> Any:
    """
    Deep-copy ``value`` into an acyclic, JSON-serializable structure.

    Args:
        value: Any remote value (scalar, list, dict, link, document node)
        visited: Identities of containers on the current copy path. Leave
            unset; one set is created per top-level call.

    Returns:
        The cloned value
    """
    kind = classify(value)
    if kind in (ValueKind.NULL, ValueKind.SCALAR):
        return value

    if visited is None:
        visited = set()
    identity = id(value)
    if identity in visited:
        return CYCLE_MARKER

    visited.add(identity)
    try:
        return _CLONERS[kind](value, visited)
    finally:
        visited.discard(identity)


def _clone_array(value: List[Any], visited: Set[int]) -> List[Any]:
    return [clone_value(item, visited) for item in value]


def _clone_object(value: Dict[str, Any], visited: Set[int]) -> Dict[str, Any]:
    return {key: clone_value(item, visited) for key, item in value.items()}


def _clone_entry(value: Dict[str, Any], visited: Set[int]) -> Dict[str, Any]:
    if not is_resolved(value):
        return _clone_object(value, visited)

    summary: Dict[str, Any] = {"id": link_id(value), "type": "Entry"}
    content_type = content_type_id(value)
    if content_type is not None:
        summary["contentType"] = content_type
    summary["title"] = clone_value(display_title(value), visited)
    return summary


def _clone_asset(value: Dict[str, Any], visited: Set[int]) -> Dict[str, Any]:
    if not is_resolved(value):
        return _clone_object(value, visited)

    fields = entry_fields(value)
    return {
        "id": link_id(value),
        "title": clone_value(fields.get("title"), visited),
        "file": clone_value(fields.get("file"), visited),
    }


_CLONERS: Dict[ValueKind, Callable[[Any, Set[int]], Any]] = {
    ValueKind.ARRAY: _clone_array,
    ValueKind.OBJECT: _clone_object,
    ValueKind.DOCUMENT_NODE: _clone_object,
    ValueKind.ENTRY_LINK: _clone_entry,
    ValueKind.ASSET_LINK: _clone_asset,
}
