"""
Builders for Contentful-shaped payloads used across the test suite.
"""

from typing import Any, Dict, List, Optional


def link(link_type: str, target_id: str) -> Dict[str, Any]:
    return {"sys": {"type": "Link", "linkType": link_type, "id": target_id}}


def entry(entry_id: str, content_type: str, fields: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "sys": {
            "id": entry_id,
            "type": "Entry",
            "createdAt": "2024-01-01T00:00:00.000Z",
            "updatedAt": "2024-02-01T00:00:00.000Z",
            "contentType": link("ContentType", content_type),
        },
        "fields": fields,
    }


def asset(asset_id: str, file_name: str, url: str, title: Optional[str] = None) -> Dict[str, Any]:
    return {
        "sys": {"id": asset_id, "type": "Asset"},
        "fields": {
            "title": title or file_name,
            "file": {
                "url": url,
                "fileName": file_name,
                "contentType": "image/png",
                "details": {"size": 1024},
            },
        },
    }


def text(value: str, *marks: str) -> Dict[str, Any]:
    return {
        "nodeType": "text",
        "value": value,
        "marks": [{"type": mark} for mark in marks],
        "data": {},
    }


def node(node_type: str, content: Optional[List[Any]] = None, **data: Any) -> Dict[str, Any]:
    return {"nodeType": node_type, "content": content or [], "data": data}


def paragraph(*children: Dict[str, Any]) -> Dict[str, Any]:
    return node("paragraph", list(children))


def document(*children: Dict[str, Any]) -> Dict[str, Any]:
    return node("document", list(children))
