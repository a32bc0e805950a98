"""
Markdown rendering for entry fields.

Rich documents are rendered node by node; every other field value is
rendered according to its kind. Each field becomes a level-2 section and a
tool's markdown is the entry title followed by its configured sections.
"""

import json
import logging
from typing import Any, Callable, Dict, List, Mapping, Optional

from ..errors import RenderFailure
from .assets import asset_reference
from .cloner import clone_value
from .values import (
    ValueKind,
    classify,
    display_title,
    entry_fields,
    is_document,
    is_resolved,
    link_id,
)

RENDER_FAILED_PLACEHOLDER = "[Rich text conversion failed]"

HEADING_LEVELS = {f"heading-{level}": level for level in range(1, 7)}

# Applied innermost first
MARK_WRAPPERS = [
    ("code", "`", "`"),
    ("bold", "**", "**"),
    ("italic", "*", "*"),
    ("underline", "<u>", "</u>"),
    ("strikethrough", "~~", "~~"),
    ("superscript", "<sup>", "</sup>"),
    ("subscript", "<sub>", "</sub>"),
]


class MarkdownRenderer:
    """
    Renders a rich document node tree to markdown.

    Block nodes render to a string without surrounding blank lines; the
    caller joins sibling blocks. Inline nodes render to a single line.
    """

    def __init__(self, assets: Optional[Mapping[str, Any]] = None):
        """
        Args:
            assets: Asset id to asset payload, used when an embedded asset
                link was not resolved in place
        """
        self.assets = assets or {}
        self._block_renderers: Dict[str, Callable[[Dict[str, Any]], str]] = {
            "document": self._render_container,
            "paragraph": self._render_paragraph,
            "unordered-list": lambda node: self._render_list(node, ordered=False),
            "ordered-list": lambda node: self._render_list(node, ordered=True),
            "list-item": self._render_container,
            "blockquote": self._render_blockquote,
            "hr": lambda node: "---",
            "table": self._render_table,
            "embedded-entry-block": self._render_embedded_entry,
            "embedded-asset-block": self._render_embedded_asset,
            "embedded-resource-block": self._render_embedded_resource,
        }
        self._inline_renderers: Dict[str, Callable[[Dict[str, Any]], str]] = {
            "text": self._render_text,
            "hyperlink": self._render_hyperlink,
            "entry-hyperlink": self._render_entry_hyperlink,
            "asset-hyperlink": self._render_asset_hyperlink,
            "resource-hyperlink": self._render_resource_hyperlink,
            "embedded-entry-inline": self._render_embedded_entry,
            "embedded-resource-inline": self._render_embedded_resource,
        }

    def render(self, document: Dict[str, Any]) -> str:
        """
        Render a document node to markdown.

        Raises:
            RenderFailure: If the node tree is malformed
        """
        try:
            return self._render_block(document).strip()
        except RenderFailure:
            raise
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise RenderFailure(f"Malformed rich text node: {e}") from e
        except RecursionError as e:
            raise RenderFailure("Rich text nesting too deep") from e

    # Block nodes

    def _render_block(self, node: Any) -> str:
        node_type = self._node_type(node)
        if node_type in HEADING_LEVELS:
            return "#" * HEADING_LEVELS[node_type] + " " + self._render_inlines(node)
        if node_type in self._block_renderers:
            return self._block_renderers[node_type](node)
        if node_type in self._inline_renderers:
            return self._inline_renderers[node_type](node)

        logging.debug(f"Unknown rich text node type '{node_type}', rendering children")
        return self._render_container(node)

    def _render_container(self, node: Dict[str, Any]) -> str:
        blocks = [self._render_block(child) for child in self._children(node)]
        return "\n\n".join(block for block in blocks if block)

    def _render_paragraph(self, node: Dict[str, Any]) -> str:
        return self._render_inlines(node)

    def _render_list(self, node: Dict[str, Any], ordered: bool) -> str:
        items = []
        for index, item in enumerate(self._children(node), 1):
            marker = f"{index}." if ordered else "-"
            indent = " " * (len(marker) + 1)
            body = "\n".join(
                block for block in (self._render_block(child) for child in self._children(item))
                if block
            )
            lines = body.split("\n")
            rendered = f"{marker} {lines[0]}"
            for line in lines[1:]:
                rendered += "\n" + (indent + line if line else line)
            items.append(rendered)
        return "\n".join(items)

    def _render_blockquote(self, node: Dict[str, Any]) -> str:
        inner = self._render_container(node)
        return "\n".join(f"> {line}" if line else ">" for line in inner.split("\n"))

    def _render_table(self, node: Dict[str, Any]) -> str:
        rows: List[List[str]] = []
        for row in self._children(node):
            cells = []
            for cell in self._children(row):
                text = " ".join(self._render_inlines(child) for child in self._children(cell))
                cells.append(text.replace("|", "\\|").replace("\n", " "))
            rows.append(cells)
        if not rows:
            return ""

        width = max(len(row) for row in rows)
        rows = [row + [""] * (width - len(row)) for row in rows]
        lines = ["| " + " | ".join(rows[0]) + " |", "| " + " | ".join(["---"] * width) + " |"]
        lines.extend("| " + " | ".join(row) + " |" for row in rows[1:])
        return "\n".join(lines)

    # Inline nodes

    def _render_inlines(self, node: Dict[str, Any]) -> str:
        parts = []
        for child in self._children(node):
            node_type = self._node_type(child)
            renderer = self._inline_renderers.get(node_type)
            parts.append(renderer(child) if renderer else self._render_inlines(child))
        return "".join(parts)

    def _render_text(self, node: Dict[str, Any]) -> str:
        value = node.get("value", "")
        if not isinstance(value, str):
            raise RenderFailure(f"Text node value must be a string, got {type(value).__name__}")
        if not value.strip():
            return value

        marks = {mark.get("type") for mark in node.get("marks") or []}
        stripped = value.strip()
        leading = value[:len(value) - len(value.lstrip())]
        trailing = value[len(value.rstrip()):]
        for mark, opening, closing in MARK_WRAPPERS:
            if mark in marks:
                stripped = f"{opening}{stripped}{closing}"
        return f"{leading}{stripped}{trailing}"

    def _render_hyperlink(self, node: Dict[str, Any]) -> str:
        uri = (node.get("data") or {}).get("uri", "")
        return f"[{self._render_inlines(node)}]({uri})"

    def _render_entry_hyperlink(self, node: Dict[str, Any]) -> str:
        target = self._target(node)
        return f"[{self._render_inlines(node)}](entry:{link_id(target) if target else ''})"

    def _render_asset_hyperlink(self, node: Dict[str, Any]) -> str:
        reference = self._asset_reference(self._target(node))
        destination = reference.file_name if reference else ""
        return f"[{self._render_inlines(node)}]({destination})"

    def _render_resource_hyperlink(self, node: Dict[str, Any]) -> str:
        return f"[{self._render_inlines(node)}]({self._resource_urn(node)})"

    # Embedded links

    def _render_embedded_entry(self, node: Dict[str, Any]) -> str:
        target = self._target(node)
        if target is None:
            return ""
        if is_resolved(target):
            return f"**{display_title(target)}**"
        return f"**[Entry {link_id(target)}]**"

    def _render_embedded_asset(self, node: Dict[str, Any]) -> str:
        target = self._target(node)
        reference = self._asset_reference(target)
        if reference is None:
            return f"[Asset {link_id(target) if target else ''} unavailable]"

        asset = target if is_resolved(target) else self.assets.get(link_id(target), {})
        title = entry_fields(asset).get("title") or reference.file_name
        return f"![{title}]({reference.file_name})"

    def _render_embedded_resource(self, node: Dict[str, Any]) -> str:
        return f"[Resource {self._resource_urn(node)}]"

    # Helpers

    @staticmethod
    def _node_type(node: Any) -> str:
        if not isinstance(node, dict) or not isinstance(node.get("nodeType"), str):
            raise RenderFailure(f"Expected a rich text node, got {type(node).__name__}")
        return node["nodeType"]

    @staticmethod
    def _children(node: Dict[str, Any]) -> List[Any]:
        content = node.get("content", [])
        if not isinstance(content, list):
            raise RenderFailure(f"Node '{node.get('nodeType')}' has non-list content")
        return content

    @staticmethod
    def _target(node: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        target = (node.get("data") or {}).get("target")
        return target if isinstance(target, dict) else None

    def _resource_urn(self, node: Dict[str, Any]) -> str:
        target = self._target(node) or {}
        return (target.get("sys") or {}).get("urn", "")

    def _asset_reference(self, target: Optional[Dict[str, Any]]):
        if target is None or classify(target) != ValueKind.ASSET_LINK:
            return None
        asset = target if is_resolved(target) else self.assets.get(link_id(target))
        return asset_reference(asset) if asset else None


def render_document(document: Dict[str, Any], assets: Optional[Mapping[str, Any]] = None) -> str:
    """Render a rich document to markdown. Raises RenderFailure on malformed input."""
    return MarkdownRenderer(assets).render(document)


def _section(field_name: str, body: str) -> str:
    return f"## {field_name}\n\n{body}\n\n"


def _compact_json(value: Any) -> str:
    return json.dumps(clone_value(value), ensure_ascii=False, separators=(",", ":"))


def render_field(field_name: str, value: Any, assets: Optional[Mapping[str, Any]] = None) -> str:
    """
    Render one field as a markdown section.

    Args:
        field_name: Field id, used as the section heading
        value: Raw field value
        assets: Optional asset lookup for embedded asset links

    Returns:
        The section, or an empty string for a null value
    """
    kind = classify(value)

    if kind == ValueKind.NULL:
        return ""

    if is_document(value):
        try:
            body = render_document(value, assets)
        except RenderFailure as e:
            logging.warning(f"Rich text conversion failed for field '{field_name}': {e}")
            body = RENDER_FAILED_PLACEHOLDER
        return _section(field_name, body)

    if isinstance(value, str):
        return _section(field_name, value)

    if kind == ValueKind.ARRAY:
        items = [item if isinstance(item, str) else _compact_json(item) for item in value]
        return _section(field_name, "\n".join(f"- {item}" for item in items))

    if kind == ValueKind.SCALAR:
        if isinstance(value, bool):
            return _section(field_name, "true" if value else "false")
        return _section(field_name, str(value))

    body = json.dumps(clone_value(value), ensure_ascii=False, indent=2)
    return _section(field_name, f"```json\n{body}\n```")


def build_tool_markdown(
    title: str,
    fields: Mapping[str, Any],
    field_names: List[str],
    assets: Optional[Mapping[str, Any]] = None
) -> str:
    """
    Build a tool's markdown: the entry title, then each configured field.

    Fields the entry does not have are skipped.
    """
    markdown = f"# {title}\n\n"
    for field_name in field_names:
        if field_name not in fields:
            continue
        markdown += render_field(field_name, fields[field_name], assets)
    return markdown
