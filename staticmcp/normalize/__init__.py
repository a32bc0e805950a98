"""Normalization of remote content: cloning, asset extraction, markdown rendering."""

from .values import ValueKind, classify, is_document
from .cloner import clone_value, CYCLE_MARKER
from .assets import extract_asset_references, build_asset_lookup
from .renderer import render_field, render_document, build_tool_markdown, RENDER_FAILED_PLACEHOLDER
from .slug import slugify, SlugAllocator

__all__ = [
    "ValueKind",
    "classify",
    "is_document",
    "clone_value",
    "CYCLE_MARKER",
    "extract_asset_references",
    "build_asset_lookup",
    "render_field",
    "render_document",
    "build_tool_markdown",
    "RENDER_FAILED_PLACEHOLDER",
    "slugify",
    "SlugAllocator"
]
