"""Data models for static-mcp."""

from .config import ToolConfig, ContentTypeConfig, OutputConfig, is_safe_name
from .content import (
    AssetReference,
    NormalizedEntry,
    SourceEntry,
    ContentTypeSummary,
    ToolResult,
    absolute_url,
)

__all__ = [
    "ToolConfig",
    "ContentTypeConfig",
    "OutputConfig",
    "AssetReference",
    "NormalizedEntry",
    "SourceEntry",
    "ContentTypeSummary",
    "ToolResult",
    "absolute_url",
    "is_safe_name"
]
