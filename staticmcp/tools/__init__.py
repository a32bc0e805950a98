"""Tool surface built from a content store."""

from .registry import (
    ToolDefinition,
    ToolRegistry,
    ContentTypeInfo,
    StoreSnapshot,
    scan_store,
    build_tool_registry,
)

__all__ = [
    "ToolDefinition",
    "ToolRegistry",
    "ContentTypeInfo",
    "StoreSnapshot",
    "scan_store",
    "build_tool_registry"
]
