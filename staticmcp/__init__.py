"""
static-mcp: build and serve static MCP tool surfaces from CMS content.

Pulls entries from a remote content source into a normalized file store and
builds a registry of read-only query tools over that store.
"""

__version__ = "1.0.0"
__author__ = "static-mcp Project"

# Import main components
from .models import AssetReference, ContentTypeConfig, NormalizedEntry, OutputConfig, ToolConfig, ToolResult
from .sources import BaseSourceAdapter, ContentfulAdapter, get_source_adapter
from .store import ContentStore
from .tools import ToolRegistry, build_tool_registry
from .pipeline import BuildReport, build_store, initialize_store

__all__ = [
    "AssetReference",
    "ContentTypeConfig",
    "NormalizedEntry",
    "OutputConfig",
    "ToolConfig",
    "ToolResult",
    "BaseSourceAdapter",
    "ContentfulAdapter",
    "get_source_adapter",
    "ContentStore",
    "ToolRegistry",
    "build_tool_registry",
    "BuildReport",
    "build_store",
    "initialize_store"
]
