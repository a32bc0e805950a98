"""
Tool registry for static-mcp.

This module scans a content store once and builds the registry of read-only
query tools served to the RPC layer: two asset tools, plus per content type
a list tool, a data tool and one tool per configured field bundle. The
registry is fixed at construction; later changes on disk are not picked up
until a new registry is built.
"""

import functools
import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Tuple

from ..errors import StaticMCPError
from ..models import ContentTypeConfig, ToolResult
from ..store import ContentStore

ToolHandler = Callable[[Dict[str, Any]], ToolResult]


@dataclass(frozen=True)
class ToolDefinition:
    """
    A named, schema-typed query operation.
    """
    name: str
    description: str
    input_schema: Dict[str, Any]
    handler: ToolHandler

    def required_arguments(self) -> List[str]:
        return list(self.input_schema.get("required", []))

    def describe(self) -> Dict[str, Any]:
        """Listing form used by the RPC layer."""
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": self.input_schema,
        }


@dataclass(frozen=True)
class ContentTypeInfo:
    name: str
    config: ContentTypeConfig
    entries: Tuple[str, ...]


@dataclass(frozen=True)
class StoreSnapshot:
    """Result of a single store scan."""
    content_types: Tuple[ContentTypeInfo, ...]
    assets: Tuple[str, ...]


class ToolRegistry:
    """
    Immutable registry of generated tools, keyed by name.
    """

    def __init__(self, tools: Iterable[ToolDefinition]):
        """
        Initialize the registry.

        Args:
            tools: Tool definitions in registration order

        Raises:
            ValueError: If two tools share a name
        """
        registered: Dict[str, ToolDefinition] = {}
        for tool in tools:
            if tool.name in registered:
                raise ValueError(f"Duplicate tool name: {tool.name}")
            registered[tool.name] = tool
        self._tools: Mapping[str, ToolDefinition] = MappingProxyType(registered)

    def __len__(self) -> int:
        return len(self._tools)

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    @property
    def tools(self) -> Mapping[str, ToolDefinition]:
        return self._tools

    def get_tool(self, name: str) -> Optional[ToolDefinition]:
        """
        Get a tool definition by name.

        Args:
            name: The tool name

        Returns:
            The tool definition, or None if not found
        """
        return self._tools.get(name)

    def list_tools(self) -> List[str]:
        """
        Get a list of all registered tool names.

        Returns:
            List of tool names in registration order
        """
        return list(self._tools.keys())

    def describe_tools(self) -> List[Dict[str, Any]]:
        return [tool.describe() for tool in self._tools.values()]

    def call_tool(self, name: str, arguments: Optional[Dict[str, Any]] = None) -> ToolResult:
        """
        Invoke a tool by name. Never raises for bad input.

        Args:
            name: The tool name
            arguments: Tool arguments keyed by parameter name

        Returns:
            The tool's result, or an error result for an unknown tool or
            missing/invalid arguments
        """
        tool = self._tools.get(name)
        if tool is None:
            return ToolResult.error(f'Unknown tool "{name}".')

        arguments = dict(arguments or {})
        for argument in tool.required_arguments():
            if argument not in arguments:
                return _missing_argument(argument, name)
        for argument, value in arguments.items():
            if argument in tool.input_schema["properties"] and value is not None and not isinstance(value, str):
                return ToolResult.error(f'Argument "{argument}" for {name} must be a string.')

        return tool.handler(arguments)


def scan_store(store: ContentStore) -> StoreSnapshot:
    """
    Scan a content store once.

    Content-type directories without a config.json are skipped.

    Raises:
        ConfigInvalid: If a content-type config is malformed
    """
    content_types: List[ContentTypeInfo] = []

    if store.entries_dir.is_dir():
        for name in store.list_content_types():
            if not store.has_content_type_config(name):
                logging.warning(f"Skipping content type '{name}': no config.json")
                continue
            content_types.append(ContentTypeInfo(
                name=name,
                config=store.read_content_type_config(name),
                entries=tuple(store.list_entries(name))
            ))

    assets = tuple(store.list_assets())
    logging.info(f"Scanned store {store.output_dir}: {len(content_types)} content types, {len(assets)} assets")
    return StoreSnapshot(content_types=tuple(content_types), assets=assets)


def _string_schema(name: str, description: str, required: bool) -> Dict[str, Any]:
    return {
        "type": "object",
        "properties": {
            name: {"type": "string", "description": description}
        },
        "required": [name] if required else [],
    }


def _filter_names(names: Iterable[str], filter_text: Optional[str]) -> List[str]:
    if not filter_text:
        return list(names)
    needle = str(filter_text).lower()
    return [name for name in names if needle in name.lower()]


def _missing_argument(argument: str, tool_name: str) -> ToolResult:
    return ToolResult.error(f'Missing required argument "{argument}" for {tool_name}.')


def _guarded(handler: ToolHandler) -> ToolHandler:
    """Turn lookup and read failures into error results."""
    @functools.wraps(handler)
    def wrapper(arguments: Dict[str, Any]) -> ToolResult:
        try:
            return handler(arguments)
        except StaticMCPError as e:
            return ToolResult.error(str(e))
        except (TypeError, ValueError) as e:
            logging.error(f"Tool call failed: {e}")
            return ToolResult.error(f"Could not read content: {e}")
        except OSError as e:
            logging.error(f"Tool read failed: {e}")
            return ToolResult.error(f"Could not read content: {e.strerror or e}")
    return wrapper


def _asset_tools(store: ContentStore, assets: Tuple[str, ...]) -> List[ToolDefinition]:
    def list_assets(arguments: Dict[str, Any]) -> ToolResult:
        results = _filter_names(assets, arguments.get("filter"))
        if not results:
            return ToolResult.text("No assets found matching the filter.")
        return ToolResult.text("\n".join(results))

    def get_asset(arguments: Dict[str, Any]) -> ToolResult:
        file_name = arguments.get("fileName")
        if not file_name:
            return _missing_argument("fileName", "get_asset")
        path = store.get_asset_path(file_name)
        return ToolResult.text(f"Asset: {file_name}\nPath: {path}")

    return [
        ToolDefinition(
            name="list_assets",
            description="List all available assets. Optionally filter by filename substring.",
            input_schema=_string_schema("filter", "Optional substring to filter asset filenames", required=False),
            handler=_guarded(list_assets)
        ),
        ToolDefinition(
            name="get_asset",
            description="Get details about a specific asset by filename.",
            input_schema=_string_schema("fileName", "The asset filename", required=True),
            handler=_guarded(get_asset)
        ),
    ]


def _content_type_tools(store: ContentStore, info: ContentTypeInfo) -> List[ToolDefinition]:
    name = info.name
    title_description = 'The entry title (slug format, e.g., "bob-smith")'

    def list_entries(arguments: Dict[str, Any]) -> ToolResult:
        results = _filter_names(info.entries, arguments.get("filter"))
        if not results:
            return ToolResult.text(f"No {name} entries found matching the filter.")
        return ToolResult.text("\n".join(results))

    def get_entry(arguments: Dict[str, Any]) -> ToolResult:
        title = arguments.get("title")
        if not title:
            return _missing_argument("title", f"get_{name}")
        return ToolResult.text(store.read_entry_text(name, title))

    def make_bundle_handler(tool_name: str) -> ToolHandler:
        def get_bundle(arguments: Dict[str, Any]) -> ToolResult:
            title = arguments.get("title")
            if not title:
                return _missing_argument("title", f"get_{name}_{tool_name}")
            return ToolResult.text(store.read_tool_markdown(name, title, tool_name))
        return get_bundle

    tools = [
        ToolDefinition(
            name=f"list_{name}",
            description=f"List all {name} entries. Optionally filter by title substring.",
            input_schema=_string_schema("filter", "Optional substring to filter entry titles", required=False),
            handler=_guarded(list_entries)
        ),
        ToolDefinition(
            name=f"get_{name}",
            description=f"Get the data for a specific {name} entry by title.",
            input_schema=_string_schema("title", title_description, required=True),
            handler=_guarded(get_entry)
        ),
    ]

    for tool in info.config.tools:
        tools.append(ToolDefinition(
            name=f"get_{name}_{tool.name}",
            description=tool.description or f"Get the {tool.name} for a specific {name} entry.",
            input_schema=_string_schema("title", title_description, required=True),
            handler=_guarded(make_bundle_handler(tool.name))
        ))

    return tools


def build_tool_registry(store: ContentStore) -> ToolRegistry:
    """
    Scan a content store and build its tool registry.

    A content type with N configured tools contributes N + 2 tools; the
    registry holds 2 + sum(N_i + 2) tools in total.

    Args:
        store: The content store to serve

    Returns:
        The populated, immutable ToolRegistry
    """
    snapshot = scan_store(store)

    tools = _asset_tools(store, snapshot.assets)
    for info in snapshot.content_types:
        tools.extend(_content_type_tools(store, info))

    registry = ToolRegistry(tools)
    logging.info(f"Registered {len(registry)} tools")
    return registry
