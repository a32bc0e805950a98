"""
Build and init flows for static-mcp.

``initialize_store`` writes the configuration of a new store;
``build_store`` pulls content from the configured source and writes the
normalized entries, tool markdown and assets. Argument parsing and
interactive prompting live in the calling front-end.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from .errors import ConfigInvalid, ConfigNotFound, UnknownContentType, UnknownSource
from .models import ContentTypeConfig, OutputConfig, SourceEntry, ToolConfig, is_safe_name
from .sources import SUPPORTED_SOURCES, BaseSourceAdapter, get_source_adapter
from .store import ContentStore


@dataclass
class BuildReport:
    """
    Summary of one build run.
    """
    content_types: List[str] = field(default_factory=list)
    entries_written: int = 0
    assets_downloaded: int = 0
    assets_skipped: int = 0


def initialize_store(
    store: ContentStore,
    source: str,
    content_types: Dict[str, List[ToolConfig]]
) -> None:
    """
    Create a store's layout and configuration files.

    Args:
        store: The store to initialize
        source: Name of the source adapter the build will use
        content_types: Content type id to the tools generated for it

    Raises:
        UnknownSource: If ``source`` is not a supported adapter
        ConfigInvalid: If no content type is given
    """
    if source not in SUPPORTED_SOURCES:
        raise UnknownSource(source, SUPPORTED_SOURCES)
    if not content_types:
        raise ConfigInvalid("Select at least one content type.", field="contentTypes")

    configs = [
        ContentTypeConfig(content_type=content_type, tools=tools)
        for content_type, tools in content_types.items()
    ]

    store.ensure_layout()
    store.write_output_config(OutputConfig(source=source))
    for content_type_config in configs:
        store.write_content_type_config(content_type_config)

    logging.info(f"Initialized store {store.output_dir} with {len(configs)} content types")


def _select_content_types(store: ContentStore, content_type_filter: Optional[Sequence[str]]) -> List[str]:
    content_types = store.list_content_types()

    if content_type_filter:
        unknown = [ct for ct in content_type_filter if ct not in content_types]
        if unknown:
            raise UnknownContentType(unknown, content_types)
        content_types = [ct for ct in content_types if ct in content_type_filter]

    if not content_types:
        raise ConfigNotFound(f'No content types found. Initialize the store at "{store.output_dir}" first.')
    return content_types


def _write_entry(
    store: ContentStore,
    adapter: BaseSourceAdapter,
    content_type: str,
    content_type_config: ContentTypeConfig,
    entry: SourceEntry,
    report: BuildReport
) -> None:
    store.write_entry(content_type, entry.slug, entry.data)

    for tool in content_type_config.tools:
        markdown = adapter.build_tool_markdown(entry, tool.fields)
        store.write_tool_markdown(content_type, entry.slug, tool.name, markdown)

    for asset in entry.referenced_assets:
        if not is_safe_name(asset.file_name):
            logging.warning(f"  Skipping asset with unsafe filename {asset.file_name!r}")
            continue
        if store.has_asset(asset.file_name):
            report.assets_skipped += 1
            continue
        adapter.download_asset(asset.url, str(store.asset_path(asset.file_name)))
        report.assets_downloaded += 1

    report.entries_written += 1


def build_store(
    store: ContentStore,
    content_types: Optional[Sequence[str]] = None,
    adapter: Optional[BaseSourceAdapter] = None
) -> BuildReport:
    """
    Pull content from the configured source into the store.

    Content types are built in discovery order and entries in fetch order.
    Existing files are overwritten, nothing is deleted, and assets already on
    disk are not downloaded again.

    Args:
        store: The initialized store to build
        content_types: Optional subset of content types to build
        adapter: Optional adapter to use instead of the configured source

    Returns:
        BuildReport with counts for the run

    Raises:
        ConfigNotFound: If the store was not initialized
        ConfigInvalid: If a config file is malformed or no source is set
        UnknownContentType: If ``content_types`` names an unknown type
        UnknownSource: If the configured source is not supported
        DownloadFailure: If an asset download fails (aborts the build)
    """
    output_config = store.read_output_config()
    if not output_config.source:
        raise ConfigInvalid(
            "source is required to run the build.\n"
            f"Set \"source\" in {store.config_path} to one of: {', '.join(SUPPORTED_SOURCES)}",
            field="source"
        )

    selected = _select_content_types(store, content_types)

    owns_adapter = adapter is None
    if adapter is None:
        adapter = get_source_adapter(output_config.source)

    store.assets_dir.mkdir(parents=True, exist_ok=True)
    report = BuildReport()

    try:
        for content_type in selected:
            content_type_config = store.read_content_type_config(content_type)
            logging.info(f"Building content type: {content_type}")

            entries = adapter.fetch_entries(content_type)
            logging.info(f"  Found {len(entries)} entries")

            for i, entry in enumerate(entries, 1):
                _write_entry(store, adapter, content_type, content_type_config, entry, report)
                logging.info(f"  [{i}/{len(entries)}] {entry.title} -> {entry.slug}")

            report.content_types.append(content_type)
    finally:
        if owns_adapter:
            adapter.close()

    logging.info(
        f"Build complete: {report.entries_written} entries, "
        f"{report.assets_downloaded} assets downloaded, {report.assets_skipped} already present"
    )
    return report
