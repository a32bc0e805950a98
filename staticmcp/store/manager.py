"""
Content store manager for static-mcp.

This module handles all reads and writes of the on-disk content layout:

    <output>/config.json
    <output>/content/entries/<content-type>/config.json
    <output>/content/entries/<content-type>/<slug>/data.json
    <output>/content/entries/<content-type>/<slug>/tools/<tool>.md
    <output>/content/assets/<file-name>

Nothing is cached: every call goes back to disk.
"""

import json
import logging
from pathlib import Path
from typing import Any, List, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError

from ..config import ConfigManager, config
from ..errors import AssetNotFound, ConfigInvalid, ConfigNotFound, EntryNotFound, ToolNotFound
from ..models import ContentTypeConfig, NormalizedEntry, OutputConfig, is_safe_name

ModelT = TypeVar("ModelT", bound=BaseModel)

CONFIG_FILENAME = "config.json"
DATA_FILENAME = "data.json"


def dump_json(data: Any) -> str:
    """Pretty-printed, newline-terminated JSON as written to the store."""
    return json.dumps(data, indent=2, ensure_ascii=False) + "\n"


class ContentStore:
    """
    Reads and writes a static-mcp content store rooted at an output directory.
    """

    def __init__(self, output_dir: Optional[str] = None, config_manager: Optional[ConfigManager] = None):
        """
        Initialize the content store.

        Args:
            output_dir: Store root holding config.json and content/
                (defaults to store.output_dir from the configuration)
            config_manager: Configuration to read the default from
        """
        self.output_dir = Path(output_dir or (config_manager or config).output_directory)

    # Paths

    @property
    def config_path(self) -> Path:
        return self.output_dir / CONFIG_FILENAME

    @property
    def content_dir(self) -> Path:
        return self.output_dir / "content"

    @property
    def entries_dir(self) -> Path:
        return self.content_dir / "entries"

    @property
    def assets_dir(self) -> Path:
        return self.content_dir / "assets"

    def content_type_dir(self, content_type: str) -> Path:
        return self.entries_dir / content_type

    def entry_dir(self, content_type: str, slug: str) -> Path:
        return self.content_type_dir(content_type) / slug

    def ensure_layout(self) -> None:
        """Create the entries and assets directories if they don't exist."""
        self.entries_dir.mkdir(parents=True, exist_ok=True)
        self.assets_dir.mkdir(parents=True, exist_ok=True)

    # Configuration

    def _read_model(self, path: Path, model: Type[ModelT], hint: str) -> ModelT:
        """
        Read and validate a JSON config file.

        Raises:
            ConfigNotFound: If the file cannot be read
            ConfigInvalid: If it is not valid JSON or violates the schema
        """
        try:
            raw = path.read_text(encoding='utf-8')
        except UnicodeDecodeError as e:
            raise ConfigInvalid(f"{path} is not valid UTF-8: {e}")
        except OSError:
            raise ConfigNotFound(f"Could not read {path}.\n{hint}")

        try:
            return model.model_validate(json.loads(raw))
        except json.JSONDecodeError as e:
            raise ConfigInvalid(f"{path} is not valid JSON: {e}")
        except ValidationError as e:
            error = e.errors()[0]
            field = ".".join(str(part) for part in error["loc"]) or None
            raise ConfigInvalid(f"Invalid {path}: {field or 'value'}: {error['msg']}", field=field)

    def _write_model(self, path: Path, instance: BaseModel) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(dump_json(instance.model_dump(by_alias=True, exclude_none=True)), encoding='utf-8')

    def read_output_config(self) -> OutputConfig:
        return self._read_model(
            self.config_path,
            OutputConfig,
            f'Make sure you have initialized the store at "{self.output_dir}" first.'
        )

    def write_output_config(self, output_config: OutputConfig) -> None:
        # source is written even when null
        self.config_path.parent.mkdir(parents=True, exist_ok=True)
        self.config_path.write_text(dump_json(output_config.model_dump()), encoding='utf-8')
        logging.info(f"Wrote {self.config_path}")

    def has_content_type_config(self, content_type: str) -> bool:
        return (self.content_type_dir(content_type) / CONFIG_FILENAME).is_file()

    def read_content_type_config(self, content_type: str) -> ContentTypeConfig:
        return self._read_model(
            self.content_type_dir(content_type) / CONFIG_FILENAME,
            ContentTypeConfig,
            f'Make sure the config exists for content type "{content_type}".'
        )

    def write_content_type_config(self, content_type_config: ContentTypeConfig) -> None:
        path = self.content_type_dir(content_type_config.content_type) / CONFIG_FILENAME
        self._write_model(path, content_type_config)
        logging.info(f"Wrote {path}")

    # Discovery

    @staticmethod
    def _subdirectories(path: Path) -> List[str]:
        if not path.is_dir():
            return []
        return sorted(child.name for child in path.iterdir() if child.is_dir())

    def list_content_types(self) -> List[str]:
        """
        List content-type directory names, sorted.

        Raises:
            ConfigNotFound: If the entries directory does not exist
        """
        if not self.entries_dir.is_dir():
            raise ConfigNotFound(
                f"Could not read {self.entries_dir}.\n"
                f'Make sure you have initialized the store at "{self.output_dir}" first.'
            )
        return self._subdirectories(self.entries_dir)

    def list_entries(self, content_type: str) -> List[str]:
        """List entry slugs of a content type, sorted."""
        return self._subdirectories(self.content_type_dir(content_type))

    # Entries

    def write_entry(self, content_type: str, slug: str, entry: NormalizedEntry) -> Path:
        path = self.entry_dir(content_type, slug) / DATA_FILENAME
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(dump_json(entry.to_data()), encoding='utf-8')
        return path

    def read_entry_text(self, content_type: str, slug: str) -> str:
        """
        Read an entry's data.json verbatim.

        Raises:
            EntryNotFound: If the entry does not exist
        """
        path = self.entry_dir(content_type, slug) / DATA_FILENAME
        if not (is_safe_name(content_type) and is_safe_name(slug)) or not path.is_file():
            raise EntryNotFound(f'Entry "{slug}" not found in {content_type}.')
        return path.read_text(encoding='utf-8')

    def read_entry(self, content_type: str, slug: str) -> NormalizedEntry:
        return NormalizedEntry.from_data(json.loads(self.read_entry_text(content_type, slug)))

    def write_tool_markdown(self, content_type: str, slug: str, tool_name: str, markdown: str) -> Path:
        path = self.entry_dir(content_type, slug) / "tools" / f"{tool_name}.md"
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(markdown, encoding='utf-8')
        return path

    def read_tool_markdown(self, content_type: str, slug: str, tool_name: str) -> str:
        """
        Read a rendered tool markdown file verbatim.

        Raises:
            ToolNotFound: If the entry has no markdown for that tool
        """
        path = self.entry_dir(content_type, slug) / "tools" / f"{tool_name}.md"
        names = (content_type, slug, f"{tool_name}.md")
        if not all(is_safe_name(name) for name in names) or not path.is_file():
            raise ToolNotFound(f'Tool "{tool_name}" not found for entry "{slug}" in {content_type}.')
        return path.read_text(encoding='utf-8')

    # Assets

    def list_assets(self) -> List[str]:
        if not self.assets_dir.is_dir():
            return []
        return sorted(child.name for child in self.assets_dir.iterdir() if child.is_file())

    def asset_path(self, file_name: str) -> Path:
        """
        Path an asset is stored under.

        Raises:
            ValueError: If the filename is not a plain file name
        """
        if not is_safe_name(file_name):
            raise ValueError(f"Unsafe asset filename: {file_name!r}")
        return self.assets_dir / file_name

    def has_asset(self, file_name: str) -> bool:
        return is_safe_name(file_name) and self.asset_path(file_name).is_file()

    def get_asset_path(self, file_name: str) -> Path:
        """
        Resolve an existing asset's path.

        Raises:
            AssetNotFound: If no asset with that filename exists
        """
        if not self.has_asset(file_name):
            raise AssetNotFound(f'Asset "{file_name}" not found.')
        return self.asset_path(file_name)
