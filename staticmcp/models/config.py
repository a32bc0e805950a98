"""
Configuration models for static-mcp content stores.

These describe the JSON files written by init and read by build and serve:
the store-level output config and the per-content-type tool configuration.
"""

from pathlib import Path
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator


def is_safe_name(name: str) -> bool:
    """True if ``name`` is a single, ordinary path component."""
    return bool(name) and name not in (".", "..") and Path(name).name == name and "\\" not in name


class ToolConfig(BaseModel):
    """
    One generated "field bundle" tool for a content type.
    """

    name: str = Field(
        ...,
        min_length=1,
        description="Tool name, used in the generated operation name and markdown filename"
    )

    description: Optional[str] = Field(
        default=None,
        description="Optional human-readable description of the bundle"
    )

    fields: List[str] = Field(
        ...,
        min_length=1,
        description="Ordered list of field ids rendered into the tool markdown"
    )

    @field_validator("name")
    @classmethod
    def _file_safe_name(cls, value: str) -> str:
        if not is_safe_name(f"{value}.md"):
            raise ValueError("tool name must be usable as a file name")
        return value

    @field_validator("fields")
    @classmethod
    def _non_empty_field_names(cls, value: List[str]) -> List[str]:
        if any(not name for name in value):
            raise ValueError("field names must be non-empty")
        return value


class ContentTypeConfig(BaseModel):
    """
    Configuration stored at ``entries/<content-type>/config.json``.
    """

    model_config = ConfigDict(populate_by_name=True)

    content_type: str = Field(
        ...,
        alias="contentType",
        min_length=1,
        description="Content type identifier in the remote source"
    )

    tools: List[ToolConfig] = Field(
        ...,
        min_length=1,
        description="Field bundle tools generated for every entry of this type"
    )

    @field_validator("content_type")
    @classmethod
    def _directory_safe_name(cls, value: str) -> str:
        if not is_safe_name(value):
            raise ValueError("content type must be usable as a directory name")
        return value

    def tool_names(self) -> List[str]:
        return [tool.name for tool in self.tools]


class OutputConfig(BaseModel):
    """
    Top-level store configuration stored at ``<output>/config.json``.
    """

    source: Optional[str] = Field(
        default=None,
        description="Name of the source adapter used by build, or null"
    )
