"""
Content models for static-mcp.

This module defines the normalized, persistence-safe shapes produced by the
source adapters, plus the result type returned by generated tools.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator


def absolute_url(url: str) -> str:
    """Give protocol-relative URLs (``//host/path``) an explicit https scheme."""
    if url.startswith("//"):
        return f"https:{url}"
    return url


class AssetReference(BaseModel):
    """
    A binary asset an entry links to, by local filename and download URL.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    file_name: str = Field(
        ...,
        alias="fileName",
        min_length=1,
        description="Filename the asset is stored under in assets/"
    )

    url: str = Field(
        ...,
        description="Absolute download URL"
    )

    @field_validator("url")
    @classmethod
    def _make_absolute(cls, value: str) -> str:
        return absolute_url(value)


# Keys written ahead of the entry's own fields in data.json
BASE_KEYS = ("id", "contentType", "title", "createdAt", "updatedAt")


class NormalizedEntry(BaseModel):
    """
    Acyclic projection of a remote entry, persisted as ``data.json``.

    Rich document fields are never part of ``fields``; they are rendered to
    markdown separately.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., description="Remote identifier")
    content_type: str = Field(..., alias="contentType")
    title: str = Field(..., description="Derived display title")
    created_at: Optional[str] = Field(default=None, alias="createdAt")
    updated_at: Optional[str] = Field(default=None, alias="updatedAt")

    fields: Dict[str, Any] = Field(
        default_factory=dict,
        description="Structurally cloned non-document field values"
    )

    def to_data(self) -> Dict[str, Any]:
        """Flatten to the on-disk layout: base keys first, then fields."""
        data: Dict[str, Any] = {
            "id": self.id,
            "contentType": self.content_type,
            "title": self.title,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }
        data.update(self.fields)
        return data

    @classmethod
    def from_data(cls, data: Dict[str, Any]) -> "NormalizedEntry":
        """Inverse of :meth:`to_data`."""
        base = {key: data.get(key) for key in BASE_KEYS}
        fields = {key: value for key, value in data.items() if key not in BASE_KEYS}
        return cls(**base, fields=fields)


@dataclass
class SourceEntry:
    """
    One entry as returned by a source adapter.

    ``fields`` holds the raw remote values with links resolved, so it may be
    cyclic and must not be serialized directly; ``data`` is the safe form.
    """
    title: str
    slug: str
    data: NormalizedEntry
    fields: Dict[str, Any]
    referenced_assets: List[AssetReference] = field(default_factory=list)
    assets: Dict[str, Any] = field(default_factory=dict)


class ContentTypeSummary(BaseModel):
    """
    A content type offered by a remote source, used when initializing a store.
    """

    id: str
    name: str
    fields: List[str] = Field(default_factory=list)


class ToolResult(BaseModel):
    """
    Result of a generated tool: text content, optionally flagged as an error.
    """

    model_config = ConfigDict(populate_by_name=True)

    content: str
    is_error: bool = Field(default=False, alias="isError")

    @classmethod
    def text(cls, content: str) -> "ToolResult":
        return cls(content=content)

    @classmethod
    def error(cls, content: str) -> "ToolResult":
        return cls(content=content, is_error=True)

    def to_response(self) -> Dict[str, Any]:
        """Serialize as ``{"content": ...}`` or ``{"content": ..., "isError": true}``."""
        return self.model_dump(by_alias=True, exclude_defaults=True)
