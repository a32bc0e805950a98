"""
Base source adapter interface for static-mcp.

This module defines the abstract interface that all content sources must implement.
"""

from abc import ABC, abstractmethod
from typing import List

from ..models import ContentTypeSummary, SourceEntry
from ..normalize import build_tool_markdown


class BaseSourceAdapter(ABC):
    """
    Abstract base class for all content source adapters.

    Each adapter fetches entries of one content type from a remote system
    (Contentful, ...) and converts them into SourceEntry objects: a
    normalized, acyclic ``data`` projection plus the raw field values used
    to render tool markdown.
    """

    #: Name the adapter is registered under in the output config
    name: str = ""

    @abstractmethod
    def fetch_entries(self, content_type: str) -> List[SourceEntry]:
        """
        Retrieve all entries of a content type from the source.

        Args:
            content_type: Content type identifier in the source

        Returns:
            List of SourceEntry objects in source order
        """
        pass

    @abstractmethod
    def fetch_content_types(self) -> List[ContentTypeSummary]:
        """
        List the content types the source offers.

        Returns:
            List of ContentTypeSummary objects
        """
        pass

    @abstractmethod
    def download_asset(self, url: str, dest_path: str) -> None:
        """
        Download an asset to a local path, creating missing directories.

        Raises:
            DownloadFailure: If the remote fetch does not succeed
        """
        pass

    def build_tool_markdown(self, entry: SourceEntry, field_names: List[str]) -> str:
        """
        Build the markdown for one tool from an entry's raw fields.

        Args:
            entry: The entry to render
            field_names: Fields of the tool, in output order

        Returns:
            Markdown text
        """
        return build_tool_markdown(entry.title, entry.fields, field_names, entry.assets)

    def close(self) -> None:
        """Release any resources held by the adapter."""

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()
