"""
Error taxonomy for static-mcp.

Configuration and lookup errors raised during build and init are fatal and
carry an actionable message. Serve-time "not found" errors are converted to
error results by the tool handlers and never reach the RPC layer.
"""

from typing import Iterable, Optional


class StaticMCPError(Exception):
    """Base class for all static-mcp errors."""


class ConfigNotFound(StaticMCPError):
    """A configuration file or directory the operation depends on is missing."""


class ConfigInvalid(StaticMCPError):
    """A configuration file exists but violates its schema."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


class UnknownSource(StaticMCPError):
    """No source adapter is registered under the requested name."""

    def __init__(self, source: str, supported: Iterable[str]):
        self.source = source
        self.supported = list(supported)
        super().__init__(
            f'Unknown source: "{source}".\n'
            f"Supported sources: {', '.join(self.supported)}"
        )


class UnknownContentType(StaticMCPError):
    """A content-type filter names types that were never initialized."""

    def __init__(self, unknown: Iterable[str], available: Iterable[str]):
        self.unknown = list(unknown)
        self.available = list(available)
        super().__init__(
            f"Unknown content type(s): {', '.join(self.unknown)}.\n"
            f"Available: {', '.join(self.available)}"
        )


class EntryNotFound(StaticMCPError):
    pass


class ToolNotFound(StaticMCPError):
    pass


class AssetNotFound(StaticMCPError):
    pass


class RenderFailure(StaticMCPError):
    """A rich document could not be converted to markdown."""


class DownloadFailure(StaticMCPError):
    """An asset download did not complete with a 2xx response."""

    def __init__(self, url: str, reason: str, status_code: Optional[int] = None):
        self.url = url
        self.status_code = status_code
        super().__init__(f"Failed to download asset from {url}: {reason}")


class SourceError(StaticMCPError):
    """The remote content source could not be queried."""
