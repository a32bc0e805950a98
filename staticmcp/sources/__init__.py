"""Content source adapters."""

from typing import Any, Callable, Dict, List

from ..errors import UnknownSource
from .base import BaseSourceAdapter
from .contentful import ContentfulAdapter

_ADAPTERS: Dict[str, Callable[..., BaseSourceAdapter]] = {
    ContentfulAdapter.name: ContentfulAdapter,
}

SUPPORTED_SOURCES: List[str] = list(_ADAPTERS)


def get_source_adapter(source: str, **kwargs: Any) -> BaseSourceAdapter:
    """
    Create the adapter registered under ``source``.

    Args:
        source: Adapter name from the output config
        **kwargs: Passed to the adapter constructor

    Raises:
        UnknownSource: If no adapter has that name
    """
    factory = _ADAPTERS.get(source)
    if factory is None:
        raise UnknownSource(source, SUPPORTED_SOURCES)
    return factory(**kwargs)


__all__ = ["BaseSourceAdapter", "ContentfulAdapter", "SUPPORTED_SOURCES", "get_source_adapter"]
