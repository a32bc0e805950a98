"""On-disk content store."""

from .manager import ContentStore, dump_json, is_safe_name

__all__ = ["ContentStore", "dump_json", "is_safe_name"]
