"""
Asset reference extraction.

Walks an entry's fields depth-first (field declaration order) and collects
every linked asset that can be resolved against the fetched asset set.
"""

import logging
from typing import Any, Dict, List, Mapping, Optional, Set

from ..models import AssetReference, is_safe_name
from .values import ValueKind, classify, entry_fields, link_id


def asset_reference(asset: Mapping[str, Any]) -> Optional[AssetReference]:
    """
    Build the reference for a resolved asset, or None if it carries no
    usable file.
    """
    file_info = entry_fields(asset).get("file")
    if not isinstance(file_info, dict):
        return None

    file_name = file_info.get("fileName")
    url = file_info.get("url")
    if not file_name or not url:
        return None
    if not is_safe_name(file_name):
        logging.warning(f"Ignoring asset with unsafe filename {file_name!r}")
        return None
    return AssetReference(file_name=file_name, url=url)


def extract_asset_references(
    fields: Mapping[str, Any],
    assets: Mapping[str, Any]
) -> List[AssetReference]:
    """
    Find the assets linked from a field mapping.

    Args:
        fields: Field name to raw value, links possibly resolved
        assets: Asset id to asset payload, used to resolve the links found

    Returns:
        One AssetReference per distinct asset, in first-occurrence order.
        Links that do not resolve are skipped.
    """
    references: List[AssetReference] = []
    seen: Set[str] = set()

    def walk(value: Any) -> None:
        kind = classify(value)

        if kind == ValueKind.ARRAY:
            for item in value:
                walk(item)

        elif kind == ValueKind.ASSET_LINK:
            asset_id = link_id(value)
            if asset_id is None or asset_id in seen:
                return
            asset = assets.get(asset_id)
            if asset is None:
                logging.debug(f"Skipping unresolved asset link {asset_id}")
                return
            reference = asset_reference(asset)
            if reference is None:
                logging.debug(f"Asset {asset_id} has no file data, skipping")
                return
            seen.add(asset_id)
            references.append(reference)

        elif kind == ValueKind.DOCUMENT_NODE:
            content = value.get("content")
            if isinstance(content, list):
                for child in content:
                    walk(child)
            data = value.get("data")
            if isinstance(data, dict) and data.get("target") is not None:
                walk(data["target"])

        elif kind == ValueKind.OBJECT:
            for item in value.values():
                walk(item)

        # Entry links are not followed: assets of linked entries belong to
        # those entries.

    for value in fields.values():
        walk(value)

    return references


def build_asset_lookup(assets: List[Dict[str, Any]]) -> Dict[str, Dict[str, Any]]:
    """Index asset payloads by id."""
    lookup: Dict[str, Dict[str, Any]] = {}
    for asset in assets:
        asset_id = link_id(asset)
        if asset_id:
            lookup[asset_id] = asset
    return lookup
