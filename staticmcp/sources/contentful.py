"""
Contentful source adapter for static-mcp.

Talks to the Contentful Content Delivery API with httpx, resolves linked
entries and assets in place (the way the official SDKs do, so the resulting
graph may be cyclic) and normalizes every entry through the cloner, asset
extractor and renderer.
"""

import logging
import os
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

import httpx

from ..config import ConfigManager, config
from ..errors import ConfigNotFound, DownloadFailure, SourceError
from ..models import ContentTypeSummary, NormalizedEntry, SourceEntry, absolute_url
from ..normalize import SlugAllocator, build_asset_lookup, clone_value, extract_asset_references, is_document
from ..normalize.values import entry_fields, link_id
from .base import BaseSourceAdapter

TOKEN_ENV = "CONTENTFUL_API_TOKEN"
SPACE_ENV = "SPACE_ID"

# Fields tried, in order, for an entry's display title
TITLE_FIELDS = ("title", "name", "slug")

ENTRY_ORDER = "sys.createdAt,sys.id"


class ContentfulAdapter(BaseSourceAdapter):
    """
    Source adapter for a Contentful space.
    """

    name = "contentful"

    def __init__(
        self,
        space_id: Optional[str] = None,
        access_token: Optional[str] = None,
        environment: Optional[str] = None,
        client: Optional[httpx.Client] = None,
        config_manager: Optional[ConfigManager] = None
    ):
        """
        Initialize the Contentful adapter.

        Args:
            space_id: Space id (defaults to config value, then $SPACE_ID)
            access_token: Delivery API token (defaults to config value, then
                $CONTENTFUL_API_TOKEN)
            environment: Environment id (defaults to config value)
            client: Optional preconfigured httpx client
            config_manager: Configuration to read defaults from

        Raises:
            ConfigNotFound: If no token or space id can be found
        """
        cfg = config_manager or config
        access_token = access_token or cfg.contentful_access_token or os.environ.get(TOKEN_ENV)
        space_id = space_id or cfg.contentful_space_id or os.environ.get(SPACE_ENV)

        if not access_token:
            raise ConfigNotFound(
                f"{TOKEN_ENV} environment variable is not set.\n"
                "Set it in your .env file or export it in your shell."
            )
        if not space_id:
            raise ConfigNotFound(
                f"{SPACE_ENV} environment variable is not set.\n"
                "Set it in your .env file or export it in your shell."
            )

        self.space_id = space_id
        self.environment = environment or cfg.contentful_environment
        self.base_url = f"https://{cfg.contentful_host}/spaces/{space_id}/environments/{self.environment}"
        self.include_depth = cfg.include_depth
        self.page_size = cfg.page_size
        self._headers = {"Authorization": f"Bearer {access_token}"}
        self._owns_client = client is None
        self.client = client or httpx.Client(timeout=cfg.request_timeout)

    def close(self) -> None:
        if self._owns_client:
            self.client.close()

    def _get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """
        Make a request to the Delivery API.

        Raises:
            SourceError: If the request fails or returns a non-2xx status
        """
        try:
            response = self.client.get(f"{self.base_url}{path}", params=params, headers=self._headers)
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as e:
            raise SourceError(
                f"Contentful request {path} failed: {e.response.status_code} {e.response.reason_phrase}"
            ) from e
        except httpx.RequestError as e:
            raise SourceError(f"Failed to connect to Contentful: {e}") from e
        except ValueError as e:
            raise SourceError(f"Contentful returned invalid JSON for {path}: {e}") from e

    def fetch_content_types(self) -> List[ContentTypeSummary]:
        response = self._get("/content_types", {"limit": 1000})
        return [
            ContentTypeSummary(
                id=item["sys"]["id"],
                name=item.get("name") or item["sys"]["id"],
                fields=[field["id"] for field in item.get("fields", []) if not field.get("omitted")]
            )
            for item in response.get("items", [])
        ]

    def fetch_entries(self, content_type: str) -> List[SourceEntry]:
        """
        Fetch every entry of a content type, paging through the API.

        Args:
            content_type: Content type id

        Returns:
            List of SourceEntry objects, ordered by creation time
        """
        items: List[Dict[str, Any]] = []
        included_entries: List[Dict[str, Any]] = []
        included_assets: List[Dict[str, Any]] = []

        skip = 0
        while True:
            page = self._get("/entries", {
                "content_type": content_type,
                "include": self.include_depth,
                "limit": self.page_size,
                "skip": skip,
                "order": ENTRY_ORDER,
            })
            page_items = page.get("items") or []
            includes = page.get("includes") or {}
            items.extend(page_items)
            included_entries.extend(includes.get("Entry") or [])
            included_assets.extend(includes.get("Asset") or [])

            skip += len(page_items)
            if not page_items or skip >= page.get("total", skip):
                break
            logging.debug(f"Fetched {skip} of {page['total']} {content_type} entries")

        assets = build_asset_lookup(included_assets)
        self._resolve_links(included_entries + items, assets)
        logging.info(f"Fetched {len(items)} {content_type} entries and {len(assets)} assets")

        slugs = SlugAllocator(content_type)
        return [self._to_source_entry(item, content_type, assets, slugs) for item in items]

    def _to_source_entry(
        self,
        item: Dict[str, Any],
        content_type: str,
        assets: Dict[str, Dict[str, Any]],
        slugs: SlugAllocator
    ) -> SourceEntry:
        fields = entry_fields(item)
        sys_data = item.get("sys") or {}
        entry_id = sys_data.get("id", "")

        title = next((str(fields[key]) for key in TITLE_FIELDS if fields.get(key)), entry_id)
        slug = slugs.allocate(title, entry_id)

        data = NormalizedEntry(
            id=entry_id,
            content_type=content_type,
            title=title,
            created_at=sys_data.get("createdAt"),
            updated_at=sys_data.get("updatedAt"),
            fields={key: clone_value(value) for key, value in fields.items() if not is_document(value)}
        )

        return SourceEntry(
            title=title,
            slug=slug,
            data=data,
            fields=fields,
            referenced_assets=extract_asset_references(fields, assets),
            assets=assets
        )

    def _resolve_links(self, entries: Iterable[Dict[str, Any]], assets: Dict[str, Dict[str, Any]]) -> None:
        """
        Replace link objects inside entry fields with the linked payloads.

        Every entry shares the same dict objects, so two entries linking to
        each other end up in a reference cycle. Links to entries or assets
        outside the fetched set are left as they are.
        """
        index: Dict[str, Dict[str, Any]] = {}
        for entry in entries:
            entry_id = link_id(entry)
            if entry_id:
                index[entry_id] = entry

        def resolve(value: Any) -> Any:
            if isinstance(value, list):
                return [resolve(item) for item in value]
            if not isinstance(value, dict):
                return value

            sys_data = value.get("sys")
            if isinstance(sys_data, dict) and sys_data.get("type") == "Link":
                if sys_data.get("linkType") == "Entry":
                    return index.get(sys_data.get("id"), value)
                if sys_data.get("linkType") == "Asset":
                    return assets.get(sys_data.get("id"), value)
                return value
            return {key: resolve(item) for key, item in value.items()}

        for entry in index.values():
            if isinstance(entry.get("fields"), dict):
                entry["fields"] = {key: resolve(value) for key, value in entry["fields"].items()}

    def download_asset(self, url: str, dest_path: str) -> None:
        """
        Download an asset to ``dest_path``.

        The payload is written to a temporary file first, so an interrupted
        download never leaves a file that looks complete.

        Raises:
            DownloadFailure: On a transport error or a non-2xx response
        """
        dest = Path(dest_path)
        dest.parent.mkdir(parents=True, exist_ok=True)
        partial = dest.with_name(dest.name + ".part")
        url = absolute_url(url)

        try:
            with self.client.stream("GET", url, follow_redirects=True) as response:
                if not response.is_success:
                    raise DownloadFailure(url, response.reason_phrase or "request failed", response.status_code)
                with open(partial, 'wb') as f:
                    for chunk in response.iter_bytes():
                        f.write(chunk)
            partial.replace(dest)
        except httpx.RequestError as e:
            raise DownloadFailure(url, str(e)) from e
        finally:
            if partial.exists():
                partial.unlink()

        logging.info(f"Downloaded asset {dest.name}")
