"""
Tests for the Contentful source adapter, against a mocked Delivery API.
"""

import json
import os
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

import httpx
import pytest

from staticmcp.config import ConfigManager
from staticmcp.errors import ConfigNotFound, DownloadFailure, SourceError, UnknownSource
from staticmcp.sources import ContentfulAdapter, get_source_adapter
from tests.factories import asset, document, entry, link, paragraph, text

BASE_PATH = "/spaces/space1/environments/master"


def make_adapter(handler, config_manager=None):
    client = httpx.Client(transport=httpx.MockTransport(handler))
    return ContentfulAdapter(
        space_id="space1",
        access_token="token1",
        client=client,
        config_manager=config_manager or ConfigManager("does-not-exist.yaml"),
    )


def entries_page(items, total=None, included_entries=(), included_assets=()):
    return {
        "total": len(items) if total is None else total,
        "items": list(items),
        "includes": {"Entry": list(included_entries), "Asset": list(included_assets)},
    }


class TestContentfulFetch(unittest.TestCase):
    """Test entry fetching and normalization."""

    def setUp(self):
        self.requests = []
        self.author = entry("a1", "person", {
            "name": "Ann Author",
            "books": [link("Entry", "b1")],
            "photo": link("Asset", "p1"),
            "bio": document(paragraph(text("Writes books."))),
        })
        self.book = entry("b1", "book", {
            "title": "The Book",
            "author": link("Entry", "a1"),
            "cover": link("Asset", "c1"),
        })
        self.photo = asset("p1", "ann.png", "//images.example.com/ann.png", title="Ann")
        self.cover = asset("c1", "cover.png", "//images.example.com/cover.png")

    def handler(self, request):
        self.requests.append(request)
        if request.url.path == f"{BASE_PATH}/entries":
            return httpx.Response(200, json=entries_page(
                [self.author],
                included_entries=[self.book],
                included_assets=[self.photo, self.cover],
            ))
        return httpx.Response(404, json={"message": "not found"})

    def test_request_shape(self):
        adapter = make_adapter(self.handler)
        adapter.fetch_entries("person")

        request = self.requests[0]
        self.assertEqual(request.url.host, "cdn.contentful.com")
        self.assertEqual(request.url.path, f"{BASE_PATH}/entries")
        self.assertEqual(request.url.params["content_type"], "person")
        self.assertEqual(request.url.params["include"], "2")
        self.assertEqual(request.url.params["skip"], "0")
        self.assertEqual(request.url.params["order"], "sys.createdAt,sys.id")
        self.assertEqual(request.headers["Authorization"], "Bearer token1")

    def test_links_are_resolved_into_a_cycle(self):
        adapter = make_adapter(self.handler)
        [result] = adapter.fetch_entries("person")

        book = result.fields["books"][0]
        self.assertEqual(book["sys"]["type"], "Entry")
        self.assertIs(book["fields"]["author"]["fields"], result.fields)

    def test_normalized_data_is_acyclic(self):
        adapter = make_adapter(self.handler)
        [result] = adapter.fetch_entries("person")

        data = result.data.to_data()
        json.dumps(data)

        self.assertEqual(data["id"], "a1")
        self.assertEqual(data["contentType"], "person")
        self.assertEqual(data["title"], "Ann Author")
        self.assertEqual(data["createdAt"], "2024-01-01T00:00:00.000Z")
        self.assertNotIn("bio", data)
        self.assertEqual(data["books"], [
            {"id": "b1", "type": "Entry", "contentType": "book", "title": "The Book"}
        ])
        self.assertEqual(data["photo"]["file"]["fileName"], "ann.png")

    def test_title_slug_and_assets(self):
        adapter = make_adapter(self.handler)
        [result] = adapter.fetch_entries("person")

        self.assertEqual(result.title, "Ann Author")
        self.assertEqual(result.slug, "ann-author")
        self.assertEqual(len(result.referenced_assets), 1)
        self.assertEqual(result.referenced_assets[0].file_name, "ann.png")
        self.assertEqual(result.referenced_assets[0].url, "https://images.example.com/ann.png")

    def test_tool_markdown_from_resolved_fields(self):
        adapter = make_adapter(self.handler)
        [result] = adapter.fetch_entries("person")

        markdown = adapter.build_tool_markdown(result, ["bio", "name"])

        self.assertEqual(markdown, "# Ann Author\n\n## bio\n\nWrites books.\n\n## name\n\nAnn Author\n\n")

    def test_title_fallback_and_slug_collisions(self):
        items = [
            entry("e1", "post", {"title": "Hello World"}),
            entry("e2", "post", {"title": "Hello, world!"}),
            entry("e3", "post", {"slug": "from-slug"}),
            entry("e4", "post", {"body": "untitled"}),
        ]

        def handler(request):
            return httpx.Response(200, json=entries_page(items))

        results = make_adapter(handler).fetch_entries("post")

        self.assertEqual([r.title for r in results], ["Hello World", "Hello, world!", "from-slug", "e4"])
        self.assertEqual([r.slug for r in results], ["hello-world", "hello-world-2", "from-slug", "e4"])

    def test_http_error_raises_source_error(self):
        adapter = make_adapter(lambda request: httpx.Response(401, json={"message": "denied"}))

        with self.assertRaises(SourceError):
            adapter.fetch_entries("person")

    def test_transport_error_raises_source_error(self):
        def handler(request):
            raise httpx.ConnectError("unreachable", request=request)

        with self.assertRaises(SourceError):
            make_adapter(handler).fetch_entries("person")

    def test_fetch_content_types(self):
        def handler(request):
            self.assertEqual(request.url.path, f"{BASE_PATH}/content_types")
            return httpx.Response(200, json={"items": [
                {"sys": {"id": "person"}, "name": "Person",
                 "fields": [{"id": "name"}, {"id": "bio"}, {"id": "legacy", "omitted": True}]},
            ]})

        [summary] = make_adapter(handler).fetch_content_types()

        self.assertEqual(summary.id, "person")
        self.assertEqual(summary.name, "Person")
        self.assertEqual(summary.fields, ["name", "bio"])


class TestContentfulPagination(unittest.TestCase):
    """Test paging through large content types."""

    def test_pages_until_total(self):
        items = [entry(f"e{i}", "post", {"title": f"Post {i}"}) for i in range(3)]
        seen_skips = []

        def handler(request):
            skip = int(request.url.params["skip"])
            limit = int(request.url.params["limit"])
            seen_skips.append(skip)
            return httpx.Response(200, json=entries_page(items[skip:skip + limit], total=len(items)))

        with tempfile.TemporaryDirectory() as temp_dir:
            config_path = Path(temp_dir) / "config.yaml"
            config_path.write_text("contentful:\n  page_size: 2\n", encoding="utf-8")
            results = make_adapter(handler, ConfigManager(str(config_path))).fetch_entries("post")

        self.assertEqual(seen_skips, [0, 2])
        self.assertEqual([r.slug for r in results], ["post-0", "post-1", "post-2"])


class TestContentfulCredentials(unittest.TestCase):
    """Test credential lookup."""

    def test_missing_token_raises(self):
        with patch.dict(os.environ, {}, clear=True):
            with self.assertRaises(ConfigNotFound) as ctx:
                ContentfulAdapter(config_manager=ConfigManager("does-not-exist.yaml"))

        self.assertIn("CONTENTFUL_API_TOKEN", str(ctx.exception))

    def test_missing_space_raises(self):
        with patch.dict(os.environ, {"CONTENTFUL_API_TOKEN": "t"}, clear=True):
            with self.assertRaises(ConfigNotFound) as ctx:
                ContentfulAdapter(config_manager=ConfigManager("does-not-exist.yaml"))

        self.assertIn("SPACE_ID", str(ctx.exception))

    def test_credentials_from_environment(self):
        env = {"CONTENTFUL_API_TOKEN": "env-token", "SPACE_ID": "env-space"}
        with patch.dict(os.environ, env, clear=True):
            adapter = ContentfulAdapter(config_manager=ConfigManager("does-not-exist.yaml"))

        try:
            self.assertEqual(adapter.space_id, "env-space")
            self.assertTrue(adapter.base_url.endswith("/spaces/env-space/environments/master"))
        finally:
            adapter.close()


class TestSourceAdapterRegistry(unittest.TestCase):

    def test_known_source(self):
        adapter = get_source_adapter(
            "contentful",
            space_id="s",
            access_token="t",
            config_manager=ConfigManager("does-not-exist.yaml"),
        )
        with adapter:
            self.assertIsInstance(adapter, ContentfulAdapter)

    def test_unknown_source(self):
        with self.assertRaises(UnknownSource) as ctx:
            get_source_adapter("sanity")

        self.assertEqual(str(ctx.exception), 'Unknown source: "sanity".\nSupported sources: contentful')


def test_download_asset_creates_directories(tmp_path):
    def handler(request):
        assert request.url == "https://images.example.com/ann.png"
        return httpx.Response(200, content=b"png-bytes")

    adapter = make_adapter(handler)
    dest = tmp_path / "nested" / "assets" / "ann.png"

    adapter.download_asset("//images.example.com/ann.png", str(dest))

    assert dest.read_bytes() == b"png-bytes"
    assert list(dest.parent.iterdir()) == [dest]


def test_download_asset_failure_leaves_no_file(tmp_path):
    adapter = make_adapter(lambda request: httpx.Response(404))
    dest = tmp_path / "missing.png"

    with pytest.raises(DownloadFailure) as exc_info:
        adapter.download_asset("https://images.example.com/missing.png", str(dest))

    assert exc_info.value.status_code == 404
    assert list(tmp_path.iterdir()) == []


if __name__ == '__main__':
    unittest.main()
