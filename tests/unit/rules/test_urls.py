"""Tests for manifest URL resolution."""

import pytest

from pwahint.rules.urls import has_scheme, resolve_manifest_url


class TestResolveManifestUrl:
    """Resolve manifest hrefs against the page URL."""

    @pytest.mark.parametrize("href, resource, expected", [
        ("/app.manifest", "https://example.com/page.html", "https://example.com/app.manifest"),
        ("manifest.json", "https://example.com/a/b/page.html", "https://example.com/a/b/manifest.json"),
        ("../manifest.json", "https://example.com/a/b/page.html", "https://example.com/a/manifest.json"),
        ("//cdn.example.org/m.json", "https://example.com/", "https://cdn.example.org/m.json"),
        ("manifest.json", "file:///srv/site/index.html", "file:///srv/site/manifest.json"),
    ])
    def test_relative_references(self, href, resource, expected):
        assert resolve_manifest_url(href, resource) == expected

    def test_absolute_href_kept_verbatim(self):
        href = "https://other.example.net/path/../m.json"
        assert resolve_manifest_url(href, "https://example.com/") == href

    def test_has_scheme(self):
        assert has_scheme("https://example.com/m.json")
        assert has_scheme("data:application/manifest+json,{}")
        assert not has_scheme("/m.json")
        assert not has_scheme("//cdn.example.org/m.json")
