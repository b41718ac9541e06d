"""Tests for the httpx-backed content fetcher."""

import asyncio

import httpx
import pytest

from pwahint.config import FetchConfig
from pwahint.fetcher import FetchError, HttpContentFetcher, file_url_to_path


def mock_transport(status_by_path: dict[str, int]) -> httpx.MockTransport:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/down":
            raise httpx.ConnectError("connection refused", request=request)
        return httpx.Response(
            status_by_path.get(request.url.path, 404),
            json={"name": "App"},
            headers={"X-Agent": request.headers["User-Agent"]},
        )
    return httpx.MockTransport(handler)


def fetch(fetcher: HttpContentFetcher, url: str):
    async def run():
        async with fetcher:
            return await fetcher.fetch(url)
    return asyncio.run(run())


class TestHttpFetch:
    """HTTP(S) URLs go through httpx."""

    def test_status_code_returned(self):
        fetcher = HttpContentFetcher(transport=mock_transport({"/manifest.json": 200}))

        result = fetch(fetcher, "https://example.com/manifest.json")

        assert result.status_code == 200
        assert result.url == "https://example.com/manifest.json"
        assert '"name"' in result.text

    def test_error_status_is_not_an_exception(self):
        fetcher = HttpContentFetcher(transport=mock_transport({}))

        result = fetch(fetcher, "https://example.com/missing.json")

        assert result.status_code == 404

    def test_transport_error_raises_fetch_error(self):
        fetcher = HttpContentFetcher(transport=mock_transport({}))

        with pytest.raises(FetchError, match="connection refused"):
            fetch(fetcher, "https://example.com/down")

    def test_user_agent_from_config(self):
        config = FetchConfig(userAgent="test-agent/1.0")
        captured: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            captured.append(request.headers["User-Agent"])
            return httpx.Response(200)

        fetch(HttpContentFetcher(config, transport=httpx.MockTransport(handler)), "http://example.com/")

        assert captured == ["test-agent/1.0"]

    def test_unsupported_scheme(self):
        fetcher = HttpContentFetcher(transport=mock_transport({}))

        with pytest.raises(FetchError, match="Unsupported URL scheme"):
            fetch(fetcher, "ftp://example.com/manifest.json")


class TestLocalFetch:
    """file: URLs are read from disk without a status code."""

    def test_existing_file(self, tmp_path):
        manifest = tmp_path / "manifest.json"
        manifest.write_text('{"name": "App"}', encoding="utf-8")

        result = fetch(HttpContentFetcher(), manifest.as_uri())

        assert result.status_code is None
        assert result.text == '{"name": "App"}'

    def test_missing_file(self, tmp_path):
        with pytest.raises(FetchError, match="Cannot read"):
            fetch(HttpContentFetcher(), (tmp_path / "nope.json").as_uri())

    def test_file_url_to_path(self, tmp_path):
        path = tmp_path / "with space.json"
        assert file_url_to_path(path.as_uri()) == path
