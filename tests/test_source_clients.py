from __future__ import annotations

import httpx
import pytest

from config.settings import NewsSettings
from models import CrisisType
from scrapers import DiscussionScraper, NewsScraper, combine_article_text
from utils.exceptions import (
    SourceAuthError,
    SourceNetworkError,
    SourceParseError,
    SourceTimeoutError,
)


def _news_scraper() -> NewsScraper:
    scraper = NewsScraper()
    scraper._news_settings = NewsSettings(api_key="test-key")
    return scraper


def test_combine_article_text_strips_citations() -> None:
    text = combine_article_text("Flood  warning [1]", "Rivers   rising [Reuters]")
    assert text == "Flood warning . Rivers rising"
    assert combine_article_text("Quake", None) == "Quake"


@pytest.mark.asyncio
async def test_news_fetch_filters_and_normalizes(monkeypatch) -> None:
    scraper = _news_scraper()
    captured = {}

    async def _fake_get_json(url, *, params=None, headers=None, timeout):
        captured.update(url=url, params=params, headers=headers, timeout=timeout)
        return {
            "status": "ok",
            "articles": [
                {
                    "title": "Storm expected this weekend",
                    "description": "Forecasters say rain is likely.",
                    "url": "https://example.com/storm",
                    "source": {"name": "Weather Desk"},
                    "publishedAt": "2026-10-17T06:00:00Z",
                },
                {
                    "title": "Earthquake kills dozens in Hualien, Taiwan",
                    "description": "Devastating quake destroyed buildings; emergency evacuation underway.",
                    "url": "https://example.com/quake",
                    "source": {"name": "Reuters"},
                    "publishedAt": "2026-10-17T07:00:00Z",
                    "author": "Desk",
                },
                {"title": "Flood without description", "description": None},
                {
                    "title": "Stock markets rally",
                    "description": "Investors cheer earnings.",
                    "url": "https://example.com/stocks",
                    "source": {"name": "Finance"},
                    "publishedAt": "2026-10-17T07:00:00Z",
                },
            ],
        }

    monkeypatch.setattr(scraper, "_get_json", _fake_get_json)

    items = await scraper.fetch(timeout=3.0)

    assert captured["url"].endswith("/everything")
    assert captured["headers"] == {"X-Api-Key": "test-key"}
    assert captured["params"]["q"] == "earthquake OR flood OR hurricane OR wildfire OR tsunami"
    assert captured["params"]["sortBy"] == "publishedAt"
    assert captured["timeout"] == 3.0

    assert len(items) == 1
    item = items[0]
    assert item.id.startswith("news_")
    assert item.type == CrisisType.EARTHQUAKE
    assert item.location == "Hualien, Taiwan"
    assert item.source == "Reuters"
    assert item.verified is True
    assert item.url == "https://example.com/quake"


@pytest.mark.asyncio
async def test_news_ids_are_stable_across_fetches(monkeypatch) -> None:
    scraper = _news_scraper()

    async def _fake_get_json(url, *, params=None, headers=None, timeout):
        return {
            "articles": [
                {
                    "title": "Flood emergency declared",
                    "description": "Evacuation ordered as rivers burst banks, homes destroyed.",
                    "url": "https://example.com/flood",
                    "source": {"name": "BBC News"},
                    "publishedAt": "2026-10-17T07:00:00Z",
                }
            ]
        }

    monkeypatch.setattr(scraper, "_get_json", _fake_get_json)

    first = await scraper.fetch()
    second = await scraper.fetch()
    assert [item.id for item in first] == [item.id for item in second]


@pytest.mark.asyncio
async def test_news_drops_records_scoring_exactly_the_threshold(monkeypatch) -> None:
    scraper = _news_scraper()

    def _article(title: str, url: str) -> dict:
        return {
            "title": title,
            "description": "Clouds over the valley",
            "url": url,
            "source": {"name": "Local Desk"},
            "publishedAt": "2026-10-17T07:00:00Z",
        }

    async def _fake_get_json(url, *, params=None, headers=None, timeout):
        # flood + storm score 0.3; the extra "damage" lifts the second past it
        return {
            "articles": [
                _article("Flood and storm", "https://example.com/edge"),
                _article("Flood and storm damage", "https://example.com/damage"),
            ]
        }

    monkeypatch.setattr(scraper, "_get_json", _fake_get_json)

    items = await scraper.fetch()

    assert [item.url for item in items] == ["https://example.com/damage"]


@pytest.mark.asyncio
async def test_news_without_key_is_auth_error() -> None:
    scraper = NewsScraper()
    scraper._news_settings = NewsSettings(api_key=None)
    with pytest.raises(SourceAuthError):
        await scraper.fetch()


@pytest.mark.asyncio
async def test_news_rejects_payload_without_articles(monkeypatch) -> None:
    scraper = _news_scraper()

    async def _fake_get_json(url, *, params=None, headers=None, timeout):
        return {"status": "error", "message": "bad request"}

    monkeypatch.setattr(scraper, "_get_json", _fake_get_json)
    with pytest.raises(SourceParseError):
        await scraper.fetch()


@pytest.mark.asyncio
async def test_discussion_fetch_parses_listing(monkeypatch) -> None:
    scraper = DiscussionScraper()

    async def _fake_get_json(url, *, params=None, headers=None, timeout):
        assert "/r/" in url and url.endswith("/search.json")
        assert params["sort"] == "new"
        assert "User-Agent" in headers
        return {
            "data": {
                "children": [
                    {
                        "data": {
                            "id": "abc123",
                            "title": "Wildfire forces evacuation near Paradise",
                            "selftext": "Emergency crews report homes destroyed.",
                            "subreddit": "worldnews",
                            "created_utc": 1792224000,
                            "permalink": "/r/worldnews/comments/abc123/",
                            "author": "reporter",
                        }
                    },
                    {"data": {"id": "zzz", "title": "Cat pictures thread"}},
                    {"data": {"id": "bad", "title": "Flood emergency", "created_utc": "soon"}},
                ]
            }
        }

    monkeypatch.setattr(scraper, "_get_json", _fake_get_json)

    items = await scraper.fetch()

    assert [item.id for item in items] == ["reddit_abc123"]
    item = items[0]
    assert item.source == "r/worldnews"
    assert item.verified is False
    assert item.type == CrisisType.WILDFIRE
    assert item.location == "Paradise"
    assert item.url == "https://reddit.com/r/worldnews/comments/abc123/"
    assert item.author == "u/reporter"


@pytest.mark.asyncio
async def test_discussion_rejects_unexpected_payload(monkeypatch) -> None:
    scraper = DiscussionScraper()

    async def _fake_get_json(url, *, params=None, headers=None, timeout):
        return {"error": 404}

    monkeypatch.setattr(scraper, "_get_json", _fake_get_json)
    with pytest.raises(SourceParseError):
        await scraper.fetch()


def _mock_transport_client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "status,expected",
    [(401, SourceAuthError), (403, SourceAuthError), (500, SourceNetworkError), (404, SourceNetworkError)],
)
async def test_get_json_maps_http_status(status, expected) -> None:
    scraper = DiscussionScraper()
    scraper._client = _mock_transport_client(lambda request: httpx.Response(status, json={}))

    with pytest.raises(expected) as excinfo:
        await scraper._get_json("https://example.com/search.json", timeout=1.0)
    assert excinfo.value.source == scraper.name
    await scraper.close()


@pytest.mark.asyncio
async def test_get_json_maps_timeout_and_transport_errors() -> None:
    scraper = DiscussionScraper()

    def _timeout(request):
        raise httpx.ReadTimeout("slow", request=request)

    scraper._client = _mock_transport_client(_timeout)
    with pytest.raises(SourceTimeoutError):
        await scraper._get_json("https://example.com/search.json", timeout=1.0)

    def _refused(request):
        raise httpx.ConnectError("refused", request=request)

    scraper._client = _mock_transport_client(_refused)
    with pytest.raises(SourceNetworkError):
        await scraper._get_json("https://example.com/search.json", timeout=1.0)
    await scraper.close()


@pytest.mark.asyncio
async def test_get_json_rejects_invalid_json() -> None:
    scraper = DiscussionScraper()
    scraper._client = _mock_transport_client(
        lambda request: httpx.Response(200, content=b"<html>not json</html>")
    )
    with pytest.raises(SourceParseError):
        await scraper._get_json("https://example.com/search.json", timeout=1.0)
    await scraper.close()
