"""
News Scraper
Article search over a NewsAPI-compatible ``/everything`` endpoint
"""
import hashlib
import re
from typing import Any, Dict, List, Optional
import logging

from models import CrisisItem
from utils.exceptions import SourceAuthError, SourceParseError

from .base import BaseSourceClient
from .classification import CRISIS_KEYWORDS


logger = logging.getLogger(__name__)

_CITATION_RE = re.compile(r"\[.*?\]")
_WHITESPACE_RE = re.compile(r"\s+")


def combine_article_text(title: str, description: Optional[str]) -> str:
    """Headline plus description, citations stripped and whitespace collapsed"""
    text = str(title or "")
    if description:
        text += ". " + str(description)
    text = _CITATION_RE.sub("", text)
    return _WHITESPACE_RE.sub(" ", text).strip()


class NewsScraper(BaseSourceClient):
    """
    Article search client.

    Queries the first five crisis keywords OR-joined, newest first. Every
    article is treated as a verified report.
    """

    QUERY_KEYWORDS = CRISIS_KEYWORDS[:5]

    def __init__(self):
        super().__init__()
        self._news_settings = self.settings.news

    @property
    def name(self) -> str:
        return "News API"

    @property
    def default_timeout(self) -> float:
        return float(self._news_settings.timeout_sec)

    def is_configured(self) -> bool:
        return bool(self._news_settings.api_key)

    def build_params(self) -> Dict[str, Any]:
        return {
            "q": " OR ".join(self.QUERY_KEYWORDS),
            "sortBy": "publishedAt",
            "pageSize": self._news_settings.page_size,
            "language": self._news_settings.language,
        }

    async def _fetch_records(self, timeout: float) -> List[Dict[str, Any]]:
        if not self.is_configured():
            raise SourceAuthError("News API key not configured", source=self.name)

        logger.info(f"[{self.name}] Fetching crisis articles")
        payload = await self._get_json(
            f"{self._news_settings.base_url.rstrip('/')}/everything",
            params=self.build_params(),
            headers={"X-Api-Key": str(self._news_settings.api_key)},
            timeout=timeout,
        )

        if not isinstance(payload, dict) or not isinstance(payload.get("articles"), list):
            raise SourceParseError("Invalid API response format", source=self.name)
        return payload["articles"]

    def _to_item(self, record: Dict[str, Any], index: int) -> Optional[CrisisItem]:
        if not isinstance(record, dict):
            return None
        title = record.get("title")
        description = record.get("description")
        if not title or not description:
            return None

        url = record.get("url")
        key = str(url or title)
        headline = f"{title} {description}"
        return self.build_item(
            item_id=f"news_{hashlib.sha1(key.encode('utf-8')).hexdigest()[:12]}",
            text=combine_article_text(title, description),
            source=(record.get("source") or {}).get("name") or "Unknown Source",
            timestamp=record.get("publishedAt"),
            verified=True,
            classify_text=headline,
            url=url,
            image_url=record.get("urlToImage"),
            author=record.get("author"),
            title=title,
        )
