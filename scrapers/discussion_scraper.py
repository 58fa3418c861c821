"""
Discussion Scraper
Crisis discussions from Reddit's public search endpoint
"""
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
import logging

from models import CrisisItem
from utils.exceptions import SourceParseError

from .base import BaseSourceClient
from .classification import CRISIS_KEYWORDS


logger = logging.getLogger(__name__)

SELFTEXT_LIMIT = 500


class DiscussionScraper(BaseSourceClient):
    """
    Discussion search client.

    Community posts are unverified by definition. The outlet name is the
    subreddit (``r/<name>``).
    """

    def __init__(self):
        super().__init__()
        self._discussion_settings = self.settings.discussion

    @property
    def name(self) -> str:
        return "Reddit API"

    @property
    def default_timeout(self) -> float:
        return float(self._discussion_settings.timeout_sec)

    def build_params(self) -> Dict[str, Any]:
        return {
            "q": " OR ".join(CRISIS_KEYWORDS[:5]),
            "sort": "new",
            "t": "day",
            "limit": self._discussion_settings.page_size,
            "restrict_sr": "on",
        }

    async def _fetch_records(self, timeout: float) -> List[Dict[str, Any]]:
        subreddits = "+".join(self._discussion_settings.subreddits)
        logger.info(f"[{self.name}] Searching r/{subreddits}")

        payload = await self._get_json(
            f"{self._discussion_settings.base_url.rstrip('/')}/r/{subreddits}/search.json",
            params=self.build_params(),
            headers={"User-Agent": self._discussion_settings.user_agent},
            timeout=timeout,
        )

        try:
            children = payload["data"]["children"]
        except (KeyError, TypeError) as exc:
            raise SourceParseError("Invalid API response format", source=self.name) from exc
        if not isinstance(children, list):
            raise SourceParseError("Invalid API response format", source=self.name)

        return [child.get("data") or {} for child in children if isinstance(child, dict)]

    def _to_item(self, record: Dict[str, Any], index: int) -> Optional[CrisisItem]:
        title = str(record.get("title") or "").strip()
        post_id = record.get("id")
        if not title or not post_id:
            return None

        text = title
        selftext = str(record.get("selftext") or "").strip()
        if selftext:
            text += ". " + selftext[:SELFTEXT_LIMIT]
        text = " ".join(text.split())

        created = record.get("created_utc")
        timestamp = (
            datetime.fromtimestamp(float(created), tz=timezone.utc) if created is not None else None
        )
        permalink = record.get("permalink")
        subreddit = record.get("subreddit") or "reddit"

        return self.build_item(
            item_id=f"reddit_{post_id}",
            text=text,
            source=f"r/{subreddit}",
            timestamp=timestamp,
            verified=False,
            url=f"https://reddit.com{permalink}" if permalink else record.get("url"),
            author=f"u/{record['author']}" if record.get("author") else None,
            title=title,
        )
