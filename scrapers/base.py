"""
Base Source Client
Abstract base for every crisis report source
"""
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
import logging

import httpx

from config import get_settings
from models import CrisisItem
from utils.exceptions import (
    SourceAuthError,
    SourceNetworkError,
    SourceParseError,
    SourceTimeoutError,
)

from .classification import (
    RELEVANCE_THRESHOLD,
    detect_crisis_type,
    extract_location,
    relevance_score,
)


logger = logging.getLogger(__name__)


class BaseSourceClient(ABC):
    """
    Source client base class.

    Subclasses fetch raw records from one read API and turn each record into
    a ``CrisisItem``; this class owns classification, relevance filtering and
    the mapping of transport failures onto the ``SourceError`` taxonomy.
    Clients never retry: the aggregator decides what a failure means.
    """

    def __init__(self):
        self.settings = get_settings()
        self._client: Optional[httpx.AsyncClient] = None

    @property
    @abstractmethod
    def name(self) -> str:
        """Human readable source name"""
        pass

    @property
    @abstractmethod
    def default_timeout(self) -> float:
        """Deadline in seconds used when the caller supplies none"""
        pass

    @abstractmethod
    async def _fetch_records(self, timeout: float) -> List[Dict[str, Any]]:
        """Fetch raw records from the remote API"""
        pass

    @abstractmethod
    def _to_item(self, record: Dict[str, Any], index: int) -> Optional[CrisisItem]:
        """Normalize one raw record, or ``None`` to skip it"""
        pass

    def is_configured(self) -> bool:
        return True

    async def fetch(self, timeout: Optional[float] = None) -> List[CrisisItem]:
        """
        Fetch, normalize, classify and relevance-filter crisis items.

        Args:
            timeout: per-call deadline in seconds

        Returns:
            relevant items, most relevant first

        Raises:
            SourceError: one of its timeout/network/auth/parse subclasses
        """
        deadline = float(timeout if timeout is not None else self.default_timeout)
        records = await self._fetch_records(deadline)

        scored = []
        for index, record in enumerate(records):
            try:
                item = self._to_item(record, index)
            except (AttributeError, KeyError, TypeError, ValueError) as exc:
                logger.warning(f"[{self.name}] Skipping malformed record #{index}: {exc}")
                continue
            if item is None:
                continue
            score = relevance_score(item.text)
            if score <= RELEVANCE_THRESHOLD:
                continue
            scored.append((score, item))

        scored.sort(key=lambda pair: pair[0], reverse=True)
        items = [item for _, item in scored]
        self._log_fetch(len(records), len(items))
        return items

    def build_item(
        self,
        *,
        item_id: str,
        text: str,
        source: str,
        timestamp: Any,
        verified: bool,
        classify_text: Optional[str] = None,
        **extra: Any,
    ) -> Optional[CrisisItem]:
        """Classify ``classify_text`` (defaults to ``text``) and build the item"""
        basis = classify_text if classify_text is not None else text
        crisis_type = detect_crisis_type(basis)
        if crisis_type is None:
            return None
        return CrisisItem(
            id=item_id,
            text=text,
            source=source,
            timestamp=timestamp or datetime.now(timezone.utc),
            location=extract_location(basis),
            type=crisis_type,
            verified=verified,
            **extra,
        )

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(follow_redirects=True)
        return self._client

    async def _get_json(
        self,
        url: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
        timeout: float,
    ) -> Any:
        """GET ``url`` and decode JSON, translating failures to SourceError"""
        client = self._get_client()
        try:
            response = await client.get(
                url,
                params=params,
                headers=headers,
                timeout=httpx.Timeout(timeout),
            )
        except httpx.TimeoutException as exc:
            raise SourceTimeoutError(f"{self.name} timeout after {timeout:g}s", source=self.name) from exc
        except httpx.HTTPError as exc:
            raise SourceNetworkError(f"{self.name} request failed: {exc}", source=self.name) from exc

        if response.status_code in (401, 403):
            raise SourceAuthError(
                f"{self.name} rejected credentials",
                source=self.name,
                status=response.status_code,
            )
        if response.status_code >= 400:
            raise SourceNetworkError(
                f"{self.name} HTTP error {response.status_code}",
                source=self.name,
                status=response.status_code,
            )

        try:
            return response.json()
        except ValueError as exc:
            raise SourceParseError(f"{self.name} returned invalid JSON", source=self.name) from exc

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def close(self):
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    def _log_fetch(self, raw_count: int, kept_count: int):
        logger.info(f"[{self.name}] {kept_count}/{raw_count} records kept after relevance filter")
