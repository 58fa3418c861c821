"""
Data Aggregator
Concurrent multi-source fetch, dedup, ranking and fixture fallback
"""
import asyncio
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple
import logging
import time

from config import get_settings
from intelligence.enrichment_queue import EnrichmentQueue
from intelligence.insights import summarize
from intelligence.llm import try_get_llm
from models import (
    AggregationResult,
    CrisisItem,
    EnrichedItem,
    InsightsSummary,
    ResultMetadata,
)
from scrapers import BaseSourceClient, DiscussionScraper, NewsScraper
from utils.exceptions import AllSourcesFailedError, SourceTimeoutError

from .dedup import dedup_cross_source, dedup_ids, dedup_intra_source
from .fixtures import (
    FIXTURE_EXECUTIVE_SUMMARY,
    FIXTURE_GENERATED_AT,
    FIXTURE_PROCESSING_TIME_MS,
    FIXTURE_SOURCE,
    fixture_enriched_items,
)
from .scoring import prioritize


logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class DataAggregator:
    """
    Crisis data aggregator.

    Construct once and share. ``fetch_all`` never raises for source failures:
    the worst case is the fixture data set with ``metadata.error`` set. The
    only exception is when fixture fallback is disabled in settings, in which
    case total failure raises ``AllSourcesFailedError``.
    """

    def __init__(
        self,
        news_client: Optional[BaseSourceClient] = None,
        discussion_client: Optional[BaseSourceClient] = None,
        enrichment_queue: Optional[EnrichmentQueue] = None,
        *,
        max_results: Optional[int] = None,
        fixture_fallback_enabled: Optional[bool] = None,
        source_timeouts: Optional[Dict[str, float]] = None,
        clock: Clock = _utc_now,
    ):
        """
        Args:
            news_client: article-search client (default ``NewsScraper``)
            discussion_client: discussion-search client (default ``DiscussionScraper``)
            enrichment_queue: queue used by ``enrich``/``refresh`` (built lazily)
            max_results: items kept after ranking
            fixture_fallback_enabled: fall back to fixtures on total failure
            source_timeouts: per-source deadline overrides, keyed by client name
            clock: wall clock used for recency scoring and timestamps
        """
        settings = get_settings()
        self.news_client = news_client or NewsScraper()
        self.discussion_client = discussion_client or DiscussionScraper()
        self._enrichment_queue = enrichment_queue
        self._owns_queue = enrichment_queue is None
        self.max_results = int(max_results or settings.aggregator.max_results)
        self.fixture_fallback_enabled = (
            settings.aggregator.fixture_fallback_enabled
            if fixture_fallback_enabled is None
            else bool(fixture_fallback_enabled)
        )
        self._source_timeouts = dict(source_timeouts or {})
        self._clock = clock
        self.last_update: Optional[datetime] = None

    @property
    def sources(self) -> List[BaseSourceClient]:
        """Clients in fetch order; cross-source dedup keeps the earlier one"""
        return [self.news_client, self.discussion_client]

    def source_timeout(self, client: BaseSourceClient) -> float:
        return float(self._source_timeouts.get(client.name, client.default_timeout))

    @property
    def enrichment_queue(self) -> EnrichmentQueue:
        if self._enrichment_queue is None:
            self._enrichment_queue = EnrichmentQueue(try_get_llm())
        return self._enrichment_queue

    async def fetch_all(self, use_fixture_data: bool = False) -> AggregationResult:
        """
        Fetch, dedupe, rank and truncate crisis items from every source.

        Args:
            use_fixture_data: skip the network and return the fixture set

        Returns:
            AggregationResult
        """
        started = time.perf_counter()

        if use_fixture_data:
            logger.info("Using fixture crisis data")
            return self._fixture_result()

        try:
            return await self._live_result(started)
        except AllSourcesFailedError as exc:
            if not self.fixture_fallback_enabled:
                raise
            logger.error(f"All sources failed, serving fixture data: {exc.message}")
            return self._fixture_result(error=exc.message, started=started, source_errors=exc.errors)
        except Exception as exc:
            if not self.fixture_fallback_enabled:
                raise AllSourcesFailedError(f"Aggregation failed: {exc}") from exc
            logger.exception("Error aggregating crisis data")
            return self._fixture_result(error=str(exc), started=started)

    async def _run_source_task(self, client: BaseSourceClient) -> Any:
        timeout = self.source_timeout(client)
        try:
            return await asyncio.wait_for(client.fetch(timeout), timeout=timeout)
        except asyncio.TimeoutError:
            exc = SourceTimeoutError(f"{client.name} timeout after {timeout:g}s", source=client.name)
            logger.warning(f"{client.name} source skipped: {exc}")
            return exc
        except Exception as exc:
            logger.warning(f"{client.name} source skipped: {exc}")
            return exc

    async def _live_result(self, started: float) -> AggregationResult:
        clients = self.sources
        logger.info(f"Fetching crisis data from {len(clients)} sources...")
        results = await asyncio.gather(*[self._run_source_task(client) for client in clients])

        merged: List[CrisisItem] = []
        sources_used: List[str] = []
        source_errors: Dict[str, str] = {}
        for client, payload in zip(clients, results):
            if isinstance(payload, Exception):
                source_errors[client.name] = str(payload) or type(payload).__name__
                continue
            unique = dedup_intra_source(payload)
            logger.info(f"{client.name}: {len(unique)} unique items ({len(payload)} fetched)")
            merged.extend(unique)
            sources_used.append(client.name)

        if not sources_used:
            raise AllSourcesFailedError(
                "; ".join(f"{name}: {message}" for name, message in source_errors.items()),
                errors=source_errors,
            )

        ranked = self.rank(merged)
        limited = ranked[: self.max_results]

        self.last_update = self._clock()
        return AggregationResult(
            items=limited,
            metadata=ResultMetadata(
                last_update=self.last_update,
                processing_time_ms=self._elapsed_ms(started),
                sources_used=sources_used,
                total_results=len(ranked),
                limited_results=len(limited),
                source_errors=source_errors,
            ),
        )

    def rank(self, items: Sequence[CrisisItem]) -> List[CrisisItem]:
        """Cross-source dedup then priority sort (no truncation)"""
        unique = dedup_ids(dedup_cross_source(items))
        return prioritize(unique, now=self._clock())

    def _fixture_result(
        self,
        *,
        error: Optional[str] = None,
        started: Optional[float] = None,
        source_errors: Optional[Dict[str, str]] = None,
    ) -> AggregationResult:
        items = prioritize(fixture_enriched_items(), now=self._clock())
        insights = summarize(items, now=FIXTURE_GENERATED_AT)
        self.last_update = self._clock()
        processing_time = FIXTURE_PROCESSING_TIME_MS if started is None else self._elapsed_ms(started)
        return AggregationResult(
            items=items,
            metadata=ResultMetadata(
                last_update=self.last_update,
                processing_time_ms=processing_time,
                sources_used=[FIXTURE_SOURCE],
                error=error,
                source_errors=dict(source_errors or {}),
            ),
            insights=insights.model_copy(update={"executive_summary": FIXTURE_EXECUTIVE_SUMMARY}),
        )

    @staticmethod
    def _elapsed_ms(started: float) -> int:
        return int(round((time.perf_counter() - started) * 1000))

    async def enrich(self, items: Sequence[Any]) -> List[EnrichedItem]:
        """Enrich raw items in order; already-enriched entries pass through"""
        pending = [item for item in items if not isinstance(item, EnrichedItem)]
        enriched = iter(await self.enrichment_queue.enrich_all(pending))
        return [item if isinstance(item, EnrichedItem) else next(enriched) for item in items]

    async def refresh(
        self,
        use_fixture_data: bool = False,
    ) -> Tuple[AggregationResult, InsightsSummary]:
        """
        One refresh cycle: fetch, enrich, summarize.

        Fixture results keep their canned insights. Live results get fresh
        statistics plus an executive summary from the enrichment queue.

        Returns:
            (result with enriched items, insights)
        """
        result = await self.fetch_all(use_fixture_data)
        enriched = await self.enrich(result.items)
        if result.insights is not None:
            return result.model_copy(update={"items": enriched}), result.insights

        insights = summarize(enriched, now=self._clock())
        briefing = await self.enrichment_queue.summarize_executive(enriched)
        insights = insights.model_copy(update={"executive_summary": briefing})
        return result.model_copy(update={"items": enriched, "insights": insights}), insights

    async def close(self):
        for client in self.sources:
            await client.close()
        if self._owns_queue and self._enrichment_queue is not None:
            await self._enrichment_queue.aclose()
            self._enrichment_queue = None

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
