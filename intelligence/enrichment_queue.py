"""Serialized, rate-limited enrichment of crisis items."""

from __future__ import annotations

import asyncio
from collections import deque
from dataclasses import dataclass, field
from enum import Enum
import logging
import time
from typing import Awaitable, Callable, Deque, Iterable, List, Optional, Tuple, Union

from tenacity import (
    AsyncRetrying,
    retry_if_not_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from config import get_enrichment_settings
from intelligence.analysis import (
    EXECUTIVE_SYSTEM_PROMPT,
    SUMMARY_MAX_TOKENS,
    SUMMARY_TEMPERATURE,
    SYSTEM_PROMPT,
    build_analysis_prompt,
    build_executive_prompt,
    heuristic_analysis,
    parse_analysis_response,
    parse_executive_summary,
)
from intelligence.insights import render_executive_summary
from intelligence.llm.base import BaseLLM
from models import CrisisAnalysis, CrisisItem, EnrichedItem, ResultItem
from utils.exceptions import (
    EnrichmentExhaustedError,
    EnrichmentRateLimitedError,
    InvalidEnrichmentRequestError,
)


logger = logging.getLogger(__name__)

Clock = Callable[[], float]
Sleep = Callable[[float], Awaitable[None]]


class EnrichmentState(str, Enum):
    PENDING = "pending"
    IN_FLIGHT = "in_flight"
    ENRICHED = "enriched"
    FALLBACK = "fallback"


class RequestKind(str, Enum):
    ANALYSIS = "analysis"
    SUMMARY = "summary"


@dataclass
class EnrichmentRequest:
    """
    One queued unit of model work and the future its caller awaits.

    ANALYSIS requests carry ``item`` and resolve to an ``EnrichedItem``;
    SUMMARY requests carry ``items`` and resolve to the briefing text.
    """

    future: "asyncio.Future"
    item: Optional[CrisisItem] = None
    items: Tuple[ResultItem, ...] = ()
    kind: RequestKind = RequestKind.ANALYSIS
    state: EnrichmentState = EnrichmentState.PENDING
    attempts: int = 0
    requeues: int = 0
    last_error: Optional[str] = None

    @property
    def label(self) -> str:
        if self.kind is RequestKind.SUMMARY:
            return f"executive summary of {len(self.items)} items"
        return self.item.id


@dataclass
class RateLimitWindow:
    """
    At most ``capacity`` dispatches in any rolling ``window_sec`` span.

    ``blocked_until`` is set when the API itself reports a rate limit; it
    zeroes the budget until that deadline. Only the queue worker touches this.
    """

    capacity: int
    window_sec: float
    blocked_until: float = 0.0
    _dispatches: Deque[float] = field(default_factory=deque)

    def _prune(self, now: float) -> None:
        while self._dispatches and now - self._dispatches[0] >= self.window_sec:
            self._dispatches.popleft()

    def remaining(self, now: float) -> int:
        if now < self.blocked_until:
            return 0
        self._prune(now)
        return max(0, self.capacity - len(self._dispatches))

    def wait_time(self, now: float) -> float:
        wait = max(0.0, self.blocked_until - now)
        self._prune(now)
        if len(self._dispatches) >= self.capacity:
            wait = max(wait, self._dispatches[0] + self.window_sec - now)
        return wait

    def record_dispatch(self, now: float) -> None:
        self._dispatches.append(now)

    def trip(self, now: float) -> None:
        self.blocked_until = now + self.window_sec


class EnrichmentQueue:
    """
    FIFO queue drained by a single worker task.

    Every submitted item resolves to an ``EnrichedItem``: model analysis when
    the inference API returns a complete answer, heuristic analysis otherwise.
    Executive summaries ride the same queue and fall back to a locally
    rendered briefing.
    Inference calls never overlap and respect the rate-limit window.
    """

    def __init__(
        self,
        llm: Optional[BaseLLM] = None,
        *,
        rate_limit: Optional[int] = None,
        window_sec: Optional[float] = None,
        max_attempts: Optional[int] = None,
        max_requeues: Optional[int] = None,
        request_timeout_sec: Optional[float] = None,
        initial_backoff_sec: Optional[float] = None,
        pace_requests: Optional[bool] = None,
        clock: Clock = time.monotonic,
        sleep: Sleep = asyncio.sleep,
    ):
        settings = get_enrichment_settings()
        self._llm = llm
        self.max_attempts = max(1, int(max_attempts or settings.max_attempts))
        self.max_requeues = max(0, int(settings.max_requeues if max_requeues is None else max_requeues))
        self.request_timeout_sec = float(request_timeout_sec or settings.request_timeout_sec)
        self.initial_backoff_sec = float(
            settings.initial_backoff_sec if initial_backoff_sec is None else initial_backoff_sec
        )
        self.pace_requests = settings.pace_requests if pace_requests is None else bool(pace_requests)
        self._window = RateLimitWindow(
            capacity=max(1, int(rate_limit or settings.rate_limit)),
            window_sec=float(window_sec or settings.window_sec),
        )
        self._clock = clock
        self._sleep = sleep
        self._queue: Deque[EnrichmentRequest] = deque()
        self._worker: Optional[asyncio.Task] = None
        self._closed = False

    @property
    def pending(self) -> int:
        return len(self._queue)

    @property
    def has_model(self) -> bool:
        return self._llm is not None

    def submit(self, item: CrisisItem) -> "asyncio.Future[EnrichedItem]":
        """Queue ``item`` and return the future resolving to its enriched form."""
        if isinstance(item, EnrichedItem):
            raise InvalidEnrichmentRequestError(
                "Item is already enriched",
                {"id": item.id},
            )
        if not isinstance(item, CrisisItem):
            raise InvalidEnrichmentRequestError(
                f"Expected CrisisItem, got {type(item).__name__}"
            )
        return self._enqueue(EnrichmentRequest(future=self._new_future(), item=item))

    def submit_summary(self, items: Iterable[ResultItem]) -> "asyncio.Future[str]":
        """Queue an executive summary of ``items``; resolves to the briefing text."""
        items = tuple(items)
        for entry in items:
            if not isinstance(entry, (CrisisItem, EnrichedItem)):
                raise InvalidEnrichmentRequestError(
                    f"Expected CrisisItem or EnrichedItem, got {type(entry).__name__}"
                )
        return self._enqueue(
            EnrichmentRequest(future=self._new_future(), items=items, kind=RequestKind.SUMMARY)
        )

    async def enrich(self, item: CrisisItem) -> EnrichedItem:
        return await self.submit(item)

    async def enrich_all(self, items: Iterable[CrisisItem]) -> List[EnrichedItem]:
        """Enrich many items; output order matches input order."""
        futures = [self.submit(item) for item in items]
        return [await future for future in futures]

    async def summarize_executive(self, items: Iterable[ResultItem]) -> str:
        return await self.submit_summary(items)

    async def aclose(self) -> None:
        """Stop the worker; anything still queued resolves locally."""
        self._closed = True
        worker = self._worker
        if worker is not None and not worker.done():
            worker.cancel()
            try:
                await worker
            except asyncio.CancelledError:
                pass
        while self._queue:
            self._resolve_fallback(self._queue.popleft(), "queue closed")
        if self._llm is not None:
            await self._llm.aclose()

    def _new_future(self) -> "asyncio.Future":
        if self._closed:
            raise InvalidEnrichmentRequestError("Enrichment queue is closed")
        return asyncio.get_running_loop().create_future()

    def _enqueue(self, request: EnrichmentRequest) -> "asyncio.Future":
        self._queue.append(request)
        self._ensure_worker()
        return request.future

    def _ensure_worker(self) -> None:
        if self._worker is None or self._worker.done():
            self._worker = asyncio.create_task(self._drain())

    async def _drain(self) -> None:
        # the head stays queued until terminal so aclose() can still resolve it
        while self._queue:
            request = self._queue[0]
            requeued = await self._process(request)
            if requeued:
                continue
            self._queue.popleft()
            if self.pace_requests and self._queue and self._llm is not None:
                await self._sleep(self._window.window_sec / self._window.capacity)

    async def _process(self, request: EnrichmentRequest) -> bool:
        """
        Drive one request to a terminal state.

        Returns True when an analysis request hit the API rate limit and stays
        at the head of the queue for another pass. A rate-limited summary
        request resolves locally instead.
        """
        if self._llm is None:
            self._resolve_fallback(request, "no inference client configured")
            return False

        request.state = EnrichmentState.IN_FLIGHT
        try:
            result = await self._call_with_retries(request)
        except EnrichmentRateLimitedError as exc:
            now = self._clock()
            self._window.trip(now)
            request.last_error = str(exc)
            if request.kind is RequestKind.SUMMARY:
                self._resolve_fallback(request, "rate limited")
                return False
            request.requeues += 1
            if request.requeues > self.max_requeues:
                self._resolve_fallback(request, f"still rate limited after {self.max_requeues} requeues")
                return False
            request.state = EnrichmentState.PENDING
            logger.warning(
                f"Rate limited on {request.label}; requeued, budget resets in "
                f"{self._window.window_sec:g}s"
            )
            return True
        except Exception as exc:
            self._resolve_fallback(request, str(exc) or type(exc).__name__)
            return False

        self._resolve(request, result, EnrichmentState.ENRICHED)
        return False

    async def _call_with_retries(self, request: EnrichmentRequest) -> Union[CrisisAnalysis, str]:
        remaining = self.max_attempts - request.attempts
        if remaining <= 0:
            raise EnrichmentExhaustedError(
                f"No attempts left for {request.label}",
                provider=self._llm.provider,
            )

        retrying = AsyncRetrying(
            stop=stop_after_attempt(remaining),
            wait=wait_exponential(
                multiplier=self.initial_backoff_sec,
                max=self.request_timeout_sec,
            ),
            retry=retry_if_not_exception_type(EnrichmentRateLimitedError),
            sleep=self._sleep,
            reraise=True,
        )
        async for attempt in retrying:
            with attempt:
                request.attempts += 1
                try:
                    return await self._dispatch(request)
                except EnrichmentRateLimitedError:
                    request.attempts -= 1
                    raise
                except Exception as exc:
                    request.last_error = str(exc) or type(exc).__name__
                    logger.info(
                        f"Enrichment attempt {request.attempts}/{self.max_attempts} "
                        f"for {request.label} failed: {request.last_error}"
                    )
                    raise
        raise EnrichmentExhaustedError(f"Retries exhausted for {request.label}")

    async def _dispatch(self, request: EnrichmentRequest) -> Union[CrisisAnalysis, str]:
        # a sleep can return early, so re-check the window until it is open
        while True:
            wait = self._window.wait_time(self._clock())
            if wait <= 0:
                break
            logger.info(f"Rate-limit budget spent, waiting {wait:.1f}s")
            await self._sleep(wait)
        self._window.record_dispatch(self._clock())

        if request.kind is RequestKind.SUMMARY:
            content = await asyncio.wait_for(
                self._llm.achat(
                    build_executive_prompt(request.items),
                    system_prompt=EXECUTIVE_SYSTEM_PROMPT,
                    max_tokens=SUMMARY_MAX_TOKENS,
                    temperature=SUMMARY_TEMPERATURE,
                ),
                timeout=self.request_timeout_sec,
            )
            return parse_executive_summary(content)

        content = await asyncio.wait_for(
            self._llm.achat(build_analysis_prompt(request.item), system_prompt=SYSTEM_PROMPT),
            timeout=self.request_timeout_sec,
        )
        return parse_analysis_response(content)

    def _resolve(
        self,
        request: EnrichmentRequest,
        result: Union[CrisisAnalysis, str],
        state: EnrichmentState,
    ) -> None:
        request.state = state
        if request.future.done():
            return
        if request.kind is RequestKind.SUMMARY:
            request.future.set_result(result)
        else:
            request.future.set_result(EnrichedItem(item=request.item, analysis=result))

    def _resolve_fallback(self, request: EnrichmentRequest, reason: str) -> None:
        if request.kind is RequestKind.SUMMARY:
            logger.warning(f"Local {request.label}: {reason}")
            self._resolve(request, render_executive_summary(request.items), EnrichmentState.FALLBACK)
            return
        logger.warning(f"Heuristic analysis for {request.label}: {reason}")
        self._resolve(request, heuristic_analysis(request.item), EnrichmentState.FALLBACK)
