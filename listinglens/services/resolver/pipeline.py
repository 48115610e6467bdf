"""Resolution pipeline: raw URL in, ResolvedMetadata out.

Phases: IDLE → NORMALIZING → EXTRACTING_IDENTIFIER → FETCHING → SCORING →
DONE, or FAILED from any of them. Normalization and identifier errors abort
at once; strategy errors are collected and only reported when the whole
chain has been exhausted.
"""

from __future__ import annotations

import asyncio
import enum
import logging
import time
from typing import Awaitable, Callable

import httpx

from listinglens.config import Settings, settings as default_settings
from listinglens.core.metrics import (
    resolution_duration_seconds,
    resolutions_total,
    strategy_attempts_total,
)
from listinglens.services.resolver.errors import (
    AllStrategiesFailed,
    ResolutionError,
    StrategyFailed,
)
from listinglens.services.resolver.identifier import extract_identifier
from listinglens.services.resolver.models import MetadataCandidate, ResolvedMetadata
from listinglens.services.resolver.normalizer import normalize_url
from listinglens.services.resolver.scorer import select_image
from listinglens.services.resolver.strategies import MetadataStrategy, default_strategies

logger = logging.getLogger(__name__)


class ResolutionPhase(str, enum.Enum):
    IDLE = "idle"
    NORMALIZING = "normalizing"
    EXTRACTING_IDENTIFIER = "extracting_identifier"
    FETCHING = "fetching"
    SCORING = "scoring"
    DONE = "done"
    FAILED = "failed"


class ResolutionPipeline:
    """Drives one resolution. Owns strategy order and short-circuiting.

    A pipeline object is cheap and meant for a single call; it holds no
    state beyond the phase of the call in progress.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        *,
        strategies: list[MetadataStrategy] | None = None,
        settings: Settings | None = None,
        delay: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.client = client
        self.settings = settings or default_settings
        self.strategies = (
            strategies
            if strategies is not None
            else default_strategies(client, settings=self.settings, delay=delay)
        )
        self.phase = ResolutionPhase.IDLE

    def _enter(self, phase: ResolutionPhase) -> None:
        logger.debug("Resolution phase %s -> %s", self.phase.value, phase.value)
        self.phase = phase

    async def _run_strategies(self, url: str) -> tuple[str, MetadataCandidate]:
        failures: list[StrategyFailed] = []
        for strategy in self.strategies:
            try:
                candidate = await strategy.fetch(url)
            except StrategyFailed as e:
                failure = e
            except ResolutionError as e:
                failure = StrategyFailed(strategy.name, e)
            except Exception as e:
                logger.exception("Strategy %s raised unexpectedly", strategy.name)
                failure = StrategyFailed(strategy.name, f"{type(e).__name__}: {e}")
            else:
                strategy_attempts_total.labels(strategy=strategy.name, status="success").inc()
                return strategy.name, candidate

            strategy_attempts_total.labels(strategy=strategy.name, status="failed").inc()
            logger.warning("Strategy %s failed for %s: %s", strategy.name, url, failure.cause)
            failures.append(failure)

        raise AllStrategiesFailed(failures)

    async def run(self, raw_url: str) -> ResolvedMetadata:
        try:
            self._enter(ResolutionPhase.NORMALIZING)
            url = await normalize_url(raw_url, client=self.client, settings=self.settings)

            self._enter(ResolutionPhase.EXTRACTING_IDENTIFIER)
            identifier = extract_identifier(url)

            self._enter(ResolutionPhase.FETCHING)
            strategy_name, candidate = await self._run_strategies(url)

            self._enter(ResolutionPhase.SCORING)
            image = candidate.authoritative_image or select_image(candidate.images)
        except ResolutionError as e:
            e.phase = e.phase or self.phase.value
            self._enter(ResolutionPhase.FAILED)
            raise

        self._enter(ResolutionPhase.DONE)
        return ResolvedMetadata(
            identifier=identifier,
            title=candidate.title or "",
            description=candidate.description or "",
            image=image,
            source_url=url,
            strategy=strategy_name,
        )


async def resolve_product_metadata(
    raw_url: str,
    *,
    client: httpx.AsyncClient | None = None,
    settings: Settings | None = None,
    strategies: list[MetadataStrategy] | None = None,
) -> ResolvedMetadata:
    """Resolve a marketplace listing URL into display metadata.

    Raises a ResolutionError subclass on failure; never returns a partial
    result. When no ``client`` is given one is opened for this call only.
    """
    start = time.monotonic()
    status = "error"
    try:
        if client is not None:
            result = await ResolutionPipeline(
                client, strategies=strategies, settings=settings
            ).run(raw_url)
        else:
            async with httpx.AsyncClient() as own_client:
                result = await ResolutionPipeline(
                    own_client, strategies=strategies, settings=settings
                ).run(raw_url)
        status = "success"
        logger.info(
            "Resolved %s as %s via %s", raw_url.strip(), result.identifier, result.strategy
        )
        return result
    except ResolutionError as e:
        status = e.code.lower()
        logger.info("Resolution of %r failed in %s: %s", raw_url, e.phase, e.message)
        raise
    finally:
        resolutions_total.labels(status=status).inc()
        resolution_duration_seconds.observe(time.monotonic() - start)
