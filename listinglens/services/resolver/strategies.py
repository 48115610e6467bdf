"""Metadata fetch strategies.

Strategy chain (run in this order by the pipeline):
1. markup:   scan the listing markup for the main product image element
2. preview:  read link-preview tags, rotating through preview-bot identities
3. generic:  one plain browser fetch, accepts whatever it finds

Every strategy exposes ``fetch(url) -> MetadataCandidate`` and raises
``StrategyFailed`` instead of returning partial garbage. None of them
retries; the next strategy in the chain is the retry.
"""

from __future__ import annotations

import asyncio
import logging
import re
from abc import ABC, abstractmethod
from typing import Awaitable, Callable

import httpx

from listinglens.config import Settings, settings as default_settings
from listinglens.services.resolver.errors import NetworkTimeout, StrategyFailed
from listinglens.services.resolver.identities import BROWSER, PREVIEW_ROTATION, ClientIdentity
from listinglens.services.resolver.models import MetadataCandidate
from listinglens.services.resolver.preview import parse_preview
from listinglens.services.resolver.scorer import is_decorative

logger = logging.getLogger(__name__)

_ROBOT_CHECK_MARKERS = [
    "Type the characters you see in this image",
    "Sorry, we just need to make sure you're not a robot",
    "api-services-support@amazon",
    "Enter the characters you see below",
    "/errors/validateCaptcha",
]


def _looks_like_robot_check(html: str) -> bool:
    return any(marker in html for marker in _ROBOT_CHECK_MARKERS)


async def fetch_html(
    client: httpx.AsyncClient,
    url: str,
    *,
    strategy: str,
    identity: ClientIdentity,
    timeout: float,
    accept_language: str | None = None,
) -> str:
    """GET ``url`` as ``identity`` and return the body.

    Transport errors, timeouts, non-200 responses and robot-check pages all
    become ``StrategyFailed`` for ``strategy``.
    """
    try:
        resp = await client.get(
            url,
            headers=identity.headers(accept_language),
            follow_redirects=True,
            timeout=timeout,
        )
    except httpx.TimeoutException:
        raise StrategyFailed(strategy, NetworkTimeout(url, timeout))
    except httpx.HTTPError as e:
        raise StrategyFailed(strategy, f"{type(e).__name__}: {e}")

    if resp.status_code != 200:
        raise StrategyFailed(strategy, f"HTTP {resp.status_code} as {identity.name}")

    html = resp.text
    if _looks_like_robot_check(html):
        raise StrategyFailed(strategy, f"robot check page served to {identity.name}")
    return html


class MetadataStrategy(ABC):
    """One way of getting listing metadata."""

    name: str = "strategy"

    @abstractmethod
    async def fetch(self, url: str) -> MetadataCandidate:
        """Return a candidate or raise StrategyFailed."""
        ...


# ═══════════════════════════════════════════════════════════════════
#  Strategy B: link-preview tags with identity rotation
# ═══════════════════════════════════════════════════════════════════


def has_usable_preview(candidate: MetadataCandidate) -> bool:
    """A title plus at least one image the scorer would not throw out."""
    return bool(candidate.title) and any(not is_decorative(u) for u in candidate.images)


class PreviewScanStrategy(MetadataStrategy):
    name = "preview"

    def __init__(
        self,
        client: httpx.AsyncClient,
        *,
        identities: tuple[ClientIdentity, ...] = PREVIEW_ROTATION,
        delay: Callable[[float], Awaitable[None]] = asyncio.sleep,
        settings: Settings | None = None,
    ):
        cfg = settings or default_settings
        self.client = client
        self.identities = identities
        self.delay = delay
        self.delay_seconds = cfg.IDENTITY_ROTATION_DELAY
        self.timeout = cfg.PREVIEW_SCAN_TIMEOUT
        self.accept_language = cfg.ACCEPT_LANGUAGE

    async def fetch(self, url: str) -> MetadataCandidate:
        reasons: list[str] = []
        for index, identity in enumerate(self.identities):
            if index:
                await self.delay(self.delay_seconds)

            logger.debug("Preview scan of %s as %s", url, identity.name)
            try:
                html = await fetch_html(
                    self.client,
                    url,
                    strategy=self.name,
                    identity=identity,
                    timeout=self.timeout,
                    accept_language=self.accept_language,
                )
            except StrategyFailed as e:
                reasons.append(str(e.cause))
                continue

            candidate = parse_preview(html, url)
            if has_usable_preview(candidate):
                logger.info("Preview scan succeeded as %s for %s", identity.name, url)
                return candidate
            reasons.append(f"{identity.name}: no title and product image in preview tags")

        raise StrategyFailed(self.name, "; ".join(reasons) or "no client identities configured")


# ═══════════════════════════════════════════════════════════════════
#  Strategy A: targeted markup scan for the main listing image
# ═══════════════════════════════════════════════════════════════════

_IMAGE_HOST = r"https://[\w\-.]+\.(?:media-)?amazon\.com/images/"
_SSL_IMAGE_HOST = r"https://[\w\-.]+\.ssl-images-amazon\.com/images/"

# Highest confidence first: the landing image element itself, then any
# product-path image carrying a size modifier, then the legacy CDN host.
LANDING_IMAGE_PATTERNS = [
    re.compile(rf'data-src="({_IMAGE_HOST}[^"]+)"[^>]*id="landingImage"', re.IGNORECASE),
    re.compile(rf'src="({_IMAGE_HOST}[^"]+)"[^>]*id="landingImage"', re.IGNORECASE),
    re.compile(rf'id="landingImage"[^>]*data-src="({_IMAGE_HOST}[^"]+)"', re.IGNORECASE),
    re.compile(rf'id="landingImage"[^>]*src="({_IMAGE_HOST}[^"]+)"', re.IGNORECASE),
    re.compile(rf'src="({_IMAGE_HOST}I/[^"]+\._[^"]*\.(?:jpg|jpeg|png|webp)[^"]*)"', re.IGNORECASE),
    re.compile(rf'data-src="({_SSL_IMAGE_HOST}[^"]+)"', re.IGNORECASE),
    re.compile(rf'src="({_SSL_IMAGE_HOST}[^"]+)"', re.IGNORECASE),
]

# "._SL500_" and compound modifiers such as "._AC_SL1500_"
_SIZE_MODIFIER_RE = re.compile(r"\._(?:[A-Z0-9]+_)*SL\d+_")


def strip_size_token(image_url: str) -> str:
    """Drop the size-limiting modifier so the CDN serves native resolution."""
    return _SIZE_MODIFIER_RE.sub("", image_url, count=1)


def find_landing_image(html: str) -> str | None:
    """First non-decorative match of the highest-confidence pattern, at native size."""
    for pattern in LANDING_IMAGE_PATTERNS:
        for match in pattern.finditer(html):
            image_url = strip_size_token(match.group(1))
            if not is_decorative(image_url):
                return image_url
    return None


class MarkupScanStrategy(MetadataStrategy):
    """Direct markup scan. Its image is authoritative and skips the scorer.

    Title and description come from a companion preview scan started
    alongside the markup fetch; if that fails, the markup's own tags are used.
    """

    name = "markup"

    def __init__(
        self,
        client: httpx.AsyncClient,
        *,
        companion: MetadataStrategy | None = None,
        settings: Settings | None = None,
    ):
        cfg = settings or default_settings
        self.client = client
        self.companion = companion
        self.timeout = cfg.MARKUP_SCAN_TIMEOUT
        self.accept_language = cfg.ACCEPT_LANGUAGE

    async def _companion_text(self, url: str) -> MetadataCandidate | None:
        if self.companion is None:
            return None
        try:
            return await self.companion.fetch(url)
        except StrategyFailed as e:
            logger.debug("Companion preview scan failed for %s: %s", url, e.cause)
            return None
        except Exception:
            logger.exception("Companion preview scan raised unexpectedly for %s", url)
            return None

    async def fetch(self, url: str) -> MetadataCandidate:
        companion_task = asyncio.ensure_future(self._companion_text(url))
        try:
            html = await fetch_html(
                self.client,
                url,
                strategy=self.name,
                identity=BROWSER,
                timeout=self.timeout,
                accept_language=self.accept_language,
            )
            image = find_landing_image(html)
            if image is None:
                raise StrategyFailed(self.name, "no listing image element in markup")
        except BaseException:
            companion_task.cancel()
            raise

        logger.info("Markup scan found listing image %s", image)

        text = await companion_task
        if text is None or not (text.title or text.description):
            text = parse_preview(html, url, html_fallbacks=True)

        return MetadataCandidate(
            title=text.title or "",
            description=text.description or "",
            images=(image,),
            authoritative_image=image,
        )


# ═══════════════════════════════════════════════════════════════════
#  Strategy C: best-effort plain browser fetch
# ═══════════════════════════════════════════════════════════════════


class GenericScanStrategy(MetadataStrategy):
    """Last resort. Accepts whatever the page offers, even nothing."""

    name = "generic"

    def __init__(self, client: httpx.AsyncClient, *, settings: Settings | None = None):
        cfg = settings or default_settings
        self.client = client
        self.timeout = cfg.GENERIC_SCAN_TIMEOUT
        self.accept_language = cfg.ACCEPT_LANGUAGE

    async def fetch(self, url: str) -> MetadataCandidate:
        html = await fetch_html(
            self.client,
            url,
            strategy=self.name,
            identity=BROWSER,
            timeout=self.timeout,
            accept_language=self.accept_language,
        )
        candidate = parse_preview(html, url, html_fallbacks=True)
        if candidate.is_empty:
            logger.warning("Generic scan of %s found no title, description or image", url)
        return candidate


def default_strategies(
    client: httpx.AsyncClient,
    *,
    settings: Settings | None = None,
    delay: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> list[MetadataStrategy]:
    """The standard A → B → C chain sharing one HTTP client."""
    preview = PreviewScanStrategy(client, delay=delay, settings=settings)
    return [
        MarkupScanStrategy(client, companion=preview, settings=settings),
        preview,
        GenericScanStrategy(client, settings=settings),
    ]
