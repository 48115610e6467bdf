"""Turn raw user input into a fetchable listing URL on the marketplace."""

from __future__ import annotations

import logging
from urllib.parse import urlparse

import httpx

from listinglens.config import Settings, settings as default_settings
from listinglens.services.resolver.errors import RedirectResolutionFailed, UnsupportedDomain
from listinglens.services.resolver.identities import BROWSER

logger = logging.getLogger(__name__)


def ensure_scheme(raw: str) -> str:
    """Trim whitespace and add ``https://`` when the input has no scheme."""
    value = raw.strip()
    if not value:
        return ""
    if value.startswith("//"):
        return "https:" + value
    if not value.lower().startswith(("http://", "https://")):
        return "https://" + value
    return value


def _hostname(url: str) -> str:
    """Lowercased host, or "" when the URL cannot be parsed (e.g. an unbalanced "[")."""
    try:
        return (urlparse(url).hostname or "").lower()
    except ValueError:
        return ""


def host_matches(url: str, domain: str) -> bool:
    """True for ``domain`` itself or any of its subdomains (www., smile., ...)."""
    host = _hostname(url)
    return host == domain or host.endswith("." + domain)


async def expand_short_link(
    url: str, client: httpx.AsyncClient, timeout: float
) -> str:
    """Follow the short link's redirects and return where they end up."""
    try:
        resp = await client.head(
            url,
            headers=BROWSER.headers(),
            follow_redirects=True,
            timeout=timeout,
        )
    except httpx.TimeoutException:
        raise RedirectResolutionFailed(url, f"timed out after {timeout:g}s")
    except httpx.HTTPError as e:
        raise RedirectResolutionFailed(url, f"{type(e).__name__}: {e}")

    if resp.status_code >= 400:
        raise RedirectResolutionFailed(url, f"HTTP {resp.status_code}")

    final = str(resp.url)
    logger.info("Expanded short link %s -> %s", url, final)
    return final


async def normalize_url(
    raw: str,
    *,
    client: httpx.AsyncClient,
    settings: Settings | None = None,
) -> str:
    """Canonicalize ``raw`` into an absolute URL on the marketplace domain.

    Short links are expanded over the network; anything else that is not on
    the marketplace is rejected without touching the network.

    Raises:
        UnsupportedDomain: the (expanded) URL is not on the marketplace.
        RedirectResolutionFailed: the short link could not be expanded.
    """
    cfg = settings or default_settings
    url = ensure_scheme(raw)
    if not url or not _hostname(url):
        raise UnsupportedDomain(raw, cfg.MARKETPLACE_DOMAIN)

    if host_matches(url, cfg.SHORT_LINK_DOMAIN):
        url = await expand_short_link(url, client, cfg.REDIRECT_TIMEOUT)

    if not host_matches(url, cfg.MARKETPLACE_DOMAIN):
        raise UnsupportedDomain(url, cfg.MARKETPLACE_DOMAIN)

    return url
