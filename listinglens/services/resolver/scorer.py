"""Image candidate scoring.

Each rule looks at one URL and returns a signed delta; the score is their
sum. Disqualification is not a rule in that sense: it is checked first and
pins the score to ``DISQUALIFIED_SCORE`` regardless of everything else.

The magnitudes are tunable, their ordering is not:
disqualification > canonical path > native resolution > explicit size >
identifier-named file.
"""

from __future__ import annotations

import logging
import re
from typing import Callable, Iterable
from urllib.parse import urlparse

from listinglens.services.resolver.identifier import is_identifier
from listinglens.services.resolver.models import ScoredImage

logger = logging.getLogger(__name__)

PRODUCT_IMAGE_SEGMENT = "/images/I/"
PRODUCT_PATH_BONUS = 1000
NATIVE_RESOLUTION_BONUS = 500
EXPLICIT_SIZE_CAP = 500
IDENTIFIER_FILENAME_BONUS = 200
THUMBNAIL_PENALTY = -100
DISQUALIFIED_SCORE = -1000

# Largest of the known thumbnail tokens (_SL75_, _SL160_); anything at or
# below it is penalized so the score stays monotonic in the size token.
THUMBNAIL_MAX_SIZE = 160

DECORATIVE_MARKERS = ("sprites/", "nav-", "gno/", "toolbar", "logo", "icon")

SIZE_TOKEN_RE = re.compile(r"_SL(\d+)_")


def explicit_size(url: str) -> int | None:
    """Pixel size from a ``_SL<n>_`` token, or None for native resolution."""
    match = SIZE_TOKEN_RE.search(url)
    return int(match.group(1)) if match else None


def _path(url: str) -> str:
    return urlparse(url).path


def is_decorative(url: str) -> bool:
    path = _path(url).lower()
    return any(marker in path for marker in DECORATIVE_MARKERS)


def _on_product_path(url: str) -> bool:
    return PRODUCT_IMAGE_SEGMENT in _path(url)


# ---------------------------------------------------------------------------
# Rules
# ---------------------------------------------------------------------------


def product_path_rule(url: str) -> int:
    return PRODUCT_PATH_BONUS if _on_product_path(url) else 0


def resolution_rule(url: str) -> int:
    if not _on_product_path(url):
        return 0
    size = explicit_size(url)
    if size is None:
        return NATIVE_RESOLUTION_BONUS
    return min(size, EXPLICIT_SIZE_CAP)


def identifier_filename_rule(url: str) -> int:
    if not _on_product_path(url):
        return 0
    filename = _path(url).rsplit("/", 1)[-1]
    stem = filename.split(".", 1)[0]
    return IDENTIFIER_FILENAME_BONUS if is_identifier(stem) else 0


def thumbnail_rule(url: str) -> int:
    size = explicit_size(url)
    if size is not None and size <= THUMBNAIL_MAX_SIZE:
        return THUMBNAIL_PENALTY
    return 0


RULES: tuple[Callable[[str], int], ...] = (
    product_path_rule,
    resolution_rule,
    identifier_filename_rule,
    thumbnail_rule,
)


def score_image(url: str) -> int:
    if is_decorative(url):
        return DISQUALIFIED_SCORE
    return sum(rule(url) for rule in RULES)


def _dedupe(urls: Iterable[str]) -> list[str]:
    seen: set[str] = set()
    result = []
    for url in urls:
        url = (url or "").strip()
        if url and url not in seen:
            seen.add(url)
            result.append(url)
    return result


def rank_images(urls: Iterable[str]) -> list[ScoredImage]:
    """Score every distinct URL, best first. Ties keep their input order."""
    scored = [ScoredImage(url=url, score=score_image(url)) for url in _dedupe(urls)]
    scored.sort(key=lambda s: s.score, reverse=True)
    return scored


def best_qualified(urls: Iterable[str]) -> ScoredImage | None:
    """Top-ranked candidate with a positive score, if any."""
    for candidate in rank_images(urls):
        if candidate.score > 0:
            return candidate
    return None


def select_image(urls: Iterable[str]) -> str | None:
    """Pick the representative image.

    Falls back to the first raw candidate when nothing scores above zero,
    and to None when there are no candidates at all. Decorative assets are
    never returned, not even as the fallback.
    """
    urls = _dedupe(urls)
    best = best_qualified(urls)
    if best is not None:
        logger.debug("Selected image %s (score %d)", best.url, best.score)
        return best.url
    for url in urls:
        if not is_decorative(url):
            logger.debug("No image qualified, falling back to first candidate %s", url)
            return url
    return None
