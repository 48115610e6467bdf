"""Item identifier (ASIN) extraction from listing URLs. No network."""

from __future__ import annotations

import re
from urllib.parse import urlparse

from listinglens.services.resolver.errors import IdentifierNotFound

IDENTIFIER_RE = re.compile(r"^[A-Z0-9]{10}$")

# Known product-detail path shapes, most specific first
_PATH_PATTERNS = [
    re.compile(r"/dp/([A-Z0-9]{10})(?:[/?#]|$)", re.IGNORECASE),
    re.compile(r"/gp/product/([A-Z0-9]{10})(?:[/?#]|$)", re.IGNORECASE),
    re.compile(r"/product/([A-Z0-9]{10})(?:[/?#]|$)", re.IGNORECASE),
    re.compile(r"/gp/aw/d/([A-Z0-9]{10})(?:[/?#]|$)", re.IGNORECASE),
]


def is_identifier(value: str) -> bool:
    """Case-insensitive check for the 10-character alphanumeric format."""
    return bool(IDENTIFIER_RE.match(value.upper()))


def extract_identifier(url: str) -> str:
    """Return the upper-cased item identifier embedded in ``url``.

    Raises IdentifierNotFound when no known path shape matches.
    """
    path = urlparse(url).path or "/"
    for pattern in _PATH_PATTERNS:
        match = pattern.search(path)
        if match:
            candidate = match.group(1).upper()
            if IDENTIFIER_RE.match(candidate):
                return candidate
    raise IdentifierNotFound(url)
