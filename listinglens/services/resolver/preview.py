"""Parse link-preview metadata (OpenGraph / Twitter Card / basic HTML)."""

from __future__ import annotations

from urllib.parse import urljoin

from bs4 import BeautifulSoup

from listinglens.services.resolver.models import MetadataCandidate

# og:image may repeat; each of these keys contributes one candidate
_OG_IMAGE_KEYS = ("og:image", "og:image:url", "og:image:secure_url")
_TWITTER_IMAGE_KEYS = ("twitter:image", "twitter:image:src")


def _meta_content(soup: BeautifulSoup, attr: str, key: str) -> str | None:
    tag = soup.find("meta", attrs={attr: key})
    if tag:
        content = (tag.get("content") or "").strip()
        if content:
            return content
    return None


def _collect_images(soup: BeautifulSoup, base_url: str) -> list[str]:
    images: list[str] = []
    seen: set[str] = set()

    def add(raw: str) -> None:
        url = urljoin(base_url, raw.strip())
        if url and url not in seen:
            seen.add(url)
            images.append(url)

    for meta in soup.find_all("meta"):
        prop = (meta.get("property") or "").lower()
        if prop in _OG_IMAGE_KEYS and (meta.get("content") or "").strip():
            add(meta["content"])

    if not images:
        for meta in soup.find_all("meta"):
            name = (meta.get("name") or meta.get("property") or "").lower()
            if name in _TWITTER_IMAGE_KEYS and (meta.get("content") or "").strip():
                add(meta["content"])
    return images


def parse_preview(html: str, base_url: str, *, html_fallbacks: bool = False) -> MetadataCandidate:
    """Extract title, description and candidate images from preview tags.

    With ``html_fallbacks`` the plain ``<title>`` and ``meta description``
    fill in for missing OpenGraph values.
    """
    soup = BeautifulSoup(html or "", "lxml")

    title = _meta_content(soup, "property", "og:title") or _meta_content(
        soup, "name", "twitter:title"
    )
    description = _meta_content(soup, "property", "og:description") or _meta_content(
        soup, "name", "twitter:description"
    )

    if html_fallbacks:
        if not title:
            title_tag = soup.find("title")
            if title_tag:
                title = title_tag.get_text(strip=True) or None
        if not description:
            description = _meta_content(soup, "name", "description")

    return MetadataCandidate(
        title=title,
        description=description,
        images=tuple(_collect_images(soup, base_url)),
    )
