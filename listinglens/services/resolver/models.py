"""Value types passed between resolver stages.

All of them are frozen: a resolution builds them, hands them on, and
never changes them afterwards.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class MetadataCandidate:
    """What one strategy managed to pull from the page. Any field may be missing."""
    title: str | None = None
    description: str | None = None
    images: tuple[str, ...] = ()
    # Set only when the strategy is certain about the image (markup scan)
    authoritative_image: str | None = None

    @property
    def is_empty(self) -> bool:
        return not (self.title or self.description or self.images or self.authoritative_image)


@dataclass(frozen=True)
class ScoredImage:
    url: str
    score: int


@dataclass(frozen=True)
class ResolvedMetadata:
    identifier: str
    title: str
    description: str
    image: str | None
    source_url: str
    strategy: str

    def to_catalog_record(self) -> dict:
        """Payload handed to the catalog store once resolution succeeds."""
        return {
            "identifier": self.identifier,
            "title": self.title,
            "description": self.description,
            "image": self.image,
            "sourceURL": self.source_url,
        }
