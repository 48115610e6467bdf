"""Listing metadata resolver."""

from listinglens.services.resolver.errors import (
    AllStrategiesFailed,
    IdentifierNotFound,
    NetworkTimeout,
    RedirectResolutionFailed,
    ResolutionError,
    StrategyFailed,
    UnsupportedDomain,
)
from listinglens.services.resolver.models import (
    MetadataCandidate,
    ResolvedMetadata,
    ScoredImage,
)
from listinglens.services.resolver.pipeline import (
    ResolutionPhase,
    ResolutionPipeline,
    resolve_product_metadata,
)

__all__ = [
    "AllStrategiesFailed", "IdentifierNotFound", "NetworkTimeout",
    "RedirectResolutionFailed", "ResolutionError", "StrategyFailed",
    "UnsupportedDomain",
    "MetadataCandidate", "ResolvedMetadata", "ScoredImage",
    "ResolutionPhase", "ResolutionPipeline", "resolve_product_metadata",
]
