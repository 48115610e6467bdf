"""Pydantic schemas for the resolve API."""

from pydantic import BaseModel, Field


# --- Request ---


class ResolveRequest(BaseModel):
    url: str = Field(
        ...,
        min_length=1,
        max_length=2048,
        description="Marketplace listing URL or short link, scheme optional",
    )


# --- Response models ---


class ResolvedListing(BaseModel):
    identifier: str = Field(..., description="10-character item identifier (ASIN)")
    title: str = Field("", description="Listing title, may be empty")
    description: str = Field("", description="Listing description, may be empty")
    image: str | None = Field(None, description="Representative image URL")
    source_url: str = Field(..., description="Normalized listing URL that was fetched")
    strategy: str = Field(..., description="Strategy that produced the metadata")


class ResolveResponse(BaseModel):
    success: bool = True
    data: ResolvedListing
    time_taken: float = Field(..., description="Resolution time in seconds")


class StrategyAttempt(BaseModel):
    strategy: str
    cause: str
    code: str | None = None


class ResolveErrorDetail(BaseModel):
    code: str = Field(..., description="Stable error code, e.g. UNSUPPORTED_DOMAIN")
    message: str
    phase: str | None = Field(None, description="Pipeline phase the error was raised in")
    attempts: list[StrategyAttempt] = []


class ResolveErrorResponse(BaseModel):
    success: bool = False
    error: ResolveErrorDetail
