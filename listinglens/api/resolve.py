"""Resolve API.

Endpoints:
  POST /v1/resolve: marketplace listing URL → identifier, title, description, image
"""

import logging
import time

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from listinglens.schemas.resolve import (
    ResolvedListing,
    ResolveErrorResponse,
    ResolveRequest,
    ResolveResponse,
)
from listinglens.services.resolver import (
    AllStrategiesFailed,
    IdentifierNotFound,
    RedirectResolutionFailed,
    ResolutionError,
    UnsupportedDomain,
    resolve_product_metadata,
)

router = APIRouter()
logger = logging.getLogger(__name__)

# Bad input is the caller's problem; upstream trouble is ours
_STATUS_BY_ERROR = {
    UnsupportedDomain: 422,
    IdentifierNotFound: 422,
    RedirectResolutionFailed: 502,
    AllStrategiesFailed: 502,
}


def status_for_error(error: ResolutionError) -> int:
    for error_type, status in _STATUS_BY_ERROR.items():
        if isinstance(error, error_type):
            return status
    return 500


@router.post(
    "",
    response_model=ResolveResponse,
    responses={422: {"model": ResolveErrorResponse}, 502: {"model": ResolveErrorResponse}},
    summary="Resolve a listing URL",
    description=(
        "Normalize a marketplace listing URL (short links are expanded), extract "
        "its item identifier and fetch title, description and a representative "
        "image. Nothing is stored; hand the result to the catalog yourself."
    ),
)
async def resolve_listing(request: ResolveRequest):
    start = time.time()
    try:
        result = await resolve_product_metadata(request.url)
    except ResolutionError as e:
        body = ResolveErrorResponse(error=e.to_dict())
        return JSONResponse(status_code=status_for_error(e), content=body.model_dump())

    return ResolveResponse(
        data=ResolvedListing(
            identifier=result.identifier,
            title=result.title,
            description=result.description,
            image=result.image,
            source_url=result.source_url,
            strategy=result.strategy,
        ),
        time_taken=round(time.time() - start, 3),
    )
