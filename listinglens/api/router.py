from fastapi import APIRouter

from listinglens.api import resolve

api_router = APIRouter(prefix="/v1")

api_router.include_router(resolve.router, prefix="/resolve", tags=["Resolve"])
