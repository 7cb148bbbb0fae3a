from fastapi import APIRouter, Depends, Request

from sikshasetu.core.auth_deps import get_services
from sikshasetu.services.container import AppServices

router = APIRouter()


@router.get("/health")
async def health(request: Request, services: AppServices = Depends(get_services)):
    rid = getattr(request.state, "request_id", None)
    feed = services.feed
    return {
        "status": "ok",
        "request_id": rid,
        "backend_configured": services.backend.configured,
        "feed_loaded": bool(feed and feed.loaded),
    }
