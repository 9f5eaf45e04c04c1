"""
Badge endpoint.

`GET /<any path>?page_path=<fragment>` returns an SVG badge with the number
of page views of every page whose path contains the fragment.  The route
accepts every method so that non-GET requests get the service's own 405
rather than the framework default.
"""
from __future__ import annotations

from fastapi import APIRouter, BackgroundTasks, Depends, Request
from starlette.responses import Response

from ..deps import get_badge_service
from ..services.badge import BadgeService

router = APIRouter(tags=["badge"])

ALL_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


@router.api_route("/{path:path}", methods=ALL_METHODS, include_in_schema=False)
async def badge(
    request: Request,
    background_tasks: BackgroundTasks,
    service: BadgeService = Depends(get_badge_service),
) -> Response:
    return await service.handle(
        request.method,
        str(request.url),
        request.query_params.multi_items(),
        background_tasks,
    )
