"""
Explore endpoints: posts ranked by engagement and users ranked by
follower count.  Both are public.
"""

from typing import Any, Dict

from fastapi import APIRouter, Depends

from social_network_api.app.api.deps import PageParams, get_feed_service
from social_network_api.app.schemas.common import envelope
from social_network_api.app.services.feed_service import FeedService


router = APIRouter()


@router.get("")
@router.get("/", include_in_schema=False)
async def explore_posts(
    paging: PageParams = Depends(),
    service: FeedService = Depends(get_feed_service),
) -> Dict[str, Any]:
    posts, pagination = await service.explore_posts(paging.page, paging.limit)
    return envelope({"posts": posts, "pagination": pagination})


@router.get("/users")
async def explore_users(
    paging: PageParams = Depends(),
    service: FeedService = Depends(get_feed_service),
) -> Dict[str, Any]:
    users, pagination = await service.explore_users(paging.page, paging.limit)
    return envelope({"users": users, "pagination": pagination})
