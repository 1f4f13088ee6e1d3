"""
Personalised feed: the caller's own posts and those of followed users.
"""

from typing import Any, Dict

from fastapi import APIRouter, Depends

from social_network_api.app.api.deps import PageParams, get_feed_service
from social_network_api.app.core.security import get_current_user
from social_network_api.app.schemas.common import envelope
from social_network_api.app.services.feed_service import FeedService


router = APIRouter()


@router.get("")
@router.get("/", include_in_schema=False)
async def get_feed(
    paging: PageParams = Depends(),
    current_user: dict = Depends(get_current_user),
    service: FeedService = Depends(get_feed_service),
) -> Dict[str, Any]:
    posts, pagination = await service.feed(current_user["user_id"], paging.page, paging.limit)
    return envelope({"posts": posts, "pagination": pagination})
