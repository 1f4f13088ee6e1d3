"""
Search endpoints.  ``q`` is required and matched as a case-insensitive
substring.
"""

from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Query

from social_network_api.app.api.deps import PageParams, get_search_service
from social_network_api.app.schemas.common import envelope
from social_network_api.app.services.search_service import SearchService


router = APIRouter()


@router.get("")
@router.get("/", include_in_schema=False)
async def search_all(
    q: Optional[str] = Query(None, description="Search text"),
    paging: PageParams = Depends(),
    service: SearchService = Depends(get_search_service),
) -> Dict[str, Any]:
    """Search users and posts together."""
    results = await service.search_all(q, paging.page, paging.limit)
    return envelope(results)


@router.get("/users")
async def search_users(
    q: Optional[str] = Query(None, description="Search text"),
    paging: PageParams = Depends(),
    service: SearchService = Depends(get_search_service),
) -> Dict[str, Any]:
    users, pagination = await service.search_users(q, paging.page, paging.limit)
    return envelope({"users": users, "pagination": pagination})


@router.get("/posts")
async def search_posts(
    q: Optional[str] = Query(None, description="Search text"),
    paging: PageParams = Depends(),
    service: SearchService = Depends(get_search_service),
) -> Dict[str, Any]:
    posts, pagination = await service.search_posts(q, paging.page, paging.limit)
    return envelope({"posts": posts, "pagination": pagination})
