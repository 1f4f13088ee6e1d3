"""
User endpoints for API v1.

Public reads (users, a user's posts, followers and following) and
owner-only profile writes, plus follow/unfollow for the authenticated
caller.
"""

from typing import Any, Dict

from fastapi import APIRouter, Depends, status

from social_network_api.app.api.deps import (
    PageParams,
    get_follow_service,
    get_user_service,
)
from social_network_api.app.core.security import get_current_user
from social_network_api.app.schemas.common import envelope
from social_network_api.app.schemas.user import (
    EducationCreate,
    EducationUpdate,
    ExperienceCreate,
    ExperienceUpdate,
    UserUpdate,
)
from social_network_api.app.services.follow_service import FollowService
from social_network_api.app.services.user_service import UserService


router = APIRouter()


@router.get("")
@router.get("/", include_in_schema=False)
async def list_users(
    paging: PageParams = Depends(),
    service: UserService = Depends(get_user_service),
) -> Dict[str, Any]:
    """List users, newest first."""
    users, pagination = await service.list_users(paging.page, paging.limit)
    return envelope({"users": users, "pagination": pagination})


@router.get("/{user_id}")
async def get_user(user_id: int, service: UserService = Depends(get_user_service)) -> Dict[str, Any]:
    """Get one user with followers and following expanded."""
    user = await service.get_user(user_id)
    return envelope({"user": user})


@router.put("/{user_id}")
async def update_user(
    user_id: int,
    payload: UserUpdate,
    current_user: dict = Depends(get_current_user),
    service: UserService = Depends(get_user_service),
) -> Dict[str, Any]:
    """Update profile fields.  Only the profile owner may call this."""
    user = await service.update_user(user_id, current_user["user_id"], payload)
    return envelope({"user": user}, "Profile updated successfully")


# ---------------------------------------------------------------------------
# Experience
# ---------------------------------------------------------------------------


@router.post("/{user_id}/experiences", status_code=status.HTTP_201_CREATED)
async def add_experience(
    user_id: int,
    payload: ExperienceCreate,
    current_user: dict = Depends(get_current_user),
    service: UserService = Depends(get_user_service),
) -> Dict[str, Any]:
    user = await service.add_experience(user_id, current_user["user_id"], payload)
    return envelope({"user": user}, "Experience added successfully")


@router.put("/{user_id}/experiences/{exp_id}")
async def update_experience(
    user_id: int,
    exp_id: int,
    payload: ExperienceUpdate,
    current_user: dict = Depends(get_current_user),
    service: UserService = Depends(get_user_service),
) -> Dict[str, Any]:
    user = await service.update_experience(user_id, exp_id, current_user["user_id"], payload)
    return envelope({"user": user}, "Experience updated successfully")


@router.delete("/{user_id}/experiences/{exp_id}")
async def delete_experience(
    user_id: int,
    exp_id: int,
    current_user: dict = Depends(get_current_user),
    service: UserService = Depends(get_user_service),
) -> Dict[str, Any]:
    user = await service.delete_experience(user_id, exp_id, current_user["user_id"])
    return envelope({"user": user}, "Experience deleted successfully")


# ---------------------------------------------------------------------------
# Education
# ---------------------------------------------------------------------------


@router.post("/{user_id}/education", status_code=status.HTTP_201_CREATED)
async def add_education(
    user_id: int,
    payload: EducationCreate,
    current_user: dict = Depends(get_current_user),
    service: UserService = Depends(get_user_service),
) -> Dict[str, Any]:
    user = await service.add_education(user_id, current_user["user_id"], payload)
    return envelope({"user": user}, "Education added successfully")


@router.put("/{user_id}/education/{edu_id}")
async def update_education(
    user_id: int,
    edu_id: int,
    payload: EducationUpdate,
    current_user: dict = Depends(get_current_user),
    service: UserService = Depends(get_user_service),
) -> Dict[str, Any]:
    user = await service.update_education(user_id, edu_id, current_user["user_id"], payload)
    return envelope({"user": user}, "Education updated successfully")


@router.delete("/{user_id}/education/{edu_id}")
async def delete_education(
    user_id: int,
    edu_id: int,
    current_user: dict = Depends(get_current_user),
    service: UserService = Depends(get_user_service),
) -> Dict[str, Any]:
    user = await service.delete_education(user_id, edu_id, current_user["user_id"])
    return envelope({"user": user}, "Education deleted successfully")


# ---------------------------------------------------------------------------
# Posts and follow graph
# ---------------------------------------------------------------------------


@router.get("/{user_id}/posts")
async def list_user_posts(
    user_id: int,
    paging: PageParams = Depends(),
    service: UserService = Depends(get_user_service),
) -> Dict[str, Any]:
    posts, pagination = await service.list_user_posts(user_id, paging.page, paging.limit)
    return envelope({"posts": posts, "pagination": pagination})


@router.get("/{user_id}/followers")
async def list_followers(
    user_id: int,
    paging: PageParams = Depends(),
    service: FollowService = Depends(get_follow_service),
) -> Dict[str, Any]:
    followers, pagination = await service.list_followers(user_id, paging.page, paging.limit)
    return envelope({"followers": followers, "pagination": pagination})


@router.get("/{user_id}/following")
async def list_following(
    user_id: int,
    paging: PageParams = Depends(),
    service: FollowService = Depends(get_follow_service),
) -> Dict[str, Any]:
    following, pagination = await service.list_following(user_id, paging.page, paging.limit)
    return envelope({"following": following, "pagination": pagination})


@router.post("/{user_id}/follow", status_code=status.HTTP_201_CREATED)
async def follow_user(
    user_id: int,
    current_user: dict = Depends(get_current_user),
    service: FollowService = Depends(get_follow_service),
) -> Dict[str, Any]:
    await service.follow(current_user["user_id"], user_id)
    return envelope(message="User followed successfully")


@router.delete("/{user_id}/follow")
async def unfollow_user(
    user_id: int,
    current_user: dict = Depends(get_current_user),
    service: FollowService = Depends(get_follow_service),
) -> Dict[str, Any]:
    await service.unfollow(current_user["user_id"], user_id)
    return envelope(message="User unfollowed successfully")
