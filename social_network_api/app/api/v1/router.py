"""
Top-level router for version 1 of the API.

This router aggregates the resource routers under their prefixes.  When
a new resource is added, include its router here.
"""

from fastapi import APIRouter

from .endpoints import auth, explore, feed, posts, search, users

router = APIRouter()

router.include_router(auth.router, prefix="/auth", tags=["auth"])
router.include_router(users.router, prefix="/users", tags=["users"])
router.include_router(posts.router, prefix="/posts", tags=["posts"])
router.include_router(search.router, prefix="/search", tags=["search"])
router.include_router(explore.router, prefix="/explore", tags=["explore"])
router.include_router(feed.router, prefix="/feed", tags=["feed"])
