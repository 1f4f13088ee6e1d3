"""
Dependency providers shared by the API routers.

The database, settings and image storage are built once by
``create_app`` and kept on ``app.state``; the providers below read them
from the request and construct services per request.  Tests override
``get_image_storage`` to avoid real uploads.
"""

from fastapi import Depends, Query, Request

from ..core.config import Settings
from ..core.db import Database
from ..services.auth_service import AuthService
from ..services.feed_service import FeedService
from ..services.follow_service import FollowService
from ..services.image_storage import ImageStorage
from ..services.post_service import PostService
from ..services.search_service import SearchService
from ..services.user_service import UserService


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_db(request: Request) -> Database:
    return request.app.state.db


def get_image_storage(request: Request) -> ImageStorage:
    return request.app.state.image_storage


class PageParams:
    """``page``/``limit`` query parameters shared by every list endpoint."""

    def __init__(
        self,
        page: int = Query(1, ge=1, description="1-based page number"),
        limit: int = Query(10, ge=1, le=100, description="Items per page"),
    ) -> None:
        self.page = page
        self.limit = limit


def get_auth_service(db: Database = Depends(get_db), settings: Settings = Depends(get_settings)) -> AuthService:
    return AuthService(db, settings)


def get_user_service(db: Database = Depends(get_db)) -> UserService:
    return UserService(db)


def get_follow_service(db: Database = Depends(get_db)) -> FollowService:
    return FollowService(db)


def get_post_service(
    db: Database = Depends(get_db),
    storage: ImageStorage = Depends(get_image_storage),
    settings: Settings = Depends(get_settings),
) -> PostService:
    return PostService(db, storage, folder=settings.cloudinary_folder)


def get_feed_service(db: Database = Depends(get_db)) -> FeedService:
    return FeedService(db)


def get_search_service(db: Database = Depends(get_db)) -> SearchService:
    return SearchService(db)
