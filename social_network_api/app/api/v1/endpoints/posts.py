"""
Post endpoints for API v1.

Create and update accept ``multipart/form-data`` with a ``text`` field
and up to five ``images`` parts.  Likes are toggled with a single POST.
"""

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile, status

from social_network_api.app.api.deps import PageParams, get_post_service
from social_network_api.app.core.security import get_current_user
from social_network_api.app.schemas.common import envelope
from social_network_api.app.schemas.post import CommentCreate, PostCreate, PostUpdate
from social_network_api.app.services.image_storage import ImageUpload
from social_network_api.app.services.post_service import PostService


router = APIRouter()


async def read_uploads(files: Optional[List[UploadFile]]) -> List[ImageUpload]:
    """Read uploaded parts into memory, skipping empty file inputs."""
    uploads: List[ImageUpload] = []
    for file in files or []:
        if not file.filename:
            continue
        data = await file.read()
        uploads.append(
            ImageUpload(filename=file.filename, content_type=file.content_type or "", data=data)
        )
    return uploads


@router.get("")
@router.get("/", include_in_schema=False)
async def list_posts(
    paging: PageParams = Depends(),
    service: PostService = Depends(get_post_service),
) -> Dict[str, Any]:
    """List all posts, newest first."""
    posts, pagination = await service.list_posts(paging.page, paging.limit)
    return envelope({"posts": posts, "pagination": pagination})


@router.get("/{post_id}")
async def get_post(post_id: int, service: PostService = Depends(get_post_service)) -> Dict[str, Any]:
    post = await service.get_post(post_id)
    return envelope({"post": post})


@router.post("", status_code=status.HTTP_201_CREATED)
@router.post("/", status_code=status.HTTP_201_CREATED, include_in_schema=False)
async def create_post(
    text: Optional[str] = Form(None),
    images: Optional[List[UploadFile]] = File(None),
    current_user: dict = Depends(get_current_user),
    service: PostService = Depends(get_post_service),
) -> Dict[str, Any]:
    """Create a post for the authenticated user.

    When image storage is not configured the post is still created,
    without images.
    """
    data = PostCreate(text=text)
    uploads = await read_uploads(images)
    post = await service.create_post(current_user["user_id"], data, uploads)
    return envelope({"post": post}, "Post created successfully")


@router.put("/{post_id}")
async def update_post(
    post_id: int,
    text: Optional[str] = Form(None),
    images: Optional[List[UploadFile]] = File(None),
    current_user: dict = Depends(get_current_user),
    service: PostService = Depends(get_post_service),
) -> Dict[str, Any]:
    data = PostUpdate(text=text)
    uploads = await read_uploads(images)
    post = await service.update_post(post_id, current_user["user_id"], data, uploads)
    return envelope({"post": post}, "Post updated successfully")


@router.delete("/{post_id}")
async def delete_post(
    post_id: int,
    current_user: dict = Depends(get_current_user),
    service: PostService = Depends(get_post_service),
) -> Dict[str, Any]:
    await service.delete_post(post_id, current_user["user_id"])
    return envelope(message="Post deleted successfully")


@router.post("/{post_id}/like")
async def toggle_like(
    post_id: int,
    current_user: dict = Depends(get_current_user),
    service: PostService = Depends(get_post_service),
) -> Dict[str, Any]:
    """Like the post, or unlike it if the caller already liked it."""
    post, liked = await service.toggle_like(post_id, current_user["user_id"])
    return envelope({"post": post}, "Post liked" if liked else "Post unliked")


@router.post("/{post_id}/comments", status_code=status.HTTP_201_CREATED)
async def add_comment(
    post_id: int,
    payload: CommentCreate,
    current_user: dict = Depends(get_current_user),
    service: PostService = Depends(get_post_service),
) -> Dict[str, Any]:
    post = await service.add_comment(post_id, current_user["user_id"], payload)
    return envelope({"post": post}, "Comment added successfully")


@router.delete("/{post_id}/comments/{comment_id}")
async def delete_comment(
    post_id: int,
    comment_id: int,
    current_user: dict = Depends(get_current_user),
    service: PostService = Depends(get_post_service),
) -> Dict[str, Any]:
    post = await service.delete_comment(post_id, comment_id, current_user["user_id"])
    return envelope({"post": post}, "Comment deleted successfully")
