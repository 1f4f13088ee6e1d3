"""
Pydantic models for posts, likes and comments.
"""

from typing import List, Optional

from pydantic import Field

from .common import CamelModel
from .user import UserSummary


POST_TEXT_MAX_LENGTH = 5000
COMMENT_TEXT_MAX_LENGTH = 1000


class PostCreate(CamelModel):
    model_config = {"str_strip_whitespace": True}

    text: str = Field(..., min_length=1, max_length=POST_TEXT_MAX_LENGTH, examples=["hello"])


class PostUpdate(CamelModel):
    """Text is optional on update but may not be blank when supplied."""

    model_config = {"str_strip_whitespace": True}

    text: Optional[str] = Field(None, min_length=1, max_length=POST_TEXT_MAX_LENGTH)


class CommentCreate(CamelModel):
    model_config = {"str_strip_whitespace": True}

    text: str = Field(..., min_length=1, max_length=COMMENT_TEXT_MAX_LENGTH, examples=["Nice!"])


class LikeRead(CamelModel):
    id: int
    user: UserSummary
    created_at: str


class CommentRead(CamelModel):
    id: int
    user: UserSummary
    text: str
    created_at: str
    updated_at: str


class PostRead(CamelModel):
    """A post with owner, likers and commenters expanded."""

    id: int
    user: UserSummary
    text: str
    images: List[str] = []
    likes: List[LikeRead] = []
    comments: List[CommentRead] = []
    shares: List[int] = []
    likes_count: int = 0
    comments_count: int = 0
    created_at: str
    updated_at: str
