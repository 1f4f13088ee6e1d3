"""
Pydantic models for accounts, profiles and their sub-records.

The password hash never appears in any read model.  ``UserRead`` lists
follower and following ids; ``UserDetail`` expands them into shallow
``UserSummary`` projections for the single-user views.
"""

from datetime import date
from typing import List, Optional
from urllib.parse import urlparse

from pydantic import Field, field_validator

from .common import CamelModel


def is_well_formed_url(value: str) -> bool:
    """Accept ``http(s)://host.tld/...`` or a bare ``host.tld/...``."""
    if not value or any(ch.isspace() for ch in value):
        return False
    candidate = value if "://" in value else f"http://{value}"
    parsed = urlparse(candidate)
    if parsed.scheme not in {"http", "https"}:
        return False
    host = parsed.hostname or ""
    return "." in host and not host.startswith(".") and not host.endswith(".")


class UserSummary(CamelModel):
    """Shallow profile projection embedded in posts and follow lists."""

    id: int
    username: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    profile_picture: str = ""


class ExperienceBase(CamelModel):
    model_config = {"str_strip_whitespace": True}

    title: Optional[str] = Field(None, min_length=1, max_length=100, examples=["Senior Software Engineer"])
    company: Optional[str] = Field(None, min_length=1, max_length=100, examples=["Tech Corp"])
    location: Optional[str] = Field(None, max_length=100)
    start_date: Optional[date] = Field(None, examples=["2020-01-01"])
    end_date: Optional[date] = None
    current: Optional[bool] = None
    description: Optional[str] = Field(None, max_length=1000)


class ExperienceCreate(ExperienceBase):
    title: str = Field(..., min_length=1, max_length=100, examples=["Senior Software Engineer"])
    company: str = Field(..., min_length=1, max_length=100, examples=["Tech Corp"])
    start_date: date = Field(..., examples=["2020-01-01"])
    current: bool = False


class ExperienceUpdate(ExperienceBase):
    """Partial update; only supplied fields are merged."""

    @field_validator("title", "company", "start_date", "current")
    @classmethod
    def reject_null(cls, v):
        if v is None:
            raise ValueError("Field cannot be null")
        return v


class ExperienceRead(CamelModel):
    id: int
    title: str
    company: str
    location: Optional[str] = None
    start_date: date
    end_date: Optional[date] = None
    current: bool = False
    description: Optional[str] = None
    created_at: str
    updated_at: str


class EducationBase(CamelModel):
    model_config = {"str_strip_whitespace": True}

    school: Optional[str] = Field(None, min_length=1, max_length=100, examples=["Stanford University"])
    degree: Optional[str] = Field(None, min_length=1, max_length=100, examples=["Bachelor of Science"])
    field_of_study: Optional[str] = Field(None, max_length=100)
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    current: Optional[bool] = None
    description: Optional[str] = Field(None, max_length=1000)


class EducationCreate(EducationBase):
    school: str = Field(..., min_length=1, max_length=100, examples=["Stanford University"])
    degree: str = Field(..., min_length=1, max_length=100, examples=["Bachelor of Science"])
    start_date: date = Field(..., examples=["2014-09-01"])
    current: bool = False


class EducationUpdate(EducationBase):
    @field_validator("school", "degree", "start_date", "current")
    @classmethod
    def reject_null(cls, v):
        if v is None:
            raise ValueError("Field cannot be null")
        return v


class EducationRead(CamelModel):
    id: int
    school: str
    degree: str
    field_of_study: Optional[str] = None
    start_date: date
    end_date: Optional[date] = None
    current: bool = False
    description: Optional[str] = None
    created_at: str
    updated_at: str


class UserCreate(CamelModel):
    """Registration payload."""

    username: str = Field(..., min_length=3, max_length=30, examples=["alice"])
    email: str = Field(..., pattern=r"^\S+@\S+\.\S+$", examples=["alice@example.com"])
    password: str = Field(..., min_length=6, examples=["secret1"])
    first_name: Optional[str] = Field(None, max_length=50)
    last_name: Optional[str] = Field(None, max_length=50)

    @field_validator("username", "email", "first_name", "last_name", mode="before")
    @classmethod
    def strip_text(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("email")
    @classmethod
    def lower_email(cls, v: str) -> str:
        return v.lower()


class LoginRequest(CamelModel):
    email: str = Field(..., min_length=1, examples=["alice@example.com"])
    password: str = Field(..., min_length=1)

    @field_validator("email")
    @classmethod
    def normalise_email(cls, v: str) -> str:
        return v.strip().lower()


class UserUpdate(CamelModel):
    """Editable profile fields.  Omitted fields are left untouched."""

    model_config = {"str_strip_whitespace": True}

    first_name: Optional[str] = Field(None, max_length=50)
    last_name: Optional[str] = Field(None, max_length=50)
    bio: Optional[str] = Field(None, max_length=500)
    location: Optional[str] = Field(None, max_length=100)
    website: Optional[str] = None
    profile_picture: Optional[str] = None
    cover_picture: Optional[str] = None

    @field_validator("website", "profile_picture", "cover_picture")
    @classmethod
    def check_url(cls, v: Optional[str]) -> str:
        # Empty string (or null) clears the field.
        if v and not is_well_formed_url(v):
            raise ValueError("Please provide a valid URL")
        return v or ""


class UserRead(CamelModel):
    """Public profile.  Never carries the password hash."""

    id: int
    username: str
    email: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    bio: Optional[str] = None
    profile_picture: str = ""
    cover_picture: str = ""
    location: Optional[str] = None
    website: Optional[str] = None
    experiences: List[ExperienceRead] = []
    education: List[EducationRead] = []
    followers: List[int] = []
    following: List[int] = []
    created_at: str
    updated_at: str


class UserDetail(UserRead):
    followers: List[UserSummary] = []
    following: List[UserSummary] = []


class ExploreUser(UserRead):
    followers_count: int = 0
