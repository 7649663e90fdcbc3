from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from .models import User, UserType
from .shared.validators import normalize_skills, validate_not_blank, validate_username


class PortfolioItem(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: str = Field(..., max_length=5000)


class RegisterRequest(BaseModel):
    username: str
    password: str = Field(..., min_length=6, max_length=128)
    userType: UserType
    fullName: str = Field(..., max_length=255)
    description: Optional[str] = None
    skills: Optional[list[str]] = None

    @field_validator("username")
    @classmethod
    def validate_username_field(cls, v):
        return validate_username(v)

    @field_validator("fullName")
    @classmethod
    def validate_full_name(cls, v):
        return validate_not_blank(v)

    @field_validator("skills")
    @classmethod
    def validate_skills(cls, v):
        return normalize_skills(v)


class LoginRequest(BaseModel):
    username: str
    password: str


class ProfileUpdate(BaseModel):
    fullName: Optional[str] = Field(None, max_length=255)
    description: Optional[str] = None
    skills: Optional[list[str]] = None
    portfolio: Optional[list[PortfolioItem]] = None

    class Config:
        extra = "forbid"

    @field_validator("fullName")
    @classmethod
    def validate_full_name(cls, v):
        return validate_not_blank(v)

    @field_validator("skills")
    @classmethod
    def validate_skills(cls, v):
        return normalize_skills(v)


class UserResponse(BaseModel):
    id: int
    username: str
    userType: UserType
    fullName: str
    description: Optional[str]
    skills: list[str]
    portfolio: list[PortfolioItem]
    createdAt: Optional[datetime] = None


class StatusResponse(BaseModel):
    message: str


def user_to_response(user: User) -> UserResponse:
    """Public view of a user (no password hash)"""
    return UserResponse(
        id=user.id,
        username=user.username,
        userType=user.user_type,
        fullName=user.full_name,
        description=user.description,
        skills=user.skills or [],
        portfolio=user.portfolio or [],
        createdAt=user.created_at,
    )
