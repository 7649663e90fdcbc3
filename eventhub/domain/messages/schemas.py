"""Message domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from ...shared.validators import MAX_DB_INT, validate_not_blank


class MessageCreate(BaseModel):
    receiverId: int = Field(..., le=MAX_DB_INT)
    content: str = Field(..., max_length=5000)

    @field_validator("content")
    @classmethod
    def validate_content(cls, v):
        return validate_not_blank(v)


class MessageResponse(BaseModel):
    id: int
    senderId: int
    receiverId: int
    content: str
    createdAt: Optional[datetime] = None
