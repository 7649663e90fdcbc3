"""Job domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from ...models import JobCategory
from ...shared.validators import MAX_DB_INT, validate_not_blank


class JobCreate(BaseModel):
    """Schema for posting a new job"""

    title: str = Field(..., max_length=255)
    description: str
    budget: int = Field(..., gt=0, le=MAX_DB_INT)
    category: JobCategory

    @field_validator("title", "description")
    @classmethod
    def validate_text(cls, v):
        return validate_not_blank(v)


class JobResponse(BaseModel):
    """Schema for job response"""

    id: int
    title: str
    description: str
    budget: int
    category: str
    clientId: int
    status: str
    createdAt: Optional[datetime] = None
