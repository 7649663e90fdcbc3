"""Proposal domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from ...shared.validators import MAX_DB_INT, validate_not_blank


class ProposalCreate(BaseModel):
    """Schema for a vendor's proposal against a job"""

    jobId: int = Field(..., le=MAX_DB_INT)
    coverLetter: str = Field(..., max_length=10000)
    price: int = Field(..., gt=0, le=MAX_DB_INT)

    @field_validator("coverLetter")
    @classmethod
    def validate_cover_letter(cls, v):
        return validate_not_blank(v)


class ProposalResponse(BaseModel):
    """Schema for proposal response"""

    id: int
    jobId: int
    vendorId: int
    coverLetter: str
    price: int
    status: str
    createdAt: Optional[datetime] = None
