"""Milestone domain schemas - Pydantic models for validation"""

from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from ...models import MilestoneStatus
from ...shared.validators import validate_not_blank


class MilestoneCreate(BaseModel):
    """Schema for adding a milestone to a job"""

    title: str = Field(..., max_length=255)
    description: str
    amount: Decimal = Field(..., gt=0, max_digits=10, decimal_places=2)
    dueDate: Optional[datetime] = None

    @field_validator("title", "description")
    @classmethod
    def validate_text(cls, v):
        return validate_not_blank(v)

    @field_validator("dueDate")
    @classmethod
    def validate_due_date(cls, v):
        # Stored as naive UTC
        if v is not None and v.tzinfo is not None:
            return v.astimezone(timezone.utc).replace(tzinfo=None)
        return v


class MilestoneStatusUpdate(BaseModel):
    """Requested next status; pending is only ever the initial state"""

    status: MilestoneStatus

    @field_validator("status")
    @classmethod
    def validate_target(cls, v):
        if v == MilestoneStatus.PENDING:
            raise ValueError("status must be one of: completed, approved, released")
        return v


class MilestoneResponse(BaseModel):
    id: int
    jobId: int
    title: str
    description: str
    amount: Decimal
    dueDate: Optional[datetime] = None
    status: str
    createdAt: Optional[datetime] = None
    completedAt: Optional[datetime] = None
    approvedAt: Optional[datetime] = None
    releasedAt: Optional[datetime] = None


class EscrowTransactionResponse(BaseModel):
    id: int
    milestoneId: int
    amount: Decimal
    status: str
    createdAt: Optional[datetime] = None
    releasedAt: Optional[datetime] = None
    refundedAt: Optional[datetime] = None
