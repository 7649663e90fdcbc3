"""Milestone router - FastAPI endpoints for milestones and escrow"""

from fastapi import APIRouter, Depends, Path
from sqlalchemy.orm import Session

from ...auth import get_current_client, get_current_user
from ...database import get_db
from ...models import EscrowTransaction, Milestone, User
from ...shared.validators import MAX_DB_INT
from .schemas import (
    EscrowTransactionResponse,
    MilestoneCreate,
    MilestoneResponse,
    MilestoneStatusUpdate,
)
from .service import MilestoneService

router = APIRouter(prefix="/api", tags=["Milestones"])


def get_milestone_service(db: Session = Depends(get_db)) -> MilestoneService:
    """Dependency injection for MilestoneService"""
    return MilestoneService(db)


def milestone_to_response(milestone: Milestone) -> MilestoneResponse:
    return MilestoneResponse(
        id=milestone.id,
        jobId=milestone.job_id,
        title=milestone.title,
        description=milestone.description,
        amount=milestone.amount,
        dueDate=milestone.due_date,
        status=milestone.status,
        createdAt=milestone.created_at,
        completedAt=milestone.completed_at,
        approvedAt=milestone.approved_at,
        releasedAt=milestone.released_at,
    )


def escrow_to_response(transaction: EscrowTransaction) -> EscrowTransactionResponse:
    return EscrowTransactionResponse(
        id=transaction.id,
        milestoneId=transaction.milestone_id,
        amount=transaction.amount,
        status=transaction.status,
        createdAt=transaction.created_at,
        releasedAt=transaction.released_at,
        refundedAt=transaction.refunded_at,
    )


@router.post("/jobs/{job_id}/milestones", response_model=MilestoneResponse, status_code=201)
async def create_milestone(
    data: MilestoneCreate,
    job_id: int = Path(..., le=MAX_DB_INT),
    current_user: User = Depends(get_current_client),
    service: MilestoneService = Depends(get_milestone_service),
):
    """Add a milestone to one of the client's jobs"""
    return milestone_to_response(service.create_milestone(job_id, data, current_user))


@router.get("/jobs/{job_id}/milestones", response_model=list[MilestoneResponse])
async def get_job_milestones(
    job_id: int = Path(..., le=MAX_DB_INT),
    current_user: User = Depends(get_current_user),
    service: MilestoneService = Depends(get_milestone_service),
):
    return [milestone_to_response(m) for m in service.get_job_milestones(job_id)]


@router.patch("/milestones/{milestone_id}/status", response_model=MilestoneResponse)
async def update_milestone_status(
    data: MilestoneStatusUpdate,
    milestone_id: int = Path(..., le=MAX_DB_INT),
    current_user: User = Depends(get_current_user),
    service: MilestoneService = Depends(get_milestone_service),
):
    """
    Advance a milestone: vendors mark it completed, the job owner
    approves (holding escrow) and releases it.
    """
    milestone = service.update_status(milestone_id, data.status, current_user)
    return milestone_to_response(milestone)


@router.get("/milestones/{milestone_id}/escrow", response_model=list[EscrowTransactionResponse])
async def get_milestone_escrow(
    milestone_id: int = Path(..., le=MAX_DB_INT),
    current_user: User = Depends(get_current_user),
    service: MilestoneService = Depends(get_milestone_service),
):
    """Escrow transactions recorded against a milestone"""
    transactions = service.get_escrow_transactions(milestone_id, current_user)
    return [escrow_to_response(t) for t in transactions]
