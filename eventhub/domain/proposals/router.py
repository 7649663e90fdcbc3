"""Proposal router - FastAPI endpoints for proposal intake"""

from fastapi import APIRouter, Depends, Path
from sqlalchemy.orm import Session

from ...auth import get_current_user, get_current_vendor
from ...database import get_db
from ...models import Proposal, User
from ...shared.validators import MAX_DB_INT
from .schemas import ProposalCreate, ProposalResponse
from .service import ProposalService

router = APIRouter(prefix="/api", tags=["Proposals"])


def get_proposal_service(db: Session = Depends(get_db)) -> ProposalService:
    """Dependency injection for ProposalService"""
    return ProposalService(db)


def proposal_to_response(proposal: Proposal) -> ProposalResponse:
    return ProposalResponse(
        id=proposal.id,
        jobId=proposal.job_id,
        vendorId=proposal.vendor_id,
        coverLetter=proposal.cover_letter,
        price=proposal.price,
        status=proposal.status,
        createdAt=proposal.created_at,
    )


@router.post("/proposals", response_model=ProposalResponse, status_code=201)
async def create_proposal(
    data: ProposalCreate,
    current_user: User = Depends(get_current_vendor),
    service: ProposalService = Depends(get_proposal_service),
):
    """Submit a proposal (vendors only)"""
    return proposal_to_response(service.create_proposal(data, current_user))


@router.get("/proposals", response_model=list[ProposalResponse])
async def get_my_proposals(
    current_user: User = Depends(get_current_vendor),
    service: ProposalService = Depends(get_proposal_service),
):
    """Proposals submitted by the current vendor"""
    return [proposal_to_response(p) for p in service.get_vendor_proposals(current_user)]


@router.get("/jobs/{job_id}/proposals", response_model=list[ProposalResponse])
async def get_job_proposals(
    job_id: int = Path(..., le=MAX_DB_INT),
    current_user: User = Depends(get_current_user),
    service: ProposalService = Depends(get_proposal_service),
):
    """Proposals on a job"""
    return [proposal_to_response(p) for p in service.get_job_proposals(job_id, current_user)]
