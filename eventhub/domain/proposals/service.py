"""Proposal service - Business logic for proposals"""

import logging

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...models import Proposal, User, UserType
from ...shared.transactions import commit_or_rollback
from ..jobs.service import JobService
from .repository import ProposalRepository
from .schemas import ProposalCreate

logger = logging.getLogger(__name__)


class ProposalService:
    """Service layer for proposal business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = ProposalRepository()
        self.jobs = JobService(db)

    def create_proposal(self, data: ProposalCreate, user: User) -> Proposal:
        """Submit a vendor proposal against an existing job"""
        job = self.jobs.get_job(data.jobId)

        proposal = self.repo.create_proposal(
            self.db,
            user.id,
            job_id=job.id,
            cover_letter=data.coverLetter,
            price=data.price,
            status="pending",
        )
        commit_or_rollback(self.db, "create proposal")
        self.db.refresh(proposal)

        logger.info(f"📨 Vendor {user.id} submitted proposal {proposal.id} on job {job.id}")
        return proposal

    def get_vendor_proposals(self, user: User) -> list[Proposal]:
        """All proposals the vendor has submitted"""
        return self.repo.get_proposals_by_vendor(self.db, user.id)

    def get_job_proposals(self, job_id: int, user: User) -> list[Proposal]:
        """
        Proposals on a job, as visible to the caller.

        The owning client sees every proposal, a vendor sees only their own,
        and any other client is refused.
        """
        job = self.jobs.get_job(job_id)

        if user.user_type == UserType.VENDOR.value:
            return self.repo.get_proposals_by_job(self.db, job.id, vendor_id=user.id)

        if job.client_id != user.id:
            logger.warning(f"🚫 Client {user.id} tried to read proposals of job {job.id}")
            raise HTTPException(status_code=403, detail="Access denied: not the job owner")

        return self.repo.get_proposals_by_job(self.db, job.id)
