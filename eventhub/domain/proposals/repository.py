"""Proposal repository - Database operations for proposals"""

from typing import Optional

from sqlalchemy.orm import Session

from ...models import Proposal


class ProposalRepository:
    """Repository for proposal database operations"""

    @staticmethod
    def get_proposals_by_job(
        db: Session, job_id: int, vendor_id: Optional[int] = None
    ) -> list[Proposal]:
        """Get proposals for a job, optionally only one vendor's"""
        query = db.query(Proposal).filter(Proposal.job_id == job_id)

        if vendor_id is not None:
            query = query.filter(Proposal.vendor_id == vendor_id)

        return query.order_by(Proposal.id.asc()).all()

    @staticmethod
    def get_proposals_by_vendor(db: Session, vendor_id: int) -> list[Proposal]:
        return (
            db.query(Proposal)
            .filter(Proposal.vendor_id == vendor_id)
            .order_by(Proposal.created_at.desc(), Proposal.id.desc())
            .all()
        )

    @staticmethod
    def create_proposal(db: Session, vendor_id: int, **proposal_data) -> Proposal:
        """Stage a new proposal; the caller commits"""
        proposal = Proposal(vendor_id=vendor_id, **proposal_data)
        db.add(proposal)
        db.flush()
        return proposal
