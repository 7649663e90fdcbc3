"""
Milestone service - milestone workflow and escrow bookkeeping

Milestone statuses only move forward, one step at a time:
pending → completed → approved → released

Approving a milestone holds its amount in a new escrow transaction;
releasing it marks that transaction released. Both writes commit together
with the status change.
"""

import logging
from datetime import datetime, timezone

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...models import (
    EscrowStatus,
    EscrowTransaction,
    Job,
    Milestone,
    MilestoneStatus,
    User,
    UserType,
)
from ...shared.transactions import commit_or_rollback
from ..jobs.service import JobService
from .repository import EscrowRepository, MilestoneRepository
from .schemas import MilestoneCreate

logger = logging.getLogger(__name__)

# target status -> status the milestone must currently be in
PREVIOUS_STATUS = {
    MilestoneStatus.COMPLETED: MilestoneStatus.PENDING,
    MilestoneStatus.APPROVED: MilestoneStatus.COMPLETED,
    MilestoneStatus.RELEASED: MilestoneStatus.APPROVED,
}

TIMESTAMP_COLUMN = {
    MilestoneStatus.COMPLETED: "completed_at",
    MilestoneStatus.APPROVED: "approved_at",
    MilestoneStatus.RELEASED: "released_at",
}


class MilestoneService:
    """Service layer for milestones and their escrow transactions"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = MilestoneRepository()
        self.escrow_repo = EscrowRepository()
        self.jobs = JobService(db)

    def get_milestone(self, milestone_id: int) -> Milestone:
        milestone = self.repo.get_milestone_by_id(self.db, milestone_id)
        if not milestone:
            raise HTTPException(status_code=404, detail="Milestone not found")
        return milestone

    def create_milestone(self, job_id: int, data: MilestoneCreate, user: User) -> Milestone:
        """Add a priced milestone to a job the client owns"""
        job = self.jobs.get_owned_job(job_id, user)

        milestone = self.repo.create_milestone(
            self.db,
            job.id,
            title=data.title,
            description=data.description,
            amount=data.amount,
            due_date=data.dueDate,
        )
        commit_or_rollback(self.db, "create milestone")
        self.db.refresh(milestone)

        logger.info(f"📌 Milestone {milestone.id} added to job {job.id} (amount={milestone.amount})")
        return milestone

    def get_job_milestones(self, job_id: int) -> list[Milestone]:
        job = self.jobs.get_job(job_id)
        return self.repo.get_milestones_by_job(self.db, job.id)

    def update_status(self, milestone_id: int, target: MilestoneStatus, user: User) -> Milestone:
        """
        Advance a milestone to the requested status.

        Raises:
            HTTPException 404: milestone or its job does not exist
            HTTPException 403: caller may not perform this transition
            HTTPException 400: milestone is not (or no longer) in the preceding status
        """
        milestone = self.get_milestone(milestone_id)
        job = self.jobs.get_job(milestone.job_id)

        self._authorize_transition(target, user, job)

        current = MilestoneStatus(milestone.status)
        if current != PREVIOUS_STATUS[target]:
            logger.warning(
                f"⚠️ Rejected milestone {milestone.id} transition: {current.value} → {target.value}"
            )
            raise HTTPException(
                status_code=400,
                detail=f"Cannot move milestone from {current.value} to {target.value}",
            )

        now = datetime.now(timezone.utc).replace(tzinfo=None)
        moved = self.repo.advance_status(
            self.db,
            milestone.id,
            current.value,
            status=target.value,
            **{TIMESTAMP_COLUMN[target]: now},
        )
        if not moved:
            # Another request moved it between the read and the update
            logger.warning(
                f"⚠️ Milestone {milestone.id} left {current.value} before {target.value} was applied"
            )
            self.db.rollback()
            raise HTTPException(
                status_code=400,
                detail=f"Milestone is no longer {current.value}",
            )

        if target == MilestoneStatus.APPROVED:
            self._hold_escrow(milestone)
        elif target == MilestoneStatus.RELEASED:
            self._release_escrow(milestone, now)

        commit_or_rollback(self.db, f"mark milestone {milestone.id} {target.value}")
        self.db.refresh(milestone)

        logger.info(f"✅ Milestone {milestone.id} transitioned: {current.value} → {target.value}")
        return milestone

    def get_escrow_transactions(self, milestone_id: int, user: User) -> list[EscrowTransaction]:
        """Escrow ledger of a milestone; vendors and the job owner may read it"""
        milestone = self.get_milestone(milestone_id)

        if user.user_type == UserType.CLIENT.value:
            self.jobs.get_owned_job(milestone.job_id, user)

        return self.escrow_repo.get_transactions_by_milestone(self.db, milestone.id)

    def _authorize_transition(self, target: MilestoneStatus, user: User, job: Job) -> None:
        if target == MilestoneStatus.COMPLETED:
            if user.user_type != UserType.VENDOR.value:
                logger.warning(f"🚫 User {user.id} cannot complete milestones: vendor role required")
                raise HTTPException(
                    status_code=403, detail="Only vendors can mark milestones completed"
                )
            return

        if user.user_type != UserType.CLIENT.value or job.client_id != user.id:
            logger.warning(f"🚫 User {user.id} cannot mark milestones of job {job.id} {target.value}")
            raise HTTPException(
                status_code=403,
                detail=f"Only the job owner can mark milestones {target.value}",
            )

    def _hold_escrow(self, milestone: Milestone) -> EscrowTransaction:
        transaction = self.escrow_repo.create_transaction(
            self.db, milestone.id, milestone.amount
        )
        logger.info(f"🔒 Escrow held for milestone {milestone.id}: {milestone.amount}")
        return transaction

    def _release_escrow(self, milestone: Milestone, released_at: datetime) -> None:
        transactions = self.escrow_repo.get_transactions_by_milestone(self.db, milestone.id)
        if not transactions:
            logger.warning(f"⚠️ No escrow transaction to release for milestone {milestone.id}")
            return

        transaction = transactions[0]
        transaction.status = EscrowStatus.RELEASED.value
        transaction.released_at = released_at
        logger.info(f"💸 Escrow transaction {transaction.id} released for milestone {milestone.id}")
