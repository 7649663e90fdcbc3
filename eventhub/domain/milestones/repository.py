"""Milestone repository - Database operations for milestones and escrow"""

from decimal import Decimal
from typing import Optional

from sqlalchemy.orm import Session

from ...models import EscrowStatus, EscrowTransaction, Milestone, MilestoneStatus


class MilestoneRepository:
    """Repository for milestone database operations"""

    @staticmethod
    def get_milestone_by_id(db: Session, milestone_id: int) -> Optional[Milestone]:
        return db.query(Milestone).filter(Milestone.id == milestone_id).first()

    @staticmethod
    def get_milestones_by_job(db: Session, job_id: int) -> list[Milestone]:
        return (
            db.query(Milestone)
            .filter(Milestone.job_id == job_id)
            .order_by(Milestone.id.asc())
            .all()
        )

    @staticmethod
    def advance_status(
        db: Session, milestone_id: int, expected_status: str, **values
    ) -> bool:
        """
        Move a milestone out of expected_status in a single conditional UPDATE.
        Returns False when the row is no longer in expected_status.
        """
        updated = (
            db.query(Milestone)
            .filter(Milestone.id == milestone_id, Milestone.status == expected_status)
            .update(values, synchronize_session=False)
        )
        return updated == 1

    @staticmethod
    def create_milestone(db: Session, job_id: int, **milestone_data) -> Milestone:
        """Stage a new milestone; the caller commits"""
        milestone = Milestone(
            job_id=job_id, status=MilestoneStatus.PENDING.value, **milestone_data
        )
        db.add(milestone)
        db.flush()
        return milestone


class EscrowRepository:
    """Repository for escrow transaction database operations"""

    @staticmethod
    def get_transactions_by_milestone(db: Session, milestone_id: int) -> list[EscrowTransaction]:
        return (
            db.query(EscrowTransaction)
            .filter(EscrowTransaction.milestone_id == milestone_id)
            .order_by(EscrowTransaction.id.asc())
            .all()
        )

    @staticmethod
    def create_transaction(db: Session, milestone_id: int, amount: Decimal) -> EscrowTransaction:
        """Stage a held escrow transaction; the caller commits"""
        transaction = EscrowTransaction(
            milestone_id=milestone_id, amount=amount, status=EscrowStatus.HELD.value
        )
        db.add(transaction)
        db.flush()
        return transaction
