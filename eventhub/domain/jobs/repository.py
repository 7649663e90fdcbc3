"""Job repository - Database operations for jobs"""

from typing import Optional

from sqlalchemy.orm import Session

from ...models import Job


class JobRepository:
    """Repository for job database operations"""

    @staticmethod
    def get_job_by_id(db: Session, job_id: int) -> Optional[Job]:
        """Get a specific job by ID"""
        return db.query(Job).filter(Job.id == job_id).first()

    @staticmethod
    def get_jobs(
        db: Session,
        client_id: Optional[int] = None,
        category: Optional[str] = None,
        status: Optional[str] = None,
    ) -> list[Job]:
        """Get jobs, newest first, with optional filters"""
        query = db.query(Job)

        if client_id is not None:
            query = query.filter(Job.client_id == client_id)

        if category:
            query = query.filter(Job.category == category)

        if status:
            query = query.filter(Job.status == status)

        return query.order_by(Job.created_at.desc(), Job.id.desc()).all()

    @staticmethod
    def create_job(db: Session, client_id: int, **job_data) -> Job:
        """Stage a new job; the caller commits"""
        job = Job(client_id=client_id, **job_data)
        db.add(job)
        db.flush()
        return job
