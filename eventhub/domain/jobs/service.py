"""Job service - Business logic for job postings"""

import logging
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...models import Job, User
from ...shared.transactions import commit_or_rollback
from .repository import JobRepository
from .schemas import JobCreate

logger = logging.getLogger(__name__)


class JobService:
    """Service layer for job business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = JobRepository()

    def get_jobs(
        self,
        client_id: Optional[int] = None,
        category: Optional[str] = None,
        status: Optional[str] = None,
    ) -> list[Job]:
        return self.repo.get_jobs(self.db, client_id, category, status)

    def get_job(self, job_id: int) -> Job:
        """Get a specific job"""
        job = self.repo.get_job_by_id(self.db, job_id)
        if not job:
            logger.info(f"Job not found with ID: {job_id}")
            raise HTTPException(status_code=404, detail="Job not found")
        return job

    def get_owned_job(self, job_id: int, user: User) -> Job:
        """Get a job that must belong to the given client"""
        job = self.get_job(job_id)
        if job.client_id != user.id:
            logger.warning(f"🚫 User {user.id} is not the owner of job {job_id}")
            raise HTTPException(status_code=403, detail="Access denied: not the job owner")
        return job

    def create_job(self, data: JobCreate, user: User) -> Job:
        """Post a new job owned by the client"""
        job = self.repo.create_job(
            self.db,
            user.id,
            title=data.title,
            description=data.description,
            budget=data.budget,
            category=data.category.value,
            status="open",
        )
        commit_or_rollback(self.db, "create job")
        self.db.refresh(job)

        logger.info(f"📥 Created job {job.id} for client {user.id} (budget={job.budget})")
        return job
