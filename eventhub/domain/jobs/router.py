"""Job router - FastAPI endpoints for the job board"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Path, Query
from sqlalchemy.orm import Session

from ...auth import get_current_client, get_current_user
from ...database import get_db
from ...models import Job, JobCategory, User
from ...shared.validators import MAX_DB_INT
from .schemas import JobCreate, JobResponse
from .service import JobService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/jobs", tags=["Jobs"])


def get_job_service(db: Session = Depends(get_db)) -> JobService:
    """Dependency injection for JobService"""
    return JobService(db)


def job_to_response(job: Job) -> JobResponse:
    return JobResponse(
        id=job.id,
        title=job.title,
        description=job.description,
        budget=job.budget,
        category=job.category,
        clientId=job.client_id,
        status=job.status,
        createdAt=job.created_at,
    )


@router.post("", response_model=JobResponse, status_code=201)
async def create_job(
    data: JobCreate,
    current_user: User = Depends(get_current_client),
    service: JobService = Depends(get_job_service),
):
    """Post a new job (clients only)"""
    job = service.create_job(data, current_user)
    return job_to_response(job)


@router.get("", response_model=list[JobResponse])
async def get_jobs(
    clientId: Optional[int] = Query(
        None, le=MAX_DB_INT, description="Only jobs posted by this client"
    ),
    category: Optional[JobCategory] = Query(None),
    status: Optional[str] = Query(None, description="Filter by job status"),
    current_user: User = Depends(get_current_user),
    service: JobService = Depends(get_job_service),
):
    """List jobs, newest first"""
    jobs = service.get_jobs(clientId, category.value if category else None, status)
    return [job_to_response(j) for j in jobs]


@router.get("/{job_id}", response_model=JobResponse)
async def get_job(
    job_id: int = Path(..., le=MAX_DB_INT),
    current_user: User = Depends(get_current_user),
    service: JobService = Depends(get_job_service),
):
    """Get a single job"""
    return job_to_response(service.get_job(job_id))
