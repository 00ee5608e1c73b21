from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from talenthub.database import get_db
from talenthub.dependencies import get_current_user
from talenthub.models.enums import JobStatus, JobType, parse_enum, parse_optional_filter
from talenthub.models.job import Job
from talenthub.models.user import User
from talenthub.schemas.common import MessageResponse, Pagination
from talenthub.schemas.job import JobCreate, JobListResponse, JobResponse, JobUpdate
from talenthub.schemas.user import UserSummary
from talenthub.services import job_service
from talenthub.utils.dates import format_posted_date

router = APIRouter(prefix="/jobs", tags=["jobs"])


def _job_to_response(job: Job, applications_count: int = 0) -> JobResponse:
    return JobResponse(
        id=job.id,
        title=job.title,
        company=job.company,
        location=job.location,
        type=job.type,
        salary=job.salary,
        description=job.description,
        requirements=job.requirements,
        benefits=job.benefits,
        remote=job.remote,
        status=job.status,
        posted_date=format_posted_date(job.created_at),
        applications_count=applications_count,
        employer=UserSummary.model_validate(job.employer) if job.employer else None,
        created_at=job.created_at,
        updated_at=job.updated_at,
    )


def _job_list(db: Session, jobs: list[Job], total: int, page: int, limit: int) -> JobListResponse:
    counts = job_service.count_applications(db, [j.id for j in jobs])
    return JobListResponse(
        jobs=[_job_to_response(j, counts[j.id]) for j in jobs],
        pagination=Pagination.build(page, limit, total),
    )


@router.get("", response_model=JobListResponse)
async def list_jobs(
    search: str | None = None,
    type: str | None = None,
    location: str | None = None,
    status: str = "ACTIVE",
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    db: Session = Depends(get_db),
):
    jobs, total = job_service.list_jobs(
        db,
        search=search,
        job_type=parse_optional_filter(JobType, type, "job type", "valid_types"),
        location=location,
        status=parse_optional_filter(JobStatus, status, "status", "valid_statuses"),
        page=page,
        limit=limit,
    )
    return _job_list(db, jobs, total, page, limit)


@router.get("/employer/my-jobs", response_model=JobListResponse)
async def list_my_jobs(
    status: str | None = None,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    jobs, total = job_service.list_my_jobs(
        db,
        user,
        status=parse_optional_filter(JobStatus, status, "status", "valid_statuses"),
        page=page,
        limit=limit,
    )
    return _job_list(db, jobs, total, page, limit)


@router.get("/{job_id}", response_model=JobResponse)
async def get_job(job_id: int, db: Session = Depends(get_db)):
    job = job_service.get_job(db, job_id)
    counts = job_service.count_applications(db, [job.id])
    return _job_to_response(job, counts[job.id])


@router.post("", response_model=JobResponse, status_code=201)
async def create_job(
    req: JobCreate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    job_type = parse_enum(JobType, req.type, "job type", "valid_types") if req.type else None
    job = job_service.create_job(db, user, req.model_dump(exclude={"type"}), job_type)
    return _job_to_response(job)


@router.put("/{job_id}", response_model=JobResponse)
async def update_job(
    job_id: int,
    req: JobUpdate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    update_data = req.model_dump(exclude_unset=True)
    if update_data.get("remote") is None:
        update_data.pop("remote", None)
    raw_type = update_data.pop("type", None)
    raw_status = update_data.pop("status", None)
    job = job_service.update_job(
        db,
        user,
        job_id,
        update_data,
        job_type=parse_enum(JobType, raw_type, "job type", "valid_types") if raw_type else None,
        status=parse_enum(JobStatus, raw_status, "status", "valid_statuses") if raw_status else None,
    )
    counts = job_service.count_applications(db, [job.id])
    return _job_to_response(job, counts[job.id])


@router.delete("/{job_id}", response_model=MessageResponse)
async def delete_job(
    job_id: int,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    job_service.delete_job(db, user, job_id)
    return {"message": "Job deleted successfully"}
