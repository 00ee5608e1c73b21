import logging

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from talenthub.errors import NotFoundError, ValidationError
from talenthub.models.application import Application
from talenthub.models.enums import JobStatus, JobType
from talenthub.models.job import Job
from talenthub.models.user import User
from talenthub.policy import Action, authorize
from talenthub.services import storage_service
from talenthub.utils.dates import utc_now
from talenthub.utils.filters import icontains

logger = logging.getLogger(__name__)

JOB_REQUIRED = ("title", "company", "location", "type", "description")


def _paginate(query, page: int, limit: int) -> tuple[list[Job], int]:
    total = query.count()
    jobs = (
        query.order_by(Job.created_at.desc(), Job.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    return jobs, total


def list_jobs(
    db: Session,
    search: str | None = None,
    job_type: JobType | None = None,
    location: str | None = None,
    status: JobStatus | None = JobStatus.ACTIVE,
    page: int = 1,
    limit: int = 10,
) -> tuple[list[Job], int]:
    """Public listing. ``status=None`` lists every status."""
    query = db.query(Job)

    if status:
        query = query.filter(Job.status == status.value)
    if search:
        query = query.filter(
            or_(
                icontains(Job.title, search),
                icontains(Job.company, search),
                icontains(Job.description, search),
            )
        )
    if job_type:
        query = query.filter(Job.type == job_type.value)
    if location and location.lower() != "all":
        if location.lower() == "remote":
            query = query.filter(Job.remote.is_(True))
        elif location.lower() == "onsite":
            query = query.filter(Job.remote.is_(False))
        else:
            query = query.filter(icontains(Job.location, location))

    return _paginate(query, page, limit)


def get_job(db: Session, job_id: int) -> Job:
    job = db.query(Job).filter(Job.id == job_id).first()
    if not job:
        raise NotFoundError("Job not found")
    return job


def count_applications(db: Session, job_ids: list[int]) -> dict[int, int]:
    if not job_ids:
        return {}
    rows = (
        db.query(Application.job_id, func.count(Application.id))
        .filter(Application.job_id.in_(job_ids))
        .group_by(Application.job_id)
        .all()
    )
    counts = dict(rows)
    return {job_id: counts.get(job_id, 0) for job_id in job_ids}


def create_job(db: Session, actor: User, fields: dict, job_type: JobType | None) -> Job:
    authorize(actor, Action.CREATE_JOB, message="Employer access required")

    missing = [f for f in JOB_REQUIRED if f != "type" and not fields.get(f)]
    if missing or job_type is None:
        raise ValidationError("Missing required fields", required=list(JOB_REQUIRED))

    now = utc_now()
    job = Job(
        title=fields["title"],
        company=fields["company"],
        location=fields["location"],
        type=job_type.value,
        salary=fields.get("salary"),
        description=fields["description"],
        requirements=fields.get("requirements"),
        benefits=fields.get("benefits"),
        remote=bool(fields.get("remote")),
        status=JobStatus.ACTIVE.value,
        employer_id=actor.id,
        created_at=now,
        updated_at=now,
    )
    db.add(job)
    db.commit()
    db.refresh(job)

    logger.info("Employer %s created job %s", actor.id, job.id)
    return job


def update_job(
    db: Session,
    actor: User,
    job_id: int,
    fields: dict,
    job_type: JobType | None = None,
    status: JobStatus | None = None,
) -> Job:
    """Partial update. ``fields`` holds only the submitted plain columns."""
    job = get_job(db, job_id)
    authorize(actor, Action.UPDATE_JOB, job, message="Not authorized to update this job")

    for required in JOB_REQUIRED:
        if required in fields and not fields[required]:
            raise ValidationError(f"{required.capitalize()} cannot be empty")

    for key, value in fields.items():
        setattr(job, key, value)
    if job_type is not None:
        job.type = job_type.value
    if status is not None:
        job.status = status.value
    job.updated_at = utc_now()

    db.commit()
    db.refresh(job)
    return job


def delete_job(db: Session, actor: User, job_id: int):
    job = get_job(db, job_id)
    authorize(actor, Action.DELETE_JOB, job, message="Not authorized to delete this job")

    n_applications = len(job.applications)
    files = [f for a in job.applications for f in a.uploaded_files]
    db.delete(job)
    db.commit()
    storage_service.remove_uploads(files)
    logger.info("User %s deleted job %s (%d applications)", actor.id, job_id, n_applications)


def list_my_jobs(
    db: Session,
    actor: User,
    status: JobStatus | None = None,
    page: int = 1,
    limit: int = 10,
) -> tuple[list[Job], int]:
    authorize(actor, Action.LIST_OWN_JOBS, message="Employer access required")

    query = db.query(Job).filter(Job.employer_id == actor.id)
    if status:
        query = query.filter(Job.status == status.value)
    return _paginate(query, page, limit)
