"""Submitting applications and moving them through review."""

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from talenthub.errors import ConflictError, NotFoundError, ValidationError
from talenthub.models.application import Application
from talenthub.models.enums import ApplicationStatus, JobStatus
from talenthub.models.user import User
from talenthub.policy import Action, authorize
from talenthub.services import job_service, storage_service
from talenthub.services.storage_service import IncomingFile
from talenthub.utils.dates import utc_now

logger = logging.getLogger(__name__)

ALREADY_APPLIED = "You have already applied for this job"


def _find_existing(db: Session, job_id: int, applicant_id: int) -> Application | None:
    return (
        db.query(Application)
        .filter(Application.job_id == job_id, Application.applicant_id == applicant_id)
        .first()
    )


def apply(
    db: Session,
    actor: User,
    job_id: int | None,
    cover_letter: str | None = None,
    resume: IncomingFile | None = None,
    cover_letter_file: IncomingFile | None = None,
    profile_backfill: dict | None = None,
) -> Application:
    authorize(actor, Action.APPLY, message="Applicant access required")
    if not job_id:
        raise ValidationError("Job ID is required")

    job = job_service.get_job(db, job_id)
    if job.status != JobStatus.ACTIVE:
        raise ValidationError("This job is not accepting applications")

    if _find_existing(db, job_id, actor.id):
        raise ConflictError(ALREADY_APPLIED)

    if resume is None:
        raise ValidationError("Resume is required")
    storage_service.validate_upload(resume)
    if cover_letter_file is not None:
        storage_service.validate_upload(cover_letter_file)

    stored = [storage_service.store_upload("resume", resume)]
    if cover_letter_file is not None:
        stored.append(storage_service.store_upload("coverLetterFile", cover_letter_file))

    now = utc_now()
    application = Application(
        job_id=job_id,
        applicant_id=actor.id,
        status=ApplicationStatus.APPLIED.value,
        cover_letter=cover_letter,
        resume_path=stored[0],
        cover_letter_path=stored[1] if len(stored) > 1 else None,
        created_at=now,
        updated_at=now,
    )
    db.add(application)

    backfilled = {k: v for k, v in (profile_backfill or {}).items() if v}
    for key, value in backfilled.items():
        setattr(actor, key, value)
    if backfilled:
        actor.updated_at = now

    # The (job_id, applicant_id) unique constraint settles concurrent submissions.
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        storage_service.remove_uploads(stored)
        raise ConflictError(ALREADY_APPLIED)
    except Exception:
        db.rollback()
        storage_service.remove_uploads(stored)
        raise
    db.refresh(application)

    logger.info("Applicant %s applied to job %s (application %s)", actor.id, job_id, application.id)
    return application


def _paginate(query, page: int, limit: int) -> tuple[list[Application], int]:
    total = query.count()
    applications = (
        query.order_by(Application.created_at.desc(), Application.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    return applications, total


def list_my_applications(
    db: Session,
    actor: User,
    status: ApplicationStatus | None = None,
    page: int = 1,
    limit: int = 10,
) -> tuple[list[Application], int]:
    authorize(actor, Action.LIST_OWN_APPLICATIONS, message="Applicant access required")

    query = db.query(Application).filter(Application.applicant_id == actor.id)
    if status:
        query = query.filter(Application.status == status.value)
    return _paginate(query, page, limit)


def list_applications_for_job(
    db: Session,
    actor: User,
    job_id: int,
    status: ApplicationStatus | None = None,
    page: int = 1,
    limit: int = 10,
) -> tuple[list[Application], int]:
    job = job_service.get_job(db, job_id)
    authorize(
        actor, Action.LIST_JOB_APPLICATIONS, job,
        message="Not authorized to view applications for this job",
    )

    query = db.query(Application).filter(Application.job_id == job_id)
    if status:
        query = query.filter(Application.status == status.value)
    return _paginate(query, page, limit)


def _get_or_404(db: Session, application_id: int) -> Application:
    application = db.query(Application).filter(Application.id == application_id).first()
    if not application:
        raise NotFoundError("Application not found")
    return application


def get_application(db: Session, actor: User, application_id: int) -> Application:
    application = _get_or_404(db, application_id)
    authorize(actor, Action.READ_APPLICATION, application, message="Not authorized to view this application")
    return application


def update_status(db: Session, actor: User, application_id: int, status: ApplicationStatus) -> Application:
    # No terminal states: REJECTED and HIRED can be moved again.
    application = _get_or_404(db, application_id)
    authorize(
        actor, Action.UPDATE_APPLICATION_STATUS, application.job,
        message="Not authorized to update this application",
    )

    previous = application.status
    application.status = status.value
    application.updated_at = utc_now()
    db.commit()
    db.refresh(application)

    logger.info(
        "User %s moved application %s from %s to %s",
        actor.id, application.id, previous, application.status,
    )
    return application


def has_applied(db: Session, actor: User, job_id: int) -> tuple[bool, Application | None]:
    authorize(actor, Action.CHECK_APPLICATION, message="Applicant access required")
    application = _find_existing(db, job_id, actor.id)
    return application is not None, application
