from fastapi import APIRouter, Depends, File, Form, Query, UploadFile
from sqlalchemy.orm import Session

from talenthub.database import get_db
from talenthub.dependencies import get_current_user
from talenthub.errors import ValidationError
from talenthub.models.application import Application
from talenthub.models.enums import (
    SETTABLE_APPLICATION_STATUSES,
    ApplicationStatus,
    parse_enum,
    parse_optional_filter,
)
from talenthub.models.user import User
from talenthub.policy import Action, authorize
from talenthub.schemas.application import (
    ApplicantSummary,
    ApplicationCheckResponse,
    ApplicationCheckSummary,
    ApplicationJobSummary,
    ApplicationListResponse,
    ApplicationResponse,
    StatusUpdate,
)
from talenthub.schemas.common import Pagination
from talenthub.services import application_service
from talenthub.services.storage_service import read_upload
from talenthub.utils.dates import format_posted_date

router = APIRouter(prefix="/applications", tags=["applications"])


def _application_to_response(app: Application, with_job: bool = True, with_applicant: bool = True) -> ApplicationResponse:
    job = app.job
    return ApplicationResponse(
        id=app.id,
        job_id=app.job_id,
        applicant_id=app.applicant_id,
        status=app.status,
        cover_letter=app.cover_letter,
        resume_path=app.resume_path,
        cover_letter_path=app.cover_letter_path,
        created_at=app.created_at,
        updated_at=app.updated_at,
        job=ApplicationJobSummary(
            id=job.id,
            title=job.title,
            company=job.company,
            location=job.location,
            type=job.type,
            salary=job.salary,
            remote=job.remote,
            status=job.status,
            employer_id=job.employer_id,
            posted_date=format_posted_date(job.created_at),
        ) if with_job else None,
        applicant=ApplicantSummary.model_validate(app.applicant) if with_applicant else None,
    )


@router.post("", response_model=ApplicationResponse, status_code=201)
async def submit_application(
    job_id: int | None = Form(None),
    cover_letter: str | None = Form(None),
    resume: UploadFile | None = File(None),
    cover_letter_file: UploadFile | None = File(None),
    phone: str | None = Form(None),
    location: str | None = Form(None),
    experience: str | None = Form(None),
    current_role: str | None = Form(None),
    expected_salary: str | None = Form(None),
    available_date: str | None = Form(None),
    portfolio: str | None = Form(None),
    linkedin: str | None = Form(None),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    # Uploads are only read once the caller is known to be an applicant.
    authorize(user, Action.APPLY, message="Applicant access required")
    application = application_service.apply(
        db,
        user,
        job_id,
        cover_letter=cover_letter,
        resume=await read_upload(resume),
        cover_letter_file=await read_upload(cover_letter_file),
        profile_backfill={
            "phone": phone,
            "location": location,
            "experience": experience,
            "current_role": current_role,
            "expected_salary": expected_salary,
            "available_date": available_date,
            "portfolio": portfolio,
            "linkedin": linkedin,
        },
    )
    return _application_to_response(application)


@router.get("/my-applications", response_model=ApplicationListResponse)
async def list_my_applications(
    status: str | None = None,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    applications, total = application_service.list_my_applications(
        db,
        user,
        status=parse_optional_filter(ApplicationStatus, status, "status", "valid_statuses"),
        page=page,
        limit=limit,
    )
    return ApplicationListResponse(
        applications=[_application_to_response(a, with_applicant=False) for a in applications],
        pagination=Pagination.build(page, limit, total),
    )


@router.get("/job/{job_id}", response_model=ApplicationListResponse)
async def list_job_applications(
    job_id: int,
    status: str | None = None,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    applications, total = application_service.list_applications_for_job(
        db,
        user,
        job_id,
        status=parse_optional_filter(ApplicationStatus, status, "status", "valid_statuses"),
        page=page,
        limit=limit,
    )
    return ApplicationListResponse(
        applications=[_application_to_response(a) for a in applications],
        pagination=Pagination.build(page, limit, total),
    )


@router.get("/check/{job_id}", response_model=ApplicationCheckResponse)
async def check_application(
    job_id: int,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    applied, application = application_service.has_applied(db, user, job_id)
    return ApplicationCheckResponse(
        has_applied=applied,
        application=ApplicationCheckSummary(
            id=application.id,
            status=application.status,
            created_at=application.created_at,
        ) if application else None,
    )


@router.patch("/{application_id}/status", response_model=ApplicationResponse)
async def update_status(
    application_id: int,
    req: StatusUpdate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    if not req.status:
        raise ValidationError("Status is required")
    status = parse_enum(
        ApplicationStatus, req.status, "status", "valid_statuses",
        allowed=SETTABLE_APPLICATION_STATUSES,
    )
    application = application_service.update_status(db, user, application_id, status)
    return _application_to_response(application)


@router.get("/{application_id}", response_model=ApplicationResponse)
async def get_application(
    application_id: int,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    application = application_service.get_application(db, user, application_id)
    return _application_to_response(application)
