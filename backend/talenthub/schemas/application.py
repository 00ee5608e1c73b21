from pydantic import BaseModel, ConfigDict

from talenthub.schemas.common import Pagination
from talenthub.schemas.user import ProfileFields


class StatusUpdate(BaseModel):
    status: str | None = None


class ApplicationJobSummary(BaseModel):
    id: int
    title: str
    company: str
    location: str
    type: str
    salary: str | None = None
    remote: bool = False
    status: str
    employer_id: int
    posted_date: str


class ApplicantSummary(ProfileFields):
    model_config = ConfigDict(from_attributes=True)

    id: int
    first_name: str
    last_name: str
    email: str


class ApplicationResponse(BaseModel):
    id: int
    job_id: int
    applicant_id: int
    status: str
    cover_letter: str | None
    resume_path: str
    cover_letter_path: str | None
    created_at: str
    updated_at: str
    job: ApplicationJobSummary | None = None
    applicant: ApplicantSummary | None = None


class ApplicationListResponse(BaseModel):
    applications: list[ApplicationResponse]
    pagination: Pagination


class ApplicationCheckSummary(BaseModel):
    id: int
    status: str
    created_at: str


class ApplicationCheckResponse(BaseModel):
    has_applied: bool
    application: ApplicationCheckSummary | None = None
