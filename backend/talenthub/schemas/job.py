from pydantic import BaseModel

from talenthub.schemas.common import Pagination
from talenthub.schemas.user import UserSummary


class JobCreate(BaseModel):
    title: str | None = None
    company: str | None = None
    location: str | None = None
    type: str | None = None
    salary: str | None = None
    description: str | None = None
    requirements: str | None = None
    benefits: str | None = None
    remote: bool = False


class JobUpdate(BaseModel):
    title: str | None = None
    company: str | None = None
    location: str | None = None
    type: str | None = None
    salary: str | None = None
    description: str | None = None
    requirements: str | None = None
    benefits: str | None = None
    remote: bool | None = None
    status: str | None = None


class JobResponse(BaseModel):
    id: int
    title: str
    company: str
    location: str
    type: str
    salary: str | None
    description: str
    requirements: str | None
    benefits: str | None
    remote: bool
    status: str
    posted_date: str
    applications_count: int = 0
    employer: UserSummary | None = None
    created_at: str
    updated_at: str


class JobListResponse(BaseModel):
    jobs: list[JobResponse]
    pagination: Pagination
