from pydantic import BaseModel, ConfigDict

from talenthub.schemas.common import Pagination


class ProfileFields(BaseModel):
    phone: str | None = None
    location: str | None = None
    experience: str | None = None
    current_role: str | None = None
    expected_salary: str | None = None
    available_date: str | None = None
    portfolio: str | None = None
    linkedin: str | None = None


PROFILE_FIELDS = tuple(ProfileFields.model_fields)


class RegisterRequest(ProfileFields):
    first_name: str | None = None
    last_name: str | None = None
    email: str | None = None
    password: str | None = None
    role: str = "applicant"


class LoginRequest(BaseModel):
    email: str | None = None
    password: str | None = None


class ProfileUpdate(ProfileFields):
    first_name: str | None = None
    last_name: str | None = None


class PasswordChange(BaseModel):
    current_password: str | None = None
    new_password: str | None = None


class RoleUpdate(BaseModel):
    role: str | None = None


class UserResponse(ProfileFields):
    model_config = ConfigDict(from_attributes=True)

    id: int
    first_name: str
    last_name: str
    email: str
    role: str
    created_at: str
    updated_at: str


class UserAdminResponse(UserResponse):
    jobs_count: int = 0
    applications_count: int = 0


class UserSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    first_name: str
    last_name: str


class AuthResponse(BaseModel):
    message: str
    user: UserResponse
    token: str


class UserListResponse(BaseModel):
    users: list[UserAdminResponse]
    pagination: Pagination
