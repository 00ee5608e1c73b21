from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from talenthub.database import get_db
from talenthub.dependencies import get_current_user
from talenthub.errors import ValidationError
from talenthub.models.enums import Role, parse_enum, parse_optional_filter
from talenthub.models.user import User
from talenthub.schemas.common import MessageResponse, Pagination
from talenthub.schemas.stats import ActivityFeed, StatsOverview
from talenthub.schemas.user import (
    PasswordChange,
    ProfileUpdate,
    RoleUpdate,
    UserAdminResponse,
    UserListResponse,
    UserResponse,
)
from talenthub.services import stats_service, user_service

router = APIRouter(prefix="/users", tags=["users"])


def _user_to_admin_response(user: User, counts: tuple[int, int]) -> UserAdminResponse:
    jobs_count, applications_count = counts
    return UserAdminResponse(
        **UserResponse.model_validate(user).model_dump(),
        jobs_count=jobs_count,
        applications_count=applications_count,
    )


@router.get("/profile", response_model=UserResponse)
async def get_profile(user: User = Depends(get_current_user)):
    return UserResponse.model_validate(user)


@router.put("/profile", response_model=UserResponse)
async def update_profile(
    req: ProfileUpdate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    updated = user_service.update_profile(db, user, req.model_dump(exclude_unset=True))
    return UserResponse.model_validate(updated)


@router.put("/change-password", response_model=MessageResponse)
async def change_password(
    req: PasswordChange,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    user_service.change_password(db, user, req.current_password, req.new_password)
    return {"message": "Password changed successfully"}


@router.get("/stats/overview", response_model=StatsOverview)
async def stats_overview(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return stats_service.overview(db, user)


@router.get("/stats/recent-activity", response_model=ActivityFeed)
async def recent_activity(
    limit: int = Query(10, ge=1, le=50),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return {"items": stats_service.recent_activity(db, user, limit=limit)}


@router.get("", response_model=UserListResponse)
async def list_users(
    role: str | None = None,
    search: str | None = None,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    users, total = user_service.list_users(
        db,
        user,
        role=parse_optional_filter(Role, role, "role", "valid_roles"),
        search=search,
        page=page,
        limit=limit,
    )
    counts = user_service.user_counts(db, [u.id for u in users])
    return UserListResponse(
        users=[_user_to_admin_response(u, counts[u.id]) for u in users],
        pagination=Pagination.build(page, limit, total),
    )


@router.get("/{user_id}", response_model=UserAdminResponse)
async def get_user(
    user_id: int,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    target = user_service.get_user(db, user, user_id)
    counts = user_service.user_counts(db, [target.id])
    return _user_to_admin_response(target, counts[target.id])


@router.patch("/{user_id}/role", response_model=UserResponse)
async def set_role(
    user_id: int,
    req: RoleUpdate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    if not req.role:
        raise ValidationError("Role is required")
    role = parse_enum(Role, req.role, "role", "valid_roles")
    updated = user_service.set_role(db, user, user_id, role)
    return UserResponse.model_validate(updated)


@router.delete("/{user_id}", response_model=MessageResponse)
async def delete_user(
    user_id: int,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    user_service.delete_user(db, user, user_id)
    return {"message": "User deleted successfully"}
