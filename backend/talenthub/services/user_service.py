import logging

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from talenthub.errors import AuthError, NotFoundError, ValidationError
from talenthub.models.application import Application
from talenthub.models.enums import Role
from talenthub.models.job import Job
from talenthub.models.user import User
from talenthub.policy import Action, authorize
from talenthub.services import storage_service
from talenthub.services.auth_service import check_password_length
from talenthub.utils.dates import utc_now
from talenthub.utils.filters import icontains
from talenthub.utils.security import hash_password, verify_password

logger = logging.getLogger(__name__)

ADMIN_ONLY = "Admin access required"


def update_profile(db: Session, user: User, fields: dict) -> User:
    """Apply a partial profile update. Names may not be blanked."""
    for name_field in ("first_name", "last_name"):
        if name_field in fields and not fields[name_field]:
            raise ValidationError("First name and last name are required")

    for key, value in fields.items():
        setattr(user, key, value)
    user.updated_at = utc_now()

    db.commit()
    db.refresh(user)
    return user


def change_password(db: Session, user: User, current_password: str | None, new_password: str | None):
    if not current_password or not new_password:
        raise ValidationError("Current password and new password are required")
    check_password_length(new_password, label="New password")
    if not verify_password(user.password_hash, current_password):
        raise AuthError("Current password is incorrect")

    user.password_hash = hash_password(new_password)
    user.updated_at = utc_now()
    db.commit()
    logger.info("Password changed for user %s", user.id)


def user_counts(db: Session, user_ids: list[int]) -> dict[int, tuple[int, int]]:
    if not user_ids:
        return {}
    job_rows = (
        db.query(Job.employer_id, func.count(Job.id))
        .filter(Job.employer_id.in_(user_ids))
        .group_by(Job.employer_id)
        .all()
    )
    app_rows = (
        db.query(Application.applicant_id, func.count(Application.id))
        .filter(Application.applicant_id.in_(user_ids))
        .group_by(Application.applicant_id)
        .all()
    )
    jobs = dict(job_rows)
    apps = dict(app_rows)
    return {uid: (jobs.get(uid, 0), apps.get(uid, 0)) for uid in user_ids}


def list_users(
    db: Session,
    actor: User,
    role: Role | None = None,
    search: str | None = None,
    page: int = 1,
    limit: int = 10,
) -> tuple[list[User], int]:
    authorize(actor, Action.LIST_USERS, message=ADMIN_ONLY)

    query = db.query(User)
    if role:
        query = query.filter(User.role == role.value)
    if search:
        query = query.filter(
            or_(
                icontains(User.first_name, search),
                icontains(User.last_name, search),
                icontains(User.email, search),
            )
        )

    total = query.count()
    users = (
        query.order_by(User.created_at.desc(), User.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    return users, total


def _get_user_or_404(db: Session, user_id: int) -> User:
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise NotFoundError("User not found")
    return user


def get_user(db: Session, actor: User, user_id: int) -> User:
    authorize(actor, Action.READ_USER, message=ADMIN_ONLY)
    return _get_user_or_404(db, user_id)


def set_role(db: Session, actor: User, user_id: int, role: Role) -> User:
    authorize(actor, Action.CHANGE_ROLE, message=ADMIN_ONLY)
    if user_id == actor.id:
        raise ValidationError("Cannot change your own role")

    user = _get_user_or_404(db, user_id)
    authorize(actor, Action.CHANGE_ROLE, user, message=ADMIN_ONLY)

    user.role = role.value
    user.updated_at = utc_now()
    db.commit()
    db.refresh(user)
    logger.info("Admin %s set role of user %s to %s", actor.id, user.id, user.role)
    return user


def delete_user(db: Session, actor: User, user_id: int):
    authorize(actor, Action.DELETE_USER, message=ADMIN_ONLY)
    if user_id == actor.id:
        raise ValidationError("Cannot delete your own account")

    user = _get_user_or_404(db, user_id)
    authorize(actor, Action.DELETE_USER, user, message=ADMIN_ONLY)

    # Files of the user's own applications and of applications to the user's jobs.
    files = [f for a in user.applications for f in a.uploaded_files]
    files += [f for j in user.jobs for a in j.applications for f in a.uploaded_files]

    db.delete(user)
    db.commit()
    storage_service.remove_uploads(files)
    logger.info("Admin %s deleted user %s", actor.id, user_id)
