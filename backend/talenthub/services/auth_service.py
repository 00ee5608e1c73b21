"""Registration, login and token resolution."""

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from talenthub.errors import AuthError, ConflictError, NotFoundError, ValidationError
from talenthub.models.enums import Role
from talenthub.models.user import User
from talenthub.utils.dates import utc_now
from talenthub.utils.security import (
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6
REGISTER_REQUIRED = ("first_name", "last_name", "email", "password", "role")


def issue_token(user: User) -> str:
    return create_access_token(user.id, user.email, user.role)


def check_password_length(password: str, label: str = "Password"):
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"{label} must be at least {MIN_PASSWORD_LENGTH} characters long")


def register(
    db: Session,
    first_name: str | None,
    last_name: str | None,
    email: str | None,
    password: str | None,
    role: Role = Role.APPLICANT,
    profile: dict | None = None,
) -> tuple[User, str]:
    if not all((first_name, last_name, email, password, role)):
        raise ValidationError("Missing required fields", required=list(REGISTER_REQUIRED))
    check_password_length(password)

    if db.query(User).filter(User.email == email).first():
        raise ConflictError("User with this email already exists")

    now = utc_now()
    user = User(
        first_name=first_name,
        last_name=last_name,
        email=email,
        password_hash=hash_password(password),
        role=Role(role).value,
        created_at=now,
        updated_at=now,
    )
    for key, value in (profile or {}).items():
        if value:
            setattr(user, key, value)

    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError("User with this email already exists")
    db.refresh(user)

    logger.info("Registered user %s as %s", user.id, user.role)
    return user, issue_token(user)


def login(db: Session, email: str | None, password: str | None) -> tuple[User, str]:
    if not email or not password:
        raise ValidationError("Email and password are required")

    user = db.query(User).filter(User.email == email).first()
    # Same message for unknown email and wrong password.
    if not user or not verify_password(user.password_hash, password):
        logger.info("Failed login for %s", email)
        raise AuthError("Invalid email or password")

    return user, issue_token(user)


def get_user_for_token(db: Session, token: str | None) -> User:
    if not token:
        raise AuthError("Access token required")
    payload = decode_access_token(token)
    user = db.query(User).filter(User.id == payload["user_id"]).first()
    if not user:
        raise NotFoundError("User not found")
    return user
