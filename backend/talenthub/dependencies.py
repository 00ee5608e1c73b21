from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from talenthub.database import get_db
from talenthub.models.user import User
from talenthub.services import auth_service

# auto_error=False so a missing header is reported in our own error format.
bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> User:
    token = credentials.credentials if credentials else None
    return auth_service.get_user_for_token(db, token)
