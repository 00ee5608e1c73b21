from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from talenthub.database import get_db
from talenthub.dependencies import get_current_user
from talenthub.models.enums import Role, parse_enum
from talenthub.models.user import User
from talenthub.schemas.user import (
    PROFILE_FIELDS,
    AuthResponse,
    LoginRequest,
    RegisterRequest,
    UserResponse,
)
from talenthub.services import auth_service

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=AuthResponse, status_code=201)
async def register(req: RegisterRequest, db: Session = Depends(get_db)):
    role = parse_enum(Role, req.role or Role.APPLICANT, "role", "valid_roles")
    user, token = auth_service.register(
        db,
        first_name=req.first_name,
        last_name=req.last_name,
        email=req.email,
        password=req.password,
        role=role,
        profile=req.model_dump(include=set(PROFILE_FIELDS)),
    )
    return AuthResponse(
        message="User registered successfully",
        user=UserResponse.model_validate(user),
        token=token,
    )


@router.post("/login", response_model=AuthResponse)
async def login(req: LoginRequest, db: Session = Depends(get_db)):
    user, token = auth_service.login(db, req.email, req.password)
    return AuthResponse(
        message="Login successful",
        user=UserResponse.model_validate(user),
        token=token,
    )


@router.get("/me", response_model=UserResponse)
async def me(user: User = Depends(get_current_user)):
    return UserResponse.model_validate(user)
