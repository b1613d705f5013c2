"""
app/api/routers/auth_router.py

Account registration and cookie session endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from app.auth import (
    SessionPrincipal,
    clear_session_cookie,
    create_session_token,
    get_session,
    set_session_cookie,
)
from app.config import AuthSettings, get_auth_settings
from app.schemas.auth import AuthResponse, LoginRequest, MeResponse, RegisterRequest, UserResponse
from app.schemas.admin import SuccessResponse
from app.services.account_service import (
    AccountService,
    SignupDisabledError,
    get_account_service,
    to_principal,
)
from db.models.user import User
from db.repositories.errors import UserAlreadyExistsError
from db.session import get_db

router = APIRouter(prefix="/auth", tags=["auth"])


def _user_response(user: User) -> UserResponse:
    return UserResponse(id=user.id, email=user.email, name=user.name, plan=user.plan, role=user.role)


@router.post("/register", response_model=AuthResponse)
def register(
    payload: RegisterRequest,
    response: Response,
    db: Session = Depends(get_db),
    settings: AuthSettings = Depends(get_auth_settings),
    account_service: AccountService = Depends(get_account_service),
) -> AuthResponse:
    try:
        user = account_service.register(
            db=db,
            name=payload.name,
            email=payload.email,
            password=payload.password,
        )
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except SignupDisabledError as exc:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(exc)) from exc
    except UserAlreadyExistsError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Email already registered") from exc

    set_session_cookie(response, create_session_token(to_principal(user), settings), settings)
    return AuthResponse(user=_user_response(user))


@router.post("/login", response_model=AuthResponse)
def login(
    payload: LoginRequest,
    response: Response,
    db: Session = Depends(get_db),
    settings: AuthSettings = Depends(get_auth_settings),
    account_service: AccountService = Depends(get_account_service),
) -> AuthResponse:
    user = account_service.authenticate(db=db, email=payload.email, password=payload.password)
    if user is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid email or password")

    set_session_cookie(response, create_session_token(to_principal(user), settings), settings)
    return AuthResponse(user=_user_response(user))


@router.post("/logout", response_model=SuccessResponse)
def logout(
    response: Response,
    settings: AuthSettings = Depends(get_auth_settings),
) -> SuccessResponse:
    clear_session_cookie(response, settings)
    return SuccessResponse()


@router.get("/me", response_model=MeResponse)
def me(
    session: SessionPrincipal | None = Depends(get_session),
    db: Session = Depends(get_db),
    account_service: AccountService = Depends(get_account_service),
) -> MeResponse:
    if session is None:
        return MeResponse(user=None)
    user = account_service.get_user(db=db, principal=session)
    return MeResponse(user=_user_response(user) if user is not None else None)
