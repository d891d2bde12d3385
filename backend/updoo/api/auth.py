from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from updoo.auth import create_access_token, get_current_user, hash_password, verify_password
from updoo.database import get_db
from updoo.models.enums import Role
from updoo.models.user import User
from updoo.schemas.auth import AuthResponse, LoginRequest, MeResponse, RegisterRequest


router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/register", response_model=AuthResponse)
def register(payload: RegisterRequest, db: Session = Depends(get_db)) -> AuthResponse:
    email = payload.email.strip().lower()

    existing = db.query(User).filter(User.email == email).first()
    if existing:
        raise HTTPException(status_code=409, detail="Email already registered")

    user = User(
        email=email,
        password_hash=hash_password(payload.password),
        role=Role(payload.role),
        language=payload.language,
        name=(payload.name or "").strip() or None,
        surname=(payload.surname or "").strip() or None,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info("Registered %s account %s", user.role.value, user.id)

    token = create_access_token(user.id)
    return AuthResponse(access_token=token, email=user.email, role=user.role)


@router.post("/login", response_model=AuthResponse)
def login(payload: LoginRequest, db: Session = Depends(get_db)) -> AuthResponse:
    email = payload.email.strip().lower()
    user = db.query(User).filter(User.email == email).first()
    if not user or not verify_password(payload.password, user.password_hash):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid email or password")
    if not user.is_active:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Account disabled")

    token = create_access_token(user.id)
    return AuthResponse(access_token=token, email=user.email, role=user.role)


@router.get("/me", response_model=MeResponse)
def me(current_user: User = Depends(get_current_user)) -> MeResponse:
    return MeResponse(
        id=current_user.id,
        email=current_user.email,
        role=current_user.role,
        language=current_user.language,
        name=current_user.name,
        surname=current_user.surname,
    )
