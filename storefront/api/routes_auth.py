from typing import Any

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from storefront.api.deps import get_db
from storefront.core.errors import AuthenticationRequired, Conflict
from storefront.db.models import User, RefreshToken
from storefront.schemas import RegisterPayload, LoginPayload, TokenPair, RefreshRequest
from storefront.security.utils import (
    hash_password,
    verify_password,
    create_access_token,
    create_refresh_token,
    token_sha256,
    now_utc,
    read_claims,
    REFRESH,
)

router = APIRouter()  # main.py mounts at /auth


def _issue_pair(db: Session, user: User) -> TokenPair:
    access, _ = create_access_token(user.id, user.email, user.role)
    refresh, jti, exp = create_refresh_token(user.id)
    db.add(
        RefreshToken(
            user_id=user.id,
            jti=jti,
            token_hash=token_sha256(refresh),
            expires_at=exp,
            revoked=False,
            created_at=now_utc(),
        )
    )
    db.commit()
    return TokenPair(access_token=access, refresh_token=refresh)


@router.post("/register", status_code=status.HTTP_201_CREATED)
def register(payload: RegisterPayload, db: Session = Depends(get_db)) -> Any:
    # Prevent duplicate email
    if db.query(User).filter(User.email == str(payload.email)).first():
        raise Conflict("Email already registered")

    user = User(
        email=str(payload.email),
        password_hash=hash_password(payload.password),
        role="customer",
        first_name=payload.first_name or "",
        last_name=payload.last_name or "",
        created_at=now_utc(),
        updated_at=now_utc(),
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return {"id": user.id, "email": user.email, "role": user.role}


@router.post("/login", response_model=TokenPair)
def login(payload: LoginPayload, db: Session = Depends(get_db)) -> TokenPair:
    user = db.query(User).filter(User.email == str(payload.email)).first()
    if not user or not user.password_hash or not verify_password(payload.password, user.password_hash):
        raise AuthenticationRequired("Invalid credentials")
    return _issue_pair(db, user)


@router.post("/refresh", response_model=TokenPair, status_code=status.HTTP_200_OK)
def refresh_token(payload: RefreshRequest, db: Session = Depends(get_db)) -> TokenPair:
    claims = read_claims(payload.refresh_token, REFRESH)

    # Verify token record (not revoked/expired and matches user)
    rt = (
        db.query(RefreshToken)
        .filter(RefreshToken.jti == claims["jti"], RefreshToken.user_id == claims.get("sub"))
        .first()
    )
    if not rt or rt.revoked or rt.expires_at < now_utc():
        raise AuthenticationRequired("Refresh token not valid")

    # Rotate: the used token is revoked
    rt.revoked = True
    db.add(rt)
    return _issue_pair(db, rt.user)


@router.post("/logout", status_code=status.HTTP_200_OK)
def logout(payload: RefreshRequest, db: Session = Depends(get_db)) -> dict:
    claims = read_claims(payload.refresh_token, REFRESH)
    rt = db.query(RefreshToken).filter(RefreshToken.jti == claims["jti"]).first()
    if rt and not rt.revoked:
        rt.revoked = True
        db.add(rt)
        db.commit()
    return {"status": "ok"}
