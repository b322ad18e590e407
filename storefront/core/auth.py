from typing import Optional
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session
import structlog
from storefront.api.deps import get_db
from storefront.core.errors import AuthenticationRequired, AuthorizationError
from storefront.db.models import User
from storefront.security.utils import ACCESS, now_utc, read_claims

logger = structlog.get_logger(__name__)

security = HTTPBearer(auto_error=False)

def get_optional_identity(creds: Optional[HTTPAuthorizationCredentials] = Depends(security)) -> Optional[dict]:
    """Session lookup: the caller's token claims, or None when there is no usable session."""
    if not creds:
        return None
    try:
        return read_claims(creds.credentials, ACCESS)
    except AuthenticationRequired:
        return None

def get_current_identity(creds: Optional[HTTPAuthorizationCredentials] = Depends(security)) -> dict:
    if not creds:
        raise AuthenticationRequired()
    return read_claims(creds.credentials, ACCESS)

def check_admin(db: Session, identity: Optional[dict]) -> User:
    """The caller's users row, provided the caller is signed in as an admin."""
    if not identity:
        raise AuthenticationRequired()
    user = db.get(User, identity["sub"])
    if not user or user.role != "admin":
        raise AuthorizationError()
    return user

def require_admin(identity: dict = Depends(get_current_identity), db: Session = Depends(get_db)) -> User:
    return check_admin(db, identity)

def ensure_user(db: Session, identity: dict) -> User:
    """Return the users row for an identity, creating a customer row when it is missing."""
    user = db.get(User, identity["sub"])
    if user:
        return user
    logger.info("user_row_missing", user_id=identity["sub"])
    user = User(
        id=identity["sub"],
        email=identity.get("email") or f"{identity['sub']}@users.invalid",
        role="customer",
        first_name=identity.get("first_name", ""),
        last_name=identity.get("last_name", ""),
        created_at=now_utc(),
        updated_at=now_utc(),
    )
    db.add(user); db.commit(); db.refresh(user)
    return user
