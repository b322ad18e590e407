"""Password hashing and the access/refresh token pair."""
from datetime import datetime, timedelta
from typing import Tuple
import hashlib, uuid

import jwt
from passlib.context import CryptContext

from storefront.core.config import settings
from storefront.core.errors import AuthenticationRequired

pwd_ctx = CryptContext(schemes=['bcrypt'], deprecated='auto')

ACCESS = 'access'
REFRESH = 'refresh'

def hash_password(p: str) -> str: return pwd_ctx.hash(p)

def verify_password(p: str, h: str) -> bool: return pwd_ctx.verify(p, h)

def now_utc() -> datetime: return datetime.utcnow()

def token_sha256(t: str) -> str: return hashlib.sha256(t.encode('utf-8')).hexdigest()

def _encode(claims: dict, ttl: timedelta) -> Tuple[str, datetime]:
    exp = now_utc() + ttl
    return jwt.encode({**claims, 'exp': exp}, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM), exp

def create_access_token(user_id: str, email: str, role: str) -> Tuple[str, datetime]:
    claims = {'sub': user_id, 'email': email, 'role': role, 'type': ACCESS}
    return _encode(claims, timedelta(seconds=settings.ACCESS_TOKEN_EXPIRES_SECONDS))

def create_refresh_token(user_id: str) -> Tuple[str, str, datetime]:
    jti = uuid.uuid4().hex
    token, exp = _encode({'sub': user_id, 'jti': jti, 'type': REFRESH}, timedelta(days=settings.REFRESH_TOKEN_EXPIRES_DAYS))
    return token, jti, exp

def decode_token(token: str) -> dict:
    return jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])

def read_claims(token: str, kind: str) -> dict:
    """Decode a token of the given kind; anything else is an ``AuthenticationRequired``."""
    try:
        claims = decode_token(token)
    except jwt.PyJWTError:
        raise AuthenticationRequired("Invalid token")
    if claims.get('type') != kind or not claims.get('sub'):
        raise AuthenticationRequired("Invalid token type")
    if kind == REFRESH and not claims.get('jti'):
        raise AuthenticationRequired("Invalid token type")
    return claims
