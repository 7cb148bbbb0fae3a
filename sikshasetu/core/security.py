# sikshasetu/core/security.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from jose import JWTError, jwt
from passlib.context import CryptContext

from sikshasetu.core.config import get_settings

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(raw: str) -> str:
    return pwd_context.hash(raw)


def verify_password(raw: str, hashed: str) -> bool:
    return pwd_context.verify(raw, hashed)


@dataclass(frozen=True)
class SessionClaims:
    identity_id: str
    session_id: str
    email: str
    expires_at: datetime


def _encode(payload: Dict[str, Any]) -> str:
    settings = get_settings()
    return jwt.encode(payload, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def issue_session_token(
    identity_id: str,
    session_id: str,
    email: str,
    expires_minutes: Optional[int] = None,
) -> tuple[str, datetime]:
    """
    Signed bearer token bound to one AuthSession row. Revoking the row
    (logout) invalidates the token even before `exp`.
    """
    settings = get_settings()
    exp_minutes = expires_minutes or settings.jwt_access_token_minutes
    now = datetime.now(timezone.utc)
    expires_at = now + timedelta(minutes=exp_minutes)
    token = _encode(
        {
            "sub": identity_id,
            "sid": session_id,
            "email": email,
            "iat": int(now.timestamp()),
            "exp": int(expires_at.timestamp()),
        }
    )
    return token, expires_at


def read_session_claims(token: str) -> Optional[SessionClaims]:
    """
    None for anything that is not a valid, unexpired session token.
    """
    settings = get_settings()
    try:
        payload = jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError:
        return None

    sub = payload.get("sub")
    sid = payload.get("sid")
    if not sub or not sid:
        return None

    return SessionClaims(
        identity_id=str(sub),
        session_id=str(sid),
        email=str(payload.get("email") or ""),
        expires_at=datetime.fromtimestamp(int(payload["exp"]), tz=timezone.utc),
    )
