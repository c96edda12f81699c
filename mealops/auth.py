"""JWT authentication — PBKDF2 password hashes and minimal HS256 tokens."""
from __future__ import annotations

import base64
import hashlib
import hmac
import json
import secrets
import time
import uuid
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from mealops.db.engine import get_session
from mealops.db.user_tables import UserRow
from mealops.errors import Forbidden, Unauthorized
from mealops.models import Role

# ---- Password hashing (PBKDF2, stdlib only) ----

_ITERATIONS = 260_000
_SALT_BYTES = 16


def hash_password(password: str) -> str:
    salt = secrets.token_hex(_SALT_BYTES)
    dk = hashlib.pbkdf2_hmac("sha256", password.encode(), salt.encode(), _ITERATIONS)
    return f"{salt}${dk.hex()}"


def verify_password(password: str, stored: str) -> bool:
    if not stored or "$" not in stored:
        return False
    salt, dk_hex = stored.split("$", 1)
    dk = hashlib.pbkdf2_hmac("sha256", password.encode(), salt.encode(), _ITERATIONS)
    return hmac.compare_digest(dk.hex(), dk_hex)


# ---- JWT (minimal, HS256 only) ----

_JWT_ALGO = "HS256"


def _b64url(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode()


def _b64url_decode(s: str) -> bytes:
    s += "=" * (-len(s) % 4)
    return base64.urlsafe_b64decode(s)


def _sign(payload: dict) -> str:
    header = _b64url(json.dumps({"alg": _JWT_ALGO, "typ": "JWT"}).encode())
    body = _b64url(json.dumps(payload).encode())
    sig_input = f"{header}.{body}".encode()
    sig = hmac.new(settings.JWT_SECRET.encode(), sig_input, hashlib.sha256).digest()
    return f"{header}.{body}.{_b64url(sig)}"


def verify_token(token: str, expected_type: str = "access") -> Optional[dict]:
    """Return the payload of a valid, unexpired token of ``expected_type``, else None."""
    parts = token.split(".")
    if len(parts) != 3:
        return None
    sig_input = f"{parts[0]}.{parts[1]}".encode()
    expected = hmac.new(settings.JWT_SECRET.encode(), sig_input, hashlib.sha256).digest()
    try:
        actual = _b64url_decode(parts[2])
        if not hmac.compare_digest(expected, actual):
            return None
        payload = json.loads(_b64url_decode(parts[1]))
    except (ValueError, TypeError):
        # Malformed base64 or JSON
        return None
    if not isinstance(payload, dict):
        return None
    if payload.get("exp", 0) < time.time() or payload.get("type") != expected_type:
        return None
    return payload


def create_tokens(user_id: str) -> dict:
    now = int(time.time())
    nonce = uuid.uuid4().hex[:8]
    access_ttl = settings.ACCESS_TOKEN_TTL_HOURS * 3600
    refresh_ttl = settings.REFRESH_TOKEN_TTL_DAYS * 86400
    access = _sign({"sub": user_id, "iat": now, "exp": now + access_ttl, "type": "access", "jti": nonce})
    refresh = _sign({"sub": user_id, "iat": now, "exp": now + refresh_ttl, "type": "refresh", "jti": nonce + "r"})
    return {"access_token": access, "refresh_token": refresh, "token_type": "bearer"}


# ---- FastAPI dependencies ----

_bearer = HTTPBearer(auto_error=False)


async def get_current_user(
    creds: Optional[HTTPAuthorizationCredentials] = Depends(_bearer),
    session: AsyncSession = Depends(get_session),
) -> Optional[UserRow]:
    if not creds:
        return None
    payload = verify_token(creds.credentials, "access")
    if not payload or not isinstance(payload.get("sub"), str):
        return None
    return await session.get(UserRow, payload["sub"])


async def require_user(user: Optional[UserRow] = Depends(get_current_user)) -> UserRow:
    if not user:
        raise Unauthorized("Authentication required")
    return user


async def require_admin(user: UserRow = Depends(require_user)) -> UserRow:
    # Role is read from the stored row, never from the token
    if user.role != Role.ADMIN:
        raise Forbidden("Admin role required")
    return user
