from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any

from jose import JWTError, jwt
from pydantic import BaseModel, ValidationError

from .config import Settings, settings as default_settings

ALGORITHM = "HS256"


class TokenPayload(BaseModel):
    sub: str
    exp: datetime
    iat: datetime
    aud: str
    iss: str


def _now() -> datetime:
    return datetime.now(tz=timezone.utc)


def create_access_token(
    subject: str,
    *,
    expires_delta: timedelta | None = None,
    config: Settings | None = None,
) -> str:
    """Mint a bearer token for ``subject``. Used by operators and tests; sign-in
    itself happens in the identity provider in front of this service."""
    cfg = config or default_settings
    now = _now()
    delta = expires_delta if expires_delta is not None else timedelta(minutes=cfg.JWT_ACCESS_TTL_MIN)
    payload: dict[str, Any] = {
        "sub": subject,
        "iat": int(now.timestamp()),
        "exp": int((now + delta).timestamp()),
        "aud": cfg.JWT_AUDIENCE,
        "iss": cfg.JWT_ISSUER,
    }
    return jwt.encode(payload, cfg.JWT_SECRET, algorithm=ALGORITHM)


def decode_token(token: str, *, config: Settings | None = None) -> TokenPayload:
    cfg = config or default_settings
    try:
        decoded = jwt.decode(
            token,
            cfg.JWT_SECRET,
            algorithms=[ALGORITHM],
            audience=cfg.JWT_AUDIENCE,
            issuer=cfg.JWT_ISSUER,
        )
    except JWTError as exc:
        raise ValueError("Invalid token") from exc
    try:
        payload = TokenPayload.model_validate(decoded)
    except ValidationError as exc:
        raise ValueError("Invalid token payload") from exc
    if not payload.sub.strip():
        raise ValueError("Token subject is empty")
    return payload
