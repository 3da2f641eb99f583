"""JWT helpers for tokens issued by the external identity provider.

The billing service never stores credentials. It only verifies bearer tokens
signed with the shared secret; ``create_access_token`` exists for local
development and tests.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import jwt

from backend.app.core.settings import get_settings

ALLOWED_ROLES = ("admin", "staff")


def create_access_token(
    subject: str,
    *,
    email: Optional[str] = None,
    role: str = "staff",
    expires_minutes: Optional[int] = None,
) -> str:
    settings = get_settings()
    expire_delta = timedelta(
        minutes=expires_minutes if expires_minutes is not None else settings.ACCESS_TOKEN_EXPIRE_MINUTES
    )
    expire = datetime.now(timezone.utc) + expire_delta
    payload = {"sub": str(subject), "email": email, "role": role, "exp": expire}
    return jwt.encode(payload, settings.SECRET_KEY, algorithm="HS256")


def decode_access_token(token: str) -> Dict[str, Any]:
    settings = get_settings()
    try:
        return jwt.decode(token, settings.SECRET_KEY, algorithms=["HS256"])
    except jwt.ExpiredSignatureError as exc:
        raise ValueError("Expired token") from exc
    except jwt.InvalidTokenError as exc:
        raise ValueError("Invalid token") from exc
