"""Authentication dependencies for retrieving the current user."""

from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, Header, HTTPException, status

from backend.app.core.security import ALLOWED_ROLES, decode_access_token


@dataclass(frozen=True)
class CurrentUser:
    id: str
    email: Optional[str]
    role: str

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"


def get_current_user(authorization: str | None = Header(default=None)) -> CurrentUser:
    # Expect Authorization: Bearer <token>
    if not authorization or not authorization.startswith("Bearer "):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")
    token = authorization.split(" ", 1)[1]
    try:
        payload = decode_access_token(token)
    except ValueError:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")

    subject = payload.get("sub")
    role = payload.get("role") or "staff"
    if not subject or role not in ALLOWED_ROLES:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")
    return CurrentUser(id=str(subject), email=payload.get("email"), role=role)


def get_current_admin(current_user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
    if not current_user.is_admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin access required")
    return current_user
