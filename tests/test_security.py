import pytest
from fastapi import HTTPException

from backend.app.core.security import create_access_token
from backend.app.dependencies.auth import get_current_admin, get_current_user


def test_get_current_user_reads_bearer_token():
    token = create_access_token("user-1", email="staff@example.com")
    user = get_current_user(authorization=f"Bearer {token}")
    assert user.id == "user-1"
    assert user.email == "staff@example.com"
    assert user.role == "staff"
    assert not user.is_admin


def test_get_current_user_rejects_missing_header():
    with pytest.raises(HTTPException) as exc_info:
        get_current_user(authorization=None)
    assert exc_info.value.status_code == 401


def test_get_current_user_rejects_unknown_role():
    token = create_access_token("user-2", role="superuser")
    with pytest.raises(HTTPException) as exc_info:
        get_current_user(authorization=f"Bearer {token}")
    assert exc_info.value.status_code == 401


def test_get_current_admin_requires_admin_role():
    staff = get_current_user(authorization=f"Bearer {create_access_token('user-3')}")
    with pytest.raises(HTTPException) as exc_info:
        get_current_admin(current_user=staff)
    assert exc_info.value.status_code == 403

    admin = get_current_user(authorization=f"Bearer {create_access_token('user-4', role='admin')}")
    assert get_current_admin(current_user=admin) is admin
