"""Company settings routes."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from backend.app.api.errors import to_http_exception
from backend.app.core.errors import BillingError
from backend.app.crud.crud_company_settings import company_settings_crud
from backend.app.db.session import get_db
from backend.app.dependencies.auth import CurrentUser, get_current_admin, get_current_user
from backend.app.schemas.company_settings import CompanySettingsRead, CompanySettingsUpdate

router = APIRouter(prefix="/settings", tags=["settings"])


@router.get("/company", response_model=CompanySettingsRead)
async def get_company_settings(db: Session = Depends(get_db), current_user: CurrentUser = Depends(get_current_user)):
    return company_settings_crud.get(db)


@router.put("/company", response_model=CompanySettingsRead)
async def update_company_settings(
    payload: CompanySettingsUpdate,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_admin),
):
    try:
        return company_settings_crud.update(db, obj_in=payload)
    except BillingError as exc:
        raise to_http_exception(exc)
