"""Billing dashboard endpoint."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from backend.app.core.time import today
from backend.app.crud.crud_client import client_crud
from backend.app.crud.crud_document import invoice_crud, quote_crud
from backend.app.db.session import get_db
from backend.app.dependencies.auth import CurrentUser, get_current_user
from backend.app.services.dashboard import get_dashboard_summary

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("/summary")
async def get_summary(db: Session = Depends(get_db), current_user: CurrentUser = Depends(get_current_user)):
    return get_dashboard_summary(
        invoice_crud.list_documents(db),
        quote_crud.list_documents(db),
        client_count=len(client_crud.get_multi(db)),
        today=today(),
    )
