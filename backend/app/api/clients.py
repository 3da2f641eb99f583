"""Client routes."""

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from backend.app.api.errors import to_http_exception
from backend.app.core.errors import BillingError
from backend.app.crud.crud_client import client_crud
from backend.app.db.session import get_db
from backend.app.dependencies.auth import CurrentUser, get_current_user
from backend.app.schemas.client import ClientCreate, ClientRead, ClientUpdate

router = APIRouter(prefix="/clients", tags=["clients"])


@router.post("/", response_model=ClientRead, status_code=status.HTTP_201_CREATED)
async def create_client(
    client_in: ClientCreate,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    try:
        return client_crud.create(db, obj_in=client_in)
    except BillingError as exc:
        raise to_http_exception(exc)


@router.get("/", response_model=list[ClientRead])
async def list_clients(db: Session = Depends(get_db), current_user: CurrentUser = Depends(get_current_user)):
    return client_crud.get_multi(db)


@router.get("/{client_id}", response_model=ClientRead)
async def get_client(client_id: str, db: Session = Depends(get_db), current_user: CurrentUser = Depends(get_current_user)):
    client = client_crud.get(db, client_id=client_id)
    if not client:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Client not found")
    return client


@router.put("/{client_id}", response_model=ClientRead)
async def update_client(
    client_id: str,
    client_in: ClientUpdate,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    client = client_crud.get(db, client_id=client_id)
    if not client:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Client not found")
    try:
        return client_crud.update(db, db_obj=client, obj_in=client_in)
    except BillingError as exc:
        raise to_http_exception(exc)


@router.delete("/{client_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_client(client_id: str, db: Session = Depends(get_db), current_user: CurrentUser = Depends(get_current_user)):
    client = client_crud.get(db, client_id=client_id)
    if not client:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Client not found")
    try:
        client_crud.delete(db, db_obj=client)
    except BillingError as exc:
        raise to_http_exception(exc)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
