"""CRUD operations for clients."""

import logging
from typing import List, Optional
from uuid import uuid4

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from backend.app.core.errors import PersistenceError, ReferenceNotFoundError
from backend.app.models.client import Client
from backend.app.models.invoice import Invoice
from backend.app.models.quote import Quote
from backend.app.schemas.client import ClientCreate, ClientUpdate

logger = logging.getLogger(__name__)


class CRUDClient:
    def _commit(self, db: Session, operation: str) -> None:
        try:
            db.commit()
        except SQLAlchemyError as exc:
            db.rollback()
            logger.error("Client %s failed: %s", operation, exc)
            raise PersistenceError(operation, "client", str(exc), integrity=isinstance(exc, IntegrityError)) from exc

    def create(self, db: Session, *, obj_in: ClientCreate) -> Client:
        obj = Client(id=str(uuid4()), **obj_in.model_dump())
        db.add(obj)
        self._commit(db, "create")
        db.refresh(obj)
        return obj

    def get(self, db: Session, *, client_id: str) -> Optional[Client]:
        return db.query(Client).filter(Client.id == client_id).first()

    def get_or_raise(self, db: Session, *, client_id: str) -> Client:
        client = self.get(db, client_id=client_id)
        if client is None:
            raise ReferenceNotFoundError("client", client_id)
        return client

    def get_multi(self, db: Session) -> List[Client]:
        return db.query(Client).order_by(Client.name.asc(), Client.id.asc()).all()

    def update(self, db: Session, *, db_obj: Client, obj_in: ClientUpdate) -> Client:
        update_data = obj_in.model_dump(exclude_unset=True)
        for field, value in update_data.items():
            setattr(db_obj, field, value)
        self._commit(db, "update")
        db.refresh(db_obj)
        return db_obj

    def delete(self, db: Session, *, db_obj: Client) -> Client:
        in_use = (
            db.query(Invoice.id).filter(Invoice.client_id == db_obj.id).first()
            or db.query(Quote.id).filter(Quote.client_id == db_obj.id).first()
        )
        if in_use:
            raise PersistenceError(
                "delete", "client", "client is referenced by existing invoices or quotes", integrity=True
            )
        db.delete(db_obj)
        self._commit(db, "delete")
        return db_obj


client_crud = CRUDClient()
