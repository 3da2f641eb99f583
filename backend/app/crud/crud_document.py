"""Persistence adapter for invoice and quote aggregates.

Documents are only ever written whole: saving replaces the header and the
complete item set, and deleting removes item rows before the header row.
Totals are recomputed from the items whenever a document is loaded.
"""

import logging
from typing import List

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from backend.app.core.errors import BillingError, PersistenceError, ReferenceNotFoundError
from backend.app.models.invoice import Invoice
from backend.app.models.invoice_item import InvoiceItem
from backend.app.models.quote import Quote
from backend.app.models.quote_item import QuoteItem
from backend.app.schemas.client import ClientRead
from backend.app.schemas.document import DocumentAggregate, LineItem, get_kind_spec
from backend.app.services.calculator import compute_totals, line_total, round_money

logger = logging.getLogger(__name__)

DOCUMENT_MODELS = {
    "invoice": (Invoice, InvoiceItem),
    "quote": (Quote, QuoteItem),
}


class CRUDDocument:
    def __init__(self, kind: str):
        self.kind = kind
        self.spec = get_kind_spec(kind)
        self.model, self.item_model = DOCUMENT_MODELS[kind]

    def _query(self, db: Session):
        return db.query(self.model).options(
            selectinload(self.model.items),
            selectinload(self.model.client),
        )

    def to_aggregate(self, row) -> DocumentAggregate:
        """Rehydrate a stored document, restoring the totals invariant from its items."""
        if row.client is None:
            raise ReferenceNotFoundError("client", row.client_id)
        items = [LineItem.model_validate(item) for item in row.items]
        totals = compute_totals(items)
        if row.total is not None and round_money(totals.total) != round_money(row.total):
            logger.warning(
                "Stored total %s for %s %s differs from recomputed %s; using recomputed value",
                row.total,
                self.kind,
                row.document_number,
                totals.total,
            )
        fields = dict(
            id=row.id,
            document_number=row.document_number,
            client=ClientRead.model_validate(row.client),
            issue_date=row.issue_date,
            items=items,
            notes=row.notes,
            terms=row.terms,
            status=row.status,
            subtotal=totals.subtotal,
            tax_total=totals.tax_total,
            total=totals.total,
            created_at=row.created_at,
            updated_at=row.updated_at,
        )
        fields[self.spec.closing_date_field] = getattr(row, self.spec.closing_date_field)
        if self.kind == "invoice":
            fields["recurrence"] = row.recurrence or "none"
            fields["next_generation_date"] = row.next_generation_date if fields["recurrence"] != "none" else None
        return self.spec.aggregate_schema(**fields)

    def list_documents(self, db: Session) -> List[DocumentAggregate]:
        rows = self._query(db).order_by(self.model.issue_date.desc(), self.model.id.asc()).all()
        documents = []
        for row in rows:
            try:
                documents.append(self.to_aggregate(row))
            except (BillingError, PydanticValidationError) as exc:
                logger.warning("Skipping %s %s: %s", self.kind, row.id, exc)
        return documents

    def get_document(self, db: Session, document_id: str) -> DocumentAggregate:
        row = self._query(db).filter(self.model.id == document_id).first()
        if row is None:
            raise ReferenceNotFoundError(self.kind, document_id)
        return self.to_aggregate(row)

    def exists(self, db: Session, document_id: str) -> bool:
        return db.query(self.model.id).filter(self.model.id == document_id).first() is not None

    def save_document(self, db: Session, aggregate: DocumentAggregate) -> DocumentAggregate:
        """Insert when the id is new, otherwise replace the header and every item row."""
        row = db.get(self.model, aggregate.id)
        operation = "create" if row is None else "update"
        try:
            if row is None:
                row = self.model(id=aggregate.id)
                db.add(row)
            else:
                row.items.clear()
                db.flush()

            row.document_number = aggregate.document_number
            row.client_id = aggregate.client.id
            row.issue_date = aggregate.issue_date
            setattr(row, self.spec.closing_date_field, getattr(aggregate, self.spec.closing_date_field))
            row.notes = aggregate.notes
            row.terms = aggregate.terms
            row.status = aggregate.status
            if self.kind == "invoice":
                row.recurrence = aggregate.recurrence
                row.next_generation_date = aggregate.next_generation_date
            row.subtotal = aggregate.subtotal
            row.tax_total = aggregate.tax_total
            row.total = aggregate.total

            for position, item in enumerate(aggregate.items):
                row.items.append(
                    self.item_model(
                        id=item.id,
                        position=position,
                        description=item.description,
                        quantity=item.quantity,
                        unit_price=item.unit_price,
                        tax_rate=item.tax_rate,
                        amount=line_total(item),
                    )
                )
            db.commit()
        except SQLAlchemyError as exc:
            db.rollback()
            logger.error("Failed to %s %s %s: %s", operation, self.kind, aggregate.document_number, exc)
            raise PersistenceError(operation, self.kind, str(exc), integrity=isinstance(exc, IntegrityError)) from exc

        logger.info("Saved %s %s (%s, %d items)", self.kind, aggregate.document_number, operation, len(aggregate.items))
        return self.get_document(db, aggregate.id)

    def delete_document(self, db: Session, document_id: str) -> None:
        row = db.get(self.model, document_id)
        if row is None:
            raise ReferenceNotFoundError(self.kind, document_id)
        try:
            row.items.clear()
            db.flush()
            db.delete(row)
            db.commit()
        except SQLAlchemyError as exc:
            db.rollback()
            logger.error("Failed to delete %s %s: %s", self.kind, document_id, exc)
            raise PersistenceError("delete", self.kind, str(exc), integrity=isinstance(exc, IntegrityError)) from exc
        logger.info("Deleted %s %s", self.kind, document_id)

    def count_items(self, db: Session, document_id: str) -> int:
        foreign_key = getattr(self.item_model, f"{self.kind}_id")
        return db.query(self.item_model).filter(foreign_key == document_id).count()


invoice_crud = CRUDDocument("invoice")
quote_crud = CRUDDocument("quote")

DOCUMENT_CRUDS = {"invoice": invoice_crud, "quote": quote_crud}
