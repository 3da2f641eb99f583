"""Read/update access to the singleton company settings row."""

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from backend.app.core.errors import PersistenceError
from backend.app.models.company_settings import SINGLETON_ID, CompanySettings
from backend.app.schemas.company_settings import BankDetails, CompanySettingsRead, CompanySettingsUpdate

logger = logging.getLogger(__name__)

# schema field -> column
FIELD_COLUMNS = {
    "name": "company_name",
    "email": "company_email",
    "phone": "company_phone",
    "address": "company_address",
    "website": "company_website",
    "vat_number": "vat_number",
    "invoice_prefix": "invoice_prefix",
    "quote_prefix": "quote_prefix",
    "invoice_terms": "invoice_terms",
    "quote_terms": "quote_terms",
}
BANK_COLUMNS = ("bank_name", "account_number", "branch_code", "account_type")


def to_schema(row: CompanySettings | None) -> CompanySettingsRead:
    if row is None:
        return CompanySettingsRead()
    values = {field: getattr(row, column) or "" for field, column in FIELD_COLUMNS.items()}
    values["invoice_prefix"] = row.invoice_prefix or "INV"
    values["quote_prefix"] = row.quote_prefix or "QT"
    values["bank_details"] = BankDetails(**{column: getattr(row, column) or "" for column in BANK_COLUMNS})
    return CompanySettingsRead(**values)


class CRUDCompanySettings:
    def get(self, db: Session) -> CompanySettingsRead:
        return to_schema(db.get(CompanySettings, SINGLETON_ID))

    def update(self, db: Session, *, obj_in: CompanySettingsUpdate) -> CompanySettingsRead:
        row = db.get(CompanySettings, SINGLETON_ID)
        operation = "update"
        if row is None:
            operation = "create"
            row = CompanySettings(id=SINGLETON_ID)
            db.add(row)

        update_data = obj_in.model_dump(exclude_unset=True)
        bank_data = update_data.pop("bank_details", None) or {}
        for field, value in update_data.items():
            if value is not None:
                setattr(row, FIELD_COLUMNS[field], value)
        for column, value in bank_data.items():
            if value is not None:
                setattr(row, column, value)

        try:
            db.commit()
        except SQLAlchemyError as exc:
            db.rollback()
            logger.error("Company settings %s failed: %s", operation, exc)
            raise PersistenceError(operation, "company settings", str(exc)) from exc
        db.refresh(row)
        return to_schema(row)


company_settings_crud = CRUDCompanySettings()
