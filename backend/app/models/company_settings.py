"""Singleton company settings: issuer identity and document defaults."""

from sqlalchemy import Column, DateTime, Integer, String, Text

from backend.app.core.time import utc_now
from backend.app.db.base_class import Base

SINGLETON_ID = 1


class CompanySettings(Base):
    __tablename__ = "company_settings"

    id = Column(Integer, primary_key=True, default=SINGLETON_ID)
    company_name = Column(String(255), nullable=False, default="")
    company_email = Column(String(255), nullable=False, default="")
    company_phone = Column(String(64), nullable=False, default="")
    company_address = Column(Text, nullable=False, default="")
    company_website = Column(String(255), nullable=False, default="")
    vat_number = Column(String(64), nullable=False, default="")

    bank_name = Column(String(255), nullable=False, default="")
    account_number = Column(String(64), nullable=False, default="")
    branch_code = Column(String(64), nullable=False, default="")
    account_type = Column(String(64), nullable=False, default="")

    invoice_prefix = Column(String(16), nullable=False, default="INV")
    quote_prefix = Column(String(16), nullable=False, default="QT")
    invoice_terms = Column(Text, nullable=False, default="")
    quote_terms = Column(Text, nullable=False, default="")

    created_at = Column(DateTime(timezone=True), default=utc_now, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utc_now, onupdate=utc_now, nullable=False)
