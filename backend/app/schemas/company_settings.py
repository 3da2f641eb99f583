"""Company settings schemas."""

from typing import Optional

from pydantic import BaseModel


class BankDetails(BaseModel):
    bank_name: str = ""
    account_number: str = ""
    branch_code: str = ""
    account_type: str = ""


class CompanySettingsRead(BaseModel):
    name: str = ""
    email: str = ""
    phone: str = ""
    address: str = ""
    vat_number: str = ""
    website: str = ""
    bank_details: BankDetails = BankDetails()
    invoice_prefix: str = "INV"
    quote_prefix: str = "QT"
    invoice_terms: str = ""
    quote_terms: str = ""


class BankDetailsUpdate(BaseModel):
    bank_name: Optional[str] = None
    account_number: Optional[str] = None
    branch_code: Optional[str] = None
    account_type: Optional[str] = None


class CompanySettingsUpdate(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    vat_number: Optional[str] = None
    website: Optional[str] = None
    bank_details: Optional[BankDetailsUpdate] = None
    invoice_prefix: Optional[str] = None
    quote_prefix: Optional[str] = None
    invoice_terms: Optional[str] = None
    quote_terms: Optional[str] = None
