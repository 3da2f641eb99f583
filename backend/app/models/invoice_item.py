"""Invoice line item rows."""

from sqlalchemy import Column, ForeignKey, String
from sqlalchemy.orm import relationship

from backend.app.db.base_class import Base
from backend.app.models.line_item import LineItemColumns


class InvoiceItem(LineItemColumns, Base):
    __tablename__ = "invoice_items"

    id = Column(String(36), primary_key=True)
    invoice_id = Column(String(36), ForeignKey("invoices.id"), nullable=False, index=True)

    invoice = relationship("Invoice", back_populates="items")
