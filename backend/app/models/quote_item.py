"""Quote line item rows, kept apart from invoice items."""

from sqlalchemy import Column, ForeignKey, String
from sqlalchemy.orm import relationship

from backend.app.db.base_class import Base
from backend.app.models.line_item import LineItemColumns


class QuoteItem(LineItemColumns, Base):
    __tablename__ = "quote_items"

    id = Column(String(36), primary_key=True)
    quote_id = Column(String(36), ForeignKey("quotes.id"), nullable=False, index=True)

    quote = relationship("Quote", back_populates="items")
