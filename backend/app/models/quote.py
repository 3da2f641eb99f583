"""Quote header model."""

from sqlalchemy import Column, Date, DateTime, ForeignKey, Numeric, String, Text
from sqlalchemy.orm import relationship

from backend.app.core.time import utc_now
from backend.app.db.base_class import Base


class Quote(Base):
    __tablename__ = "quotes"

    id = Column(String(36), primary_key=True)
    document_number = Column(String(64), nullable=False, unique=True, index=True)
    client_id = Column(String(36), ForeignKey("clients.id"), nullable=False, index=True)

    issue_date = Column(Date, nullable=False)
    expiry_date = Column(Date, nullable=False)
    notes = Column(Text, nullable=True)
    terms = Column(Text, nullable=True)
    status = Column(String(32), default="draft", nullable=False)

    subtotal = Column(Numeric(16, 6), default=0, nullable=False)
    tax_total = Column(Numeric(16, 6), default=0, nullable=False)
    total = Column(Numeric(16, 6), default=0, nullable=False)

    created_at = Column(DateTime(timezone=True), default=utc_now, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utc_now, onupdate=utc_now, nullable=False)

    client = relationship("Client", back_populates="quotes")
    items = relationship(
        "QuoteItem",
        back_populates="quote",
        order_by="QuoteItem.position",
        cascade="all, delete-orphan",
    )
