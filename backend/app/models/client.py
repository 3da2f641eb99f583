"""Client (bill-to party) model."""

from uuid import uuid4

from sqlalchemy import Column, DateTime, String, Text
from sqlalchemy.orm import relationship

from backend.app.core.time import utc_now
from backend.app.db.base_class import Base


class Client(Base):
    __tablename__ = "clients"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid4()))
    name = Column(String(255), nullable=False, index=True)
    contact_person = Column(String(255), nullable=True)
    email = Column(String(255), nullable=False)
    phone = Column(String(64), nullable=True)
    address = Column(Text, nullable=False)
    vat_number = Column(String(64), nullable=True)

    created_at = Column(DateTime(timezone=True), default=utc_now, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utc_now, onupdate=utc_now, nullable=False)

    invoices = relationship("Invoice", back_populates="client")
    quotes = relationship("Quote", back_populates="client")
