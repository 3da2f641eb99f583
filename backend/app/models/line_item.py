"""Columns shared by invoice and quote item rows."""

from sqlalchemy import Column, Integer, Numeric, String

# field -> (precision, scale); drafts are validated against these before saving.
ITEM_NUMERIC_COLUMNS = {
    "quantity": (14, 4),
    "unit_price": (14, 4),
    "tax_rate": (7, 4),
}


class LineItemColumns:
    # Unrounded inputs; amounts are rounded only when rendered.
    position = Column(Integer, nullable=False, default=0)
    description = Column(String(500), nullable=False, default="")
    quantity = Column(Numeric(*ITEM_NUMERIC_COLUMNS["quantity"]), nullable=False)
    unit_price = Column(Numeric(*ITEM_NUMERIC_COLUMNS["unit_price"]), nullable=False)
    tax_rate = Column(Numeric(*ITEM_NUMERIC_COLUMNS["tax_rate"]), nullable=False, default=0)
    # Snapshot of quantity * unit_price * (1 + tax_rate / 100) taken at save time.
    amount = Column(Numeric(16, 6), nullable=False)
