"""Money and tax arithmetic for line items and documents.

Every function here is pure. Amounts are ``Decimal`` and are never rounded
while aggregating; ``round_money`` is applied only when a figure is shown.
"""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Iterable, Protocol

from backend.app.core.errors import FieldError, ValidationError

ZERO = Decimal("0")
HUNDRED = Decimal("100")
CENT = Decimal("0.01")


class PricedLine(Protocol):
    quantity: Decimal
    unit_price: Decimal
    tax_rate: Decimal


@dataclass(frozen=True)
class DocumentTotals:
    subtotal: Decimal
    tax_total: Decimal
    total: Decimal


def to_decimal(value) -> Decimal:
    if isinstance(value, Decimal):
        return value
    if value is None:
        raise InvalidOperation("missing amount")
    return Decimal(str(value))


def line_errors(item: PricedLine, prefix: str = "") -> list[FieldError]:
    """Return every constraint the line breaks; empty when it is valid."""
    errors: list[FieldError] = []
    checks = (
        ("quantity", lambda v: v > ZERO, "must be greater than 0"),
        ("unit_price", lambda v: v >= ZERO, "must not be negative"),
        ("tax_rate", lambda v: v >= ZERO, "must not be negative"),
    )
    for name, predicate, message in checks:
        field = f"{prefix}{name}"
        try:
            value = to_decimal(getattr(item, name, None))
        except (InvalidOperation, ValueError, TypeError):
            errors.append(FieldError(field, "must be a number"))
            continue
        if not value.is_finite():
            errors.append(FieldError(field, "must be a finite number"))
        elif not predicate(value):
            errors.append(FieldError(field, message))
    return errors


def validate_line(item: PricedLine) -> None:
    errors = line_errors(item)
    if errors:
        raise ValidationError("Invalid line item", errors)


def line_subtotal(item: PricedLine) -> Decimal:
    validate_line(item)
    return to_decimal(item.quantity) * to_decimal(item.unit_price)


def line_tax(item: PricedLine) -> Decimal:
    return line_subtotal(item) * to_decimal(item.tax_rate) / HUNDRED


def line_total(item: PricedLine) -> Decimal:
    return line_subtotal(item) + line_tax(item)


def document_subtotal(items: Iterable[PricedLine]) -> Decimal:
    return sum((line_subtotal(item) for item in items), ZERO)


def document_tax(items: Iterable[PricedLine]) -> Decimal:
    return sum((line_tax(item) for item in items), ZERO)


def document_total(items: Iterable[PricedLine]) -> Decimal:
    items = list(items)
    return document_subtotal(items) + document_tax(items)


def compute_totals(items: Iterable[PricedLine]) -> DocumentTotals:
    items = list(items)
    subtotal = document_subtotal(items)
    tax_total = document_tax(items)
    return DocumentTotals(subtotal=subtotal, tax_total=tax_total, total=subtotal + tax_total)


def round_money(amount: Decimal) -> Decimal:
    return to_decimal(amount).quantize(CENT, rounding=ROUND_HALF_UP)


def format_money(amount: Decimal, prefix: str = "R") -> str:
    """Render ``amount`` as ``"<prefix> 1234.50"``."""
    rounded = round_money(amount)
    if not prefix:
        return f"{rounded}"
    return f"{prefix} {rounded}"
