"""Turn a submitted invoice/quote draft into a validated document aggregate.

Validation is a pure function of the draft (``validate_draft``), and
``build_document`` either returns a fully computed aggregate or raises. Totals
sent by the client are never read: they are always recomputed from the items.
"""

import calendar
import logging
import random
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Optional
from uuid import uuid4

from backend.app.core.errors import DocumentValidationError, FieldError, ReferenceNotFoundError
from backend.app.models.line_item import ITEM_NUMERIC_COLUMNS
from backend.app.schemas.client import ClientRead
from backend.app.schemas.company_settings import CompanySettingsRead
from backend.app.schemas.document import (
    RECURRENCES,
    DocumentAggregate,
    DocumentDraft,
    LineItem,
    LineItemDraft,
    get_kind_spec,
)
from backend.app.services.calculator import compute_totals, line_errors

logger = logging.getLogger(__name__)

DEFAULT_PAYMENT_DAYS = 30
DEFAULT_TAX_RATE = 15

RECURRENCE_MONTHS = {"monthly": 1, "quarterly": 3, "yearly": 12}


def generate_document_number(prefix: str, today: date, rng: Optional[random.Random] = None) -> str:
    """Convenience number ``{prefix}{YYYYMMDD}-{NNN}``; uniqueness is enforced by storage."""
    rng = rng or random
    return f"{prefix}{today.strftime('%Y%m%d')}-{rng.randint(0, 999):03d}"


def add_months(value: date, months: int) -> date:
    month_index = value.month - 1 + months
    year = value.year + month_index // 12
    month = month_index % 12 + 1
    day = min(value.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def next_generation_date(issue_date: date, recurrence: str) -> Optional[date]:
    if recurrence == "weekly":
        return issue_date + timedelta(days=7)
    if recurrence in RECURRENCE_MONTHS:
        return add_months(issue_date, RECURRENCE_MONTHS[recurrence])
    return None


def _is_calendar_date(value) -> bool:
    return isinstance(value, date) and not isinstance(value, datetime)


def _storage_errors(item: LineItemDraft, prefix: str, flagged: set) -> list[FieldError]:
    """Values must fit their item column without rounding."""
    errors = []
    for name, (precision, scale) in ITEM_NUMERIC_COLUMNS.items():
        field = f"{prefix}{name}"
        value = getattr(item, name, None)
        if field in flagged or not isinstance(value, Decimal) or not value.is_finite():
            continue
        if -value.normalize().as_tuple().exponent > scale:
            errors.append(FieldError(field, f"must have at most {scale} decimal places"))
        elif abs(value) >= Decimal(10) ** (precision - scale):
            errors.append(FieldError(field, "is too large"))
    return errors


def _item_errors(index: int, item: LineItemDraft) -> list[FieldError]:
    prefix = f"items[{index}]."
    errors = []
    if not (item.description or "").strip():
        errors.append(FieldError(f"{prefix}description", "is required"))
    errors.extend(line_errors(item, prefix=prefix))
    errors.extend(_storage_errors(item, prefix, {e.field for e in errors}))
    return errors


def validate_draft(kind: str, draft: DocumentDraft) -> list[FieldError]:
    """Return all field errors for ``draft``; an empty list means it is valid."""
    spec = get_kind_spec(kind)
    errors: list[FieldError] = []

    if draft.document_number is not None and not draft.document_number.strip():
        errors.append(FieldError("document_number", "is required"))
    if not (draft.client_id or "").strip():
        errors.append(FieldError("client_id", "is required"))

    closing_field = spec.closing_date_field
    closing_date = getattr(draft, closing_field, None)
    if not _is_calendar_date(draft.issue_date):
        errors.append(FieldError("issue_date", "must be a valid date"))
    if not _is_calendar_date(closing_date):
        errors.append(FieldError(closing_field, "must be a valid date"))
    elif _is_calendar_date(draft.issue_date) and closing_date < draft.issue_date:
        errors.append(FieldError(closing_field, "must not be before issue_date"))

    if draft.status not in spec.statuses:
        errors.append(FieldError("status", f"must be one of: {', '.join(spec.statuses)}"))

    if kind == "invoice":
        if draft.recurrence not in RECURRENCES:
            errors.append(FieldError("recurrence", f"must be one of: {', '.join(RECURRENCES)}"))
        elif draft.recurrence == "none" and draft.next_generation_date is not None:
            errors.append(FieldError("next_generation_date", "only allowed for recurring invoices"))
        elif (
            draft.next_generation_date is not None
            and _is_calendar_date(draft.issue_date)
            and draft.next_generation_date < draft.issue_date
        ):
            errors.append(FieldError("next_generation_date", "must not be before issue_date"))

    if not draft.items:
        errors.append(FieldError("items", "at least one item is required"))
    seen_ids = set()
    for index, item in enumerate(draft.items):
        errors.extend(_item_errors(index, item))
        if item.id:
            if item.id in seen_ids:
                errors.append(FieldError(f"items[{index}].id", "is duplicated"))
            seen_ids.add(item.id)
    return errors


def build_document(
    kind: str,
    draft: DocumentDraft,
    *,
    client: Optional[ClientRead],
    company: CompanySettingsRead,
    today: date,
    existing_id: Optional[str] = None,
    existing_number: Optional[str] = None,
    created_at: Optional[datetime] = None,
    rng: Optional[random.Random] = None,
) -> DocumentAggregate:
    spec = get_kind_spec(kind)
    errors = validate_draft(kind, draft)
    if errors:
        raise DocumentValidationError(errors)
    if client is None:
        raise ReferenceNotFoundError("client", draft.client_id)

    items = [
        LineItem(
            id=item.id or str(uuid4()),
            description=item.description.strip(),
            quantity=item.quantity,
            unit_price=item.unit_price,
            tax_rate=item.tax_rate,
        )
        for item in draft.items
    ]
    totals = compute_totals(items)

    document_number = draft.document_number if draft.document_number is not None else existing_number
    if document_number is None:
        document_number = generate_document_number(getattr(company, spec.prefix_setting), today, rng)
    terms = draft.terms if draft.terms is not None else (getattr(company, spec.terms_setting) or None)

    fields = dict(
        id=existing_id or str(uuid4()),
        document_number=document_number.strip(),
        client=client,
        issue_date=draft.issue_date,
        items=items,
        notes=draft.notes,
        terms=terms,
        status=draft.status,
        subtotal=totals.subtotal,
        tax_total=totals.tax_total,
        total=totals.total,
        created_at=created_at,
    )
    fields[spec.closing_date_field] = getattr(draft, spec.closing_date_field)
    if kind == "invoice":
        fields["recurrence"] = draft.recurrence
        if draft.recurrence != "none":
            fields["next_generation_date"] = draft.next_generation_date or next_generation_date(
                draft.issue_date, draft.recurrence
            )

    aggregate = spec.aggregate_schema(**fields)
    logger.debug("Built %s %s with %d item(s)", kind, aggregate.document_number, len(items))
    return aggregate


def default_draft(kind: str, *, company: CompanySettingsRead, today: date, rng: Optional[random.Random] = None) -> dict:
    """Pre-filled form values for a new document."""
    spec = get_kind_spec(kind)
    draft = {
        "document_number": generate_document_number(getattr(company, spec.prefix_setting), today, rng),
        "client_id": "",
        "issue_date": today.isoformat(),
        spec.closing_date_field: (today + timedelta(days=DEFAULT_PAYMENT_DAYS)).isoformat(),
        "items": [
            {
                "id": str(uuid4()),
                "description": "",
                "quantity": "1",
                "unit_price": "0",
                "tax_rate": str(DEFAULT_TAX_RATE),
            }
        ],
        "notes": "",
        "terms": getattr(company, spec.terms_setting),
        "status": "draft",
    }
    if kind == "invoice":
        draft["recurrence"] = "none"
    return draft
