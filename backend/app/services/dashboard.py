"""Billing dashboard figures built from rehydrated invoices and quotes."""

from datetime import date
from decimal import Decimal

from backend.app.schemas.document import INVOICE_STATUSES, InvoiceAggregate, QuoteAggregate
from backend.app.services.calculator import round_money
from backend.app.services.document_builder import add_months

OUTSTANDING_STATUSES = ("sent", "overdue")
RECENT_LIMIT = 5
REVENUE_MONTHS = 6


def _money(amount: Decimal) -> str:
    return str(round_money(amount))


def _invoice_card(invoice: InvoiceAggregate) -> dict:
    return {
        "id": invoice.id,
        "document_number": invoice.document_number,
        "client_name": invoice.client.name,
        "issue_date": invoice.issue_date.isoformat(),
        "status": invoice.status,
        "total": _money(invoice.total),
    }


def monthly_revenue(invoices: list[InvoiceAggregate], *, today: date, months: int = REVENUE_MONTHS) -> list[dict]:
    """Paid revenue per calendar month, oldest first, ending with the current month."""
    first_of_month = today.replace(day=1)
    rows = []
    for offset in range(months - 1, -1, -1):
        start = add_months(first_of_month, -offset)
        end = add_months(start, 1)
        revenue = sum(
            (i.total for i in invoices if i.status == "paid" and start <= i.issue_date < end),
            Decimal("0"),
        )
        rows.append({"month": start.strftime("%Y-%m"), "revenue": _money(revenue)})
    return rows


def get_dashboard_summary(invoices: list[InvoiceAggregate], quotes: list[QuoteAggregate], *, client_count: int, today: date) -> dict:
    total_revenue = sum((i.total for i in invoices if i.status == "paid"), Decimal("0"))
    outstanding = sum((i.total for i in invoices if i.status in OUTSTANDING_STATUSES), Decimal("0"))
    status_counts = {status: 0 for status in INVOICE_STATUSES}
    for invoice in invoices:
        status_counts[invoice.status] = status_counts.get(invoice.status, 0) + 1

    recent = sorted(invoices, key=lambda i: (i.issue_date, i.document_number), reverse=True)[:RECENT_LIMIT]
    recurring = sorted(
        (i for i in invoices if i.recurrence != "none" and i.next_generation_date is not None),
        key=lambda i: i.next_generation_date,
    )[:RECENT_LIMIT]

    return {
        "as_of": today.isoformat(),
        "total_revenue": _money(total_revenue),
        "outstanding_amount": _money(outstanding),
        "overdue_invoices": status_counts["overdue"],
        "pending_quotes": sum(1 for q in quotes if q.status == "sent"),
        "client_count": client_count,
        "invoice_status_counts": status_counts,
        "monthly_revenue": monthly_revenue(invoices, today=today),
        "recent_invoices": [_invoice_card(i) for i in recent],
        "upcoming_recurring": [
            {
                **_invoice_card(i),
                "recurrence": i.recurrence,
                "next_generation_date": i.next_generation_date.isoformat(),
            }
            for i in recurring
        ],
    }
