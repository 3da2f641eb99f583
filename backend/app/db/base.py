from backend.app.db.base_class import Base

# Import models to register metadata for Base.metadata.create_all in tests
from backend.app.models.client import Client  # noqa: F401
from backend.app.models.company_settings import CompanySettings  # noqa: F401
from backend.app.models.invoice import Invoice  # noqa: F401
from backend.app.models.invoice_item import InvoiceItem  # noqa: F401
from backend.app.models.quote import Quote  # noqa: F401
from backend.app.models.quote_item import QuoteItem  # noqa: F401
