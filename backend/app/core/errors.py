"""Domain error taxonomy shared by services, persistence and the API layer."""

from dataclasses import dataclass


class BillingError(Exception):
    """Base class for every error raised by the billing core."""


@dataclass(frozen=True)
class FieldError:
    field: str
    message: str

    def as_dict(self) -> dict:
        return {"field": self.field, "message": self.message}


class ValidationError(BillingError):
    """Input rejected before any persistence attempt."""

    def __init__(self, message: str, errors: list[FieldError] | None = None):
        super().__init__(message)
        self.message = message
        self.errors = list(errors or [])


class DocumentValidationError(ValidationError):
    def __init__(self, errors: list[FieldError]):
        summary = "; ".join(f"{e.field}: {e.message}" for e in errors)
        super().__init__(f"Document is invalid ({summary})", errors)


class ReferenceNotFoundError(BillingError):
    """A referenced record (client, invoice, quote) does not exist."""

    def __init__(self, entity: str, identifier: str | None = None):
        super().__init__(f"{entity} not found")
        self.entity = entity
        self.identifier = identifier


class PersistenceError(BillingError):
    """Storage failure, tagged with the operation that was attempted."""

    def __init__(self, operation: str, entity: str, message: str, *, integrity: bool = False):
        super().__init__(f"Failed to {operation} {entity}: {message}")
        self.operation = operation
        self.entity = entity
        self.integrity = integrity


class ExportError(BillingError):
    """Failure inside the PDF export pipeline.

    ``stage`` is one of ``capture``, ``encode`` or ``deliver`` so callers can
    pick a recovery action: re-render, abort or retry.
    """

    stage = "export"
    reason = "export_failed"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ExportNotReadyError(ExportError):
    stage = "capture"
    reason = "not_ready"


class ExportCaptureError(ExportError):
    stage = "capture"
    reason = "capture_failed"


class ExportEncodeError(ExportError):
    stage = "encode"
    reason = "encode_failed"


class ExportDeliveryError(ExportError):
    stage = "deliver"
    reason = "upload_failed"


class ExportBusyError(ExportError):
    reason = "busy"


class ExportCancelledError(ExportError):
    reason = "cancelled"
