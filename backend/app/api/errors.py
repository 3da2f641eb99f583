"""Translate billing errors into HTTP responses."""

from fastapi import HTTPException, status

from backend.app.core.errors import (
    BillingError,
    ExportBusyError,
    ExportCancelledError,
    ExportDeliveryError,
    ExportError,
    ExportNotReadyError,
    PersistenceError,
    ReferenceNotFoundError,
    ValidationError,
)


def to_http_exception(exc: BillingError) -> HTTPException:
    if isinstance(exc, ValidationError):
        return HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={"message": exc.message, "errors": [e.as_dict() for e in exc.errors]},
        )
    if isinstance(exc, ReferenceNotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc).capitalize())
    if isinstance(exc, PersistenceError):
        code = status.HTTP_409_CONFLICT if exc.integrity else status.HTTP_503_SERVICE_UNAVAILABLE
        return HTTPException(
            status_code=code,
            detail={"message": str(exc), "operation": exc.operation, "entity": exc.entity},
        )
    if isinstance(exc, ExportError):
        if isinstance(exc, (ExportNotReadyError, ExportBusyError, ExportCancelledError)):
            code = status.HTTP_409_CONFLICT
        elif isinstance(exc, ExportDeliveryError):
            code = status.HTTP_502_BAD_GATEWAY
        else:
            code = status.HTTP_500_INTERNAL_SERVER_ERROR
        return HTTPException(
            status_code=code,
            detail={"message": exc.message, "stage": exc.stage, "reason": exc.reason},
        )
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))
