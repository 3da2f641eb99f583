"""Quote routes."""

from backend.app.api.documents import build_document_router

router = build_document_router("quote")
