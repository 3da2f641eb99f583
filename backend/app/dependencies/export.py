"""Shared PDF export registry for the API process."""

from backend.app.core.settings import get_settings
from backend.app.services.blob_store import LocalBlobStore
from backend.app.services.pdf_export import ExportRegistry, PageGeometry, PdfExportPipeline

_registry = None


def build_export_registry(settings) -> ExportRegistry:
    geometry = PageGeometry(margin_mm=settings.pdf_margin_mm)
    blob_store = LocalBlobStore(settings.export_storage_dir, base_url=settings.export_base_url)
    return ExportRegistry(lambda: PdfExportPipeline(geometry=geometry, blob_store=blob_store))


def get_export_registry() -> ExportRegistry:
    global _registry
    if _registry is None:
        _registry = build_export_registry(get_settings())
    return _registry
