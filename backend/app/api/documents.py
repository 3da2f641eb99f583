"""Shared routes for invoices and quotes.

Both document kinds expose the same surface; ``build_document_router``
produces one router per kind with that kind's draft and aggregate schemas.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from backend.app.api.errors import to_http_exception
from backend.app.core.errors import BillingError
from backend.app.core.settings import get_settings
from backend.app.core.time import today
from backend.app.crud.crud_client import client_crud
from backend.app.crud.crud_company_settings import company_settings_crud
from backend.app.crud.crud_document import DOCUMENT_CRUDS
from backend.app.db.session import get_db
from backend.app.dependencies.auth import CurrentUser, get_current_user
from backend.app.dependencies.export import get_export_registry
from backend.app.schemas.client import ClientRead
from backend.app.schemas.document import get_kind_spec
from backend.app.schemas.layout import DocumentLayout
from backend.app.services.document_builder import build_document, default_draft
from backend.app.services.pdf_export import ExportRegistry
from backend.app.services.renderer import DocumentView


def _resolve_client(db: Session, client_id: str) -> Optional[ClientRead]:
    client = client_crud.get(db, client_id=client_id)
    return ClientRead.model_validate(client) if client else None


def build_document_router(kind: str) -> APIRouter:
    spec = get_kind_spec(kind)
    crud = DOCUMENT_CRUDS[kind]
    draft_schema = spec.draft_schema
    aggregate_schema = spec.aggregate_schema
    router = APIRouter(prefix=f"/{kind}s", tags=[f"{kind}s"])

    def _open_view(db: Session, document_id: str) -> DocumentView:
        aggregate = crud.get_document(db, document_id)
        company = company_settings_crud.get(db)
        return DocumentView(kind, aggregate, company, currency_prefix=get_settings().currency_prefix)

    @router.get("/", response_model=list[aggregate_schema])
    async def list_documents(
        status: str | None = None,
        db: Session = Depends(get_db),
        current_user: CurrentUser = Depends(get_current_user),
    ):
        documents = crud.list_documents(db)
        if status:
            documents = [d for d in documents if d.status == status]
        return documents

    @router.get("/defaults")
    async def get_document_defaults(db: Session = Depends(get_db), current_user: CurrentUser = Depends(get_current_user)):
        return default_draft(kind, company=company_settings_crud.get(db), today=today())

    @router.get("/{document_id}", response_model=aggregate_schema)
    async def get_document(
        document_id: str, db: Session = Depends(get_db), current_user: CurrentUser = Depends(get_current_user)
    ):
        try:
            return crud.get_document(db, document_id)
        except BillingError as exc:
            raise to_http_exception(exc)

    @router.post("/", response_model=aggregate_schema, status_code=status.HTTP_201_CREATED)
    async def create_document(
        draft: draft_schema,
        db: Session = Depends(get_db),
        current_user: CurrentUser = Depends(get_current_user),
    ):
        try:
            aggregate = build_document(
                kind,
                draft,
                client=_resolve_client(db, draft.client_id),
                company=company_settings_crud.get(db),
                today=today(),
            )
            return crud.save_document(db, aggregate)
        except BillingError as exc:
            raise to_http_exception(exc)

    @router.put("/{document_id}", response_model=aggregate_schema)
    async def replace_document(
        document_id: str,
        draft: draft_schema,
        db: Session = Depends(get_db),
        current_user: CurrentUser = Depends(get_current_user),
    ):
        try:
            existing = crud.get_document(db, document_id)
            aggregate = build_document(
                kind,
                draft,
                client=_resolve_client(db, draft.client_id),
                company=company_settings_crud.get(db),
                today=today(),
                existing_id=existing.id,
                existing_number=existing.document_number,
                created_at=existing.created_at,
            )
            return crud.save_document(db, aggregate)
        except BillingError as exc:
            raise to_http_exception(exc)

    @router.delete("/{document_id}", status_code=status.HTTP_204_NO_CONTENT)
    async def delete_document(
        document_id: str, db: Session = Depends(get_db), current_user: CurrentUser = Depends(get_current_user)
    ):
        try:
            crud.delete_document(db, document_id)
        except BillingError as exc:
            raise to_http_exception(exc)
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    @router.get("/{document_id}/view", response_model=DocumentLayout)
    async def view_document(
        document_id: str, db: Session = Depends(get_db), current_user: CurrentUser = Depends(get_current_user)
    ):
        try:
            return _open_view(db, document_id).render()
        except BillingError as exc:
            raise to_http_exception(exc)

    @router.get("/{document_id}/pdf")
    async def export_document_pdf(
        document_id: str,
        upload: bool = False,
        db: Session = Depends(get_db),
        current_user: CurrentUser = Depends(get_current_user),
        registry: ExportRegistry = Depends(get_export_registry),
    ):
        try:
            view = _open_view(db, document_id)
            view.render()
            artifact = await registry.export(view, upload=upload)
        except BillingError as exc:
            raise to_http_exception(exc)
        headers = {"Content-Disposition": f'attachment; filename="{artifact.filename}"'}
        if artifact.url:
            headers["X-Document-Url"] = artifact.url
        return Response(content=artifact.content, media_type=artifact.media_type, headers=headers)

    @router.post("/{document_id}/pdf/cancel")
    async def cancel_document_pdf(
        document_id: str,
        current_user: CurrentUser = Depends(get_current_user),
        registry: ExportRegistry = Depends(get_export_registry),
    ):
        return {"cancelled": registry.cancel((kind, document_id))}

    return router
