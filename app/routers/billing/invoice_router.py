from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.db import get_db
from app.dependencies import (
    get_document_action_service,
    get_document_bulk_service,
    get_document_repository,
)
from app.models.enums.document_status import DocumentStatus
from app.models.enums.document_type import DocumentType
from app.repositories.document_repository import DocumentRepository
from app.utils.action_response import to_http_response
from app.utils.get_user import get_current_user
from app.utils.response import success_response, APIResponse

from app.schemas.billing.document_schemas import (
    BulkActionRequest,
    DocumentCreate,
    DocumentUpdate,
    DocumentOut,
    DocumentListData,
)

from app.services.billing.document_action_service import DocumentActionService
from app.services.billing.document_bulk_service import DocumentBulkService
from app.services.billing.document_service import (
    create_document,
    update_document,
    destroy_document,
    get_document,
    get_document_or_404,
    list_documents,
)

router = APIRouter(
    prefix="/invoices",
    tags=["Invoices"],
)


@router.get(
    "",
    response_model=APIResponse[DocumentListData],
)
async def list_invoices_api(
    db: AsyncSession = Depends(get_db),
    user=Depends(get_current_user),
    client_id: int | None = Query(None, description="Filter by client"),
    status: DocumentStatus | None = Query(None, description="Filter by status (e.g., draft, sent)"),
    include_deleted: bool = Query(False),
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    sort_by: str = Query("created_at"),
    order: str = Query("desc"),
):
    data = await list_documents(
        db=db,
        document_type=DocumentType.invoice,
        user=user,
        client_id=client_id,
        status=status,
        include_deleted=include_deleted,
        page=page,
        page_size=page_size,
        sort_by=sort_by,
        order=order,
    )
    return success_response(
        "Invoices retrieved successfully",
        data,
    )


@router.post(
    "",
    response_model=APIResponse[DocumentOut],
)
async def create_invoice_api(
    payload: DocumentCreate,
    db: AsyncSession = Depends(get_db),
    user=Depends(get_current_user),
):
    invoice = await create_document(db, DocumentType.invoice, payload, user)
    return success_response(
        "Invoice created successfully",
        invoice,
    )


@router.post("/bulk")
async def bulk_invoices_api(
    payload: BulkActionRequest,
    user=Depends(get_current_user),
    bulk: DocumentBulkService = Depends(get_document_bulk_service),
):
    result = await bulk.perform(payload.ids, payload.action, user, DocumentType.invoice)
    return to_http_response(result)


@router.get(
    "/{invoice_id}",
    response_model=APIResponse[DocumentOut],
)
async def get_invoice_api(
    invoice_id: int,
    db: AsyncSession = Depends(get_db),
    user=Depends(get_current_user),
):
    invoice = await get_document(db, DocumentType.invoice, invoice_id, user)
    return success_response(
        "Invoice retrieved successfully",
        invoice,
    )


@router.patch(
    "/{invoice_id}",
    response_model=APIResponse[DocumentOut],
)
async def update_invoice_api(
    invoice_id: int,
    payload: DocumentUpdate,
    db: AsyncSession = Depends(get_db),
    user=Depends(get_current_user),
):
    invoice = await update_document(db, DocumentType.invoice, invoice_id, payload, user)
    return success_response(
        "Invoice updated successfully",
        invoice,
    )


@router.delete("/{invoice_id}")
async def destroy_invoice_api(
    invoice_id: int,
    db: AsyncSession = Depends(get_db),
    user=Depends(get_current_user),
):
    await destroy_document(db, DocumentType.invoice, invoice_id, user)
    return success_response("Invoice removed successfully")


@router.post("/{invoice_id}/{action}")
async def invoice_action_api(
    invoice_id: int,
    action: str,
    repository: DocumentRepository = Depends(get_document_repository),
    user=Depends(get_current_user),
    actions: DocumentActionService = Depends(get_document_action_service),
):
    invoice = await get_document_or_404(repository, DocumentType.invoice, invoice_id, user)
    result = await actions.perform(invoice, action, user)
    return to_http_response(result)
