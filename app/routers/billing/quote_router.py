import os

from fastapi import APIRouter, Depends, Query
from starlette.background import BackgroundTask
from fastapi.responses import FileResponse
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
    download_document_by_invitation,
)

router = APIRouter(
    prefix="/quotes",
    tags=["Quotes"],
)


@router.get(
    "",
    response_model=APIResponse[DocumentListData],
)
async def list_quotes_api(
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
        document_type=DocumentType.quote,
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
        "Quotes retrieved successfully",
        data,
    )


@router.post(
    "",
    response_model=APIResponse[DocumentOut],
)
async def create_quote_api(
    payload: DocumentCreate,
    db: AsyncSession = Depends(get_db),
    user=Depends(get_current_user),
):
    quote = await create_document(db, DocumentType.quote, payload, user)
    return success_response(
        "Quote created successfully",
        quote,
    )


@router.post("/bulk")
async def bulk_quotes_api(
    payload: BulkActionRequest,
    user=Depends(get_current_user),
    bulk: DocumentBulkService = Depends(get_document_bulk_service),
):
    result = await bulk.perform(payload.ids, payload.action, user, DocumentType.quote)
    return to_http_response(result)


@router.get("/invitations/{invitation_key}/download")
async def download_quote_by_invitation_api(
    invitation_key: str,
    db: AsyncSession = Depends(get_db),
):
    file_path, filename = await download_document_by_invitation(db, invitation_key)
    return FileResponse(
        file_path,
        media_type="application/pdf",
        filename=filename,
        background=BackgroundTask(os.remove, file_path),
    )


@router.get(
    "/{quote_id}",
    response_model=APIResponse[DocumentOut],
)
async def get_quote_api(
    quote_id: int,
    db: AsyncSession = Depends(get_db),
    user=Depends(get_current_user),
):
    quote = await get_document(db, DocumentType.quote, quote_id, user)
    return success_response(
        "Quote retrieved successfully",
        quote,
    )


@router.patch(
    "/{quote_id}",
    response_model=APIResponse[DocumentOut],
)
async def update_quote_api(
    quote_id: int,
    payload: DocumentUpdate,
    db: AsyncSession = Depends(get_db),
    user=Depends(get_current_user),
):
    quote = await update_document(db, DocumentType.quote, quote_id, payload, user)
    return success_response(
        "Quote updated successfully",
        quote,
    )


@router.delete("/{quote_id}")
async def destroy_quote_api(
    quote_id: int,
    db: AsyncSession = Depends(get_db),
    user=Depends(get_current_user),
):
    await destroy_document(db, DocumentType.quote, quote_id, user)
    return success_response("Quote removed successfully")


@router.post("/{quote_id}/{action}")
async def quote_action_api(
    quote_id: int,
    action: str,
    repository: DocumentRepository = Depends(get_document_repository),
    user=Depends(get_current_user),
    actions: DocumentActionService = Depends(get_document_action_service),
):
    quote = await get_document_or_404(repository, DocumentType.quote, quote_id, user)
    result = await actions.perform(quote, action, user)
    return to_http_response(result)
