from datetime import datetime, timezone
import logging
from typing import List

from fastapi.concurrency import run_in_threadpool
from sqlalchemy import select, func, asc, desc
from sqlalchemy.ext.asyncio import AsyncSession

from app.constants.activity_codes import ActivityCode
from app.constants.document_actions import Capability
from app.constants.error_codes import ErrorCode
from app.core.exceptions import AppException
from app.models.billing.document_models import Document, DocumentItem
from app.models.billing.invitation_models import Invitation
from app.models.enums.document_status import DocumentStatus
from app.models.enums.document_type import DocumentType
from app.models.masters.client_models import Client
from app.repositories.document_repository import DocumentRepository
from app.schemas.billing.document_schemas import (
    DocumentCreate,
    DocumentItemIn,
    DocumentItemOut,
    DocumentListData,
    DocumentOut,
    DocumentUpdate,
)
from app.services.auth.document_policy import DocumentPolicy
from app.services.billing.document_factory import build_document, calculate_totals
from app.utils.pdf_generators.document_pdf import document_pdf_filename, generate_document_pdf

logger = logging.getLogger(__name__)

policy = DocumentPolicy()


def map_document(document: Document) -> DocumentOut:
    return DocumentOut(
        id=document.id,
        number=document.number,
        document_type=document.document_type,
        status=document.status,
        company_id=document.company_id,
        client_id=document.client_id,
        user_id=document.user_id,
        po_number=document.po_number,
        public_notes=document.public_notes,
        private_notes=document.private_notes,
        valid_until=document.valid_until,
        subtotal_amount=document.subtotal_amount,
        tax_amount=document.tax_amount,
        total_amount=document.total_amount,
        balance=document.balance,
        is_deleted=bool(document.is_deleted),
        is_archived=document.is_archived,
        source_document_id=document.source_document_id,
        converted_document_id=document.converted_document_id,
        version=document.version or 1,
        created_at=document.created_at,
        updated_at=document.updated_at,
        items=[
            DocumentItemOut(
                id=i.id,
                position=i.position,
                product_key=i.product_key,
                notes=i.notes,
                quantity=i.quantity,
                cost=i.cost,
                tax_rate=i.tax_rate,
                line_total=i.line_total,
            )
            for i in document.items
        ],
    )


def _build_items(items: List[DocumentItemIn]) -> List[DocumentItem]:
    return [
        DocumentItem(
            position=index,
            product_key=i.product_key,
            notes=i.notes,
            quantity=i.quantity,
            cost=i.cost,
            tax_rate=i.tax_rate,
        )
        for index, i in enumerate(items)
    ]


async def _get_client(db: AsyncSession, client_id: int, company_id: int) -> Client:
    client = await db.get(Client, client_id)
    if not client or client.company_id != company_id or client.is_deleted or not client.is_active:
        raise AppException(404, "Client not found", ErrorCode.CLIENT_NOT_FOUND)
    return client


async def get_document_or_404(
    repository: DocumentRepository,
    document_type: DocumentType,
    document_id: int,
    user,
    include_deleted: bool = True,
) -> Document:
    document = await repository.get(user.company_id, document_id, document_type, include_deleted=include_deleted)
    if not document:
        raise AppException(404, f"{document_type.value.capitalize()} not found", ErrorCode.DOCUMENT_NOT_FOUND)
    return document


def _require(user, capability: Capability, document: Document) -> None:
    if policy.cannot(user, capability, document):
        raise AppException(403, "Insufficient privileges", ErrorCode.PERMISSION_DENIED)


async def create_document(
    db: AsyncSession,
    document_type: DocumentType,
    payload: DocumentCreate,
    user,
) -> DocumentOut:
    client = await _get_client(db, payload.client_id, user.company_id)

    if not payload.items:
        raise AppException(400, "Document must contain at least one item", ErrorCode.VALIDATION_ERROR)

    document = build_document(document_type, user.company_id, user.id, client.id)
    document.po_number = payload.po_number
    document.public_notes = payload.public_notes
    document.private_notes = payload.private_notes
    document.valid_until = payload.valid_until
    document.items = _build_items(payload.items)
    calculate_totals(document)

    document.invitations = [
        Invitation(company_id=user.company_id, contact_id=contact.id)
        for contact in client.contacts
    ]

    repository = DocumentRepository(db)
    document = await repository.save(document)
    await repository.log_activity(
        user,
        ActivityCode.CREATE_DOCUMENT,
        document_type=document_type.value,
        target_name=document.number,
    )
    return map_document(document)


async def get_document(
    db: AsyncSession,
    document_type: DocumentType,
    document_id: int,
    user,
) -> DocumentOut:
    document = await get_document_or_404(
        DocumentRepository(db), document_type, document_id, user, include_deleted=False
    )
    _require(user, Capability.view, document)
    return map_document(document)


async def list_documents(
    db: AsyncSession,
    document_type: DocumentType,
    user,
    client_id: int | None = None,
    status: DocumentStatus | None = None,
    include_deleted: bool = False,
    page: int = 1,
    page_size: int = 20,
    sort_by: str = "created_at",
    order: str = "desc",
) -> DocumentListData:
    filters = [
        Document.company_id == user.company_id,
        Document.document_type == document_type,
    ]
    if not include_deleted:
        filters.append(Document.is_deleted.is_(False))
    if client_id:
        filters.append(Document.client_id == client_id)
    if status:
        filters.append(Document.status == status)

    total = await db.scalar(select(func.count(Document.id)).where(*filters))

    sort_map = {
        "created_at": Document.created_at,
        "number": Document.number,
    }
    sort_col = sort_map.get(sort_by, Document.created_at)

    result = await db.execute(
        select(Document)
        .where(*filters)
        .order_by(asc(sort_col) if order == "asc" else desc(sort_col))
        .offset((page - 1) * page_size)
        .limit(page_size)
    )

    return DocumentListData(
        total=total or 0,
        items=[map_document(d) for d in result.scalars().unique()],
    )


async def update_document(
    db: AsyncSession,
    document_type: DocumentType,
    document_id: int,
    payload: DocumentUpdate,
    user,
) -> DocumentOut:
    repository = DocumentRepository(db)
    document = await get_document_or_404(repository, document_type, document_id, user)
    _require(user, Capability.edit, document)

    if document.is_deleted:
        raise AppException(400, "Deleted documents cannot be updated", ErrorCode.DOCUMENT_DELETED)

    if document.version != payload.version:
        raise AppException(409, "Version conflict", ErrorCode.DOCUMENT_VERSION_CONFLICT)

    changes: list[str] = []

    if payload.items is not None:
        document.items = _build_items(payload.items)
        calculate_totals(document)
        changes.append("items")

    for field in ("po_number", "public_notes", "private_notes", "valid_until"):
        value = getattr(payload, field)
        if value is not None and value != getattr(document, field):
            setattr(document, field, value)
            changes.append(field)

    if not changes:
        return map_document(document)

    document.version += 1
    document.updated_by_id = user.id
    document.updated_at = datetime.now(timezone.utc)

    document = await repository.save(document)
    await repository.log_activity(
        user,
        ActivityCode.UPDATE_DOCUMENT,
        document_type=document_type.value,
        target_name=document.number,
        changes=", ".join(changes),
    )
    return map_document(document)


async def destroy_document(
    db: AsyncSession,
    document_type: DocumentType,
    document_id: int,
    user,
) -> None:
    repository = DocumentRepository(db)
    document = await get_document_or_404(repository, document_type, document_id, user)
    _require(user, Capability.edit, document)

    number = document.number
    await repository.delete(document)
    await repository.log_activity(
        user,
        ActivityCode.DESTROY_DOCUMENT,
        document_type=document_type.value,
        target_name=number,
    )


async def download_document_by_invitation(db: AsyncSession, key: str) -> tuple[str, str]:
    """Render the invited contact's copy of a document. Returns (path, filename)."""
    invitation = await DocumentRepository(db).get_invitation_by_key(key)
    if not invitation or invitation.document.is_deleted:
        raise AppException(404, "Invitation not found", ErrorCode.INVITATION_NOT_FOUND)

    file_path = await run_in_threadpool(generate_document_pdf, invitation.document, invitation.contact)
    return file_path, document_pdf_filename(invitation.document)
