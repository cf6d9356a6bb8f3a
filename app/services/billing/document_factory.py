"""Builds new documents out of existing ones.

Same-type clones copy the source verbatim (apart from identity and status).
Cross-type conversions copy the line items and recompute every amount, since
the target type may round or tax differently.
"""
import logging
from decimal import Decimal
from typing import List

from app.core.exceptions import ConversionError
from app.models.billing.document_models import Document, DocumentItem
from app.models.billing.invitation_models import Invitation
from app.models.enums.document_status import DocumentStatus
from app.models.enums.document_type import DocumentType
from app.utils.decimal_utils import to_decimal, compute_line_total, compute_line_tax

logger = logging.getLogger(__name__)


def calculate_totals(document: Document) -> None:
    subtotal = Decimal("0.00")
    tax = Decimal("0.00")

    for item in document.items:
        item.line_total = compute_line_total(item.quantity, item.cost)
        subtotal += item.line_total
        tax += compute_line_tax(item.line_total, item.tax_rate)

    document.subtotal_amount = to_decimal(subtotal)
    document.tax_amount = to_decimal(tax)
    document.total_amount = to_decimal(subtotal + tax)
    # nothing has been paid against a freshly built document
    document.balance = document.total_amount


def build_document(
    document_type: DocumentType,
    company_id: int,
    user_id: int,
    client_id: int,
) -> Document:
    return Document(
        document_type=document_type,
        company_id=company_id,
        user_id=user_id,
        client_id=client_id,
        status=DocumentStatus.draft,
        is_deleted=False,
        version=1,
        subtotal_amount=Decimal("0.00"),
        tax_amount=Decimal("0.00"),
        total_amount=Decimal("0.00"),
        balance=Decimal("0.00"),
        created_by_id=user_id,
        updated_by_id=user_id,
    )


def _copy_invitations(source: Document) -> List[Invitation]:
    # the same contacts keep access to whatever the document turns into
    return [
        Invitation(company_id=source.company_id, contact_id=invitation.contact_id)
        for invitation in source.invitations
    ]


def _copy_items(source: Document) -> List[DocumentItem]:
    return [
        DocumentItem(
            position=index,
            product_key=item.product_key,
            notes=item.notes,
            quantity=item.quantity,
            cost=item.cost,
            tax_rate=item.tax_rate,
            line_total=item.line_total,
        )
        for index, item in enumerate(source.items)
    ]


def _copy_document(source: Document, document_type: DocumentType, acting_user_id: int) -> Document:
    target = build_document(
        document_type=document_type,
        company_id=source.company_id,
        user_id=acting_user_id,
        client_id=source.client_id,
    )
    target.po_number = source.po_number
    target.public_notes = source.public_notes
    target.private_notes = source.private_notes
    target.source_document_id = source.id
    target.items = _copy_items(source)
    target.invitations = _copy_invitations(source)
    return target


async def clone_same_type(repository, source: Document, acting_user_id: int) -> Document:
    target = _copy_document(source, source.document_type, acting_user_id)
    target.valid_until = source.valid_until
    target.subtotal_amount = source.subtotal_amount
    target.tax_amount = source.tax_amount
    target.total_amount = source.total_amount
    target.balance = source.total_amount

    target = await repository.save(target)
    logger.info(
        "Document cloned",
        extra={"source_id": source.id, "target_id": target.id, "document_type": target.document_type.value},
    )
    return target


async def convert_to_other_type(repository, source: Document, acting_user_id: int) -> Document:
    if not source.is_convertible():
        raise ConversionError(f"{source.label} cannot be converted")

    target = _copy_document(source, source.document_type.counterpart, acting_user_id)
    calculate_totals(target)

    target = await repository.save(target)
    logger.info(
        "Document converted",
        extra={
            "source_id": source.id,
            "target_id": target.id,
            "target_type": target.document_type.value,
        },
    )
    return target
