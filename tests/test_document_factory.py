"""Tests for same-type cloning and cross-type conversion."""

from decimal import Decimal

import pytest

from app.core.exceptions import ConversionError
from app.models.enums.document_status import DocumentStatus
from app.models.enums.document_type import DocumentType
from app.services.billing.document_factory import (
    calculate_totals,
    clone_same_type,
    convert_to_other_type,
)


def _item_values(document):
    return [
        (i.product_key, i.notes, i.quantity, i.cost, i.tax_rate)
        for i in document.items
    ]


def test_calculate_totals(make_document):
    document = make_document()
    calculate_totals(document)

    assert document.items[0].line_total == Decimal("300.00")
    assert document.subtotal_amount == Decimal("399.99")
    assert document.tax_amount == Decimal("30.00")
    assert document.total_amount == Decimal("429.99")
    assert document.balance == Decimal("429.99")


@pytest.mark.asyncio
async def test_clone_same_type_copies_content(repository, make_document, admin):
    source = make_document(status=DocumentStatus.approved)

    target = await clone_same_type(repository, source, admin.id)

    assert target.id != source.id
    assert target.number != source.number
    assert target.document_type == DocumentType.quote
    assert target.status == DocumentStatus.draft
    assert target.user_id == admin.id
    assert target.source_document_id == source.id
    assert target.total_amount == source.total_amount
    assert _item_values(target) == _item_values(source)
    # the source is left alone
    assert source.status == DocumentStatus.approved
    assert len(source.items) == 2


@pytest.mark.asyncio
async def test_convert_recomputes_totals(repository, make_document, admin):
    source = make_document(status=DocumentStatus.sent)
    source.total_amount = Decimal("1.00")

    target = await convert_to_other_type(repository, source, admin.id)

    assert target.document_type == DocumentType.invoice
    assert target.number.startswith("INV-")
    assert target.status == DocumentStatus.draft
    assert target.total_amount == Decimal("429.99")
    assert target.balance == Decimal("429.99")
    assert _item_values(target) == _item_values(source)
    assert source.status == DocumentStatus.sent


@pytest.mark.asyncio
async def test_convert_refuses_converted_source(repository, make_document, admin):
    source = make_document(status=DocumentStatus.converted)

    with pytest.raises(ConversionError):
        await convert_to_other_type(repository, source, admin.id)

    assert repository.saved == []
    assert repository.of_type(DocumentType.invoice) == []
