"""Persistence tests against an in-memory SQLite database."""

from decimal import Decimal

import pytest
from sqlalchemy import select

from app.constants.activity_codes import ActivityCode
from app.core.exceptions import AppException
from app.models.enums.document_status import DocumentStatus
from app.models.enums.document_type import DocumentType
from app.models.support.activity_models import UserActivity
from app.repositories.document_repository import DocumentRepository
from app.schemas.billing.document_schemas import DocumentUpdate
from app.services.billing.document_service import (
    create_document,
    get_document,
    get_document_or_404,
    list_documents,
    update_document,
)


@pytest.mark.asyncio
async def test_create_assigns_number_and_invitations(session, seeded, quote_payload):
    out = await create_document(session, DocumentType.quote, quote_payload, seeded["user"])

    assert out.number == f"QT-{out.id:06d}"
    assert out.status == DocumentStatus.draft
    assert out.total_amount == Decimal("429.99")
    assert [i.position for i in out.items] == [0, 1]

    document = await DocumentRepository(session).get(seeded["company"].id, out.id)
    assert len(document.invitations) == 2
    assert all(inv.key for inv in document.invitations)

    activity = (await session.execute(select(UserActivity))).scalars().one()
    assert "created quote" in activity.message


@pytest.mark.asyncio
async def test_find_by_ids_is_tenant_scoped(session, seeded, quote_payload):
    repository = DocumentRepository(session)
    quote = await create_document(session, DocumentType.quote, quote_payload, seeded["user"])
    invoice = await create_document(session, DocumentType.invoice, quote_payload, seeded["user"])

    document = await repository.get(seeded["company"].id, quote.id)
    document.soft_delete()
    await repository.save(document)

    found = await repository.find_by_ids(seeded["company"].id, [invoice.id, quote.id, 999])
    assert [d.id for d in found] == [quote.id, invoice.id]

    live = await repository.find_by_ids(seeded["company"].id, [invoice.id, quote.id], include_deleted=False)
    assert [d.id for d in live] == [invoice.id]

    quotes_only = await repository.find_by_ids(
        seeded["company"].id, [invoice.id, quote.id], document_type=DocumentType.quote
    )
    assert [d.id for d in quotes_only] == [quote.id]

    assert await repository.find_by_ids(seeded["other"].id, [invoice.id, quote.id]) == []
    assert await repository.find_by_ids(seeded["company"].id, []) == []


@pytest.mark.asyncio
async def test_invitation_lookup(session, seeded, quote_payload):
    repository = DocumentRepository(session)
    out = await create_document(session, DocumentType.quote, quote_payload, seeded["user"])
    document = await repository.get(seeded["company"].id, out.id)
    key = document.invitations[0].key

    invitation = await repository.get_invitation_by_key(key)

    assert invitation.document_id == out.id
    assert await repository.get_invitation_by_key("missing") is None


@pytest.mark.asyncio
async def test_log_activity_persists_message(session, seeded):
    repository = DocumentRepository(session)

    await repository.log_activity(
        seeded["user"],
        ActivityCode.MARK_DOCUMENT_SENT,
        document_type="quote",
        target_name="QT-000001",
    )

    activity = (await session.execute(select(UserActivity))).scalars().one()
    assert activity.message == "Admin (owner@acme.test) marked quote QT-000001 as sent"
    assert activity.company_id == seeded["company"].id


@pytest.mark.asyncio
async def test_update_checks_version(session, seeded, quote_payload):
    out = await create_document(session, DocumentType.quote, quote_payload, seeded["user"])

    updated = await update_document(
        session, DocumentType.quote, out.id, DocumentUpdate(po_number="PO-1", version=out.version), seeded["user"]
    )
    assert updated.po_number == "PO-1"
    assert updated.version == out.version + 1

    with pytest.raises(AppException) as exc:
        await update_document(
            session, DocumentType.quote, out.id, DocumentUpdate(po_number="PO-2", version=out.version), seeded["user"]
        )
    assert exc.value.status_code == 409


@pytest.mark.asyncio
async def test_list_hides_deleted_by_default(session, seeded, quote_payload):
    repository = DocumentRepository(session)
    first = await create_document(session, DocumentType.quote, quote_payload, seeded["user"])
    await create_document(session, DocumentType.quote, quote_payload, seeded["user"])

    document = await repository.get(seeded["company"].id, first.id)
    document.soft_delete()
    await repository.save(document)

    visible = await list_documents(session, DocumentType.quote, seeded["user"])
    everything = await list_documents(session, DocumentType.quote, seeded["user"], include_deleted=True)

    assert visible.total == 1
    assert everything.total == 2


@pytest.mark.asyncio
async def test_read_hides_deleted_but_actions_still_resolve(session, seeded, quote_payload):
    repository = DocumentRepository(session)
    out = await create_document(session, DocumentType.quote, quote_payload, seeded["user"])
    assert (await get_document(session, DocumentType.quote, out.id, seeded["user"])).id == out.id

    document = await repository.get(seeded["company"].id, out.id)
    document.soft_delete()
    await repository.save(document)

    with pytest.raises(AppException) as exc:
        await get_document(session, DocumentType.quote, out.id, seeded["user"])
    assert exc.value.status_code == 404

    found = await get_document_or_404(repository, DocumentType.quote, out.id, seeded["user"])
    assert found.is_deleted
