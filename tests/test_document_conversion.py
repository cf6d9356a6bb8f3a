"""Conversions and clones against an in-memory SQLite database."""

from unittest.mock import Mock

import pytest
from sqlalchemy import select

from app.models.billing.invitation_models import Invitation
from app.models.enums.document_status import DocumentStatus
from app.models.enums.document_type import DocumentType
from app.repositories.document_repository import DocumentRepository
from app.services.auth.document_policy import DocumentPolicy
from app.services.billing.action_results import Item
from app.services.billing.document_action_service import DocumentActionService
from app.services.billing.document_bulk_service import DocumentBulkService
from app.services.billing.document_service import create_document


@pytest.fixture
def engine_services(session, render_pdf):
    repository = DocumentRepository(session)
    policy = DocumentPolicy()
    delivery = Mock(spec=["enqueue_email", "enqueue_zip_and_email"])
    actions = DocumentActionService(repository, policy, delivery, render_pdf=render_pdf)
    return repository, actions, DocumentBulkService(repository, policy, actions, delivery)


async def _invitations(session, document_id):
    query = select(Invitation).where(Invitation.document_id == document_id)
    return (await session.execute(query)).scalars().all()


async def _quote(session, seeded, quote_payload, repository):
    out = await create_document(session, DocumentType.quote, quote_payload, seeded["user"])
    return await repository.get(seeded["company"].id, out.id)


@pytest.mark.asyncio
async def test_clone_to_invoice_invites_same_contacts(session, seeded, quote_payload, engine_services):
    repository, actions, _ = engine_services
    quote = await _quote(session, seeded, quote_payload, repository)
    contacts = sorted(inv.contact_id for inv in quote.invitations)

    result = await actions.perform(quote, "clone_to_invoice", seeded["user"])

    assert isinstance(result, Item)
    invoice = result.document
    assert invoice.document_type == DocumentType.invoice
    invitations = await _invitations(session, invoice.id)
    assert sorted(inv.contact_id for inv in invitations) == contacts
    assert all(inv.company_id == seeded["company"].id for inv in invitations)

    quote_keys = {inv.key for inv in quote.invitations}
    assert not quote_keys & {inv.key for inv in invitations}


@pytest.mark.asyncio
async def test_bulk_convert_invites_same_contacts(session, seeded, quote_payload, engine_services):
    repository, _, bulk = engine_services
    quote = await _quote(session, seeded, quote_payload, repository)
    contacts = sorted(inv.contact_id for inv in quote.invitations)

    result = await bulk.perform([quote.id], "convert", seeded["user"])

    converted = result.documents[0]
    assert converted.status == DocumentStatus.converted
    invitations = await _invitations(session, converted.converted_document_id)
    assert sorted(inv.contact_id for inv in invitations) == contacts
