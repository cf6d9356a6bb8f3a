"""Tests for the nightly quote expiry job."""

from datetime import date, timedelta

import pytest
from sqlalchemy import select

from app.models.billing.document_models import Document
from app.models.enums.document_status import DocumentStatus
from app.models.enums.document_type import DocumentType
from app.models.support.activity_models import UserActivity
from app.repositories.document_repository import DocumentRepository
from app.services.billing.document_expiry_service import auto_expire_quotes
from app.services.billing.document_service import create_document

TODAY = date(2026, 3, 15)


async def _quote(session, seeded, payload, status, valid_until):
    out = await create_document(
        session,
        DocumentType.quote,
        payload.model_copy(update={"valid_until": valid_until}),
        seeded["user"],
    )
    repository = DocumentRepository(session)
    document = await repository.get(seeded["company"].id, out.id)
    document.status = status
    await repository.save(document)
    return document.id


async def _status(session, document_id):
    return await session.scalar(select(Document.status).where(Document.id == document_id))


@pytest.mark.asyncio
async def test_expires_overdue_sent_and_approved_quotes(session, seeded, quote_payload):
    past = TODAY - timedelta(days=1)
    sent = await _quote(session, seeded, quote_payload, DocumentStatus.sent, past)
    approved = await _quote(session, seeded, quote_payload, DocumentStatus.approved, past)
    draft = await _quote(session, seeded, quote_payload, DocumentStatus.draft, past)
    current = await _quote(session, seeded, quote_payload, DocumentStatus.sent, TODAY)

    count = await auto_expire_quotes(session, today=TODAY)

    assert count == 2
    assert await _status(session, sent) == DocumentStatus.expired
    assert await _status(session, approved) == DocumentStatus.expired
    assert await _status(session, draft) == DocumentStatus.draft
    assert await _status(session, current) == DocumentStatus.sent

    messages = (await session.execute(select(UserActivity.message))).scalars().all()
    assert sum("expired quote" in m for m in messages) == 2


@pytest.mark.asyncio
async def test_nothing_to_expire(session, seeded):
    assert await auto_expire_quotes(session, today=TODAY) == 0
