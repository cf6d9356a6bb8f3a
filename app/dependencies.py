"""Dependency wiring for the document engine."""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.db import get_db
from app.repositories.document_repository import DocumentRepository
from app.services.auth.document_policy import DocumentPolicy
from app.services.billing.document_action_service import DocumentActionService
from app.services.billing.document_bulk_service import DocumentBulkService
from app.services.billing.document_delivery import DocumentDeliveryQueue


async def get_document_repository(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> DocumentRepository:
    return DocumentRepository(db)


def get_document_policy() -> DocumentPolicy:
    return DocumentPolicy()


def get_delivery_queue() -> DocumentDeliveryQueue:
    return DocumentDeliveryQueue()


async def get_document_action_service(
    repository: Annotated[DocumentRepository, Depends(get_document_repository)],
    policy: Annotated[DocumentPolicy, Depends(get_document_policy)],
    delivery: Annotated[DocumentDeliveryQueue, Depends(get_delivery_queue)],
) -> DocumentActionService:
    return DocumentActionService(repository, policy, delivery)


async def get_document_bulk_service(
    repository: Annotated[DocumentRepository, Depends(get_document_repository)],
    policy: Annotated[DocumentPolicy, Depends(get_document_policy)],
    delivery: Annotated[DocumentDeliveryQueue, Depends(get_delivery_queue)],
    actions: Annotated[DocumentActionService, Depends(get_document_action_service)],
) -> DocumentBulkService:
    return DocumentBulkService(repository, policy, actions, delivery)
