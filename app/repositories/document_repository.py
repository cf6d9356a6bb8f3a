"""Persistence for quotes and invoices."""

from typing import Iterable, List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.constants.activity_codes import ActivityCode
from app.models.billing.document_models import Document
from app.models.billing.invitation_models import Invitation
from app.models.enums.document_type import DocumentType
from app.utils.activity_helpers import emit_activity, actor_context
from app.utils.logger import get_logger

logger = get_logger(__name__)


def format_document_number(document_type: DocumentType, document_id: int) -> str:
    return f"{document_type.number_prefix}-{document_id:06d}"


class DocumentRepository:
    """Data access for documents, their invitations and the activity log.

    Attributes:
        session: SQLAlchemy async session for database operations
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def save(self, document: Document) -> Document:
        """Persist a document, assigning its number on first save.

        Args:
            document: New or modified document

        Returns:
            Document: The same instance, refreshed from the database
        """
        self.session.add(document)
        await self.session.flush()

        if not document.number:
            document.number = format_document_number(document.document_type, document.id)

        await self.session.commit()
        await self.session.refresh(document)
        return document

    async def delete(self, document: Document) -> None:
        """Permanently remove a document and its line items."""
        await self.session.delete(document)
        await self.session.commit()
        logger.info("Document removed", extra={"document_id": document.id})

    async def get(
        self,
        company_id: int,
        document_id: int,
        document_type: Optional[DocumentType] = None,
        include_deleted: bool = False,
    ) -> Optional[Document]:
        query = select(Document).where(
            Document.id == document_id,
            Document.company_id == company_id,
        )
        if document_type is not None:
            query = query.where(Document.document_type == document_type)
        if not include_deleted:
            query = query.where(Document.is_deleted.is_(False))

        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def find_by_ids(
        self,
        company_id: int,
        ids: Iterable[int],
        include_deleted: bool = True,
        document_type: Optional[DocumentType] = None,
    ) -> List[Document]:
        """Resolve ids to documents inside one company, ordered by id.

        Ids that do not exist or belong to another company are dropped silently.
        """
        ids = list(ids)
        if not ids:
            return []

        query = select(Document).where(
            Document.id.in_(ids),
            Document.company_id == company_id,
        )
        if document_type is not None:
            query = query.where(Document.document_type == document_type)
        if not include_deleted:
            query = query.where(Document.is_deleted.is_(False))

        result = await self.session.execute(query.order_by(Document.id))
        return list(result.scalars().unique())

    async def get_invitation_by_key(self, key: str) -> Optional[Invitation]:
        result = await self.session.execute(
            select(Invitation).where(Invitation.key == key)
        )
        return result.scalar_one_or_none()

    async def log_activity(self, user, code: ActivityCode, **context) -> None:
        await emit_activity(
            self.session,
            user_id=user.id,
            username=user.username,
            company_id=user.company_id,
            code=code,
            **actor_context(user),
            **context,
        )
        await self.session.commit()
