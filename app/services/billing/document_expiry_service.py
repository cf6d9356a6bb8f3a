from datetime import date

from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession

from app.constants.activity_codes import ActivityCode
from app.models.billing.document_models import Document
from app.models.enums.document_status import DocumentStatus
from app.models.enums.document_type import DocumentType
from app.utils.activity_helpers import emit_activity
from app.utils.logger import get_logger

logger = get_logger(__name__)

EXPIRABLE_STATUSES = (DocumentStatus.sent, DocumentStatus.approved)


def _expire_quotes_stmt(today: date):
    return (
        update(Document)
        .where(
            Document.document_type == DocumentType.quote,
            Document.status.in_(EXPIRABLE_STATUSES),
            Document.is_deleted.is_(False),
            Document.valid_until.isnot(None),
            Document.valid_until < today,
        )
        .values(
            status=DocumentStatus.expired,
            version=Document.version + 1,
            updated_by_id=None,
        )
        .returning(Document.id, Document.company_id, Document.number)
    )


async def auto_expire_quotes(db: AsyncSession, today: date | None = None) -> int:
    today = today or date.today()

    result = await db.execute(_expire_quotes_stmt(today))
    expired = result.all()

    if not expired:
        return 0

    for row in expired:
        await emit_activity(
            db,
            user_id=None,
            username="system",
            company_id=row.company_id,
            code=ActivityCode.EXPIRE_DOCUMENT,
            actor_role="System",
            actor_email="system",
            document_type=DocumentType.quote.value,
            target_name=row.number,
            changes=f"Expired automatically on {today}",
        )

    await db.commit()
    logger.info("Quotes expired", extra={"count": len(expired)})
    return len(expired)
