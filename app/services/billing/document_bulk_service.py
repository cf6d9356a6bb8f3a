"""Bulk document actions.

Items are processed one by one; an item the actor may not touch is skipped and
the batch carries on.
"""
import logging
from typing import Iterable, List

from app.constants.activity_codes import ActivityCode
from app.constants.document_actions import BULK_ACTIONS, Capability, DocumentAction, parse_action
from app.core.exceptions import DocumentActionError
from app.models.billing.document_models import Document
from app.models.enums.document_type import DocumentType
from app.models.users.user_models import User
from app.services.billing.action_results import ActionResult, Collection, Notification, Rejected

logger = logging.getLogger(__name__)


class DocumentBulkService:
    def __init__(self, repository, policy, actions, delivery):
        self.repository = repository
        self.policy = policy
        self.actions = actions
        self.delivery = delivery

    async def perform(
        self,
        ids: Iterable[int],
        action: str,
        actor: User,
        document_type: DocumentType | None = None,
    ) -> ActionResult:
        try:
            parsed = parse_action(action, BULK_ACTIONS)
        except DocumentActionError as exc:
            return Rejected.from_error(exc)

        ids = list(ids)
        documents = await self._resolve(ids, actor, document_type)
        if not documents:
            return Notification("No documents found", 200)

        if parsed is DocumentAction.download:
            return await self._download(documents, actor)

        if parsed is DocumentAction.convert:
            await self._convert(documents, actor)
        else:
            await self._dispatch(documents, parsed, actor)

        return Collection(await self._resolve(ids, actor, document_type))

    # -------------------------
    # BRANCHES
    # -------------------------
    async def _download(self, documents: List[Document], actor: User) -> ActionResult:
        visible = []
        skipped = []
        for document in documents:
            if self.policy.can(actor, Capability.view, document):
                visible.append(document)
            else:
                skipped.append(document.number)

        if skipped:
            logger.warning(
                "Bulk download skipped documents without view access",
                extra={"user_id": actor.id, "skipped": skipped},
            )

        if not visible:
            return Notification("No documents available for download", 200, {"skipped": skipped})

        self.delivery.enqueue_zip_and_email(visible, actor.company_id, actor.username)
        await self.repository.log_activity(
            actor,
            ActivityCode.BULK_DOWNLOAD_DOCUMENTS,
            count=len(visible),
            target_names=", ".join(d.number for d in visible),
        )
        return Notification("Email sent", 200, {"skipped": skipped})

    async def _convert(self, documents: List[Document], actor: User) -> None:
        for document in documents:
            if self.policy.cannot(actor, Capability.edit, document) or not document.is_convertible():
                continue
            await self.actions.execute(document, DocumentAction.convert, actor, bulk=True)

    async def _dispatch(self, documents: List[Document], action: DocumentAction, actor: User) -> None:
        for document in documents:
            if self.policy.cannot(actor, Capability.edit, document):
                continue

            result = await self.actions.execute(document, action, actor, bulk=True)
            if isinstance(result, Rejected):
                logger.info(
                    "Bulk item rejected",
                    extra={"action": action.value, "document_id": document.id, "reason": result.reason},
                )

    async def _resolve(self, ids: List[int], actor: User, document_type: DocumentType | None) -> List[Document]:
        return await self.repository.find_by_ids(
            actor.company_id,
            ids,
            include_deleted=True,
            document_type=document_type,
        )
