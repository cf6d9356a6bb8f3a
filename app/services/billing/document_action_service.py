"""Single-document action dispatch.

An action token is parsed into a DocumentAction at the boundary, checked against
the actor's capability on the document, and routed to exactly one handler.
Precondition and authorization failures come back as Rejected results; only
infrastructure errors (database, rendering) propagate.
"""
import logging
import os
from typing import Awaitable, Callable, Dict, Optional, Union

from fastapi.concurrency import run_in_threadpool

from app.constants.activity_codes import ActivityCode
from app.constants.document_actions import (
    DocumentAction,
    REQUIRED_CAPABILITY,
    SINGLE_ACTIONS,
    parse_action,
)
from app.core.exceptions import ActionNotImplemented, AuthorizationDenied, DocumentActionError
from app.models.billing.document_models import Document
from app.models.enums.document_type import DocumentType
from app.models.users.user_models import User
from app.services.billing import document_factory
from app.services.billing.action_results import (
    ActionResult,
    BinaryStream,
    Collection,
    Item,
    Notification,
    Rejected,
)
from app.utils.pdf_generators.document_pdf import document_pdf_filename, generate_document_pdf

logger = logging.getLogger(__name__)

Handler = Callable[[Document, User, bool], Awaitable[Optional[ActionResult]]]


def _read_and_remove(path: str) -> bytes:
    try:
        with open(path, "rb") as fh:
            return fh.read()
    finally:
        os.remove(path)


class DocumentActionService:
    def __init__(self, repository, policy, delivery, render_pdf=generate_document_pdf):
        self.repository = repository
        self.policy = policy
        self.delivery = delivery
        self.render_pdf = render_pdf

        self._handlers: Dict[DocumentAction, Handler] = {
            DocumentAction.clone_to_invoice: self._clone_to_invoice,
            DocumentAction.clone_to_quote: self._clone_to_quote,
            DocumentAction.approve: self._approve,
            DocumentAction.mark_sent: self._mark_sent,
            DocumentAction.archive: self._archive,
            DocumentAction.delete: self._delete,
            DocumentAction.download: self._download,
            DocumentAction.email: self._email,
            DocumentAction.history: self._history,
            DocumentAction.convert: self._convert,
        }
        missing = set(DocumentAction) - set(self._handlers)
        if missing:
            raise RuntimeError(f"No handler for document actions: {sorted(a.value for a in missing)}")

    # -------------------------
    # ENTRY POINTS
    # -------------------------
    async def perform(
        self,
        document: Document,
        action: Union[str, DocumentAction],
        actor: User,
    ) -> ActionResult:
        """Run one action requested directly for a single document."""
        token = action.value if isinstance(action, DocumentAction) else action
        try:
            action = parse_action(token, SINGLE_ACTIONS)
        except DocumentActionError as exc:
            return Rejected.from_error(exc)

        return await self.execute(document, action, actor)

    async def execute(
        self,
        document: Document,
        action: DocumentAction,
        actor: User,
        bulk: bool = False,
    ) -> Optional[ActionResult]:
        capability = REQUIRED_CAPABILITY[action]
        if self.policy.cannot(actor, capability, document):
            logger.info(
                "Document action denied",
                extra={"action": action.value, "document_id": document.id, "user_id": actor.id},
            )
            return Rejected.from_error(
                AuthorizationDenied(f"Insufficient privileges to {capability.value} {document.label}")
            )

        try:
            return await self._handlers[action](document, actor, bulk)
        except DocumentActionError as exc:
            logger.info(
                "Document action rejected",
                extra={"action": action.value, "document_id": document.id, "reason": exc.message},
            )
            return Rejected.from_error(exc)

    # -------------------------
    # HANDLERS
    # -------------------------
    async def _clone_to_invoice(self, document: Document, actor: User, bulk: bool) -> ActionResult:
        if document.document_type == DocumentType.invoice:
            return Item(await self._clone(document, actor))
        return Item(await self._convert_copy(document, actor))

    async def _clone_to_quote(self, document: Document, actor: User, bulk: bool) -> ActionResult:
        if document.document_type == DocumentType.quote:
            return Item(await self._clone(document, actor))
        return Item(await self._convert_copy(document, actor))

    async def _approve(self, document: Document, actor: User, bulk: bool) -> ActionResult:
        document.approve()
        document.updated_by_id = actor.id
        document = await self.repository.save(document)
        await self._log(actor, ActivityCode.APPROVE_DOCUMENT, document)
        return Item(document)

    async def _mark_sent(self, document: Document, actor: User, bulk: bool) -> Optional[ActionResult]:
        document.mark_sent()
        document.updated_by_id = actor.id
        document = await self.repository.save(document)
        await self._log(actor, ActivityCode.MARK_DOCUMENT_SENT, document)

        if bulk:
            return None
        return Item(document)

    async def _archive(self, document: Document, actor: User, bulk: bool) -> ActionResult:
        if document.archive():
            document.updated_by_id = actor.id
            document = await self.repository.save(document)
            await self._log(actor, ActivityCode.ARCHIVE_DOCUMENT, document)
        return Collection([document])

    async def _delete(self, document: Document, actor: User, bulk: bool) -> ActionResult:
        if document.soft_delete():
            document.updated_by_id = actor.id
            document = await self.repository.save(document)
            await self._log(actor, ActivityCode.DELETE_DOCUMENT, document)
        return Collection([document])

    async def _download(self, document: Document, actor: User, bulk: bool) -> ActionResult:
        path = await run_in_threadpool(self.render_pdf, document, None)
        content = await run_in_threadpool(_read_and_remove, path)
        return BinaryStream(content=content, filename=document_pdf_filename(document))

    async def _email(self, document: Document, actor: User, bulk: bool) -> ActionResult:
        self.delivery.enqueue_email(document)
        await self._log(actor, ActivityCode.EMAIL_DOCUMENT, document)
        return Notification("Email sent", 200)

    async def _history(self, document: Document, actor: User, bulk: bool) -> ActionResult:
        raise ActionNotImplemented("Document history is not implemented")

    async def _convert(self, document: Document, actor: User, bulk: bool) -> ActionResult:
        target = await self._convert_copy(document, actor)
        document.mark_converted(target)
        document.updated_by_id = actor.id
        await self.repository.save(document)
        return Item(target)

    # -------------------------
    # HELPERS
    # -------------------------
    async def _clone(self, document: Document, actor: User) -> Document:
        target = await document_factory.clone_same_type(self.repository, document, actor.id)
        await self._log(
            actor,
            ActivityCode.CLONE_DOCUMENT,
            target,
            source_name=document.number,
        )
        return target

    async def _convert_copy(self, document: Document, actor: User) -> Document:
        target = await document_factory.convert_to_other_type(self.repository, document, actor.id)
        await self._log(
            actor,
            ActivityCode.CONVERT_DOCUMENT,
            document,
            source_name=document.number,
            target_type=target.document_type.value,
            target_name=target.number,
        )
        return target

    async def _log(self, actor: User, code: ActivityCode, document: Document, **context) -> None:
        context.setdefault("target_name", document.number)
        await self.repository.log_activity(
            actor,
            code,
            document_type=document.document_type.value,
            **context,
        )
