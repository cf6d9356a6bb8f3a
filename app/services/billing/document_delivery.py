"""Background delivery of documents by email.

Jobs run on the application scheduler as one-shot jobs, so the request that
enqueues them returns before any PDF is rendered or any mail is sent. A failing
job is logged by the scheduler and never reported back to the caller.
"""
import os
import tempfile
import zipfile
from datetime import datetime, timezone
from typing import Iterable, List

from fastapi.concurrency import run_in_threadpool

from app.core.db import AsyncSessionLocal
from app.core.scheduler import scheduler
from app.models.billing.document_models import Document
from app.repositories.document_repository import DocumentRepository
from app.utils.logger import get_logger
from app.utils.mailer import send_email_with_attachment
from app.utils.pdf_generators.document_pdf import document_pdf_filename, generate_document_pdf

logger = get_logger(__name__)


# =====================================================
# JOBS
# =====================================================
async def zip_and_email_documents(document_ids: List[int], company_id: int, address: str) -> None:
    async with AsyncSessionLocal() as db:
        documents = await DocumentRepository(db).find_by_ids(company_id, document_ids)

    if not documents:
        logger.warning("Nothing to zip", extra={"document_ids": document_ids})
        return

    with tempfile.TemporaryDirectory() as tmp_dir:
        stamp = datetime.now(timezone.utc).strftime("%Y%m%d%H%M%S")
        zip_path = os.path.join(tmp_dir, f"documents_{stamp}.zip")

        with zipfile.ZipFile(zip_path, "w", zipfile.ZIP_DEFLATED) as archive:
            for document in documents:
                pdf_path = await run_in_threadpool(generate_document_pdf, document)
                try:
                    archive.write(pdf_path, arcname=document_pdf_filename(document))
                finally:
                    os.remove(pdf_path)

        await run_in_threadpool(
            send_email_with_attachment,
            address,
            "Your requested documents",
            f"Attached are the {len(documents)} documents you requested.",
            zip_path,
        )

    logger.info("Document archive emailed", extra={"count": len(documents), "recipient": address})


async def email_document(document_id: int, company_id: int) -> None:
    async with AsyncSessionLocal() as db:
        document = await DocumentRepository(db).get(company_id, document_id, include_deleted=True)
        if document is None:
            logger.warning("Document vanished before email", extra={"document_id": document_id})
            return

        if not document.invitations:
            logger.warning("Document has no invitations", extra={"document_id": document_id})
            return

        for invitation in document.invitations:
            contact = invitation.contact
            pdf_path = await run_in_threadpool(generate_document_pdf, document, contact)
            try:
                await run_in_threadpool(
                    send_email_with_attachment,
                    contact.email,
                    f"{document.label} from your supplier",
                    f"Hello {contact.full_name},\n\nPlease find {document.label} attached.",
                    pdf_path,
                )
            finally:
                os.remove(pdf_path)
            invitation.sent_at = datetime.now(timezone.utc)

        await db.commit()


# =====================================================
# QUEUE
# =====================================================
class DocumentDeliveryQueue:
    """Enqueues delivery jobs; never waits for them."""

    def __init__(self, job_scheduler=scheduler):
        self.scheduler = job_scheduler

    def enqueue_zip_and_email(self, documents: Iterable[Document], company_id: int, address: str) -> None:
        document_ids = [d.id for d in documents]
        self.scheduler.add_job(zip_and_email_documents, args=[document_ids, company_id, address])
        logger.info("Zip delivery queued", extra={"document_ids": document_ids, "recipient": address})

    def enqueue_email(self, document: Document) -> None:
        self.scheduler.add_job(email_document, args=[document.id, document.company_id])
        logger.info("Email delivery queued", extra={"document_id": document.id})
