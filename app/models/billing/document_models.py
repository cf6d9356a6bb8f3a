from decimal import Decimal

from sqlalchemy import Column, Integer, String, ForeignKey, Numeric, Enum, Index, CheckConstraint, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.types import Date

from app.core.db import Base
from app.core.exceptions import PreconditionViolation
from app.constants.error_codes import ErrorCode
from app.models.base.mixins import TimestampMixin, SoftDeleteMixin, ArchiveMixin, AuditMixin, utcnow
from app.models.enums.document_status import DocumentStatus
from app.models.enums.document_type import DocumentType


# Forward-only lifecycle. `deleted` is terminal; only permanent removal follows it.
ALLOWED_TRANSITIONS = {
    DocumentStatus.draft: {DocumentStatus.sent, DocumentStatus.converted, DocumentStatus.deleted},
    DocumentStatus.sent: {DocumentStatus.approved, DocumentStatus.expired, DocumentStatus.converted, DocumentStatus.deleted},
    DocumentStatus.approved: {DocumentStatus.expired, DocumentStatus.converted, DocumentStatus.deleted},
    DocumentStatus.expired: {DocumentStatus.converted, DocumentStatus.deleted},
    DocumentStatus.converted: {DocumentStatus.deleted},
    DocumentStatus.deleted: set(),
}


class Document(Base, TimestampMixin, SoftDeleteMixin, ArchiveMixin, AuditMixin):
    """A quote or an invoice.

    Both commercial types share one table; `document_type` tells them apart and
    `number` carries the type prefix (QT-000042 / INV-000042).
    """

    __tablename__ = "documents"

    id = Column(Integer, primary_key=True)
    company_id = Column(Integer, ForeignKey("companies.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    client_id = Column(Integer, ForeignKey("clients.id", ondelete="RESTRICT"), nullable=False, index=True)

    document_type = Column(Enum(DocumentType), nullable=False, index=True)
    number = Column(String(50), nullable=True, index=True)
    status = Column(Enum(DocumentStatus), nullable=False, default=DocumentStatus.draft, index=True)

    po_number = Column(String(100), nullable=True)
    public_notes = Column(String, nullable=True)
    private_notes = Column(String, nullable=True)
    valid_until = Column(Date, nullable=True)

    subtotal_amount = Column(Numeric(14, 2), nullable=False, default=Decimal("0.00"))
    tax_amount = Column(Numeric(14, 2), nullable=False, default=Decimal("0.00"))
    total_amount = Column(Numeric(14, 2), nullable=False, default=Decimal("0.00"))
    balance = Column(Numeric(14, 2), nullable=False, default=Decimal("0.00"))

    source_document_id = Column(Integer, ForeignKey("documents.id", ondelete="SET NULL"), nullable=True, index=True)
    converted_document_id = Column(Integer, ForeignKey("documents.id", ondelete="SET NULL"), nullable=True)

    version = Column(Integer, nullable=False, default=1)

    client = relationship("Client", lazy="selectin")
    items = relationship(
        "DocumentItem",
        back_populates="document",
        cascade="all, delete-orphan",
        order_by="DocumentItem.position",
        lazy="selectin",
    )
    invitations = relationship("Invitation", back_populates="document", cascade="all, delete-orphan", lazy="selectin")

    __table_args__ = (
        Index("ix_document_company_type_status", "company_id", "document_type", "status"),
        UniqueConstraint("company_id", "document_type", "number", name="uq_document_company_type_number"),
        CheckConstraint("subtotal_amount >= 0 AND tax_amount >= 0 AND total_amount >= 0", name="ck_document_amounts_non_negative"),
    )

    # ----------------------------
    # Predicates
    # ----------------------------
    def is_convertible(self) -> bool:
        return self.status != DocumentStatus.converted and not self.is_deleted

    def is_approvable(self) -> bool:
        return self.document_type == DocumentType.quote and self.status == DocumentStatus.sent

    def can_transition_to(self, status: DocumentStatus) -> bool:
        return status in ALLOWED_TRANSITIONS[self.status]

    # ----------------------------
    # Transitions
    # ----------------------------
    def _transition_to(self, status: DocumentStatus) -> None:
        if not self.can_transition_to(status):
            raise PreconditionViolation(
                f"{self.label} cannot move from {self.status.value} to {status.value}"
            )
        self.status = status
        self.version = (self.version or 0) + 1

    def mark_sent(self) -> None:
        if self.is_deleted:
            raise PreconditionViolation(f"{self.label} is deleted", error_code=ErrorCode.DOCUMENT_DELETED)
        # already past draft: marking sent again never moves the document backwards
        if self.status == DocumentStatus.draft:
            self._transition_to(DocumentStatus.sent)

    def approve(self) -> None:
        if not self.is_approvable():
            raise PreconditionViolation("Unable to approve this quote as it has expired.")
        self._transition_to(DocumentStatus.approved)

    def mark_converted(self, target: "Document") -> None:
        self._transition_to(DocumentStatus.converted)
        self.converted_document_id = target.id

    def archive(self) -> bool:
        """Returns False when there was nothing to do."""
        if self.is_deleted or self.is_archived:
            return False
        self.archived_at = utcnow()
        self.version = (self.version or 0) + 1
        return True

    def soft_delete(self) -> bool:
        """Returns False when the document was already deleted."""
        if self.is_deleted:
            return False
        self._transition_to(DocumentStatus.deleted)
        self.is_deleted = True
        self.deleted_at = utcnow()
        return True

    @property
    def label(self) -> str:
        kind = self.document_type.value.capitalize() if self.document_type else "Document"
        return f"{kind} {self.number or self.id}"

    def __repr__(self):
        return f"<Document {self.document_type} {self.number} status={self.status}>"


class DocumentItem(Base, TimestampMixin):
    __tablename__ = "document_items"

    id = Column(Integer, primary_key=True)
    document_id = Column(Integer, ForeignKey("documents.id", ondelete="CASCADE"), nullable=False, index=True)
    position = Column(Integer, nullable=False, default=0)

    product_key = Column(String(255), nullable=False)
    notes = Column(String, nullable=True)
    quantity = Column(Numeric(12, 2), nullable=False)
    cost = Column(Numeric(12, 2), nullable=False)
    tax_rate = Column(Numeric(5, 2), nullable=False, default=Decimal("0.00"))
    line_total = Column(Numeric(14, 2), nullable=False)

    document = relationship("Document", back_populates="items", lazy="selectin")

    __table_args__ = (
        CheckConstraint("quantity > 0", name="ck_document_item_quantity_positive"),
        CheckConstraint("cost >= 0", name="ck_document_item_cost_non_negative"),
        CheckConstraint("tax_rate >= 0", name="ck_document_item_tax_rate_non_negative"),
    )

    def __repr__(self):
        return f"<DocumentItem id={self.id} product_key={self.product_key} qty={self.quantity}>"
