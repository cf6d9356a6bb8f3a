import secrets

from sqlalchemy import Column, Integer, String, ForeignKey, DateTime
from sqlalchemy.orm import relationship
from app.core.db import Base
from app.models.base.mixins import TimestampMixin


def generate_invitation_key() -> str:
    return secrets.token_urlsafe(24)


class Invitation(Base, TimestampMixin):
    """Grants one client contact public access to one document through `key`."""

    __tablename__ = "invitations"

    id = Column(Integer, primary_key=True)
    company_id = Column(Integer, ForeignKey("companies.id", ondelete="CASCADE"), nullable=False, index=True)
    document_id = Column(Integer, ForeignKey("documents.id", ondelete="CASCADE"), nullable=False, index=True)
    contact_id = Column(Integer, ForeignKey("client_contacts.id", ondelete="CASCADE"), nullable=False, index=True)
    key = Column(String(64), nullable=False, unique=True, index=True, default=generate_invitation_key)
    sent_at = Column(DateTime(timezone=True), nullable=True)

    document = relationship("Document", back_populates="invitations", lazy="selectin")
    contact = relationship("ClientContact", lazy="selectin")

    def __repr__(self):
        return f"<Invitation id={self.id} document_id={self.document_id} contact_id={self.contact_id}>"
