from sqlalchemy import Column, Integer, String, Boolean, ForeignKey, Index
from sqlalchemy.orm import relationship
from app.core.db import Base
from app.models.base.mixins import TimestampMixin, SoftDeleteMixin, AuditMixin


class Client(Base, TimestampMixin, SoftDeleteMixin, AuditMixin):
    __tablename__ = "clients"

    id = Column(Integer, primary_key=True)
    company_id = Column(Integer, ForeignKey("companies.id", ondelete="CASCADE"), nullable=False, index=True)

    name = Column(String(255), nullable=False, index=True)
    email = Column(String(255), nullable=True, index=True)
    address = Column(String, nullable=True)

    is_active = Column(Boolean, default=True, nullable=False)

    contacts = relationship("ClientContact", back_populates="client", cascade="all, delete-orphan", lazy="selectin")

    __table_args__ = (Index("ix_client_company_active", "company_id", "is_active"),)

    def __repr__(self):
        return f"<Client id={self.id} name={self.name} active={self.is_active}>"


class ClientContact(Base, TimestampMixin):
    __tablename__ = "client_contacts"

    id = Column(Integer, primary_key=True)
    company_id = Column(Integer, ForeignKey("companies.id", ondelete="CASCADE"), nullable=False, index=True)
    client_id = Column(Integer, ForeignKey("clients.id", ondelete="CASCADE"), nullable=False, index=True)

    first_name = Column(String(100), nullable=True)
    last_name = Column(String(100), nullable=True)
    email = Column(String(255), nullable=False)
    is_primary = Column(Boolean, default=False, nullable=False)

    client = relationship("Client", back_populates="contacts", lazy="selectin")

    @property
    def full_name(self) -> str:
        name = " ".join(p for p in (self.first_name, self.last_name) if p)
        return name or self.email

    def __repr__(self):
        return f"<ClientContact id={self.id} client_id={self.client_id} email={self.email}>"
