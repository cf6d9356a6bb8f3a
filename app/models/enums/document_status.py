# app/models/enums/document_status.py
import enum


class DocumentStatus(str, enum.Enum):
    draft = "draft"
    sent = "sent"
    approved = "approved"
    expired = "expired"
    converted = "converted"
    deleted = "deleted"
