# app/models/enums/document_type.py
import enum


class DocumentType(str, enum.Enum):
    quote = "quote"
    invoice = "invoice"

    @property
    def counterpart(self) -> "DocumentType":
        return DocumentType.invoice if self is DocumentType.quote else DocumentType.quote

    @property
    def number_prefix(self) -> str:
        return "QT" if self is DocumentType.quote else "INV"
