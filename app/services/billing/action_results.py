from dataclasses import dataclass, field
from typing import List, Union

from app.constants.error_codes import ErrorCode
from app.core.exceptions import DocumentActionError
from app.models.billing.document_models import Document


@dataclass(frozen=True)
class Item:
    document: Document


@dataclass(frozen=True)
class Collection:
    documents: List[Document]


@dataclass(frozen=True)
class BinaryStream:
    content: bytes
    filename: str
    media_type: str = "application/pdf"


@dataclass(frozen=True)
class Notification:
    message: str
    status_code: int = 200
    details: dict = field(default_factory=dict)


@dataclass(frozen=True)
class Rejected:
    reason: str
    status_code: int = 400
    error_code: ErrorCode = ErrorCode.DOCUMENT_INVALID_STATE

    @classmethod
    def from_error(cls, exc: DocumentActionError) -> "Rejected":
        return cls(reason=exc.message, status_code=exc.status_code, error_code=exc.error_code)


ActionResult = Union[Item, Collection, BinaryStream, Notification, Rejected]
