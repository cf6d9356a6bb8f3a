from pydantic import BaseModel, Field
from typing import List, Optional
from decimal import Decimal
from datetime import datetime, date

from app.models.enums.document_status import DocumentStatus
from app.models.enums.document_type import DocumentType

# =====================================================
# ITEM PAYLOADS (CREATE / UPDATE)
# =====================================================

class DocumentItemIn(BaseModel):
    product_key: str = Field(..., min_length=1, max_length=255)
    notes: Optional[str] = None
    quantity: Decimal = Field(..., gt=0)
    cost: Decimal = Field(..., ge=0)
    tax_rate: Decimal = Field(Decimal("0.00"), ge=0, le=100)


# =====================================================
# ITEM RESPONSES
# =====================================================

class DocumentItemOut(BaseModel):
    id: Optional[int]
    position: int
    product_key: str
    notes: Optional[str]
    quantity: Decimal
    cost: Decimal
    tax_rate: Decimal
    line_total: Decimal


# =====================================================
# DOCUMENT CREATE / UPDATE
# =====================================================

class DocumentCreate(BaseModel):
    client_id: int
    items: List[DocumentItemIn]
    po_number: Optional[str] = None
    public_notes: Optional[str] = None
    private_notes: Optional[str] = None
    valid_until: Optional[date] = None


class DocumentUpdate(BaseModel):
    po_number: Optional[str] = None
    public_notes: Optional[str] = None
    private_notes: Optional[str] = None
    valid_until: Optional[date] = None
    items: Optional[List[DocumentItemIn]] = None
    version: int


# =====================================================
# DOCUMENT RESPONSE
# =====================================================

class DocumentOut(BaseModel):
    id: Optional[int]
    number: Optional[str]
    document_type: DocumentType
    status: DocumentStatus

    company_id: int
    client_id: int
    user_id: Optional[int]

    po_number: Optional[str]
    public_notes: Optional[str]
    private_notes: Optional[str]
    valid_until: Optional[date]

    subtotal_amount: Decimal
    tax_amount: Decimal
    total_amount: Decimal
    balance: Decimal

    is_deleted: bool
    is_archived: bool
    source_document_id: Optional[int]
    converted_document_id: Optional[int]
    version: int

    created_at: Optional[datetime]
    updated_at: Optional[datetime]

    items: List[DocumentItemOut]


class DocumentListData(BaseModel):
    total: int
    items: List[DocumentOut]


# =====================================================
# ACTIONS
# =====================================================

class BulkActionRequest(BaseModel):
    ids: List[int] = Field(default_factory=list)
    action: str
