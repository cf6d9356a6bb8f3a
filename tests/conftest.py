"""Pytest configuration and shared fixtures."""

import os

os.environ.setdefault("APP_ENV", "development")
os.environ.setdefault("DB_TYPE", "sqlite")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("JWT_ACCESS_SECRET_KEY", "test-secret")

from decimal import Decimal
from unittest.mock import Mock

import pytest
import pytest_asyncio
from sqlalchemy.pool import StaticPool

from app.core.db import build_engine, build_session_factory, init_models
from app.models.billing.document_models import Document, DocumentItem
from app.models.enums.document_status import DocumentStatus
from app.models.enums.document_type import DocumentType
from app.models.masters.client_models import Client, ClientContact
from app.models.users.user_models import Company, User
from app.repositories.document_repository import format_document_number
from app.schemas.billing.document_schemas import DocumentCreate, DocumentItemIn
from app.services.auth.document_policy import DocumentPolicy
from app.services.billing.document_action_service import DocumentActionService
from app.services.billing.document_bulk_service import DocumentBulkService
from app.services.billing.document_factory import calculate_totals
from app.utils.activity_helpers import actor_context, render_activity

COMPANY_ID = 1
OTHER_COMPANY_ID = 2


class FakeDocumentRepository:
    """In-memory stand-in for DocumentRepository."""

    def __init__(self):
        self.documents = {}
        self.saved = []
        self.removed = []
        self.activities = []
        self._next_id = 1

    def add(self, document: Document) -> Document:
        if document.id is None:
            document.id = self._next_id
            self._next_id += 1
        if not document.number:
            document.number = format_document_number(document.document_type, document.id)
        self.documents[document.id] = document
        return document

    async def save(self, document: Document) -> Document:
        self.add(document)
        self.saved.append(document)
        return document

    async def delete(self, document: Document) -> None:
        self.documents.pop(document.id, None)
        self.removed.append(document)

    async def get(self, company_id, document_id, document_type=None, include_deleted=False):
        document = self.documents.get(document_id)
        if document is None or document.company_id != company_id:
            return None
        if document_type is not None and document.document_type != document_type:
            return None
        if document.is_deleted and not include_deleted:
            return None
        return document

    async def find_by_ids(self, company_id, ids, include_deleted=True, document_type=None):
        found = []
        for document_id in sorted(set(ids)):
            document = await self.get(company_id, document_id, document_type, include_deleted)
            if document is not None:
                found.append(document)
        return found

    async def get_invitation_by_key(self, key):
        return None

    async def log_activity(self, user, code, **context):
        # rendering here catches template / context mismatches
        message = render_activity(code, **actor_context(user), **context)
        self.activities.append((code, message))

    def of_type(self, document_type: DocumentType):
        return [d for d in self.documents.values() if d.document_type == document_type]


def _user(user_id: int, role: str, company_id: int = COMPANY_ID) -> User:
    return User(
        id=user_id,
        company_id=company_id,
        username=f"{role}{user_id}@example.com",
        password_hash="x",
        role=role,
        is_active=True,
        token_version=0,
    )


@pytest.fixture
def admin() -> User:
    return _user(1, "admin")


@pytest.fixture
def sales() -> User:
    """Sales user who owns the documents built by `make_document` by default."""
    return _user(2, "sales")


@pytest.fixture
def other_sales() -> User:
    return _user(3, "sales")


@pytest.fixture
def viewer() -> User:
    return _user(4, "viewer")


@pytest.fixture
def outsider() -> User:
    return _user(5, "admin", company_id=OTHER_COMPANY_ID)


@pytest.fixture
def repository() -> FakeDocumentRepository:
    return FakeDocumentRepository()


@pytest.fixture
def make_document(repository, sales):
    """Build a persisted-looking document with two line items."""

    def _make(
        status: DocumentStatus = DocumentStatus.draft,
        document_type: DocumentType = DocumentType.quote,
        owner: User | None = None,
        company_id: int = COMPANY_ID,
        is_deleted: bool = False,
    ) -> Document:
        owner = owner or sales
        document = Document(
            document_type=document_type,
            company_id=company_id,
            user_id=owner.id,
            client_id=10,
            status=status,
            is_deleted=is_deleted,
            version=1,
            po_number="PO-77",
            public_notes="Delivered within 2 weeks",
            private_notes="Ask for deposit",
        )
        document.items = [
            DocumentItem(
                position=0,
                product_key="Oak desk",
                notes="Large",
                quantity=Decimal("2.00"),
                cost=Decimal("150.00"),
                tax_rate=Decimal("10.00"),
            ),
            DocumentItem(
                position=1,
                product_key="Chair",
                notes=None,
                quantity=Decimal("1.00"),
                cost=Decimal("99.99"),
                tax_rate=Decimal("0.00"),
            ),
        ]
        calculate_totals(document)
        return repository.add(document)

    return _make


@pytest.fixture
def delivery() -> Mock:
    return Mock(spec=["enqueue_email", "enqueue_zip_and_email"])


@pytest.fixture
def render_pdf(tmp_path):
    """Renderer stub writing a tiny PDF-looking file."""

    def _render(document, contact=None):
        path = tmp_path / f"render_{document.id}_{contact.id if contact else 0}.pdf"
        path.write_bytes(b"%PDF-1.4\n% stub for " + document.number.encode())
        return str(path)

    return _render


@pytest.fixture
def policy() -> DocumentPolicy:
    return DocumentPolicy()


@pytest.fixture
def action_service(repository, policy, delivery, render_pdf) -> DocumentActionService:
    return DocumentActionService(repository, policy, delivery, render_pdf=render_pdf)


@pytest.fixture
def bulk_service(repository, policy, action_service, delivery) -> DocumentBulkService:
    return DocumentBulkService(repository, policy, action_service, delivery)


# -------------------------
# DATABASE
# -------------------------
@pytest_asyncio.fixture
async def session_factory():
    """Session factory bound to a fresh in-memory SQLite schema."""
    engine = build_engine("sqlite+aiosqlite:///:memory:", poolclass=StaticPool)
    await init_models(engine)

    yield build_session_factory(engine)

    await engine.dispose()


@pytest_asyncio.fixture
async def session(session_factory):
    async with session_factory() as db:
        yield db


@pytest_asyncio.fixture
async def seeded(session):
    company = Company(name="Acme Interiors")
    other = Company(name="Globex")
    session.add_all([company, other])
    await session.flush()

    user = User(
        company_id=company.id,
        username="owner@acme.test",
        password_hash="x",
        role="admin",
        is_active=True,
        token_version=0,
    )
    client = Client(company_id=company.id, name="Initech", is_active=True, is_deleted=False)
    client.contacts = [
        ClientContact(company_id=company.id, first_name="Peter", email="peter@initech.test", is_primary=True),
        ClientContact(company_id=company.id, first_name="Samir", email="samir@initech.test"),
    ]
    session.add_all([user, client])
    await session.commit()
    return {"company": company, "other": other, "user": user, "client": client}


@pytest.fixture
def quote_payload(seeded) -> DocumentCreate:
    return DocumentCreate(
        client_id=seeded["client"].id,
        items=[
            DocumentItemIn(product_key="Oak desk", quantity=Decimal("2"), cost=Decimal("150.00"), tax_rate=Decimal("10")),
            DocumentItemIn(product_key="Chair", quantity=Decimal("1"), cost=Decimal("99.99")),
        ],
    )
