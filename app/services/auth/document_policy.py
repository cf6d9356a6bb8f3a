# app/services/auth/document_policy.py

from app.constants.document_actions import Capability
from app.models.billing.document_models import Document
from app.models.users.user_models import User

ROLE_CAPABILITIES = {
    "admin": {Capability.view, Capability.edit},
    "manager": {Capability.view, Capability.edit},
    "sales": {Capability.view, Capability.edit},
    "viewer": {Capability.view},
}

# roles whose edit rights stop at the documents they own
OWNER_SCOPED_ROLES = {"sales"}


class DocumentPolicy:
    """Answers whether a user holds a capability on one specific document."""

    def can(self, user: User, capability: Capability, document: Document) -> bool:
        if user is None or not user.is_active:
            return False

        if user.company_id != document.company_id:
            return False

        role = (user.role or "").lower()
        if capability not in ROLE_CAPABILITIES.get(role, set()):
            return False

        if capability is Capability.edit and role in OWNER_SCOPED_ROLES:
            return document.user_id == user.id

        return True

    def cannot(self, user: User, capability: Capability, document: Document) -> bool:
        return not self.can(user, capability, document)
