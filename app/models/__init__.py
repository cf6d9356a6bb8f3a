# Users / tenants
from app.models.users.user_models import Company, User
from app.models.support.activity_models import UserActivity

# Masters
from app.models.masters.client_models import Client, ClientContact

# Billing
from app.models.billing.document_models import Document, DocumentItem
from app.models.billing.invitation_models import Invitation
