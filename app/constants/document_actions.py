from enum import Enum

from app.core.exceptions import UnknownAction


class Capability(str, Enum):
    view = "view"
    edit = "edit"


class DocumentAction(str, Enum):
    clone_to_invoice = "clone_to_invoice"
    clone_to_quote = "clone_to_quote"
    approve = "approve"
    mark_sent = "mark_sent"
    archive = "archive"
    delete = "delete"
    download = "download"
    email = "email"
    history = "history"
    convert = "convert"


# `convert` marks the source as converted and only makes sense over a batch
SINGLE_ACTIONS = frozenset(a for a in DocumentAction if a is not DocumentAction.convert)
BULK_ACTIONS = frozenset(DocumentAction)

REQUIRED_CAPABILITY = {
    DocumentAction.clone_to_invoice: Capability.edit,
    DocumentAction.clone_to_quote: Capability.edit,
    DocumentAction.approve: Capability.edit,
    DocumentAction.mark_sent: Capability.edit,
    DocumentAction.archive: Capability.edit,
    DocumentAction.delete: Capability.edit,
    DocumentAction.download: Capability.view,
    DocumentAction.email: Capability.edit,
    DocumentAction.history: Capability.view,
    DocumentAction.convert: Capability.edit,
}


def parse_action(token: str, allowed: frozenset = SINGLE_ACTIONS) -> DocumentAction:
    """Turn a raw action token into a DocumentAction, rejecting anything outside `allowed`."""
    try:
        action = DocumentAction(token)
    except ValueError:
        raise UnknownAction(token)

    if action not in allowed:
        raise UnknownAction(token)
    return action
