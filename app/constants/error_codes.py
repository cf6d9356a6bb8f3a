from enum import Enum


class ErrorCode(str, Enum):
    # ---------------- GENERIC ----------------
    VALIDATION_ERROR = "VALIDATION_ERROR"
    UNAUTHORIZED = "UNAUTHORIZED"
    PERMISSION_DENIED = "PERMISSION_DENIED"
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"
    NOT_IMPLEMENTED = "NOT_IMPLEMENTED"
    INTERNAL_ERROR = "INTERNAL_ERROR"

    # ---------------- CLIENTS ----------------
    CLIENT_NOT_FOUND = "CLIENT_NOT_FOUND"

    # ---------------- DOCUMENTS ----------------
    DOCUMENT_NOT_FOUND = "DOCUMENT_NOT_FOUND"
    DOCUMENT_INVALID_STATE = "DOCUMENT_INVALID_STATE"
    DOCUMENT_NOT_CONVERTIBLE = "DOCUMENT_NOT_CONVERTIBLE"
    DOCUMENT_DELETED = "DOCUMENT_DELETED"
    DOCUMENT_VERSION_CONFLICT = "DOCUMENT_VERSION_CONFLICT"
    DOCUMENT_UNKNOWN_ACTION = "DOCUMENT_UNKNOWN_ACTION"

    # ---------------- INVITATIONS ----------------
    INVITATION_NOT_FOUND = "INVITATION_NOT_FOUND"
