from enum import Enum


class ActivityCode(str, Enum):
    # ---------------- AUTH ----------------
    LOGIN = "LOGIN"

    # ---------------- DOCUMENTS ----------------
    CREATE_DOCUMENT = "CREATE_DOCUMENT"
    UPDATE_DOCUMENT = "UPDATE_DOCUMENT"
    DESTROY_DOCUMENT = "DESTROY_DOCUMENT"
    CLONE_DOCUMENT = "CLONE_DOCUMENT"
    CONVERT_DOCUMENT = "CONVERT_DOCUMENT"
    APPROVE_DOCUMENT = "APPROVE_DOCUMENT"
    MARK_DOCUMENT_SENT = "MARK_DOCUMENT_SENT"
    ARCHIVE_DOCUMENT = "ARCHIVE_DOCUMENT"
    DELETE_DOCUMENT = "DELETE_DOCUMENT"
    EMAIL_DOCUMENT = "EMAIL_DOCUMENT"
    BULK_DOWNLOAD_DOCUMENTS = "BULK_DOWNLOAD_DOCUMENTS"
    EXPIRE_DOCUMENT = "EXPIRE_DOCUMENT"
