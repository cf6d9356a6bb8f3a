from app.constants.activity_codes import ActivityCode


ACTIVITY_TEMPLATES = {
    # ---------------- AUTH ----------------
    ActivityCode.LOGIN:
        "{actor_role} ({actor_email}) logged in",

    # ---------------- DOCUMENTS ----------------
    ActivityCode.CREATE_DOCUMENT:
        "{actor_role} ({actor_email}) created {document_type} {target_name}",

    ActivityCode.UPDATE_DOCUMENT:
        "{actor_role} ({actor_email}) updated {document_type} {target_name}: {changes}",

    ActivityCode.DESTROY_DOCUMENT:
        "{actor_role} ({actor_email}) permanently removed {document_type} {target_name}",

    ActivityCode.CLONE_DOCUMENT:
        "{actor_role} ({actor_email}) cloned {document_type} {source_name} into {target_name}",

    ActivityCode.CONVERT_DOCUMENT:
        "{actor_role} ({actor_email}) converted {document_type} {source_name} into {target_type} {target_name}",

    ActivityCode.APPROVE_DOCUMENT:
        "{actor_role} ({actor_email}) approved {document_type} {target_name}",

    ActivityCode.MARK_DOCUMENT_SENT:
        "{actor_role} ({actor_email}) marked {document_type} {target_name} as sent",

    ActivityCode.ARCHIVE_DOCUMENT:
        "{actor_role} ({actor_email}) archived {document_type} {target_name}",

    ActivityCode.DELETE_DOCUMENT:
        "{actor_role} ({actor_email}) deleted {document_type} {target_name}",

    ActivityCode.EMAIL_DOCUMENT:
        "{actor_role} ({actor_email}) emailed {document_type} {target_name}",

    ActivityCode.BULK_DOWNLOAD_DOCUMENTS:
        "{actor_role} ({actor_email}) requested a zip of {count} documents: {target_names}",

    ActivityCode.EXPIRE_DOCUMENT:
        "{actor_role} ({actor_email}) expired {document_type} {target_name}: {changes}",
}
