# app/utils/action_response.py

from fastapi import Response
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from app.services.billing.action_results import (
    ActionResult,
    BinaryStream,
    Collection,
    Item,
    Notification,
    Rejected,
)
from app.services.billing.document_service import map_document
from app.utils.response import success_response, error_response


def to_http_response(result: ActionResult) -> Response:
    """Translate an engine result into the API envelope."""
    if isinstance(result, Item):
        body = success_response("Action completed successfully", map_document(result.document))
        return JSONResponse(status_code=200, content=jsonable_encoder(body))

    if isinstance(result, Collection):
        body = success_response(
            "Action completed successfully",
            [map_document(d) for d in result.documents],
        )
        return JSONResponse(status_code=200, content=jsonable_encoder(body))

    if isinstance(result, BinaryStream):
        return Response(
            content=result.content,
            media_type=result.media_type,
            headers={"Content-Disposition": f'attachment; filename="{result.filename}"'},
        )

    if isinstance(result, Notification):
        body = success_response(result.message, result.details or None)
        return JSONResponse(status_code=result.status_code, content=jsonable_encoder(body))

    if isinstance(result, Rejected):
        body = error_response(result.reason, result.error_code)
        return JSONResponse(status_code=result.status_code, content=jsonable_encoder(body))

    raise TypeError(f"Unsupported action result: {type(result).__name__}")
