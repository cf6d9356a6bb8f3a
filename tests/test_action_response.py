"""Tests for turning action results into HTTP responses."""

import json

import pytest

from app.constants.error_codes import ErrorCode
from app.services.billing.action_results import (
    BinaryStream,
    Collection,
    Item,
    Notification,
    Rejected,
)
from app.utils.action_response import to_http_response


def _body(response):
    return json.loads(response.body)


def test_item(make_document):
    document = make_document()

    response = to_http_response(Item(document))
    body = _body(response)

    assert response.status_code == 200
    assert body["success"] is True
    assert body["data"]["id"] == document.id
    assert body["data"]["number"] == document.number
    assert body["data"]["status"] == "draft"
    assert len(body["data"]["items"]) == 2


def test_collection(make_document):
    documents = [make_document(), make_document()]

    body = _body(to_http_response(Collection(documents)))

    assert [d["id"] for d in body["data"]] == [d.id for d in documents]


def test_binary_stream():
    response = to_http_response(BinaryStream(content=b"%PDF-1.4", filename="Quote_QT-000001.pdf"))

    assert response.status_code == 200
    assert response.body == b"%PDF-1.4"
    assert response.media_type == "application/pdf"
    assert response.headers["content-disposition"] == 'attachment; filename="Quote_QT-000001.pdf"'


def test_notification_with_details():
    response = to_http_response(Notification("Email sent", 200, {"skipped": ["QT-000002"]}))
    body = _body(response)

    assert response.status_code == 200
    assert body["message"] == "Email sent"
    assert body["data"] == {"skipped": ["QT-000002"]}


def test_notification_without_details():
    body = _body(to_http_response(Notification("No documents found")))

    assert body["data"] is None


def test_rejected():
    response = to_http_response(
        Rejected("Document history is not implemented", 501, ErrorCode.NOT_IMPLEMENTED)
    )
    body = _body(response)

    assert response.status_code == 501
    assert body["success"] is False
    assert body["error_code"] == "NOT_IMPLEMENTED"
    assert body["message"] == "Document history is not implemented"


def test_unknown_result_type():
    with pytest.raises(TypeError):
        to_http_response(None)
