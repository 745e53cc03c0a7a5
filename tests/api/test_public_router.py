"""
Test suite for the public API-key-gated routes.

Covers the gateway (header, query parameter, invalid keys, store failures),
POST /public/invoke and the per-container document routes.
"""

from unittest.mock import AsyncMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from server.core.InvokeService import InvokeService
from server.dependencies.errors import register_error_handlers
from server.routers.PublicRouter import router
from shared.models.apikey import APIKeyRecord
from shared.models.invoke import ContainerReply
from shared.stores.docstore.DocStoreRegistry import DocStoreRegistry

VALID_KEY = "ai_valid"
RECORD = APIKeyRecord(id="key-1", container_id="bot-1", api_key=VALID_KEY)
HEADERS = {"X-AI-API-Key": VALID_KEY}


@pytest.fixture
def container_client() -> AsyncMock:
    client = AsyncMock()
    client.do_send_message.return_value = ContainerReply(success=True, message="Hello from bot-1")
    return client


@pytest.fixture
def apikey_store() -> AsyncMock:
    store = AsyncMock()

    async def resolve(api_key):
        return RECORD if api_key == VALID_KEY else None

    store.do_resolve_key.side_effect = resolve
    return store


@pytest.fixture
def app(helper_config, tmp_path, container_client, apikey_store) -> FastAPI:
    """FastAPI test application with the public router and in-memory collaborators."""
    app = FastAPI()
    register_error_handlers(app)
    app.include_router(router)
    app.state.logging = helper_config.get_logger()
    app.state.apikey_store = apikey_store
    app.state.doc_stores = DocStoreRegistry(helper_config=helper_config, containers_root=str(tmp_path))
    app.state.invoke_service = InvokeService(
        helper_config=helper_config,
        container_client=container_client,
        apikey_store=apikey_store,
    )
    return app


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    return TestClient(app)


# ---------------------------------------------------------------------------
# gateway
# ---------------------------------------------------------------------------


def test_missing_key_is_rejected(client, container_client):
    response = client.post("/public/invoke", json={"message": "hi"})

    assert response.status_code == 401
    assert response.json() == {"success": False, "message": "X-AI-API-Key header required"}
    container_client.do_send_message.assert_not_awaited()


def test_invalid_key_is_rejected(client):
    response = client.post("/public/invoke", json={"message": "hi"}, headers={"X-AI-API-Key": "ai_wrong"})

    assert response.status_code == 401
    assert response.json() == {"success": False, "message": "Invalid or inactive API key"}


def test_inactive_key_is_rejected(client, apikey_store):
    apikey_store.do_resolve_key.side_effect = None
    apikey_store.do_resolve_key.return_value = RECORD.model_copy(update={"active": False})

    response = client.post("/public/invoke", json={"message": "hi"}, headers=HEADERS)

    assert response.status_code == 401


def test_key_accepted_from_query_parameter(client):
    response = client.post(f"/public/invoke?apiKey={VALID_KEY}", json={"message": "hi"})
    assert response.status_code == 200


def test_key_store_failure_is_internal_error(client, apikey_store):
    apikey_store.do_resolve_key.side_effect = RuntimeError("database locked")

    response = client.post("/public/invoke", json={"message": "hi"}, headers=HEADERS)

    assert response.status_code == 500
    assert response.json() == {"success": False, "message": "Internal error"}


# ---------------------------------------------------------------------------
# POST /public/invoke
# ---------------------------------------------------------------------------


def test_invoke_forwards_message_with_generated_session(client, container_client, apikey_store):
    response = client.post("/public/invoke", json={"message": "hi"}, headers=HEADERS)

    assert response.status_code == 200
    assert response.json() == {"success": True, "response": "Hello from bot-1", "containerId": "bot-1"}
    container_id, message, session_id = container_client.do_send_message.await_args.args
    assert container_id == "bot-1"
    assert message == "hi"
    assert session_id.startswith("pub_")
    apikey_store.do_touch_usage.assert_awaited_once_with("key-1")


def test_invoke_passes_session_id_through(client, container_client):
    client.post("/public/invoke", json={"message": "hi", "sessionId": "sess-42"}, headers=HEADERS)

    assert container_client.do_send_message.await_args.args[2] == "sess-42"


def test_invoke_with_empty_body_requires_message(client):
    response = client.post("/public/invoke", headers=HEADERS)

    assert response.status_code == 400
    assert response.json() == {"success": False, "message": "message is required"}


def test_invoke_with_blank_message_requires_message(client):
    response = client.post("/public/invoke", json={"message": ""}, headers=HEADERS)

    assert response.status_code == 400
    assert response.json()["message"] == "message is required"


@pytest.mark.parametrize(
    "body, expected",
    [
        ({"message": 5}, "message must be a string"),
        ({"message": "hi", "sessionId": 5}, "sessionId must be a string"),
    ],
)
def test_invoke_names_the_invalid_field(client, container_client, body, expected):
    response = client.post("/public/invoke", json=body, headers=HEADERS)

    assert response.status_code == 400
    assert response.json() == {"success": False, "message": expected}
    container_client.do_send_message.assert_not_awaited()


def test_invoke_container_failure_is_reported(client, container_client):
    container_client.do_send_message.return_value = ContainerReply(success=False, error="model overloaded")

    response = client.post("/public/invoke", json={"message": "hi"}, headers=HEADERS)

    assert response.status_code == 500
    assert response.json() == {"success": False, "message": "model overloaded"}


def test_invoke_unexpected_error_is_internal_error(client, container_client):
    container_client.do_send_message.side_effect = RuntimeError("boom")

    response = client.post("/public/invoke", json={"message": "hi"}, headers=HEADERS)

    assert response.status_code == 500
    assert response.json() == {"success": False, "message": "Internal server error"}


# ---------------------------------------------------------------------------
# documents
# ---------------------------------------------------------------------------


def test_document_lifecycle(client, tmp_path):
    created = client.post(
        "/public/documents",
        json={"title": "FAQ", "text": "Opening hours are nine to five.", "tags": ["faq"]},
        headers=HEADERS,
    )
    assert created.status_code == 200
    body = created.json()
    assert body["success"] is True
    assert body["chunkCount"] == 1
    doc_id = body["id"]
    assert (tmp_path / "bot-1" / "doc_store.json").exists()

    listed = client.get("/public/documents", headers=HEADERS).json()
    assert [d["id"] for d in listed["documents"]] == [doc_id]
    assert listed["documents"][0]["tags"] == ["faq"]

    fetched = client.get(f"/public/documents/{doc_id}", headers=HEADERS).json()
    assert fetched["doc"]["title"] == "FAQ"

    deleted = client.delete(f"/public/documents/{doc_id}", headers=HEADERS)
    assert deleted.status_code == 200
    assert deleted.json()["doc"]["id"] == doc_id

    missing = client.delete(f"/public/documents/{doc_id}", headers=HEADERS)
    assert missing.status_code == 404
    assert missing.json() == {"success": False, "message": "Document not found"}


def test_clear_documents_reports_count(client):
    for i in range(2):
        client.post("/public/documents", json={"text": f"Doc {i}."}, headers=HEADERS)

    response = client.delete("/public/documents", headers=HEADERS)

    assert response.json() == {"success": True, "deletedCount": 2}
    assert client.get("/public/documents", headers=HEADERS).json()["documents"] == []


def test_blank_document_text_is_rejected(client):
    response = client.post("/public/documents", json={"text": "   "}, headers=HEADERS)

    assert response.status_code == 400
    assert response.json() == {"success": False, "message": "text is required"}


def test_document_routes_require_key(client):
    response = client.get("/public/documents")
    assert response.status_code == 401
