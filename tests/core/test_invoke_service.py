"""Tests for forwarding public messages to containers."""

from unittest.mock import AsyncMock

import pytest

from server.core.InvokeService import InvokeService, make_public_session_id
from shared.helper.errors import UpstreamError, ValidationError
from shared.models.apikey import APIKeyRecord
from shared.models.invoke import ContainerReply, InvokeRequest

RECORD = APIKeyRecord(id="key-1", container_id="bot-1", api_key="ai_test")


@pytest.fixture
def container_client() -> AsyncMock:
    client = AsyncMock()
    client.do_send_message.return_value = ContainerReply(success=True, message="Hello!")
    return client


@pytest.fixture
def apikey_store() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def invoke_service(helper_config, container_client, apikey_store) -> InvokeService:
    return InvokeService(helper_config=helper_config, container_client=container_client, apikey_store=apikey_store)


def test_public_session_id_prefix():
    assert make_public_session_id().startswith("pub_")
    assert make_public_session_id()[4:].isdigit()


@pytest.mark.asyncio
async def test_invoke_uses_given_session_and_touches_usage(invoke_service, container_client, apikey_store):
    result = await invoke_service.do_invoke(RECORD, InvokeRequest(message="hi", sessionId="sess-9"))

    container_client.do_send_message.assert_awaited_once_with("bot-1", "hi", "sess-9")
    apikey_store.do_touch_usage.assert_awaited_once_with("key-1")
    assert result.model_dump(by_alias=True) == {"success": True, "response": "Hello!", "containerId": "bot-1"}


@pytest.mark.asyncio
async def test_invoke_generates_session_id(invoke_service, container_client):
    await invoke_service.do_invoke(RECORD, InvokeRequest(message="hi"))

    _, _, session_id = container_client.do_send_message.await_args.args
    assert session_id.startswith("pub_")


@pytest.mark.asyncio
async def test_empty_message_is_rejected(invoke_service, container_client):
    with pytest.raises(ValidationError, match="message is required"):
        await invoke_service.do_invoke(RECORD, InvokeRequest(message=""))
    container_client.do_send_message.assert_not_awaited()


@pytest.mark.asyncio
async def test_container_failure_raises_upstream_error(invoke_service, container_client, apikey_store):
    container_client.do_send_message.return_value = ContainerReply(success=False, error=None)

    with pytest.raises(UpstreamError, match="AI error"):
        await invoke_service.do_invoke(RECORD, InvokeRequest(message="hi"))
    apikey_store.do_touch_usage.assert_not_awaited()


@pytest.mark.asyncio
async def test_usage_touch_failure_does_not_fail_response(invoke_service, apikey_store):
    apikey_store.do_touch_usage.side_effect = OSError("read-only filesystem")

    result = await invoke_service.do_invoke(RECORD, InvokeRequest(message="hi"))

    assert result.success is True
    assert result.response == "Hello!"
