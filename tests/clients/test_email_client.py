"""Tests for the SendGrid email client."""

import json

import httpx
import pytest

from shared.clients.email.EmailClientInterface import OTP_SUBJECT, render_otp_html
from shared.clients.email.EmailClientManager import EmailClientManager
from shared.clients.email.sendgrid.EmailClientSendgrid import EmailClientSendgrid


@pytest.fixture
def sendgrid_env(monkeypatch):
    monkeypatch.setenv("EMAIL_SENDGRID_API_KEY", "SG.test")
    monkeypatch.setenv("EMAIL_SENDGRID_FROM_EMAIL", "noreply@example.com")
    monkeypatch.delenv("EMAIL_SENDGRID_BASE_URL", raising=False)


def test_otp_template_embeds_code():
    html = render_otp_html("123456")
    assert "123456" in html
    assert "valid for 10 minutes" in html


@pytest.mark.asyncio
async def test_send_otp_builds_sendgrid_request(helper_config, sendgrid_env, recording_transport):
    recorder = recording_transport(lambda request: httpx.Response(202))
    client = EmailClientSendgrid(helper_config=helper_config)
    await client.boot(transport=recorder.transport)

    result = await client.do_send_otp("user@example.com", "654321")

    assert result.success is True
    assert result.message == "OTP sent successfully"
    sent = recorder.requests[0]
    assert str(sent.url) == "https://api.sendgrid.com/v3/mail/send"
    assert sent.headers["Authorization"] == "Bearer SG.test"
    body = json.loads(sent.content)
    assert body["personalizations"] == [{"to": [{"email": "user@example.com"}]}]
    assert body["from"] == {"email": "noreply@example.com"}
    assert body["subject"] == OTP_SUBJECT
    assert "654321" in body["content"][0]["value"]


@pytest.mark.asyncio
async def test_provider_rejection_is_returned_not_raised(helper_config, sendgrid_env, recording_transport):
    recorder = recording_transport(lambda request: httpx.Response(401, json={"errors": [{"message": "bad key"}]}))
    client = EmailClientSendgrid(helper_config=helper_config)
    await client.boot(transport=recorder.transport)

    result = await client.do_send_otp("user@example.com", "654321")

    assert result.success is False
    assert "401" in result.error


def test_manager_requires_api_key(helper_config, monkeypatch):
    monkeypatch.setenv("EMAIL_ENGINE", "sendgrid")
    monkeypatch.delenv("EMAIL_SENDGRID_API_KEY", raising=False)
    monkeypatch.setenv("EMAIL_SENDGRID_FROM_EMAIL", "noreply@example.com")
    with pytest.raises(ValueError, match="EMAIL_SENDGRID_API_KEY"):
        EmailClientManager(helper_config=helper_config)
