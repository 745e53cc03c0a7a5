"""Tests for the email OTP routes."""

from unittest.mock import AsyncMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from server.core.OTPService import OTPService
from server.dependencies.errors import register_error_handlers
from server.routers.OTPRouter import router
from shared.models.otp import EmailResult


@pytest.fixture
def email_client() -> AsyncMock:
    client = AsyncMock()
    client.do_send_otp.return_value = EmailResult(success=True, message="OTP sent successfully")
    return client


def _app(helper_config, otp_service=None) -> FastAPI:
    app = FastAPI()
    register_error_handlers(app)
    app.include_router(router)
    app.state.logging = helper_config.get_logger()
    app.state.otp_service = otp_service
    return app


@pytest.fixture
def client(helper_config, email_client) -> TestClient:
    service = OTPService(helper_config=helper_config, email_client=email_client)
    return TestClient(_app(helper_config, service))


def test_routes_report_missing_email_configuration(helper_config):
    client = TestClient(_app(helper_config))

    response = client.post("/api/otp/send", json={"email": "user@example.com"})

    assert response.status_code == 501
    assert response.json() == {"success": False, "message": "OTP delivery is not configured."}


def test_send_then_verify(client, email_client):
    sent = client.post("/api/otp/send", json={"email": "User@Example.com"})
    assert sent.json() == {"success": True, "message": "OTP sent successfully"}

    _, otp = email_client.do_send_otp.await_args.args
    verified = client.post("/api/otp/verify", json={"email": "user@example.com", "otp": otp})

    assert verified.status_code == 200
    assert verified.json() == {"success": True, "message": "OTP verified successfully"}


def test_wrong_code_reports_remaining_attempts(client, email_client):
    client.post("/api/otp/send", json={"email": "user@example.com"})
    _, otp = email_client.do_send_otp.await_args.args
    wrong = "000000" if otp != "000000" else "111111"

    response = client.post("/api/otp/verify", json={"email": "user@example.com", "otp": wrong})

    assert response.status_code == 400
    assert response.json() == {"success": False, "message": "Invalid OTP. 2 attempts remaining"}


def test_verify_without_send(client):
    response = client.post("/api/otp/verify", json={"email": "nobody@example.com", "otp": "123456"})
    assert response.json()["message"] == "No OTP found for this email"


def test_invalid_email_is_rejected(client, email_client):
    response = client.post("/api/otp/send", json={"email": "not-an-email"})

    assert response.status_code == 400
    email_client.do_send_otp.assert_not_awaited()


def test_missing_email_field_is_rejected(client):
    response = client.post("/api/otp/send", json={})
    assert response.status_code == 400
    assert response.json()["success"] is False


def test_provider_failure_is_reported(client, email_client):
    email_client.do_send_otp.return_value = EmailResult(success=False, error="SendGrid 401: bad key")

    response = client.post("/api/otp/send", json={"email": "user@example.com"})

    assert response.status_code == 500
    assert response.json() == {"success": False, "message": "SendGrid 401: bad key"}
