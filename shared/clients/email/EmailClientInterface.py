from abc import abstractmethod

import httpx

from shared.clients.ClientInterface import ClientInterface
from shared.helper.HelperConfig import HelperConfig
from shared.models.otp import EmailResult

OTP_SUBJECT = "OTP Verification - AI Chatbot Platform"
OTP_VALID_MINUTES = 10


def render_otp_html(otp: str) -> str:
    """Fixed HTML body of the OTP verification email."""
    return f"""
<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto; padding: 20px;">
  <div style="background: linear-gradient(135deg, #667eea 0%, #764ba2 100%); color: white; padding: 30px; border-radius: 10px 10px 0 0; text-align: center;">
    <h1 style="margin: 0; font-size: 28px;">AI Chatbot Platform</h1>
    <p style="margin: 10px 0 0 0; font-size: 16px; opacity: 0.9;">OTP Verification</p>
  </div>
  <div style="background: #f8f9fa; padding: 30px; border-radius: 0 0 10px 10px;">
    <h2 style="color: #333; margin: 0 0 20px 0;">Your Verification Code</h2>
    <p style="color: #666; margin: 0 0 20px 0; line-height: 1.6;">
      Thank you for registering with our AI Chatbot Platform! To complete your registration, please use the following One-Time Password (OTP):
    </p>
    <div style="background: white; border: 2px solid #667eea; border-radius: 10px; padding: 20px; text-align: center; margin: 20px 0;">
      <h1 style="color: #667eea; font-size: 36px; margin: 0; letter-spacing: 5px; font-family: 'Courier New', monospace;">{otp}</h1>
    </div>
    <p style="color: #666; margin: 20px 0 0 0; font-size: 14px; line-height: 1.6;">
      <strong>Important:</strong><br>
      &bull; This OTP is valid for {OTP_VALID_MINUTES} minutes<br>
      &bull; Do not share this code with anyone<br>
      &bull; If you didn't request this, please ignore this email
    </p>
    <div style="margin-top: 30px; padding-top: 20px; border-top: 1px solid #ddd; text-align: center;">
      <p style="color: #999; margin: 0; font-size: 12px;">This is an automated message from AI Chatbot Platform</p>
    </div>
  </div>
</div>
"""


class EmailClientInterface(ClientInterface):
    def __init__(self, helper_config: HelperConfig):
        super().__init__(helper_config=helper_config)

    ##########################################
    ################ GETTER ##################
    ##########################################

    ################ GENERAL ##################
    def _get_client_type(self) -> str:
        return "email"

    @abstractmethod
    def get_sender(self) -> str:
        """Returns the configured sender address."""
        pass

    ################ ENDPOINTS ##################
    @abstractmethod
    def _get_endpoint_send(self) -> str:
        """Returns the endpoint path for sending a message (e.g. "/v3/mail/send")."""
        pass

    ################ PAYLOAD BUILDER ##################
    @abstractmethod
    def get_send_payload(self, recipient: str, subject: str, html: str) -> dict:
        """Build the provider-specific request body for a single HTML email."""
        pass

    ##########################################
    ############### REQUESTS #################
    ##########################################

    async def do_send_html(self, recipient: str, subject: str, html: str) -> EmailResult:
        """Send one HTML email. Provider and transport failures are returned, not raised."""
        try:
            response = await self.do_request(
                method="POST",
                endpoint=self._get_endpoint_send(),
                json=self.get_send_payload(recipient, subject, html),
            )
        except httpx.HTTPError as e:
            self.logging.error("Email provider '%s' unreachable: %s", self.get_engine_name(), e)
            return EmailResult(success=False, error=str(e) or e.__class__.__name__)

        if not response.is_success:
            self.logging.error(
                "Email provider '%s' rejected message to %s: status %d, body: %s",
                self.get_engine_name(), recipient, response.status_code, response.text[:200],
            )
            return EmailResult(success=False, error=f"Email provider responded with status {response.status_code}")
        return EmailResult(success=True, message="Email sent successfully")

    async def do_send_otp(self, recipient: str, otp: str) -> EmailResult:
        """Send the OTP verification email."""
        result = await self.do_send_html(recipient, OTP_SUBJECT, render_otp_html(otp))
        if result.success:
            self.logging.info("OTP sent to %s", recipient)
            return EmailResult(success=True, message="OTP sent successfully")
        return result
