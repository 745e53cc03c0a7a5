from shared.clients.email.EmailClientInterface import EmailClientInterface
from shared.helper.HelperConfig import HelperConfig
from shared.models.config import EnvConfig


class EmailClientSendgrid(EmailClientInterface):
    def __init__(self, helper_config: HelperConfig):
        super().__init__(helper_config=helper_config)
        self._base_url = self.get_config_val("BASE_URL", default="https://api.sendgrid.com", val_type="string")
        self._api_key = self.get_config_val("API_KEY", default=None, val_type="string")
        self._from_email = self.get_config_val("FROM_EMAIL", default=None, val_type="string")

    ################ GENERAL ##################
    def _get_engine_name(self) -> str:
        return "Sendgrid"

    def get_sender(self) -> str:
        return self._from_email

    ################ CONFIG ##################
    def _get_required_config(self) -> list[EnvConfig]:
        return [
            EnvConfig(env_key="BASE_URL", val_type="string", default="https://api.sendgrid.com"),
            EnvConfig(env_key="API_KEY", val_type="string", default=None),
            EnvConfig(env_key="FROM_EMAIL", val_type="string", default=None),
        ]

    ################ AUTH ##################
    def _get_auth_header(self) -> dict:
        return {"Authorization": f"Bearer {self._api_key}"}

    ################ ENDPOINTS ##################
    def _get_base_url(self) -> str:
        return self._base_url

    def _get_endpoint_healthcheck(self) -> str:
        return "/v3/scopes"

    def _get_endpoint_send(self) -> str:
        return "/v3/mail/send"

    ################ PAYLOAD BUILDER ##################
    def get_send_payload(self, recipient: str, subject: str, html: str) -> dict:
        """Build a SendGrid v3 mail/send body.

        Returns:
            dict: {"personalizations": [...], "from": {...}, "subject": "...", "content": [...]}
        """
        return {
            "personalizations": [{"to": [{"email": recipient}]}],
            "from": {"email": self._from_email},
            "subject": subject,
            "content": [{"type": "text/html", "value": html}],
        }
