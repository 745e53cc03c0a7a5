from shared.clients.container.ContainerClientInterface import ContainerClientInterface
from shared.helper.HelperConfig import HelperConfig
from shared.models.config import EnvConfig
from shared.models.invoke import ContainerReply


class ContainerClientHttp(ContainerClientInterface):
    """Talks to a container host that exposes POST /containers/<id>/chat."""

    def __init__(self, helper_config: HelperConfig):
        super().__init__(helper_config=helper_config)
        self._base_url = self.get_config_val("BASE_URL", default=None, val_type="string")
        self._api_key = self.get_config_val("API_KEY", default="", val_type="string")

    ################ GENERAL ##################
    def _get_engine_name(self) -> str:
        return "Http"

    ################ CONFIG ##################
    def _get_required_config(self) -> list[EnvConfig]:
        return [
            EnvConfig(env_key="BASE_URL", val_type="string", default=None),
            EnvConfig(env_key="API_KEY", val_type="string", default=""),
        ]

    ################ AUTH ##################
    def _get_auth_header(self) -> dict:
        if self._api_key:
            return {"Authorization": f"Bearer {self._api_key}"}
        return {}

    ################ ENDPOINTS ##################
    def _get_base_url(self) -> str:
        return self._base_url

    def _get_endpoint_healthcheck(self) -> str:
        return "/health"

    def _get_endpoint_chat(self, container_id: str) -> str:
        return f"/containers/{container_id}/chat"

    ################ PAYLOAD BUILDER ##################
    def get_chat_payload(self, message: str, session_id: str) -> dict:
        return {"message": message, "sessionId": session_id}

    ##########################################
    ################# OTHER ##################
    ##########################################

    def extract_reply(self, response_data: dict) -> ContainerReply:
        """Parse a {success, message | error} body."""
        if not isinstance(response_data, dict) or "success" not in response_data:
            raise ValueError("response has no 'success' field")
        return ContainerReply.model_validate(response_data)
