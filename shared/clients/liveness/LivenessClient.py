import httpx

from shared.clients.ClientInterface import ClientInterface
from shared.helper.HelperConfig import HelperConfig
from shared.helper.errors import UpstreamError
from shared.models.config import EnvConfig


class LivenessClient(ClientInterface):
    """Calls the ping and health endpoints of a hosted bridge instance."""

    def __init__(self, helper_config: HelperConfig, base_url: str | None = None):
        super().__init__(helper_config=helper_config)
        self.base_url = base_url or self.get_config_val("BASE_URL", default="http://localhost:8000", val_type="string")

    ################ GENERAL ##################
    def _get_client_type(self) -> str:
        return "liveness"

    def _get_engine_name(self) -> str:
        return "Server"

    def _get_default_timeout(self) -> float:
        return 10.0

    ################ CONFIG ##################
    def _get_required_config(self) -> list[EnvConfig]:
        return [
            EnvConfig(env_key="BASE_URL", val_type="string", default="http://localhost:8000"),
        ]

    ################ AUTH ##################
    def _get_auth_header(self) -> dict:
        return {}

    ################ ENDPOINTS ##################
    def _get_base_url(self) -> str:
        return self.base_url

    def _get_endpoint_healthcheck(self) -> str:
        return "/api/health"

    def _get_endpoint_ping(self) -> str:
        return "/api/ping"

    ##########################################
    ############### REQUESTS #################
    ##########################################

    async def do_ping(self) -> dict:
        """GET /api/ping and return its {status, timestamp} body.

        Raises:
            UpstreamError: On a non-2xx status or a body that is not a JSON object.
            httpx.HTTPError: On timeouts and connection failures.
        """
        response = await self.do_request(method="GET", endpoint=self._get_endpoint_ping(), raise_on_error=True)
        return self._json_object(response)

    async def do_health_check(self) -> dict:
        """GET /api/health and return its {status, uptime, ...} body."""
        response = await self.do_request(method="GET", endpoint=self._get_endpoint_healthcheck(), raise_on_error=True)
        return self._json_object(response)

    def _json_object(self, response: httpx.Response) -> dict:
        try:
            data = response.json()
        except ValueError as e:
            raise UpstreamError(f"{response.request.url} returned invalid JSON: {e}") from e
        if not isinstance(data, dict):
            raise UpstreamError(f"{response.request.url} returned {type(data).__name__}, expected a JSON object")
        return data
