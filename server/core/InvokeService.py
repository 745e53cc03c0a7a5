import time

from shared.clients.container.ContainerClientInterface import ContainerClientInterface
from shared.helper.HelperConfig import HelperConfig
from shared.helper.errors import UpstreamError, ValidationError
from shared.models.apikey import APIKeyRecord
from shared.models.invoke import InvokeRequest, InvokeResponse
from shared.stores.apikey.APIKeyStoreInterface import APIKeyStoreInterface

PUBLIC_SESSION_PREFIX = "pub_"


def make_public_session_id() -> str:
    """Timestamp-based session id for callers that did not send one. Not unique under load."""
    return f"{PUBLIC_SESSION_PREFIX}{int(time.time() * 1000)}"


class InvokeService:
    """Forwards public chat messages to the container behind an API key."""

    def __init__(
        self,
        helper_config: HelperConfig,
        container_client: ContainerClientInterface,
        apikey_store: APIKeyStoreInterface,
    ) -> None:
        self.logging = helper_config.get_logger()
        self._container_client = container_client
        self._apikey_store = apikey_store

    ##########################################
    ############### CORE #####################
    ##########################################

    async def do_invoke(self, record: APIKeyRecord, request: InvokeRequest) -> InvokeResponse:
        """Send a message to the key's container and return its reply.

        Usage of the key is recorded after a successful reply. A failing usage
        touch is logged and does not fail the invocation.

        Args:
            record (APIKeyRecord): The resolved, active API key.
            request (InvokeRequest): Message and optional session id.

        Returns:
            InvokeResponse: {success: true, response, containerId}.

        Raises:
            ValidationError: If the message is missing or empty.
            UpstreamError: If the container reports a failure.
        """
        if not request.message:
            raise ValidationError("message is required")

        session_id = request.session_id or make_public_session_id()
        self.logging.info(
            "Public invoke: key=%s container=%s session=%s", record.id, record.container_id, session_id,
        )

        reply = await self._container_client.do_send_message(record.container_id, request.message, session_id)
        if not reply.success:
            self.logging.warning("Container %s failed: %s", record.container_id, reply.error)
            raise UpstreamError(reply.error or "AI error")

        try:
            await self._apikey_store.do_touch_usage(record.id)
        except Exception as e:
            self.logging.warning("Could not record usage of API key %s: %s", record.id, e)

        return InvokeResponse(success=True, response=reply.message, container_id=record.container_id)
