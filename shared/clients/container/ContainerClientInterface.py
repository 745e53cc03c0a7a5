from abc import abstractmethod

import httpx

from shared.clients.ClientInterface import ClientInterface
from shared.helper.HelperConfig import HelperConfig
from shared.models.invoke import ContainerReply


class ContainerClientInterface(ClientInterface):
    """Delivers chat messages to tenant containers and normalises their replies."""

    def __init__(self, helper_config: HelperConfig):
        super().__init__(helper_config=helper_config)

    ##########################################
    ################ GETTER ##################
    ##########################################

    ################ GENERAL ##################
    def _get_client_type(self) -> str:
        return "container"

    ################ ENDPOINTS ##################
    @abstractmethod
    def _get_endpoint_chat(self, container_id: str) -> str:
        """Returns the endpoint path that accepts chat messages for a container."""
        pass

    ################ PAYLOAD BUILDER ##################
    @abstractmethod
    def get_chat_payload(self, message: str, session_id: str) -> dict:
        """Build the backend-specific request body for a chat message."""
        pass

    ##########################################
    ################# OTHER ##################
    ##########################################

    @abstractmethod
    def extract_reply(self, response_data: dict) -> ContainerReply:
        """Convert a parsed container response into a ContainerReply.

        Raises:
            ValueError: If the response does not have the expected shape.
        """
        pass

    ##########################################
    ############### REQUESTS #################
    ##########################################

    async def do_send_message(self, container_id: str, message: str, session_id: str) -> ContainerReply:
        """Send a chat message to a container and wait for its reply.

        Transport errors and malformed responses are not raised; they come back
        as ``ContainerReply(success=False, error=...)`` so the caller can answer
        with an error envelope.

        Args:
            container_id (str): Opaque container identifier.
            message (str): The user's message.
            session_id (str): Conversation identifier passed through to the container.

        Returns:
            ContainerReply: {success, message | error}.
        """
        try:
            response = await self.do_request(
                method="POST",
                endpoint=self._get_endpoint_chat(container_id),
                json=self.get_chat_payload(message, session_id),
            )
        except httpx.HTTPError as e:
            self.logging.error("Failed to reach container %s: %s", container_id, e)
            return ContainerReply(success=False, error=str(e) or e.__class__.__name__)

        try:
            reply = self.extract_reply(response.json())
        except ValueError as e:
            self.logging.error(
                "Container %s returned an unexpected response (status %d): %s",
                container_id, response.status_code, response.text[:200],
            )
            return ContainerReply(success=False, error=f"Invalid response from container: {e}")

        if not response.is_success and reply.success:
            return ContainerReply(success=False, error=f"Container responded with status {response.status_code}")
        return reply
