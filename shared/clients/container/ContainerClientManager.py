from shared.helper.HelperConfig import HelperConfig
from shared.clients.container.ContainerClientInterface import ContainerClientInterface


class ContainerClientManager:
    """Manager class to instantiate the configured container client."""

    def __init__(self, helper_config: HelperConfig):
        self.helper_config = helper_config
        self.logging = helper_config.get_logger()
        self.client = self._initialize_client()

    def _get_engine_from_env(self) -> str:
        """Read the container engine name from env configuration.

        Returns:
            str: Capitalised engine name (e.g. "Http"). Defaults to "Http".
        """
        engine = self.helper_config.get_string_val("CONTAINER_ENGINE", default="http")
        return engine.strip().lower().capitalize()

    def _initialize_client(self) -> ContainerClientInterface:
        """Instantiate the container client for the configured engine.

        Raises:
            ValueError: If the engine is unsupported or cannot be imported.
        """
        engine = self._get_engine_from_env()
        class_name = f"ContainerClient{engine}"
        try:
            module = __import__(
                f"shared.clients.container.{engine.lower()}.{class_name}",
                fromlist=[class_name],
            )
            client_class = getattr(module, class_name)
            client = client_class(helper_config=self.helper_config)
            self.logging.debug("Instantiated container client for engine: %s", engine)
            return client
        except (ImportError, AttributeError) as e:
            raise ValueError("Unsupported container engine '%s'. Error: %s" % (engine, e))

    def get_client(self) -> ContainerClientInterface:
        """Return the instantiated container client."""
        return self.client
