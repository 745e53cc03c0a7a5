from shared.helper.HelperConfig import HelperConfig
from shared.clients.email.EmailClientInterface import EmailClientInterface


class EmailClientManager:
    """Manager class to instantiate the configured email client."""

    def __init__(self, helper_config: HelperConfig):
        self.helper_config = helper_config
        self.logging = helper_config.get_logger()
        self.client = self._initialize_client()

    def _get_engine_from_env(self) -> str:
        """Read the email engine name from env configuration.

        Returns:
            str: Capitalised engine name (e.g. "Sendgrid"). Defaults to "Sendgrid".
        """
        engine = self.helper_config.get_string_val("EMAIL_ENGINE", default="sendgrid")
        return engine.strip().lower().capitalize()

    def _initialize_client(self) -> EmailClientInterface:
        engine = self._get_engine_from_env()
        class_name = f"EmailClient{engine}"
        try:
            module = __import__(
                f"shared.clients.email.{engine.lower()}.{class_name}",
                fromlist=[class_name],
            )
            client_class = getattr(module, class_name)
            client = client_class(helper_config=self.helper_config)
            self.logging.debug("Instantiated email client for engine: %s", engine)
            return client
        except (ImportError, AttributeError) as e:
            raise ValueError("Unsupported email engine '%s'. Error: %s" % (engine, e))

    def get_client(self) -> EmailClientInterface:
        """Return the instantiated email client."""
        return self.client
