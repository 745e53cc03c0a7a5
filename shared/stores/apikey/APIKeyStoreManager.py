from shared.helper.HelperConfig import HelperConfig
from shared.stores.apikey.APIKeyStoreInterface import APIKeyStoreInterface


class APIKeyStoreManager:
    """Manager class to instantiate the configured API key store."""

    def __init__(self, helper_config: HelperConfig):
        self.helper_config = helper_config
        self.logging = helper_config.get_logger()
        self.store = self._initialize_store()

    def _get_engine_from_env(self) -> str:
        """Read the store engine name from env configuration.

        Returns:
            str: Capitalised engine name (e.g. "File"). Defaults to "File".
        """
        engine = self.helper_config.get_string_val("APIKEY_STORE_ENGINE", default="file")
        return engine.strip().lower().capitalize()

    def _initialize_store(self) -> APIKeyStoreInterface:
        """Instantiate the API key store for the configured engine.

        Raises:
            ValueError: If the engine is unsupported or cannot be imported.
        """
        engine = self._get_engine_from_env()
        class_name = f"APIKeyStore{engine}"
        try:
            module = __import__(
                f"shared.stores.apikey.{engine.lower()}.{class_name}",
                fromlist=[class_name],
            )
            store_class = getattr(module, class_name)
            store = store_class(helper_config=self.helper_config)
            self.logging.debug("Instantiated API key store for engine: %s", engine)
            return store
        except (ImportError, AttributeError) as e:
            raise ValueError("Unsupported API key store engine '%s'. Error: %s" % (engine, e))

    def get_store(self) -> APIKeyStoreInterface:
        """Return the instantiated API key store."""
        return self.store
