from abc import ABC, abstractmethod
from typing import Any

from shared.helper.HelperConfig import HelperConfig
from shared.models.apikey import APIKeyRecord
from shared.models.config import EnvConfig


class APIKeyStoreInterface(ABC):
    def __init__(self, helper_config: HelperConfig):
        self.logging = helper_config.get_logger()
        self._helper_config = helper_config
        self.validate_full_configuration()

    ##########################################
    ############### CHECKER ##################
    ##########################################

    def validate_full_configuration(self) -> None:
        """
        Validates that all required configuration values for the store are set.

        Raises:
            ValueError: If any required configuration value is missing or invalid.
        """
        for config in self._get_required_config():
            _ = self.get_config_val(raw_key=config.env_key, default=config.default, val_type=config.val_type)

    ##########################################
    ################ GETTER ##################
    ##########################################

    def get_engine_name(self) -> str:
        """
        Returns the name of the storage engine in lowercase. E.g. "file"
        """
        return self._get_engine_name().lower()

    @abstractmethod
    def _get_engine_name(self) -> str:
        pass

    @abstractmethod
    def _get_required_config(self) -> list[EnvConfig]:
        """
        Returns all required configurations for the store.
        """
        pass

    def _get_config_key_name(self, raw_key: str) -> str:
        """
        Returns:
            str: The full configuration key name. E.g. "APIKEY_STORE_FILE_PATH"
        """
        return f"APIKEY_STORE_{self.get_engine_name().upper()}_{raw_key.upper()}"

    def get_config_val(self, raw_key: str, default: Any = None, val_type: str = "string") -> Any:
        key = self._get_config_key_name(raw_key)
        if val_type == "string":
            return self._helper_config.get_string_val(key, default=default)
        elif val_type == "number":
            return self._helper_config.get_number_val(key, default=default)
        elif val_type == "bool":
            return self._helper_config.get_bool_val(key, default=default)
        elif val_type == "list":
            return self._helper_config.get_list_val(key, default=default)
        else:
            raise ValueError(f"Unsupported config value type '{val_type}' for env key '{raw_key}' in API key store '{self.get_engine_name()}'.")

    ##########################################
    ############## LIFECYCLE #################
    ##########################################

    async def boot(self) -> None:
        """Open connections or files the store needs. No-op by default."""

    async def close(self) -> None:
        """Release whatever boot() acquired. No-op by default."""

    ##########################################
    ############### REQUESTS #################
    ##########################################

    @abstractmethod
    async def do_resolve_key(self, api_key: str) -> APIKeyRecord | None:
        """Look up an API key.

        Returns:
            APIKeyRecord | None: The record if the key exists and is active, otherwise None.
        """
        pass

    @abstractmethod
    async def do_touch_usage(self, key_id: str) -> None:
        """Set last_used_at of a key to now."""
        pass

    @abstractmethod
    async def do_create_key(self, container_id: str, user_id: str | None = None, label: str | None = None) -> APIKeyRecord:
        """Issue a new active key for a container."""
        pass

    @abstractmethod
    async def do_list_keys(self, container_id: str | None = None, user_id: str | None = None) -> list[APIKeyRecord]:
        """List keys, newest first, optionally filtered by container and owner."""
        pass

    @abstractmethod
    async def do_revoke_key(self, key_id: str, user_id: str | None = None) -> bool:
        """Deactivate a key. Returns False if no matching key exists."""
        pass
