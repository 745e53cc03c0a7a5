import asyncio
import secrets
import uuid
from datetime import datetime, timezone

from shared.helper.HelperConfig import HelperConfig
from shared.models.apikey import APIKeyRecord
from shared.models.config import EnvConfig
from shared.stores.JsonFileStore import JsonFileStore
from shared.stores.apikey.APIKeyStoreInterface import APIKeyStoreInterface

API_KEY_PREFIX = "ai_"


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class APIKeyStoreFile(APIKeyStoreInterface):
    """API keys kept in a JSON file: {"keys": [...]}."""

    def __init__(self, helper_config: HelperConfig, store_path: str | None = None):
        super().__init__(helper_config=helper_config)
        self.store_path = store_path or helper_config.get_path_val(
            self._get_config_key_name("PATH"), default="data/api_keys.json"
        )
        self._file: JsonFileStore | None = None

    ################ GENERAL ##################
    def _get_engine_name(self) -> str:
        return "File"

    ################ CONFIG ##################
    def _get_required_config(self) -> list[EnvConfig]:
        return [
            EnvConfig(env_key="PATH", val_type="string", default="data/api_keys.json"),
        ]

    ################ LIFECYCLE ##################
    async def boot(self) -> None:
        self._file = JsonFileStore(logger=self.logging, store_path=self.store_path, collection_key="keys")

    def _get_file(self) -> JsonFileStore:
        if self._file is None:
            raise Exception("API key store not initialised. Call boot() before using it.")
        return self._file

    ##########################################
    ############### REQUESTS #################
    ##########################################

    # file access and lock waits run in a worker thread so the event loop stays free

    async def do_resolve_key(self, api_key: str) -> APIKeyRecord | None:
        return await asyncio.to_thread(self._resolve_key, api_key)

    async def do_touch_usage(self, key_id: str) -> None:
        await asyncio.to_thread(self._touch_usage, key_id)

    async def do_create_key(self, container_id: str, user_id: str | None = None, label: str | None = None) -> APIKeyRecord:
        return await asyncio.to_thread(self._create_key, container_id, user_id, label)

    async def do_list_keys(self, container_id: str | None = None, user_id: str | None = None) -> list[APIKeyRecord]:
        return await asyncio.to_thread(self._list_keys, container_id, user_id)

    async def do_revoke_key(self, key_id: str, user_id: str | None = None) -> bool:
        return await asyncio.to_thread(self._revoke_key, key_id, user_id)

    ##########################################
    ############### FILE ACCESS ##############
    ##########################################

    def _resolve_key(self, api_key: str) -> APIKeyRecord | None:
        for raw in self._get_file().read():
            if raw.get("api_key") == api_key and raw.get("active", False):
                return APIKeyRecord.model_validate(raw)
        return None

    def _touch_usage(self, key_id: str) -> None:
        with self._get_file().transaction() as keys:
            for raw in keys:
                if raw.get("id") == key_id:
                    raw["last_used_at"] = _now()
                    break
            else:
                self.logging.warning("Usage touch for unknown API key id %s", key_id)

    def _create_key(self, container_id: str, user_id: str | None, label: str | None) -> APIKeyRecord:
        record = APIKeyRecord(
            id=str(uuid.uuid4()),
            container_id=container_id,
            api_key=f"{API_KEY_PREFIX}{secrets.token_urlsafe(24)}",
            user_id=user_id,
            label=label,
            active=True,
            created_at=_now(),
        )
        with self._get_file().transaction() as keys:
            keys.append(record.model_dump())
        self.logging.info("Created API key %s for container %s", record.id, container_id)
        return record

    def _list_keys(self, container_id: str | None, user_id: str | None) -> list[APIKeyRecord]:
        records = [
            APIKeyRecord.model_validate(raw)
            for raw in self._get_file().read()
            if (container_id is None or raw.get("container_id") == container_id)
            and (user_id is None or raw.get("user_id") == user_id)
        ]
        return sorted(records, key=lambda r: r.created_at or "", reverse=True)

    def _revoke_key(self, key_id: str, user_id: str | None) -> bool:
        with self._get_file().transaction() as keys:
            for raw in keys:
                if raw.get("id") == key_id and (user_id is None or raw.get("user_id") == user_id):
                    raw["active"] = False
                    self.logging.info("Revoked API key %s", key_id)
                    return True
        return False
