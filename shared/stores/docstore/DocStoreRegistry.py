import os
import re

from shared.helper.HelperConfig import HelperConfig
from shared.helper.errors import ValidationError
from shared.stores.docstore.DocStore import DocStore

_CONTAINER_ID = re.compile(r"^[A-Za-z0-9_-]+$")


class DocStoreRegistry:
    """Hands out one DocStore per container, rooted at <containers_root>/<container_id>/."""

    def __init__(self, helper_config: HelperConfig, containers_root: str | None = None) -> None:
        self._helper_config = helper_config
        self.logging = helper_config.get_logger()
        self.containers_root = containers_root or helper_config.get_path_val("CONTAINERS_ROOT", default="containers")
        self._stores: dict[str, DocStore] = {}

    def get_store(self, container_id: str) -> DocStore:
        """Return the document store of a container, creating its directory on first use.

        Raises:
            ValidationError: If the container id could escape the containers root.
        """
        if not container_id or not _CONTAINER_ID.match(container_id):
            raise ValidationError(f"Invalid container id: {container_id!r}")
        store = self._stores.get(container_id)
        if store is None:
            base_dir = os.path.join(self.containers_root, container_id)
            store = DocStore(helper_config=self._helper_config, base_dir=base_dir)
            self._stores[container_id] = store
            self.logging.debug("Opened document store for container %s at %s", container_id, store.store_path)
        return store
