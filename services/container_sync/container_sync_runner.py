"""Container sync runner entry point.

Pushes the canonical container logic files into every tenant container
directory and prints a JSON summary of what changed.

Usage:
    python -m services.container_sync.container_sync_runner
"""

import json

from services.container_sync.ContainerSyncService import ContainerSyncService
from shared.helper.HelperConfig import HelperConfig
from shared.logging.logging_setup import setup_logging

DEFAULT_SYNC_FILES = ["bot_logic.py", "rag.py", "config.py"]


def main() -> int:
    """Run one sync. Returns a process exit code (1 if any container failed)."""
    logger = setup_logging()
    config = HelperConfig(logger=logger)

    target_root = config.get_path_val(
        "CONTAINER_SYNC_TARGET_ROOT",
        default=config.get_string_val("CONTAINERS_ROOT", default="containers"),
    )
    service = ContainerSyncService(
        helper_config=config,
        source_dir=config.get_path_val("CONTAINER_SYNC_SOURCE_DIR", default="containers/mainCodebase"),
        target_root=target_root,
        files=config.get_list_val("CONTAINER_SYNC_FILES", default=DEFAULT_SYNC_FILES),
        backup=config.get_bool_val("CONTAINER_SYNC_BACKUP", default=False),
    )

    results = service.do_sync()
    print(json.dumps({"updated": [r.model_dump() for r in results]}, indent=2))
    return 1 if any(r.errors for r in results) else 0


if __name__ == "__main__":
    raise SystemExit(main())
