"""Container logic sync service.

Copies a fixed set of logic files from the canonical source directory into
every tenant container directory, overwriting them in place. Optionally the
current copy is kept as ``<file>.backup.<millis>`` first.
"""

import os
import shutil
import time

from shared.helper.HelperConfig import HelperConfig
from shared.helper.errors import StorageError
from shared.models.container_sync import ContainerSyncResult


class ContainerSyncService:
    def __init__(
        self,
        helper_config: HelperConfig,
        source_dir: str,
        target_root: str,
        files: list[str],
        backup: bool = False,
    ) -> None:
        self.logging = helper_config.get_logger()
        self.source_dir = os.path.abspath(source_dir)
        self.target_root = os.path.abspath(target_root)
        self.files = files
        self.backup = backup

    ##########################################
    ############### CORE SYNC ################
    ##########################################

    def do_sync(self) -> list[ContainerSyncResult]:
        """Push the logic files to all container directories.

        A failure in one container is logged and recorded in its result; the
        remaining containers are still processed.

        Returns:
            list[ContainerSyncResult]: One entry per container directory, sorted by id.

        Raises:
            StorageError: If the target root cannot be listed.
        """
        missing = [f for f in self.files if not os.path.isfile(os.path.join(self.source_dir, f))]
        if missing:
            self.logging.warning("Source files not found in %s: %s", self.source_dir, ", ".join(missing))

        container_dirs = self._get_container_dirs()
        self.logging.info("Syncing %d file(s) into %d container(s)...", len(self.files), len(container_dirs))

        results = [self._sync_container(container_dir) for container_dir in container_dirs]

        updated = sum(1 for r in results if r.updated)
        failed = sum(1 for r in results if r.errors)
        self.logging.info("Container sync complete: %d updated, %d with errors.", updated, failed)
        return results

    def _get_container_dirs(self) -> list[str]:
        try:
            with os.scandir(self.target_root) as it:
                entries = sorted(it, key=lambda e: e.name)
        except OSError as e:
            raise StorageError(f"Cannot list container root {self.target_root}: {e}") from e
        return [
            entry.path
            for entry in entries
            if entry.is_dir()
            and not entry.name.startswith(".")
            and os.path.abspath(entry.path) != self.source_dir
        ]

    def _sync_container(self, container_dir: str) -> ContainerSyncResult:
        result = ContainerSyncResult(container_id=os.path.basename(container_dir))
        for filename in self.files:
            src = os.path.join(self.source_dir, filename)
            if not os.path.isfile(src):
                continue
            dst = os.path.join(container_dir, filename)
            try:
                if self.backup and os.path.exists(dst):
                    backup_path = f"{dst}.backup.{int(time.time() * 1000)}"
                    shutil.copyfile(dst, backup_path)
                    result.backups.append(os.path.basename(backup_path))
                shutil.copyfile(src, dst)
                result.updated.append(filename)
            except OSError as e:
                self.logging.error("Failed to update %s in container %s: %s", filename, result.container_id, e)
                result.errors.append(f"{filename}: {e}")
        return result
