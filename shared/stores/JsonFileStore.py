"""Whole-file JSON persistence guarded by a file lock.

The file holds a single object ``{<collection_key>: [...]}``. Every mutation
is a read-modify-write inside ``transaction()``, serialised across threads
and processes by a ``FileLock`` on ``<path>.lock``. Writes go to a temp file
that is swapped in with ``os.replace`` so readers never see a half-written file.
"""

import json
import logging
import os
import tempfile
import time
from contextlib import contextmanager
from typing import Iterator

from filelock import FileLock, Timeout

from shared.helper.errors import StorageError

LOCK_TIMEOUT_SECONDS = 10.0


class JsonFileStore:
    def __init__(self, logger: logging.Logger, store_path: str, collection_key: str) -> None:
        self.logging = logger
        self.store_path = store_path
        self.collection_key = collection_key
        self._lock = FileLock(f"{store_path}.lock", timeout=LOCK_TIMEOUT_SECONDS)
        self._ensure_store()

    def _ensure_store(self) -> None:
        """Create the store file with an empty collection if it does not exist."""
        directory = os.path.dirname(self.store_path)
        try:
            if directory:
                os.makedirs(directory, exist_ok=True)
            with self._acquire():
                if not os.path.exists(self.store_path):
                    self.write([])
        except OSError as e:
            raise StorageError(f"Could not create store file {self.store_path}: {e}") from e

    @contextmanager
    def _acquire(self) -> Iterator[None]:
        try:
            with self._lock:
                yield
        except Timeout as e:
            raise StorageError(f"Timed out waiting for lock on {self.store_path}") from e

    ##########################################
    ################ ACCESS ##################
    ##########################################

    def read(self) -> list[dict]:
        """Return the stored collection.

        A missing file reads as empty. An unreadable or corrupt file also reads
        as empty, but is first moved aside to ``<path>.corrupt.<millis>`` so the
        next write cannot destroy it.
        """
        try:
            return self._load()
        except (OSError, ValueError) as e:
            self.logging.warning("Store file %s is unreadable (%s); re-checking under lock.", self.store_path, e)
        return self._recover()

    def _load(self) -> list[dict]:
        if not os.path.exists(self.store_path):
            return []
        with open(self.store_path, "r", encoding="utf-8") as f:
            data = json.load(f)
        items = data.get(self.collection_key, []) if isinstance(data, dict) else None
        if not isinstance(items, list):
            raise ValueError(f"'{self.collection_key}' is not a list")
        return items

    def _recover(self) -> list[dict]:
        """Re-read under the lock; the file is moved aside only if it is still unreadable."""
        with self._acquire():
            try:
                return self._load()
            except (OSError, ValueError) as e:
                self.logging.error("Store file %s is unreadable (%s); treating it as empty.", self.store_path, e)
                self._quarantine()
                return []

    def write(self, items: list[dict]) -> None:
        """Replace the stored collection. Raises StorageError if the file cannot be written."""
        directory = os.path.dirname(self.store_path) or "."
        try:
            fd, tmp_path = tempfile.mkstemp(prefix=".store-", suffix=".json", dir=directory)
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump({self.collection_key: items}, f, indent=2, ensure_ascii=False)
                os.replace(tmp_path, self.store_path)
            except BaseException:
                if os.path.exists(tmp_path):
                    os.remove(tmp_path)
                raise
        except OSError as e:
            self.logging.error("Failed to write store file %s: %s", self.store_path, e)
            raise StorageError(f"Failed to write store file {self.store_path}: {e}") from e

    @contextmanager
    def transaction(self) -> Iterator[list[dict]]:
        """Yield the collection under the file lock and write it back if the block succeeds."""
        with self._acquire():
            items = self.read()
            yield items
            self.write(items)

    def _quarantine(self) -> None:
        target = f"{self.store_path}.corrupt.{int(time.time() * 1000)}"
        try:
            os.replace(self.store_path, target)
            self.logging.warning("Moved unreadable store file to %s", target)
        except OSError as e:
            self.logging.error("Could not move unreadable store file %s aside: %s", self.store_path, e)
