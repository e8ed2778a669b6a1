# src/todolist/storage/file_store.py

from __future__ import annotations

import asyncio
import contextlib
import logging
import os
from pathlib import Path
from urllib.parse import quote

logger = logging.getLogger(__name__)


class FileKeyValueStore:
    """
    Directory-backed KeyValueStore: one file per key.

    Keys are percent-encoded into file names. Writes go to a temp file that is
    then renamed over the target, so a crash never leaves a half-written value.
    """

    def __init__(self, root: str | Path) -> None:
        self._root = Path(root)
        self._root.mkdir(parents=True, exist_ok=True)
        logger.info("FileKeyValueStore ready dir=%s", self._root)

    def close(self) -> None:
        return

    def path_for(self, key: str) -> Path:
        return self._root / f"{quote(key, safe='')}.bin"

    def _get_sync(self, key: str) -> bytes | None:
        path = self.path_for(key)
        try:
            return path.read_bytes()
        except FileNotFoundError:
            return None

    def _set_sync(self, key: str, value: bytes) -> None:
        path = self.path_for(key)
        tmp = path.with_suffix(".tmp")
        tmp.write_bytes(value)
        os.replace(tmp, path)
        with contextlib.suppress(Exception):
            # Best-effort: task text is personal data, keep the file private on disk.
            os.chmod(path, 0o600)

    async def get(self, key: str) -> bytes | None:
        return await asyncio.to_thread(self._get_sync, key)

    async def set(self, key: str, value: bytes) -> None:
        await asyncio.to_thread(self._set_sync, key, bytes(value))
        logger.debug("kv set key=%s bytes=%d", key, len(value))
