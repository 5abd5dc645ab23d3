# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_oidc_client

"""
Key-value storage backends for pending signin records.
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Protocol

from coreason_oidc_client.utils.logger import logger

DEFAULT_STORAGE_PATH = Path.home() / ".local" / "share" / "coreason-oidc-client" / "storage.json"


class StorageProtocol(Protocol):
    """Protocol for a string key-value store, shaped after the Web Storage API."""

    def get_item(self, key: str) -> str | None:
        ...

    def set_item(self, key: str, value: str) -> None:
        ...

    def remove_item(self, key: str) -> None:
        ...


class MemoryStorage:
    """
    In-memory implementation of StorageProtocol.
    Contents are lost when the process exits.
    """

    def __init__(self) -> None:
        self._items: dict[str, str] = {}

    def get_item(self, key: str) -> str | None:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)

    def keys(self) -> list[str]:
        return list(self._items)


class FileStorage:
    """
    Persistent implementation of StorageProtocol backed by a single JSON object file.

    Writes go to a temporary file in the same directory which is then renamed into place,
    so readers never observe a partial file. The file is created with `0o600` permissions
    because pending records may carry the client secret.

    Attributes:
        path (Path): Location of the JSON file.
    """

    def __init__(self, path: Path | str | None = None) -> None:
        self.path = Path(path) if path is not None else DEFAULT_STORAGE_PATH

    def _load(self, for_write: bool = False) -> dict[str, str]:
        """
        Reads the JSON object from disk.

        An unreadable file reads as empty. When loading for a write it is first renamed
        to `<name>.corrupt`.
        """
        try:
            text = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}

        try:
            data = json.loads(text)
        except json.JSONDecodeError:
            data = None

        if not isinstance(data, dict):
            if for_write:
                self._quarantine()
            else:
                logger.warning(f"Ignoring unreadable storage file {self.path}")
            return {}
        return {str(k): str(v) for k, v in data.items()}

    def _quarantine(self) -> None:
        target = self.path.with_name(f"{self.path.name}.corrupt")
        os.replace(self.path, target)
        logger.warning(f"Moved unreadable storage file {self.path} to {target}")

    def _save(self, items: dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=self.path.parent, prefix=".storage-", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(items, fh, indent=2)
                fh.flush()
                os.fsync(fh.fileno())
            os.chmod(tmp_path, 0o600)
            os.replace(tmp_path, self.path)
        except BaseException:
            Path(tmp_path).unlink(missing_ok=True)
            raise

    def get_item(self, key: str) -> str | None:
        return self._load().get(key)

    def set_item(self, key: str, value: str) -> None:
        items = self._load(for_write=True)
        items[key] = value
        self._save(items)

    def remove_item(self, key: str) -> None:
        items = self._load(for_write=True)
        if items.pop(key, None) is not None:
            self._save(items)

    def keys(self) -> list[str]:
        return list(self._load())
