"""
Credential Storage Service

Small async key-value stores for the auth token and user id.

Backends:
- SecureFileStore: JSON file created with mode 0600 (owner read/write only).
  The default on desktop and server machines.
- LocalFileStore: plain JSON file, the equivalent of browser local storage.
- MemoryStore: process-local dict, for tests and one-shot commands.

Error policy:
    Reads never raise; a broken or unreadable store is logged and treated as
    empty so the user is simply asked to log in again. Writes and removals
    are logged and re-raised, since silently losing a login is worse.

Usage:
    from smartflash.services.storage import get_token_store

    store = get_token_store()
    await store.set_item("authToken", token)
    token = await store.get_item("authToken")
"""

import json
import logging
import os
from pathlib import Path
from typing import Optional

import aiofiles
import aiofiles.os

from smartflash.config import Settings, settings as default_settings
from smartflash.enums.api import StorageBackend

logger = logging.getLogger(__name__)


class TokenStore:
    """Interface shared by all credential stores."""

    async def get_item(self, key: str) -> Optional[str]:
        raise NotImplementedError

    async def set_item(self, key: str, value: str) -> None:
        raise NotImplementedError

    async def remove_item(self, key: str) -> None:
        raise NotImplementedError


class MemoryStore(TokenStore):
    """In-memory store. Contents are lost when the process exits."""

    def __init__(self, initial: Optional[dict[str, str]] = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    async def get_item(self, key: str) -> Optional[str]:
        return self._data.get(key)

    async def set_item(self, key: str, value: str) -> None:
        self._data[key] = value

    async def remove_item(self, key: str) -> None:
        self._data.pop(key, None)


class LocalFileStore(TokenStore):
    """
    JSON file store.

    The whole file is rewritten on every change; it only ever holds a couple
    of short strings.
    """

    FILE_MODE: Optional[int] = None

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    async def _read_all(self) -> dict[str, str]:
        if not await aiofiles.os.path.exists(self.path):
            return {}
        async with aiofiles.open(self.path, "r", encoding="utf-8") as f:
            raw = await f.read()
        if not raw.strip():
            return {}
        data = json.loads(raw)
        if not isinstance(data, dict):
            raise ValueError(f"Credential store {self.path} is not a JSON object")
        return {str(k): str(v) for k, v in data.items()}

    async def _write_all(self, data: dict[str, str]) -> None:
        await aiofiles.os.makedirs(self.path.parent, exist_ok=True)
        async with aiofiles.open(self.path, "w", encoding="utf-8") as f:
            await f.write(json.dumps(data, indent=2))
        if self.FILE_MODE is not None:
            os.chmod(self.path, self.FILE_MODE)

    async def get_item(self, key: str) -> Optional[str]:
        try:
            data = await self._read_all()
        except (OSError, ValueError) as e:
            logger.error(f'Error getting item "{key}" from {self.path}: {e}')
            return None
        return data.get(key)

    async def set_item(self, key: str, value: str) -> None:
        try:
            data = await self._read_all()
            data[key] = value
            await self._write_all(data)
        except (OSError, ValueError) as e:
            logger.error(f'Error setting item "{key}" in {self.path}: {e}')
            raise

    async def remove_item(self, key: str) -> None:
        try:
            data = await self._read_all()
            if key not in data:
                return
            del data[key]
            await self._write_all(data)
        except (OSError, ValueError) as e:
            logger.error(f'Error removing item "{key}" from {self.path}: {e}')
            raise


class SecureFileStore(LocalFileStore):
    """JSON file store readable only by the owning user."""

    FILE_MODE = 0o600


def get_token_store(settings: Optional[Settings] = None) -> TokenStore:
    """
    Create the credential store configured in settings.

    Args:
        settings: Settings to read STORAGE_BACKEND/STORAGE_PATH from
            (default: global settings)

    Returns:
        TokenStore for the configured backend
    """
    settings = settings or default_settings
    backend = settings.STORAGE_BACKEND

    if backend == StorageBackend.MEMORY:
        return MemoryStore()
    if backend == StorageBackend.LOCAL:
        return LocalFileStore(settings.storage_file)
    return SecureFileStore(settings.storage_file)
