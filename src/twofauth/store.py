"""Account store: account name -> normalized base32 secret.

The store is an explicit object: load it, mutate it, save it. Persistence
goes through a backend that reads and writes a single blob. Nothing locks
the file, so two invocations racing on set/delete lose updates (the last
save wins).
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path

from pydantic import TypeAdapter, ValidationError

from twofauth.errors import CorruptStoreError

logger = logging.getLogger(__name__)

_ACCOUNTS = TypeAdapter(dict[str, str])
_BASE32_BLOCK = 8


def normalize_secret(raw: str) -> str:
    """Join whitespace-separated tokens, pad to a multiple of 8 with '=', uppercase.

    No alphabet check is done here: an invalid secret is accepted and only
    fails when a code is generated from it.
    """
    secret = "".join(raw.split())
    missing_padding = len(secret) % _BASE32_BLOCK
    if missing_padding != 0:
        secret += "=" * (_BASE32_BLOCK - missing_padding)
    return secret.upper()


# ---------------------------------------------------------------------------
# Backends
# ---------------------------------------------------------------------------


class StoreBackend(ABC):
    """Reads and writes the serialized store as a single blob."""

    @abstractmethod
    def read(self) -> bytes | None:
        """Return the stored bytes, or None if nothing was saved yet."""

    @abstractmethod
    def write(self, data: bytes) -> None:
        """Replace the stored bytes."""


class FileBackend(StoreBackend):
    def __init__(self, path: Path | str) -> None:
        self.path = Path(path).expanduser()

    def read(self) -> bytes | None:
        try:
            return self.path.read_bytes()
        except FileNotFoundError:
            logger.debug("No store at %s yet", self.path)
            return None

    def write(self, data: bytes) -> None:
        directory = self.path.parent
        directory.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=directory, prefix=f".{self.path.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(data)
            os.chmod(tmp, 0o600)
            os.replace(tmp, self.path)
        except BaseException:
            Path(tmp).unlink(missing_ok=True)
            raise

    def __repr__(self) -> str:
        return f"FileBackend({str(self.path)!r})"


class MemoryBackend(StoreBackend):
    def __init__(self, data: bytes | None = None) -> None:
        self.data = data

    def read(self) -> bytes | None:
        return self.data

    def write(self, data: bytes) -> None:
        self.data = data

    def __repr__(self) -> str:
        return f"MemoryBackend({len(self.data or b'')} bytes)"


# ---------------------------------------------------------------------------
# Store
# ---------------------------------------------------------------------------


class SecretStore:
    """In-memory account mapping bound to the backend it was loaded from."""

    def __init__(self, backend: StoreBackend, accounts: dict[str, str] | None = None) -> None:
        self.backend = backend
        self._accounts: dict[str, str] = dict(accounts or {})
        self.dirty = False

    @classmethod
    def load(cls, backend: StoreBackend) -> SecretStore:
        """Load the store; missing or empty data gives an empty store.

        :raises CorruptStoreError: if the data is not a JSON object of strings
        """
        raw = backend.read()
        if not raw or not raw.strip():
            return cls(backend)
        try:
            accounts = _ACCOUNTS.validate_json(raw, strict=True)
        except ValidationError as exc:
            first = exc.errors()[0]
            where = ".".join(str(part) for part in first["loc"])
            detail = f"{where}: {first['msg']}" if where else first["msg"]
            raise CorruptStoreError(f"Account store is corrupt ({backend!r}): {detail}") from exc
        logger.debug("Loaded %d account(s) from %r", len(accounts), backend)
        return cls(backend, accounts)

    def list(self) -> list[str]:
        return list(self._accounts)

    def items(self) -> list[tuple[str, str]]:
        return list(self._accounts.items())

    def get(self, name: str) -> str | None:
        return self._accounts.get(name)

    def set(self, name: str, raw: str) -> SecretStore:
        self._accounts[name] = normalize_secret(raw)
        self.dirty = True
        logger.info("Stored secret for account %s", name)
        return self

    def delete(self, name: str) -> SecretStore:
        if self._accounts.pop(name, None) is None:
            logger.debug("Delete of unknown account %s ignored", name)
        else:
            logger.info("Deleted account %s", name)
        self.dirty = True
        return self

    def save(self) -> None:
        data = json.dumps(self._accounts, indent=2, sort_keys=True).encode("utf-8")
        self.backend.write(data)
        self.dirty = False
        logger.debug("Saved %d account(s) to %r", len(self._accounts), self.backend)

    def __len__(self) -> int:
        return len(self._accounts)

    def __contains__(self, name: object) -> bool:
        return name in self._accounts
