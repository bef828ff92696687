"""Credential stores for provider API tokens.

Tokens are keyed by :attr:`Account.credential_key`. The file store keeps them
in a TOML file next to the config, readable by the owner only.
"""

from __future__ import annotations

from pathlib import Path
from typing import Protocol

from deploy_status.config.constants import CREDENTIALS_FILE
from deploy_status.config.manager import read_toml, write_private_toml


class CredentialStore(Protocol):
    def save(self, secret: str, key: str) -> None: ...

    def load(self, key: str) -> str | None: ...

    def delete(self, key: str) -> None: ...

    def exists(self, key: str) -> bool: ...


class FileCredentialStore:
    """Stores tokens in an owner-only TOML file."""

    def __init__(self, path: Path | None = None) -> None:
        self.path = path or CREDENTIALS_FILE

    def _read(self) -> dict[str, str]:
        data = read_toml(self.path)
        return {k: v for k, v in data.get("tokens", {}).items() if isinstance(v, str)}

    def _write(self, tokens: dict[str, str]) -> None:
        write_private_toml(self.path, {"tokens": tokens})

    def save(self, secret: str, key: str) -> None:
        tokens = self._read()
        tokens[key] = secret
        self._write(tokens)

    def load(self, key: str) -> str | None:
        return self._read().get(key)

    def delete(self, key: str) -> None:
        tokens = self._read()
        if tokens.pop(key, None) is not None:
            self._write(tokens)

    def exists(self, key: str) -> bool:
        return key in self._read()


class MemoryCredentialStore:
    """In-process credential store."""

    def __init__(self, tokens: dict[str, str] | None = None) -> None:
        self._tokens = dict(tokens or {})

    def save(self, secret: str, key: str) -> None:
        self._tokens[key] = secret

    def load(self, key: str) -> str | None:
        return self._tokens.get(key)

    def delete(self, key: str) -> None:
        self._tokens.pop(key, None)

    def exists(self, key: str) -> bool:
        return key in self._tokens
