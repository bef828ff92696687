"""Configuration manager — read/write TOML config, persist the account list."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import structlog
import tomli_w
from pydantic import ValidationError

from deploy_status.client.errors import ConfigurationError
from deploy_status.config.constants import CONFIG_FILE, ENV_CONFIG_FILE
from deploy_status.config.models import AppConfig, Settings
from deploy_status.models.account import Account

try:
    import tomllib
except ModuleNotFoundError:
    import tomli as tomllib

logger = structlog.get_logger(__name__)


def default_config_path() -> Path:
    env_path = os.environ.get(ENV_CONFIG_FILE)
    return Path(env_path) if env_path else CONFIG_FILE


def write_private_toml(path: Path, data: dict[str, Any]) -> None:
    """Write *data* to *path* atomically with owner-only permissions."""
    path.parent.mkdir(parents=True, exist_ok=True)
    os.chmod(path.parent, 0o700)
    temp = path.with_suffix(".tmp")
    fd = os.open(str(temp), os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
    try:
        os.write(fd, tomli_w.dumps(data).encode())
    finally:
        os.close(fd)
    temp.replace(path)


def read_toml(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}
    try:
        return tomllib.loads(path.read_bytes().decode())
    except (tomllib.TOMLDecodeError, UnicodeDecodeError) as exc:
        raise ConfigurationError(f"Cannot parse {path}: {exc}") from exc


class ConfigManager:
    """Manages settings and the persisted account list on disk."""

    def __init__(self, config_path: Path | None = None) -> None:
        self.config_path = config_path or default_config_path()
        self._config: AppConfig | None = None

    @property
    def config(self) -> AppConfig:
        if self._config is None:
            self._config = self._load()
        return self._config

    @property
    def settings(self) -> Settings:
        return self.config.settings

    def _load(self) -> AppConfig:
        data = read_toml(self.config_path)
        try:
            return AppConfig(
                settings=Settings(**data.get("settings", {})),
                accounts=[Account(**acct) for acct in data.get("accounts", [])],
            )
        except ValidationError as exc:
            raise ConfigurationError(
                f"Invalid configuration in {self.config_path}: {exc}"
            ) from exc

    def save(self) -> None:
        data: dict[str, Any] = {}
        # Remove defaults to keep config clean
        settings = self.config.settings.model_dump(mode="json", exclude_defaults=True)
        if settings:
            data["settings"] = settings
        if self.config.accounts:
            data["accounts"] = [
                acct.model_dump(mode="json") for acct in self.config.accounts
            ]
        write_private_toml(self.config_path, data)
        logger.debug("config saved", path=str(self.config_path))

    # Persisted account list

    def load_accounts(self) -> list[Account]:
        return list(self.config.accounts)

    def save_accounts(self, accounts: list[Account]) -> None:
        self.config.accounts = list(accounts)
        self.save()

    def get_account(self, ref: str) -> Account | None:
        """Find an account by full id, id prefix or name."""
        for acct in self.config.accounts:
            if str(acct.id) == ref or acct.name == ref:
                return acct
        matches = [a for a in self.config.accounts if str(a.id).startswith(ref)]
        if len(matches) == 1:
            return matches[0]
        return None

    # Settings

    def set_value(self, key: str, value: str) -> Settings:
        """Set a settings field from its string form, e.g. ``notifications.enabled``."""
        data = self.config.settings.model_dump()
        target = data
        *parents, leaf = key.split(".")
        for part in parents:
            if not isinstance(target.get(part), dict):
                raise ConfigurationError(f"Unknown setting: {key}")
            target = target[part]
        if leaf not in target or isinstance(target[leaf], dict):
            raise ConfigurationError(f"Unknown setting: {key}")
        target[leaf] = value
        try:
            settings = Settings.model_validate(data)
        except ValidationError as exc:
            raise ConfigurationError(f"Invalid value for {key}: {value}") from exc
        self.config.settings = settings
        self.save()
        return settings
