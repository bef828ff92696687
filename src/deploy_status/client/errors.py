"""Typed exceptions and error handling decorator."""

from __future__ import annotations

import functools
from typing import Any, Callable, TypeVar

from rich.console import Console

F = TypeVar("F", bound=Callable[..., Any])

err_console = Console(stderr=True)


class DeployStatusError(Exception):
    """Base exception for deploy-status."""

    exit_code: int = 1


class ProviderConnectionError(DeployStatusError):
    """Cannot reach the provider API (transport failure or timeout)."""

    exit_code = 2


class InvalidCredentialError(DeployStatusError):
    """Token rejected by the provider (401/403 or failed validation)."""

    exit_code = 3

    def __init__(self, message: str = "") -> None:
        super().__init__(
            message
            or "Invalid or expired API token. Please check your token."
        )


class RateLimitedError(DeployStatusError):
    """Provider returned 429."""

    exit_code = 4

    def __init__(self, retry_after: float | None = None) -> None:
        self.retry_after = retry_after
        if retry_after is not None:
            msg = f"Rate limited. Please try again in {int(retry_after)} seconds."
        else:
            msg = "Rate limited. Please try again later."
        super().__init__(msg)


class DecodingError(DeployStatusError):
    """Provider payload could not be parsed."""

    exit_code = 5

    def __init__(self, detail: str = "") -> None:
        msg = "Failed to parse response"
        super().__init__(f"{msg}: {detail}" if detail else msg)


class ConfigurationError(DeployStatusError):
    """Missing or invalid local configuration."""

    exit_code = 6


class ServerError(DeployStatusError):
    """Unexpected HTTP status from the provider."""

    exit_code = 7

    def __init__(self, status_code: int, detail: str = "") -> None:
        self.status_code = status_code
        if detail:
            msg = f"Server error ({status_code}): {detail}"
        else:
            msg = f"Server error: {status_code}"
        super().__init__(msg)


def error_handler(func: F) -> F:
    """Decorator that catches DeployStatusError and prints user-friendly messages."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except DeployStatusError as exc:
            err_console.print(f"[bold red]Error:[/] {exc}")
            raise SystemExit(exc.exit_code)
        except ValueError as exc:
            err_console.print(f"[bold red]Error:[/] {exc}")
            raise SystemExit(1)

    return wrapper  # type: ignore[return-value]
