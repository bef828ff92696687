"""Provider and account models."""

from __future__ import annotations

import uuid
from enum import Enum

from pydantic import BaseModel, Field


class Service(str, Enum):
    """A supported deployment platform."""

    VERCEL = "vercel"
    NETLIFY = "netlify"

    @property
    def display_name(self) -> str:
        return {Service.VERCEL: "Vercel", Service.NETLIFY: "Netlify"}[self]

    @property
    def token_instructions(self) -> str:
        if self is Service.VERCEL:
            return "Go to vercel.com → Settings → Tokens → Create Token"
        return (
            "Go to app.netlify.com → User Settings → Applications"
            " → Personal Access Tokens"
        )


class Account(BaseModel):
    """A connected provider account."""

    id: uuid.UUID = Field(default_factory=uuid.uuid4)
    service: Service
    name: str = Field(min_length=1)
    enabled: bool = True

    @property
    def credential_key(self) -> str:
        """Key under which the account's token is kept in the credential store."""
        return f"deploystatus.token.{self.id}"
