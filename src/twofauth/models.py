"""Pydantic models for values returned to the CLI."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

DIGITS = 6
INTERVAL = 30


class Code(BaseModel):
    """A generated one-time password and how long it stays valid."""

    model_config = ConfigDict(frozen=True)

    code: int = Field(ge=0, lt=10**DIGITS)
    seconds_remaining: int = Field(ge=1, le=INTERVAL)

    @property
    def display(self) -> str:
        return f"{self.code:0{DIGITS}d}"

    def __str__(self) -> str:
        return self.display
