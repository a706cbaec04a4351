"""Failure types shared by the store, the TOTP engine and the CLI."""

from __future__ import annotations


class TwoFAuthError(Exception):
    """Base class for all twofauth failures."""


class DecodeError(TwoFAuthError, ValueError):
    """A stored secret is not valid base32."""


class AccountNotFound(TwoFAuthError, LookupError):
    def __init__(self, name: str) -> None:
        super().__init__(f"Account not found: {name}")
        self.name = name


class CorruptStoreError(TwoFAuthError):
    """The persisted store could not be read as a name -> secret mapping."""


class BadArguments(TwoFAuthError):
    pass
