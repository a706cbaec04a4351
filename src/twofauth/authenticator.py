"""Operations behind the CLI commands.

Each takes an already-loaded store. ``set_account`` and ``delete_account``
always save the store before returning, even when nothing changed or the
arguments were rejected.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime

from twofauth.errors import AccountNotFound, BadArguments
from twofauth.models import Code
from twofauth.store import SecretStore
from twofauth.totp import generate_code


def list_accounts(store: SecretStore) -> list[str]:
    """Account names in display order; empty when nothing is registered."""
    return sorted(store.list())


def get_code(store: SecretStore, name: str, now: datetime | float | None = None) -> Code:
    """Current code for an account.

    :raises AccountNotFound: if the account is not registered
    :raises DecodeError: if the stored secret is not valid base32
    """
    secret = store.get(name)
    if secret is None:
        raise AccountNotFound(name)
    return generate_code(secret, now)


def set_account(store: SecretStore, name: str, secret_tokens: Sequence[str]) -> None:
    try:
        if not secret_tokens:
            raise BadArguments("A secret is required")
        store.set(name, " ".join(secret_tokens))
    finally:
        store.save()


def delete_account(store: SecretStore, name: str) -> None:
    try:
        store.delete(name)
    finally:
        store.save()
