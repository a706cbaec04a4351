"""CLI entry point for twofauth.

Usage:
    twofauth list                     # List registered accounts
    twofauth get <account>            # Show the current code
    twofauth set <account> <secret>   # Register or replace a secret
    twofauth delete <account>         # Remove an account
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape

from twofauth import __version__
from twofauth.authenticator import delete_account, get_code, list_accounts, set_account
from twofauth.config import settings
from twofauth.errors import AccountNotFound, BadArguments, CorruptStoreError, DecodeError
from twofauth.store import FileBackend, SecretStore

logger = logging.getLogger(__name__)

console = Console(soft_wrap=True)
err_console = Console(stderr=True, soft_wrap=True)


def _open_store(ctx: click.Context) -> SecretStore:
    path: Path = ctx.obj["store_path"]
    try:
        return SecretStore.load(FileBackend(path))
    except CorruptStoreError as e:
        err_console.print(f"[red]{escape(str(e))}[/red]")
        sys.exit(1)


@click.group()
@click.option(
    "--store",
    "store_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Account store file (default: ~/.2fauth).",
)
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
@click.version_option(__version__, prog_name="twofauth")
@click.pass_context
def main(ctx: click.Context, store_path: Path | None, verbose: bool) -> None:
    """twofauth: time-based one-time passwords from the command line."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else settings.log_level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%H:%M:%S",
    )
    ctx.ensure_object(dict)
    ctx.obj["store_path"] = store_path or settings.store_path
    logger.debug("Using store %s", ctx.obj["store_path"])


@main.command("list")
@click.pass_context
def list_cmd(ctx: click.Context) -> None:
    """List all registered accounts."""
    names = list_accounts(_open_store(ctx))
    if not names:
        console.print("There are no accounts registered yet! Add one with: twofauth set <account> <secret>")
        return
    console.print("Get the code for an account with: twofauth get <account>")
    for name in names:
        console.print(escape(name), highlight=False)


@main.command("get")
@click.argument("name")
@click.pass_context
def get_cmd(ctx: click.Context, name: str) -> None:
    """Print the current code for an account with the time remaining."""
    store = _open_store(ctx)
    try:
        code = get_code(store, name)
    except AccountNotFound:
        console.print(
            f"Looks like {escape(name)} is not in the list. For the list of accounts, run: twofauth list",
            highlight=False,
        )
        return
    except DecodeError as e:
        err_console.print(f"[red]{escape(name)}: {escape(str(e))}[/red]")
        sys.exit(1)
    console.print(
        f"[bold]{code.display}[/bold] ({code.seconds_remaining} second(s) remaining)",
        highlight=False,
    )


@main.command("set")
@click.argument("name")
@click.argument("secret", nargs=-1)
@click.pass_context
def set_cmd(ctx: click.Context, name: str, secret: tuple[str, ...]) -> None:
    """Register an account's secret, replacing any existing one.

    The secret may be given in several space-separated groups.
    """
    try:
        set_account(_open_store(ctx), name, secret)
    except BadArguments as e:
        raise click.UsageError(str(e), ctx=ctx) from e


@main.command("delete")
@click.argument("name")
@click.pass_context
def delete_cmd(ctx: click.Context, name: str) -> None:
    """Delete an account. Does nothing if it does not exist."""
    delete_account(_open_store(ctx), name)


if __name__ == "__main__":
    main()
