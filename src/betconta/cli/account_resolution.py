"""CLI helpers for child account resolution and error handling."""

from __future__ import annotations

import click
from betconta.domain.account import AccountService
from betconta.utils.account_resolver import resolve_child_account


def resolve_child_or_exit(ctx: click.Context, account_service: AccountService, child: str | int) -> int:
    """Resolve child account ID or CPF, or exit with a CLI error.

    This keeps error messaging and exit behavior consistent across commands.
    """
    try:
        return resolve_child_account(account_service, child)
    except ValueError as exc:
        click.echo(f"Error: {exc}", err=True)
        ctx.exit(1)
