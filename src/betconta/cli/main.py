"""Main CLI entry point."""

import logging

import click
from betconta.database.factories import create_sqlite_database

# Import and register all commands at module level
from betconta.cli.commands import (
    master,
    child,
    pix,
    kyc,
    affiliate,
)


def configure_logging(verbosity: int) -> None:
    """Configure root logging: warnings by default, -v for info, -vv for debug."""
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity > 1:
        level = logging.DEBUG
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides BETCONTA_DB_PATH environment variable)",
    envvar="BETCONTA_DB_PATH",
)
@click.option("-v", "--verbose", count=True, help="Increase log output (-v info, -vv debug)")
@click.pass_context
def cli(ctx, db_path: str | None, verbose: int):
    """BetConta - child accounts, KYC, PIX keys and affiliates.

    Administration tool for master users and their child accounts: identity
    verification, PIX key lifecycle and affiliate commissions.
    """
    ctx.ensure_object(dict)
    configure_logging(verbose)

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        db = create_sqlite_database(database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db
        ctx.call_on_close(db.disconnect)


# Register all commands
master.register_commands(cli)
child.register_commands(cli)
pix.register_commands(cli)
kyc.register_commands(cli)
affiliate.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
