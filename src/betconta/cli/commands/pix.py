"""PIX key commands."""

import click
from betconta.domain.account import AccountService
from betconta.domain.errors import DomainError
from betconta.domain.expiry import DEFAULT_SWEEP_INTERVAL, ExpiryScanner
from betconta.domain.pix import PixKeyRegistry, format_remaining
from betconta.cli.account_resolution import resolve_child_or_exit
from betconta.cli.error_handling import handle_domain_error
from betconta.utils.date_parser import parse_datetime


@click.group()
def pix_group():
    """Manage PIX keys of child accounts."""
    pass


@pix_group.command("activate")
@click.argument("child", metavar="CHILD")
@click.argument("key_type", metavar="KEY_TYPE")
@click.pass_context
def activate_key(ctx, child: str, key_type: str):
    """Activate a PIX key for a child account.

    CHILD can be a child account ID or CPF. KEY_TYPE is CPF, Email or Random.
    An active key of the same type is closed first.

    Examples:
        betconta pix activate 42 CPF
        betconta pix activate 987.654.321-00 random
    """
    db = ctx.obj["db"]
    child_id = resolve_child_or_exit(ctx, AccountService(db), child)
    registry = PixKeyRegistry(db)
    try:
        record = registry.activate(child_id, key_type)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    lifetime = registry.remaining_lifetime(record)
    click.echo(f"Activated {record.key_type.value} key {record.value} (ID: {record.id})")
    click.echo(f"Expires in {format_remaining(lifetime).removesuffix(' remaining')}")


@pix_group.command("deactivate")
@click.argument("child", metavar="CHILD")
@click.argument("key_type", metavar="KEY_TYPE", required=False)
@click.pass_context
def deactivate_key(ctx, child: str, key_type: str | None):
    """Deactivate PIX keys of a child account.

    Without KEY_TYPE every active key of the account is closed.

    Examples:
        betconta pix deactivate 42 CPF
        betconta pix deactivate 42
    """
    db = ctx.obj["db"]
    child_id = resolve_child_or_exit(ctx, AccountService(db), child)
    registry = PixKeyRegistry(db)
    try:
        if key_type is None:
            closed = registry.deactivate_all(child_id)
            click.echo(f"Closed {closed} active key{'s' if closed != 1 else ''}")
        else:
            registry.deactivate(child_id, key_type)
            click.echo(f"{key_type} key of child account {child_id} is inactive")
    except DomainError as e:
        handle_domain_error(ctx, e)


@pix_group.command("list")
@click.argument("child", metavar="CHILD")
@click.pass_context
def list_keys(ctx, child: str):
    """List the PIX key history of a child account, most recent first."""
    db = ctx.obj["db"]
    child_id = resolve_child_or_exit(ctx, AccountService(db), child)
    registry = PixKeyRegistry(db)

    records = registry.list_by_child(child_id)
    if not records:
        click.echo("No PIX keys found.")
        return

    click.echo(f"\nPIX keys of child account {child_id}:")
    click.echo("-" * 80)
    for r in records:
        if r.is_active:
            state = format_remaining(registry.remaining_lifetime(r))
        else:
            state = f"closed {r.closed_at:%Y-%m-%d %H:%M}"
        click.echo(
            f"ID: {r.id:3d} | {r.key_type.value:6s} | {r.value:40s} | "
            f"created {r.created_at:%Y-%m-%d %H:%M} | {state}"
        )


@pix_group.command("sweep")
@click.option("--now", "now_str", help="Reference time (e.g. '2024-05-01 12:00', '+1d'); defaults to now")
@click.option("--watch", is_flag=True, help="Keep sweeping on a fixed interval")
@click.option(
    "--interval",
    type=float,
    default=DEFAULT_SWEEP_INTERVAL,
    show_default=True,
    envvar="BETCONTA_SWEEP_INTERVAL",
    help="Seconds between sweeps with --watch",
)
@click.option("--max-sweeps", type=int, help="Stop --watch after this many sweeps")
@click.pass_context
def sweep_keys(ctx, now_str: str | None, watch: bool, interval: float, max_sweeps: int | None):
    """Close PIX keys that have been active for more than 72 hours.

    Examples:
        betconta pix sweep
        betconta -v pix sweep --watch --interval 300
    """
    scanner = ExpiryScanner(ctx.obj["db"])

    if watch:
        if now_str is not None:
            click.echo("Error: --now cannot be combined with --watch", err=True)
            ctx.exit(1)
        try:
            total = scanner.run(interval=interval, max_sweeps=max_sweeps)
        except ValueError as e:
            handle_domain_error(ctx, e)
            return
        except KeyboardInterrupt:
            click.echo("Stopped.")
            return
        click.echo(f"Expired {total} key{'s' if total != 1 else ''}")
        return

    now = None
    if now_str is not None:
        try:
            now = parse_datetime(now_str)
        except ValueError as e:
            handle_domain_error(ctx, e)
            return

    closed = scanner.sweep(now)
    click.echo(f"Expired {closed} key{'s' if closed != 1 else ''}")


def register_commands(cli):
    """Register PIX commands with main CLI."""
    cli.add_command(pix_group, name="pix")
