"""Child account management commands."""

import click
from betconta.domain.account import AccountService
from betconta.domain.entities import ChildAccountStatus, PixKeyType
from betconta.domain.errors import DomainError
from betconta.domain.kyc import KycService
from betconta.domain.pix import PixKeyRegistry, format_remaining
from betconta.cli.account_resolution import resolve_child_or_exit
from betconta.cli.error_handling import handle_domain_error


@click.group()
def child_group():
    """Manage child accounts."""
    pass


@child_group.command("create")
@click.argument("master_user_id", type=int)
@click.option("--name", required=True, help="Account holder name")
@click.option("--cpf", required=True, help="Holder CPF")
@click.option("--rg", "rg_number", required=True, help="Holder RG number")
@click.option("--email", required=True, help="Holder email")
@click.option("--whatsapp", help="Contact number")
@click.pass_context
def create_child(ctx, master_user_id: int, name: str, cpf: str, rg_number: str, email: str, whatsapp: str | None):
    """Create a child account under a master user.

    Examples:
        betconta child create 1 --name "Joao Lima" --cpf 98765432100 --rg 1234567 --email joao@example.com
    """
    service = AccountService(ctx.obj["db"])
    try:
        child_id = service.create_child_account(
            master_user_id=master_user_id,
            name=name,
            cpf=cpf,
            rg_number=rg_number,
            email=email,
            whatsapp=whatsapp,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Created child account '{name}' (ID: {child_id})")


@child_group.command("list")
@click.option("--master", "master_user_id", type=int, help="Only children of this master user")
@click.pass_context
def list_children(ctx, master_user_id: int | None):
    """List child accounts."""
    service = AccountService(ctx.obj["db"])

    children = service.list_child_accounts(master_user_id=master_user_id)
    if not children:
        click.echo("No child accounts found.")
        return

    click.echo("\nChild accounts:")
    click.echo("-" * 80)
    for c in children:
        click.echo(
            f"ID: {c.id:3d} | {c.name:25s} | CPF: {c.cpf_mask} | {c.status.value:8s} | "
            f"R$ {c.balance} | master {c.master_user_id}"
        )


@child_group.command("show")
@click.argument("child", metavar="CHILD")
@click.pass_context
def show_child(ctx, child: str):
    """Show a child account with its KYC status and active PIX keys.

    CHILD can be a child account ID or CPF.
    """
    db = ctx.obj["db"]
    account_service = AccountService(db)
    child_id = resolve_child_or_exit(ctx, account_service, child)

    account = account_service.get_child_account(child_id)
    kyc_status = KycService(db).display_status(child_id)
    registry = PixKeyRegistry(db)

    click.echo(f"Child account {account.id}: {account.name}")
    click.echo(f"  Master user: {account.master_user_id}")
    click.echo(f"  CPF:         {account.cpf_mask}")
    click.echo(f"  Email:       {account.email}")
    click.echo(f"  Status:      {account.status.value}")
    click.echo(f"  KYC:         {kyc_status.value}")
    click.echo(f"  Balance:     R$ {account.balance}")
    click.echo("  PIX keys:")
    any_active = False
    for key_type in PixKeyType:
        record = registry.get_active(child_id, key_type)
        if record is None:
            continue
        any_active = True
        lifetime = registry.remaining_lifetime(record)
        click.echo(f"    {key_type.value:6s} {record.value} ({format_remaining(lifetime)})")
    if not any_active:
        click.echo("    none active")


@child_group.command("set-status")
@click.argument("child", metavar="CHILD")
@click.argument("status", type=click.Choice([s.value for s in ChildAccountStatus]))
@click.pass_context
def set_child_status(ctx, child: str, status: str):
    """Set a child account's status directly (admin override).

    Examples:
        betconta child set-status 42 approved
    """
    service = AccountService(ctx.obj["db"])
    child_id = resolve_child_or_exit(ctx, service, child)
    try:
        service.set_child_status(child_id, status)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Child account {child_id} status set to '{status}'")


def register_commands(cli):
    """Register child account commands with main CLI."""
    cli.add_command(child_group, name="child")
