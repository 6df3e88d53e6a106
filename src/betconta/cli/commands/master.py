"""Master user management commands."""

import click
from betconta.domain.account import AccountService
from betconta.domain.errors import DomainError
from betconta.cli.error_handling import handle_domain_error
from betconta.utils.cpf import format_cpf


@click.group()
def master_group():
    """Manage master users."""
    pass


@master_group.command("create")
@click.argument("name", metavar="NAME")
@click.option("--email", required=True, help="Email address")
@click.option("--cpf", required=True, help="CPF (with or without punctuation)")
@click.pass_context
def create_master(ctx, name: str, email: str, cpf: str):
    """Create a master user.

    Examples:
        betconta master create "Maria Souza" --email maria@example.com --cpf 123.456.789-09
    """
    service = AccountService(ctx.obj["db"])
    try:
        user_id = service.create_master_user(name=name, email=email, cpf=cpf)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Created master user '{name}' (ID: {user_id})")


@master_group.command("list")
@click.pass_context
def list_masters(ctx):
    """List all master users."""
    service = AccountService(ctx.obj["db"])

    users = service.list_master_users()
    if not users:
        click.echo("No master users found.")
        return

    click.echo("\nMaster users:")
    click.echo("-" * 80)
    for user in users:
        state = "active" if user.is_active else "disabled"
        affiliate = user.affiliate_status.value if user.affiliate_status else "none"
        click.echo(
            f"ID: {user.id:3d} | {user.name:25s} | {format_cpf(user.cpf)} | {state:8s} | affiliate: {affiliate}"
        )


@master_group.command("toggle")
@click.argument("user_id", type=int)
@click.option("--enable/--disable", default=True, help="Enable or disable the user")
@click.pass_context
def toggle_master(ctx, user_id: int, enable: bool):
    """Enable or disable a master user.

    Examples:
        betconta master toggle 1 --disable
    """
    service = AccountService(ctx.obj["db"])
    try:
        service.set_master_active(user_id, enable)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Master user {user_id} {'enabled' if enable else 'disabled'}")


def register_commands(cli):
    """Register master user commands with main CLI."""
    cli.add_command(master_group, name="master")
