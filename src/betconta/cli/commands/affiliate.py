"""Affiliate program commands."""

import click
from betconta.domain.account import AccountService
from betconta.domain.commission import CommissionLedger
from betconta.domain.entities import AffiliateApproval
from betconta.domain.errors import DomainError
from betconta.cli.account_resolution import resolve_child_or_exit
from betconta.cli.error_handling import handle_domain_error
from betconta.utils.amount_parser import parse_amount


@click.group()
def affiliate_group():
    """Manage affiliates and commissions."""
    pass


@affiliate_group.command("create")
@click.argument("master_user_id", type=int)
@click.pass_context
def create_affiliate(ctx, master_user_id: int):
    """Open an affiliate account for a master user."""
    try:
        affiliate = CommissionLedger(ctx.obj["db"]).create_affiliate(master_user_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Created affiliate {affiliate.id} with code {affiliate.code}")


@affiliate_group.command("approve")
@click.argument("master_user_id", type=int)
@click.argument("status", type=click.Choice([s.value for s in AffiliateApproval]), default="approved")
@click.pass_context
def approve_affiliate(ctx, master_user_id: int, status: str):
    """Set a master user's affiliate status (approving creates the account).

    Examples:
        betconta affiliate approve 1
        betconta affiliate approve 1 rejected
    """
    try:
        affiliate = CommissionLedger(ctx.obj["db"]).set_affiliate_approval(master_user_id, status)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Affiliate status of master user {master_user_id} set to '{status}'")
    if affiliate is not None:
        click.echo(f"Affiliate {affiliate.id} code {affiliate.code}")


@affiliate_group.command("settings")
@click.argument("affiliate_id", type=int)
@click.option("--default-price", required=True, help="Default referral price (e.g. 120,00)")
@click.option("--message", help="Custom landing page message")
@click.pass_context
def update_settings(ctx, affiliate_id: int, default_price: str, message: str | None):
    """Update an affiliate's referral settings."""
    try:
        price = parse_amount(default_price)
        settings = CommissionLedger(ctx.obj["db"]).update_settings(affiliate_id, price, message)
    except ValueError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Default price set to R$ {settings.default_price}")


@affiliate_group.command("sale")
@click.argument("affiliate_id", type=int)
@click.argument("child", metavar="CHILD")
@click.argument("price", metavar="PRICE")
@click.pass_context
def record_sale(ctx, affiliate_id: int, child: str, price: str):
    """Record the sale of a child account through an affiliate.

    Examples:
        betconta affiliate sale 3 42 115,00
    """
    db = ctx.obj["db"]
    child_id = resolve_child_or_exit(ctx, AccountService(db), child)
    try:
        record = CommissionLedger(db).record_sale(affiliate_id, child_id, parse_amount(price))
    except ValueError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Recorded sale {record.id}: price R$ {record.sale_price}, commission R$ {record.commission}")


@affiliate_group.command("pay")
@click.argument("record_id", type=int)
@click.pass_context
def mark_paid(ctx, record_id: int):
    """Mark a commission record as paid."""
    try:
        CommissionLedger(ctx.obj["db"]).mark_paid(record_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Commission record {record_id} is paid")


@affiliate_group.command("show")
@click.argument("affiliate_id", type=int)
@click.pass_context
def show_affiliate(ctx, affiliate_id: int):
    """Show an affiliate with its settings and sales."""
    ledger = CommissionLedger(ctx.obj["db"])
    affiliate = ledger.get_affiliate(affiliate_id)
    if affiliate is None:
        click.echo(f"Error: Affiliate {affiliate_id} not found", err=True)
        ctx.exit(1)

    settings = ledger.get_settings(affiliate_id)
    click.echo(f"Affiliate {affiliate.id} (master user {affiliate.master_user_id})")
    click.echo(f"  Code:        {affiliate.code}")
    click.echo(f"  Status:      {affiliate.approval_status.value}{'' if affiliate.is_active else ' (inactive)'}")
    click.echo(f"  Price range: R$ {affiliate.min_price} - R$ {affiliate.max_price}")
    if settings is not None:
        click.echo(f"  Default:     R$ {settings.default_price}")
    click.echo(f"  Sales:       {affiliate.total_sales}")
    click.echo(f"  Commission:  R$ {affiliate.total_commission}")

    sales = ledger.list_sales(affiliate_id)
    if sales:
        click.echo("  Records:")
        for r in sales:
            click.echo(
                f"    ID: {r.id:3d} | child {r.child_account_id} | R$ {r.sale_price} | "
                f"commission R$ {r.commission} | {r.payment_status.value}"
            )


def register_commands(cli):
    """Register affiliate commands with main CLI."""
    cli.add_command(affiliate_group, name="affiliate")
