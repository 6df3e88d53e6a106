"""KYC submission and review commands."""

import click
from betconta.domain.account import AccountService
from betconta.domain.entities import DocumentType, KycDocuments, KycStatus
from betconta.domain.errors import DomainError
from betconta.domain.kyc import KycService
from betconta.cli.account_resolution import resolve_child_or_exit
from betconta.cli.error_handling import handle_domain_error


@click.group()
def kyc_group():
    """Submit and review identity verification."""
    pass


@kyc_group.command("submit")
@click.argument("master_user_id", type=int)
@click.option("--child", help="Child account ID or CPF (omit for the master user's own KYC)")
@click.option("--front", required=True, help="Reference to the document front image")
@click.option("--back", required=True, help="Reference to the document back image")
@click.option("--selfie", required=True, help="Reference to the selfie image")
@click.option("--doc-type", type=click.Choice([d.value for d in DocumentType]), help="Document type")
@click.option("--doc-number", help="Document number")
@click.option("--holder", help="Name printed on the document")
@click.pass_context
def submit_kyc(
    ctx,
    master_user_id: int,
    child: str | None,
    front: str,
    back: str,
    selfie: str,
    doc_type: str | None,
    doc_number: str | None,
    holder: str | None,
):
    """Submit KYC documents.

    Examples:
        betconta kyc submit 1 --child 42 --front uploads/f.jpg --back uploads/b.jpg --selfie uploads/s.jpg
    """
    db = ctx.obj["db"]
    child_id = None
    if child is not None:
        child_id = resolve_child_or_exit(ctx, AccountService(db), child)

    documents = KycDocuments(
        front=front,
        back=back,
        selfie=selfie,
        document_type=DocumentType(doc_type) if doc_type else None,
        document_number=doc_number,
        holder_name=holder,
    )
    try:
        case = KycService(db).submit(master_user_id, child_id, documents)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Submitted KYC case {case.id} ({case.account_type.value})")


@kyc_group.command("review")
@click.argument("case_id", type=int)
@click.argument("status", type=click.Choice([s.value for s in KycStatus if s is not KycStatus.SUBMITTED]))
@click.option("--reviewer", default="admin", show_default=True, help="Reviewer identifier")
@click.option("--notes", help="Review notes")
@click.pass_context
def review_kyc(ctx, case_id: int, status: str, reviewer: str, notes: str | None):
    """Move a KYC case to under_review, approved or rejected.

    Examples:
        betconta kyc review 7 under_review
        betconta kyc review 7 rejected --notes "Selfie is blurred"
    """
    try:
        case = KycService(ctx.obj["db"]).set_status(case_id, status, reviewer_id=reviewer, notes=notes)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"KYC case {case.id} is now '{case.status.value}'")


@kyc_group.command("list")
@click.option("--master", "master_user_id", type=int, help="Only cases of this master user")
@click.option("--child", help="Only cases of this child account (ID or CPF)")
@click.pass_context
def list_kyc(ctx, master_user_id: int | None, child: str | None):
    """List KYC cases, most recent first."""
    db = ctx.obj["db"]
    child_id = None
    if child is not None:
        child_id = resolve_child_or_exit(ctx, AccountService(db), child)

    cases = KycService(db).list_cases(master_user_id=master_user_id, child_account_id=child_id)
    if not cases:
        click.echo("No KYC cases found.")
        return

    click.echo("\nKYC cases:")
    click.echo("-" * 80)
    for case in cases:
        target = f"child {case.child_account_id}" if case.child_account_id is not None else "master"
        line = (
            f"ID: {case.id:3d} | master {case.master_user_id} | {target:10s} | "
            f"{case.status.value:12s} | submitted {case.submitted_at:%Y-%m-%d %H:%M}"
        )
        if case.review_notes:
            line += f" | {case.review_notes}"
        click.echo(line)


@kyc_group.command("status")
@click.argument("child", metavar="CHILD")
@click.pass_context
def kyc_status(ctx, child: str):
    """Show the KYC status a child account's owner sees."""
    db = ctx.obj["db"]
    child_id = resolve_child_or_exit(ctx, AccountService(db), child)
    try:
        status = KycService(db).display_status(child_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(status.value)


def register_commands(cli):
    """Register KYC commands with main CLI."""
    cli.add_command(kyc_group, name="kyc")
