"""Chart of accounts commands."""

import click
from ledgerpost.cli.error_handling import handle_domain_error, resolve_company_or_exit
from ledgerpost.domain.account import AccountDirectory
from ledgerpost.domain.entities import AccountCategory
from ledgerpost.domain.errors import DomainError

CATEGORY_CHOICES = [c.name for c in AccountCategory]


@click.group()
def accounts_group():
    """Manage the chart of accounts."""
    pass


@accounts_group.command("init")
@click.argument("company", metavar="COMPANY")
@click.pass_context
def init_accounts(ctx, company: str):
    """Create the standard chart of accounts for a company.

    Existing accounts are kept; only missing standard accounts are added.

    Examples:
        ledgerpost accounts init "Acme Trading"
    """
    company_id = resolve_company_or_exit(ctx, company)
    directory = AccountDirectory(ctx.obj["db"])
    try:
        created = directory.initialize_chart_of_accounts(company_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    if created == 0:
        click.echo("Chart of accounts already initialized.")
    else:
        click.echo(f"Created {created} accounts.")


@accounts_group.command("list")
@click.argument("company", metavar="COMPANY")
@click.option("--all", "include_inactive", is_flag=True, help="Include inactive accounts")
@click.pass_context
def list_accounts(ctx, company: str, include_inactive: bool):
    """List a company's chart of accounts."""
    company_id = resolve_company_or_exit(ctx, company)
    directory = AccountDirectory(ctx.obj["db"])

    accounts = directory.list_accounts(company_id, include_inactive=include_inactive)
    if not accounts:
        click.echo("No accounts found. Run 'ledgerpost accounts init' first.")
        return

    click.echo(f"\n{'Code':<10} {'Name':<40} {'Category':<12} Parent")
    click.echo("-" * 76)
    for acc in accounts:
        marker = "" if acc.is_active else " (inactive)"
        click.echo(
            f"{acc.code:<10} {acc.name + marker:<40} {acc.category.value:<12} {acc.parent_code or ''}"
        )


@accounts_group.command("create")
@click.argument("company", metavar="COMPANY")
@click.argument("code", metavar="CODE")
@click.argument("name", metavar="NAME")
@click.option("--parent", "parent_code", help="Parent account code (defaults to the part before '-')")
@click.option(
    "--category",
    type=click.Choice(CATEGORY_CHOICES, case_sensitive=False),
    help="Account category (inferred from the code when omitted)",
)
@click.pass_context
def create_account(ctx, company: str, code: str, name: str, parent_code: str | None, category: str | None):
    """Create an account, or show the existing one with this code.

    Examples:
        ledgerpost accounts create "Acme Trading" 8800-010 "Insurance - Hollard"
        ledgerpost accounts create 1 1150 "Bank - Call Account" --category ASSETS
    """
    company_id = resolve_company_or_exit(ctx, company)
    directory = AccountDirectory(ctx.obj["db"])

    existing = directory.get_account(company_id, code)
    if existing is not None:
        click.echo(f"Account {existing.code} '{existing.name}' already exists (ID: {existing.id})")
        return

    try:
        account_id = directory.get_or_create(
            company_id,
            code,
            name,
            parent_code=parent_code,
            category=AccountCategory[category.upper()] if category else None,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created account {code} '{name}' (ID: {account_id})")


def register_commands(cli):
    """Register chart of accounts commands with main CLI."""
    cli.add_command(accounts_group, name="accounts")
