"""Journal viewing commands."""

import click
from ledgerpost.cli.error_handling import resolve_company_or_exit
from ledgerpost.utils.date_parser import parse_date


@click.group()
def journal_group():
    """Inspect posted journal entries."""
    pass


@journal_group.command("list")
@click.argument("company", metavar="COMPANY")
@click.option("--from", "start_date", help="Start date (inclusive)")
@click.option("--to", "end_date", help="End date (inclusive)")
@click.pass_context
def list_entries(ctx, company: str, start_date: str | None, end_date: str | None):
    """List journal entries with their lines."""
    db = ctx.obj["db"]
    company_id = resolve_company_or_exit(ctx, company)

    start = None
    if start_date:
        try:
            start = parse_date(start_date)
        except ValueError as e:
            click.echo(f"Error: Invalid start date: {e}", err=True)
            ctx.exit(1)

    end = None
    if end_date:
        try:
            end = parse_date(end_date)
        except ValueError as e:
            click.echo(f"Error: Invalid end date: {e}", err=True)
            ctx.exit(1)

    entries = db.list_journal_entries(company_id, start_date=start, end_date=end)
    if not entries:
        click.echo("No journal entries found.")
        return

    codes = {acc.id: acc.code for acc in db.list_accounts(company_id, include_inactive=True)}
    for entry in entries:
        click.echo(f"\n{entry.entry_date} {entry.reference}  {entry.description or ''}")
        for line in entry.lines:
            debit = f"{line.debit_amount:,.2f}" if line.debit_amount else ""
            credit = f"{line.credit_amount:,.2f}" if line.credit_amount else ""
            click.echo(f"    {codes.get(line.account_id, '?'):<10} {debit:>12} {credit:>12}")
        if not entry.is_balanced:
            click.echo("    ** unbalanced **")


def register_commands(cli):
    """Register journal commands with main CLI."""
    cli.add_command(journal_group, name="journal")
