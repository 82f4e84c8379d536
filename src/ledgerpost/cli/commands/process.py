"""Batch processing commands."""

import click
from ledgerpost.cli.error_handling import handle_domain_error, resolve_company_or_exit
from ledgerpost.domain.batch import create_orchestrator
from ledgerpost.domain.entities import BatchResult
from ledgerpost.domain.errors import DomainError


def _print_result(result: BatchResult) -> None:
    click.echo(f"Processed:      {result.processed_count}")
    click.echo(f"Classified:     {result.classified_count}")
    click.echo(f"Posted:         {result.posted_count}")
    click.echo(f"Already posted: {result.already_posted_count}")
    click.echo(f"Unclassified:   {result.unclassified_count}")
    click.echo(f"Failed:         {result.failed_count}")
    if result.errors:
        click.echo("\nErrors:")
        for error in result.errors:
            click.echo(f"  {error}")


@click.command("process")
@click.argument("company", metavar="COMPANY")
@click.option("--validate", is_flag=True, help="Refuse the whole batch if any transaction is malformed")
@click.pass_context
def process_transactions(ctx, company: str, validate: bool):
    """Classify and post every unposted transaction of a company.

    Exits with status 1 when any transaction failed or stayed unclassified.

    Examples:
        ledgerpost process "Acme Trading"
        ledgerpost process 1 --validate
    """
    company_id = resolve_company_or_exit(ctx, company)
    orchestrator = create_orchestrator(ctx.obj["db"], ctx.obj["settings"])
    try:
        result = orchestrator.process_company(company_id, validate=validate)
    except DomainError as e:
        handle_domain_error(ctx, e)

    _print_result(result)
    if not result.success:
        ctx.exit(1)


@click.command("regenerate")
@click.argument("company", metavar="COMPANY")
@click.confirmation_option(prompt="Replace the journal entries of every transaction?")
@click.pass_context
def regenerate_entries(ctx, company: str):
    """Classify and post every transaction again, replacing earlier entries."""
    company_id = resolve_company_or_exit(ctx, company)
    orchestrator = create_orchestrator(ctx.obj["db"], ctx.obj["settings"])
    result = orchestrator.regenerate(company_id)

    _print_result(result)
    if not result.success:
        ctx.exit(1)


def register_commands(cli):
    """Register batch processing commands with main CLI."""
    cli.add_command(process_transactions)
    cli.add_command(regenerate_entries)
