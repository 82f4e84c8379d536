"""CLI error handling helpers."""

import click

from ledgerpost.domain.company import CompanyService
from ledgerpost.domain.errors import DomainError
from ledgerpost.utils.company_resolver import resolve_company


def handle_domain_error(ctx: click.Context, error: DomainError | ValueError) -> None:
    """Render a domain error and exit with failure."""
    click.echo(f"Error: {error}", err=True)
    ctx.exit(1)


def resolve_company_or_exit(ctx: click.Context, company: str | int) -> int:
    """Resolve company name or ID, or exit with a CLI error."""
    try:
        return resolve_company(CompanyService(ctx.obj["db"]), company)
    except ValueError as exc:
        handle_domain_error(ctx, exc)
