"""Classification rule commands."""

import click
from ledgerpost.cli.error_handling import handle_domain_error, resolve_company_or_exit
from ledgerpost.domain.entities import MatchType
from ledgerpost.domain.errors import DomainError
from ledgerpost.domain.rules import RuleStore


@click.group()
def rule_group():
    """Manage classification rules."""
    pass


@rule_group.command("add")
@click.argument("company", metavar="COMPANY")
@click.argument("pattern", metavar="PATTERN")
@click.argument("account_code", metavar="ACCOUNT_CODE")
@click.option("--priority", type=int, default=0, show_default=True, help="Higher priorities are tried first")
@click.option(
    "--match-type",
    type=click.Choice([m.value for m in MatchType], case_sensitive=False),
    default=MatchType.CONTAINS.value,
    show_default=True,
    help="How the pattern is compared with transaction details",
)
@click.pass_context
def add_rule(ctx, company: str, pattern: str, account_code: str, priority: int, match_type: str):
    """Add a rule mapping PATTERN to ACCOUNT_CODE.

    Examples:
        ledgerpost rule add "Acme Trading" DOTSURE 8800-002 --priority 90
        ledgerpost rule add 1 "SALARY" 8100 --match-type STARTS_WITH
    """
    company_id = resolve_company_or_exit(ctx, company)
    store = RuleStore(ctx.obj["db"])
    try:
        rule_id = store.add_rule(
            company_id,
            pattern,
            account_code,
            priority=priority,
            match_type=MatchType(match_type.upper()),
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Added rule {rule_id}: '{pattern.strip().upper()}' -> {account_code}")


@rule_group.command("list")
@click.argument("company", metavar="COMPANY")
@click.option("--all", "include_inactive", is_flag=True, help="Include deactivated rules")
@click.pass_context
def list_rules(ctx, company: str, include_inactive: bool):
    """List rules in evaluation order."""
    company_id = resolve_company_or_exit(ctx, company)
    store = RuleStore(ctx.obj["db"])

    rules = store.list_rules(company_id, include_inactive=include_inactive)
    if not rules:
        click.echo("No rules found.")
        return

    click.echo(f"\n{'ID':>4} {'Priority':>8} {'Match':<12} {'Pattern':<30} Account")
    click.echo("-" * 80)
    for r in rules:
        status = "" if r.is_active else " (inactive)"
        click.echo(
            f"{r.id:>4} {r.priority:>8} {r.match_type.value:<12} {r.pattern:<30} "
            f"{r.account_code} {r.account_name}{status}"
        )


@rule_group.command("deactivate")
@click.argument("rule_id", type=int, metavar="RULE_ID")
@click.pass_context
def deactivate_rule(ctx, rule_id: int):
    """Deactivate a rule."""
    store = RuleStore(ctx.obj["db"])
    try:
        store.deactivate_rule(rule_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deactivated rule {rule_id}")


@rule_group.command("init-standard")
@click.argument("company", metavar="COMPANY")
@click.pass_context
def init_standard_rules(ctx, company: str):
    """Add the built-in keyword rules (bank fees, salaries, rent, ...)."""
    company_id = resolve_company_or_exit(ctx, company)
    store = RuleStore(ctx.obj["db"])
    try:
        created = store.create_standard_rules(company_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created {created} standard rules.")


def register_commands(cli):
    """Register rule commands with main CLI."""
    cli.add_command(rule_group, name="rule")
