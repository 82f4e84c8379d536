"""Bank transaction commands."""

import click
from ledgerpost.cli.error_handling import handle_domain_error, resolve_company_or_exit
from ledgerpost.domain.errors import DomainError
from ledgerpost.domain.transaction import BankTransactionService
from ledgerpost.utils.amount_parser import parse_amount, parse_positive_amount
from ledgerpost.utils.date_parser import parse_date


@click.group()
def txn_group():
    """Record and classify bank transactions."""
    pass


@txn_group.command("add")
@click.argument("company", metavar="COMPANY")
@click.option("--date", "date_str", required=True, help="Statement date (YYYY-MM-DD, DD/MM/YYYY, 'today', ...)")
@click.option("--details", required=True, help="Statement description")
@click.option("--debit", help="Money out")
@click.option("--credit", help="Money in")
@click.option("--reference", help="Bank reference number")
@click.option("--balance", help="Running balance after the line")
@click.option("--period", "fiscal_period_id", type=int, help="Fiscal period ID")
@click.pass_context
def add_transaction(
    ctx,
    company: str,
    date_str: str,
    details: str,
    debit: str | None,
    credit: str | None,
    reference: str | None,
    balance: str | None,
    fiscal_period_id: int | None,
):
    """Record one bank statement line.

    Exactly one of --debit or --credit must be given.

    Examples:
        ledgerpost txn add "Acme Trading" --date 2024-03-15 --details "DOTSURE PREMIUM" --debit 450.00
        ledgerpost txn add 1 --date 15/03/2024 --details "DEPOSIT INV 1001" --credit "R 1 200,00"
    """
    if (debit is None) == (credit is None):
        click.echo("Error: Specify exactly one of --debit or --credit", err=True)
        ctx.exit(1)

    company_id = resolve_company_or_exit(ctx, company)

    try:
        transaction_date = parse_date(date_str)
    except ValueError as e:
        click.echo(f"Error: Invalid date: {e}", err=True)
        ctx.exit(1)

    try:
        debit_amount = parse_positive_amount(debit) if debit is not None else None
        credit_amount = parse_positive_amount(credit) if credit is not None else None
        balance_amount = parse_amount(balance) if balance is not None else None
    except ValueError as e:
        click.echo(f"Error: Invalid amount: {e}", err=True)
        ctx.exit(1)

    service = BankTransactionService(ctx.obj["db"])
    try:
        txn_id = service.record_transaction(
            company_id=company_id,
            transaction_date=transaction_date,
            details=details,
            debit_amount=debit_amount,
            credit_amount=credit_amount,
            balance=balance_amount,
            reference=reference,
            fiscal_period_id=fiscal_period_id,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Recorded transaction {txn_id}")


@txn_group.command("unclassified")
@click.argument("company", metavar="COMPANY")
@click.pass_context
def list_unclassified(ctx, company: str):
    """List transactions that have not been posted yet."""
    company_id = resolve_company_or_exit(ctx, company)
    service = BankTransactionService(ctx.obj["db"])

    transactions = service.get_unclassified_transactions(company_id)
    if not transactions:
        click.echo("No unposted transactions.")
        return

    click.echo(f"\n{'ID':>5} {'Date':<10} {'Debit':>12} {'Credit':>12} Details")
    click.echo("-" * 80)
    for t in transactions:
        debit = f"{t.debit_amount:,.2f}" if t.debit_amount else ""
        credit = f"{t.credit_amount:,.2f}" if t.credit_amount else ""
        suffix = f" [{t.account_code}]" if t.account_code else ""
        click.echo(f"{t.id:>5} {t.transaction_date!s:<10} {debit:>12} {credit:>12} {t.details}{suffix}")


@txn_group.command("classify")
@click.argument("transaction_id", type=int, metavar="TRANSACTION_ID")
@click.argument("account_code", metavar="ACCOUNT_CODE")
@click.pass_context
def classify_transaction(ctx, transaction_id: int, account_code: str):
    """Assign an account to a transaction by hand.

    The next 'ledgerpost process' run posts it to that account.
    """
    service = BankTransactionService(ctx.obj["db"])
    try:
        txn = service.classify_manually(transaction_id, account_code)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Transaction {txn.id} classified to {txn.account_code} {txn.account_name}")


def register_commands(cli):
    """Register bank transaction commands with main CLI."""
    cli.add_command(txn_group, name="txn")
