"""Main CLI entry point."""

import logging
import os

import click
from click.core import ParameterSource

from ledgerpost.config import load_settings
from ledgerpost.database.factories import create_database, create_sqlite_database
from ledgerpost.logging_config import setup_logging

# Import and register all commands at module level
from ledgerpost.cli.commands import (
    accounts,
    company,
    journal,
    process,
    rule,
    txn,
)


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to SQLite database file (overrides LEDGERPOST_DB_PATH environment variable)",
    envvar="LEDGERPOST_DB_PATH",
)
@click.option("--verbose", "-v", is_flag=True, help="Log engine activity to stderr.")
@click.pass_context
def cli(ctx, db_path: str | None, verbose: bool):
    """Ledgerpost - bank transaction classification and journal posting.

    Classifies bank statement lines against per-company rules and built-in
    heuristics, then posts each one exactly once as a balanced double-entry
    journal entry.
    """
    ctx.ensure_object(dict)
    try:
        settings = load_settings()
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)
    ctx.obj["settings"] = settings

    if verbose:
        setup_logging(logging.DEBUG)
    elif os.environ.get("LEDGERPOST_LOG_LEVEL"):
        setup_logging(settings.log_level)

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        if ctx.get_parameter_source("db_path") == ParameterSource.COMMANDLINE or not settings.database_url:
            db = create_sqlite_database(database_path=db_path)
        else:
            db = create_database(settings.database_url)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db
        ctx.call_on_close(db.disconnect)


# Register all commands
company.register_commands(cli)
accounts.register_commands(cli)
rule.register_commands(cli)
txn.register_commands(cli)
process.register_commands(cli)
journal.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
