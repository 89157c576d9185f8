"""
Flask CLI commands for schema setup, seeding, dumps and running reference queries.
Registered on the app by create_app(); run with `flask --app coursedb <command>`.
"""
from typing import Dict, Tuple

import click
from flask import Flask
from flask.cli import with_appcontext

from .database import db
from .database.dump import dump_json, load_json
from .models import queries
from .models.models import load_seed, row_counts
from .utils.exceptions import CourseDBError
from .utils.helpers import dumps
from .utils.logging import get_logger

log = get_logger(__name__)


class CommandError(click.ClickException):
    """ClickException carrying the exit code of the CourseDBError it wraps."""

    def __init__(self, error: CourseDBError) -> None:
        super().__init__(error.message)
        self.exit_code = error.exit_code
        self.payload = error.payload


def _report(counts: Dict[str, int]) -> None:
    for table_name, count in counts.items():
        click.echo(f"{table_name:<20} {count}")


def _parse_params(pairs: Tuple[str, ...]) -> Dict[str, str]:
    params = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise click.BadParameter(f"expected key=value, got {pair!r}", param_hint="-p")
        params[key.strip()] = value
    return params


@click.command("init-db")
@with_appcontext
def init_db_command() -> None:
    """Create every table, index and foreign key that is missing."""
    try:
        db.sync_schema()
    except CourseDBError as e:
        raise CommandError(e) from e
    click.echo("Schema is up to date.")


@click.command("drop-db")
@with_appcontext
@click.option("--yes", is_flag=True, help="Do not ask for confirmation.")
def drop_db_command(yes: bool) -> None:
    """Drop all tables, children first."""
    if not yes:
        click.confirm("Drop every coursedb table?", abort=True)
    db.drop_schema()
    click.echo("All tables dropped.")


@click.command("seed-db")
@with_appcontext
def seed_db_command() -> None:
    """Load the sample dataset into an empty schema."""
    try:
        counts = load_seed()
    except CourseDBError as e:
        raise CommandError(e) from e
    _report(counts)


@click.command("reset-db")
@with_appcontext
@click.option("--yes", is_flag=True, help="Do not ask for confirmation.")
@click.option("--no-seed", is_flag=True, help="Recreate the schema but leave it empty.")
def reset_db_command(yes: bool, no_seed: bool) -> None:
    """Drop, recreate and (by default) reseed the database."""
    if not yes:
        click.confirm("This deletes all data. Continue?", abort=True)
    try:
        db.drop_schema()
        db.sync_schema()
        if no_seed:
            click.echo("Schema recreated.")
            return
        _report(load_seed())
    except CourseDBError as e:
        raise CommandError(e) from e


@click.command("export-db")
@with_appcontext
@click.argument("path", type=click.Path(dir_okay=False, writable=True))
def export_db_command(path: str) -> None:
    """Write every row of every table to a JSON dump."""
    written = dump_json(db, path)
    click.echo(f"Exported to {written}")


@click.command("import-db")
@with_appcontext
@click.argument("path", type=click.Path(exists=True, dir_okay=False))
def import_db_command(path: str) -> None:
    """Reload a JSON dump into an empty schema."""
    try:
        counts = load_json(db, path)
    except CourseDBError as e:
        raise CommandError(e) from e
    _report(counts)


@click.command("query")
@with_appcontext
@click.argument("name", required=False)
@click.option("-p", "--param", "params", multiple=True, metavar="KEY=VALUE",
              help="Query parameter, repeatable.")
@click.option("--list", "list_queries", is_flag=True, help="List the available queries.")
def query_command(name: str | None, params: Tuple[str, ...], list_queries: bool) -> None:
    """Run a named reference query and print the result as JSON."""
    if list_queries or not name:
        for query_name in sorted(queries.QUERIES):
            click.echo(query_name)
        return
    try:
        result = queries.run_query(name, **_parse_params(params))
    except CourseDBError as e:
        raise CommandError(e) from e
    except TypeError as e:
        # unexpected keyword for the chosen query
        raise click.UsageError(str(e)) from e
    click.echo(dumps(result))


@click.command("stats")
@with_appcontext
def stats_command() -> None:
    """Row count per table."""
    _report(row_counts())


def register_commands(app: Flask) -> None:
    for command in (
        init_db_command,
        drop_db_command,
        seed_db_command,
        reset_db_command,
        export_db_command,
        import_db_command,
        query_command,
        stats_command,
    ):
        app.cli.add_command(command)
    log.debug("CLI commands registered")
