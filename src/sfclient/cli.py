from __future__ import annotations

import json
import logging
from typing import Any, Dict, Optional

import click
import requests

from . import __version__
from .client import SalesforceClient
from .config import SFConfig, build_authentication_flow
from .env_loader import load_env_files
from .exceptions import SalesforceError
from .logging_config import configure_logging
from .transport import RequestsTransport

_logger = logging.getLogger(__name__)


def _connect() -> SalesforceClient:
    """Build a client from SF_* settings and authenticate it."""
    cfg = SFConfig.from_env()
    client = SalesforceClient(RequestsTransport(timeout=cfg.timeout))
    client.api_version = cfg.api_version
    client.authenticate(build_authentication_flow(cfg))
    return client


def _run(fn, *args):
    """Call fn, turning client and network errors into a CLI abort."""
    try:
        return fn(*args)
    except (SalesforceError, requests.RequestException) as e:
        _logger.debug("Command failed", exc_info=True)
        click.echo(f"❌  {e}", err=True)
        raise click.Abort() from None


def _parse_record(text: str) -> Dict[str, Any]:
    try:
        record = json.loads(text)
    except ValueError as e:
        raise click.BadParameter(f"not valid JSON: {e}") from None
    if not isinstance(record, dict):
        raise click.BadParameter("record must be a JSON object")
    return record


@click.group(
    context_settings={"help_option_names": ["-h", "--help"]},
    invoke_without_command=True,
)
@click.version_option(__version__, "--version", prog_name="sfclient")
@click.option(
    "-v",
    "--verbose",
    "loglevel",
    flag_value=logging.INFO,
    default=None,
    help="Enable INFO logs.",
)
@click.option(
    "-vv",
    "--very-verbose",
    "loglevel",
    flag_value=logging.DEBUG,
    help="Enable DEBUG logs.",
)
@click.pass_context
def cli(ctx: click.Context, loglevel: Optional[int]) -> None:
    """Salesforce REST client. Use subcommands like 'login' or 'query'."""
    configure_logging(loglevel)
    load_env_files(quiet=True)
    _logger.debug("CLI start, version=%s", __version__)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


@cli.command("login")
def cmd_login() -> None:
    """Authenticate with the configured flow and report the session."""
    client = _run(_connect)
    click.echo("✅  Authenticated.")
    click.echo(f"Instance URL: {client.instance_url}")
    click.echo(f"API Version:  {client.api_version}")


@cli.command("query")
@click.argument("soql")
@click.option("--pretty", is_flag=True, help="Pretty-print JSON.")
def cmd_query(soql: str, pretty: bool) -> None:
    """Run a SOQL query and print the records as JSON."""
    client = _run(_connect)
    records = _run(client.query, soql)
    click.echo(json.dumps(records, indent=2 if pretty else None))


@cli.command("get")
@click.argument("object_name")
@click.argument("record_id")
@click.option("--fields", "fields", default="Id", show_default=True, help="Comma separated fields to select.")
def cmd_get(object_name: str, record_id: str, fields: str) -> None:
    """Fetch one record by Id."""
    client = _run(_connect)
    names = [f.strip() for f in fields.split(",") if f.strip()]
    record = _run(lambda: client.find_by_id(object_name, record_id, dict, names))
    if record is None:
        click.echo(f"No {object_name} with Id {record_id}.", err=True)
        raise click.exceptions.Exit(1)
    click.echo(json.dumps(record, indent=2))


@cli.command("create")
@click.argument("object_name")
@click.argument("record_json")
def cmd_create(object_name: str, record_json: str) -> None:
    """Create a record from a JSON object and print its Id."""
    record = _parse_record(record_json)
    client = _run(_connect)
    click.echo(_run(client.create, object_name, record))


@cli.command("update")
@click.argument("object_name")
@click.argument("record_id")
@click.argument("record_json")
def cmd_update(object_name: str, record_id: str, record_json: str) -> None:
    """Update a record with the fields of a JSON object."""
    record = _parse_record(record_json)
    client = _run(_connect)
    updated = _run(client.update, object_name, record_id, record)
    click.echo("updated" if updated else "not updated")


@cli.command("delete")
@click.argument("object_name")
@click.argument("record_id")
def cmd_delete(object_name: str, record_id: str) -> None:
    """Delete a record."""
    client = _run(_connect)
    deleted = _run(client.delete, object_name, record_id)
    click.echo("deleted" if deleted else "not deleted")
