"""Hooksig CLI - Command line interface."""

from __future__ import annotations

import json
import logging
import sys

import click
import structlog
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from hooksig.config import HooksigConfig, flatten_config, load_config_from_file
from hooksig.errors import SignatureError
from hooksig.registry import get_default_registry
from hooksig.verifier import WebhookSigner, WebhookVerifier

console = Console()

LOG_LEVELS = ["debug", "info", "warning", "error"]


def _configure_logging(log_level: str) -> None:
    # Logs go to stderr so that `hooksig sign` output can be piped
    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, log_level.upper())
        ),
        logger_factory=structlog.PrintLoggerFactory(sys.stderr),
    )


@click.group()
@click.option(
    "--config", "-c",
    "config_file",
    type=click.Path(exists=True),
    help="Path to YAML or TOML config file",
)
@click.option(
    "--log-level",
    "-l",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default=None,
    help="Log level (default: warning)",
)
@click.pass_context
def main(ctx: click.Context, config_file: str | None, log_level: str | None):
    """Hooksig - Versioned webhook signatures.

    Examples:

        hooksig sign -s whsec_current body.json

        hooksig verify -s whsec_current -H "t=1492774577000,v1=5257a8..." body.json

        cat body.json | hooksig sign -s whsec_new -s whsec_old
    """
    file_config: dict = {}
    if config_file:
        try:
            file_config = flatten_config(load_config_from_file(config_file))
        except (FileNotFoundError, ValueError) as e:
            console.print(f"[red]Failed to load config: {e}[/red]")
            sys.exit(1)

    try:
        config = HooksigConfig(**file_config)
    except ValidationError as e:
        console.print(f"[red]Invalid configuration: {e}[/red]")
        sys.exit(1)

    _configure_logging(log_level or config.log_level)

    ctx.ensure_object(dict)
    ctx.obj["config"] = config


@main.command()
@click.argument("payload", type=click.File("rb"), default="-")
@click.option(
    "--secret", "-s",
    "secrets",
    multiple=True,
    required=True,
    envvar="HOOKSIG_SECRET",
    help="Signing secret (repeat for several secrets)",
)
@click.option("--timestamp", "-t", type=int, default=None, help="Timestamp in ms (default: now)")
@click.option(
    "--scheme",
    "versions",
    type=int,
    multiple=True,
    help="Scheme version to sign with (default: all registered)",
)
@click.option(
    "--with-name",
    is_flag=True,
    default=False,
    help="Prefix the output with the configured header name",
)
@click.pass_context
def sign(
    ctx: click.Context,
    payload,
    secrets: tuple[str, ...],
    timestamp: int | None,
    versions: tuple[int, ...],
    with_name: bool,
):
    """Sign a payload and print the signature header value.

    PAYLOAD is a file path, or - to read from stdin.
    """
    registry = get_default_registry()
    schemes = None
    if versions:
        schemes = []
        for version in versions:
            scheme = registry.find(version)
            if scheme is None:
                raise click.BadParameter(f"Unknown scheme version: {version}", param_hint="--scheme")
            schemes.append(scheme)

    signer = WebhookSigner(secrets=list(secrets), schemes=schemes, registry=registry)
    try:
        header = signer.sign(payload.read(), timestamp=timestamp)
    except SignatureError as e:
        raise click.BadParameter(str(e), param_hint="--timestamp") from e

    if with_name:
        config: HooksigConfig = ctx.obj["config"]
        header = f"{config.header_name}: {header}"
    click.echo(header)


@main.command()
@click.argument("payload", type=click.File("rb"), default="-")
@click.option("--secret", "-s", required=True, envvar="HOOKSIG_SECRET", help="Shared secret")
@click.option(
    "--header",
    "-H",
    "header_value",
    required=True,
    help="Value of the signature header (see header_name in config)",
)
@click.option("--tolerance", type=int, default=None, help="Maximum signature age in seconds")
@click.option("--ignore-tolerance", is_flag=True, default=False, help="Accept signatures of any age")
@click.option(
    "--untrusted",
    type=int,
    multiple=True,
    help="Scheme version to reject (repeatable)",
)
@click.option("--json", "json_output", is_flag=True, help="Output as JSON")
@click.pass_context
def verify(
    ctx: click.Context,
    payload,
    secret: str,
    header_value: str,
    tolerance: int | None,
    ignore_tolerance: bool,
    untrusted: tuple[int, ...],
    json_output: bool,
):
    """Verify a payload against a signature header value.

    Exits with status 1 if verification fails.
    """
    config: HooksigConfig = ctx.obj["config"]

    overrides: dict = {}
    if tolerance is not None:
        overrides["tolerance"] = tolerance
    if ignore_tolerance:
        overrides["ignore_tolerance"] = True
    if untrusted:
        overrides["untrusted_schemes"] = [*config.untrusted_schemes, *untrusted]
    config = config.model_copy(update=overrides)

    verifier = WebhookVerifier.from_config(secret, config=config)
    result = verifier.check(header_value, payload.read())

    if json_output:
        console.print_json(
            json.dumps(
                {
                    "header": config.header_name,
                    "valid": result.valid,
                    "status": result.status.value,
                    "error": result.error,
                    "timestamp": result.timestamp,
                }
            )
        )
    elif result.valid:
        console.print("[green]Signature valid[/green]")
    else:
        console.print(f"[red]Signature invalid:[/red] {result.error} ({result.status.value})")

    if not result.valid:
        sys.exit(1)


@main.command()
def schemes():
    """List registered signature schemes."""
    table = Table(title="Signature Schemes")
    table.add_column("Version", justify="right", style="cyan")
    table.add_column("Scheme")

    for scheme in get_default_registry():
        table.add_row(f"v{scheme.version}", repr(scheme))

    console.print(table)


@main.command()
def version():
    """Show version information."""
    from hooksig import __version__

    console.print(f"[bold]Version:[/bold] {__version__}")
    console.print(f"[bold]Python:[/bold] {sys.version}")


if __name__ == "__main__":
    main()
