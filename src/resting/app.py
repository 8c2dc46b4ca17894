"""Typer application and CLI entry point for resting.

``resting request URL`` invokes one endpoint and prints the response body,
its :meth:`~resting.component.response.ServiceResponse.describe` summary,
or the entities transformed from it. Settings not given on the command line
come from :func:`~resting.config.load_config`.

The :func:`main` function is the console-script entry point declared in
``pyproject.toml``. :class:`~resting.exceptions.RestingError` instances end
the process with the error's ``exit_code``.
"""

from __future__ import annotations

import signal
import sys
from pathlib import Path
from typing import Any, Optional

import typer

from resting import __version__, helper
from resting.exit_codes import EXIT_GENERIC_FAILURE


app = typer.Typer(
    name="resting",
    help="Invoke REST endpoints and transform JSON/XML responses.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"resting {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    json_output: bool = typer.Option(False, "--json", help="JSON output format."),
    plain_output: bool = typer.Option(False, "--plain", help="Plain text output."),
    no_color: bool = typer.Option(False, "--no-color", help="Disable color output."),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Suppress non-essential output."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug output."),
) -> None:
    """Root callback: installs the global :class:`~resting.output.OutputManager`."""
    from resting.output import OutputFormat, OutputManager, set_output

    fmt = OutputFormat.AUTO
    if json_output:
        fmt = OutputFormat.JSON
    elif plain_output:
        fmt = OutputFormat.PLAIN

    set_output(OutputManager(format=fmt, no_color=no_color, quiet=quiet, verbose=verbose))


def _parse_params(raw_params: Optional[list[str]]) -> Optional[list[tuple[str, str]]]:
    from resting.exceptions import ConfigurationError

    if not raw_params:
        return None
    pairs = []
    for raw in raw_params:
        key, sep, value = raw.partition("=")
        if not sep or not key:
            raise ConfigurationError(f"Invalid parameter '{raw}', expected key=value")
        pairs.append((key, value))
    return pairs


@app.command("request")
def request_command(
    url: str = typer.Argument(..., help="Absolute http(s) URL of the endpoint."),
    verb: Optional[str] = typer.Option(None, "--verb", "-X", help="GET, POST, PUT or DELETE."),
    port: Optional[int] = typer.Option(None, "--port", "-p", help="Port of the endpoint."),
    param: Optional[list[str]] = typer.Option(
        None, "--param", "-d", help="Request parameter as key=value (repeatable)."
    ),
    header: Optional[list[str]] = typer.Option(
        None, "--header", "-H", help="Request header as 'Name: value' (repeatable)."
    ),
    body: Optional[str] = typer.Option(None, "--body", help="Raw message body (POST/PUT)."),
    file: Optional[Path] = typer.Option(None, "--file", help="File sent as the body (POST/PUT)."),
    binary: bool = typer.Option(False, "--binary", help="Send --file as application/octet-stream."),
    encoding: Optional[str] = typer.Option(None, "--encoding", help="Payload and response encoding."),
    xml: bool = typer.Option(False, "--xml", help="Treat the response as XML."),
    connect_timeout: Optional[float] = typer.Option(
        None, "--connect-timeout", help="Connect timeout in seconds."
    ),
    socket_timeout: Optional[float] = typer.Option(
        None, "--socket-timeout", help="Read/write timeout in seconds."
    ),
    describe: bool = typer.Option(False, "--describe", help="Print status, headers and body."),
    entities: bool = typer.Option(False, "--entities", help="Print the transformed entities."),
) -> None:
    """Invoke URL once and print the response."""
    from resting.config import load_config
    from resting.models import Header
    from resting.output import info, print_body, print_data, print_entities, warning
    from resting.transform import get_transformer

    config = load_config(
        port=port,
        verb=verb,
        encoding=encoding,
        transformation_type="xml" if xml else None,
        connection_timeout=connect_timeout,
        socket_timeout=socket_timeout,
    )
    headers = list(config.headers) + [Header.parse(raw) for raw in header or []]

    response = helper.execute(
        config.verb,
        url,
        config.port,
        params=_parse_params(param),
        message=body,
        file=file,
        binary=binary,
        encoding=config.encoding,
        headers=headers,
        timeouts=config.timeouts,
    )
    info(f"HTTP {response.status_code}")

    if describe:
        print_data(response.describe())
    elif entities:
        transformer = get_transformer(config.transformation_type)
        print_entities(transformer.create_entity_list(response, Any))
    else:
        print_body(response.body_text(), response.content_type or "")

    if not response.is_success:
        warning(f"Endpoint answered with HTTP {response.status_code}")
        raise typer.Exit(code=EXIT_GENERIC_FAILURE)


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)

    signal.signal(signal.SIGINT, _handler)


def main() -> None:
    """CLI entry point invoked by the ``resting`` console script.

    Raises:
        SystemExit: Always raised (either by Typer or explicitly).
    """
    _setup_signal_handlers()
    try:
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)
    except Exception as exc:
        from resting.exceptions import RestingError
        from resting.output import error

        if isinstance(exc, RestingError):
            error(str(exc))
            sys.exit(exc.exit_code)
        error(f"Unexpected error: {exc}")
        sys.exit(EXIT_GENERIC_FAILURE)
