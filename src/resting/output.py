"""Terminal output for the ``resting`` command line.

Response data and diagnostics never share a stream:

* **stdout** carries the response body, its ``describe()`` summary, or the
  transformed entities, so the output of ``resting request`` can be piped.
* **stderr** carries the status line, request traces, warnings and errors.

Data is rendered in one of three formats. ``JSON`` re-indents JSON bodies
and prints entities as one JSON array; ``PLAIN`` prints bodies verbatim and
entities as JSON Lines; ``RICH`` highlights JSON and XML. ``AUTO`` picks
``RICH`` on an interactive terminal with colour enabled and ``PLAIN``
otherwise. ``NO_COLOR`` and ``TERM=dumb`` disable colour.

Library code reports diagnostics through the module-level helpers
(:func:`debug`, :func:`warning`, ...), which delegate to a global
:class:`OutputManager`. The CLI installs a configured manager at startup;
library callers get a quiet default that only shows warnings and errors.
"""

from __future__ import annotations

import json
import os
import sys
from enum import Enum
from typing import Any, Optional, Sequence

from pydantic_core import to_jsonable_python
from rich.console import Console
from rich.syntax import Syntax


class OutputFormat(str, Enum):
    """How response data is written to stdout."""

    AUTO = "auto"
    JSON = "json"
    PLAIN = "plain"
    RICH = "rich"


def _syntax_for(content_type: str) -> Optional[str]:
    lowered = content_type.lower()
    if "json" in lowered:
        return "json"
    if "xml" in lowered:
        return "xml"
    return None


def _entities_to_json(entities: Sequence[Any]) -> list[Any]:
    # Entities may be pydantic models or dataclasses as well as plain values.
    return to_jsonable_python(list(entities), fallback=str)


class OutputManager:
    """Writes response data to stdout and diagnostics to stderr.

    Args:
        format: Data format; ``AUTO`` resolves from TTY detection.
        no_color: Disable colour and Rich markup.
        quiet: Suppress :meth:`info` messages.
        verbose: Show :meth:`debug` messages.
    """

    def __init__(
        self,
        format: OutputFormat = OutputFormat.AUTO,
        no_color: bool = False,
        quiet: bool = False,
        verbose: bool = False,
    ) -> None:
        self._no_color = no_color or _should_disable_color()
        self._quiet = quiet
        self._verbose = verbose

        if format == OutputFormat.AUTO:
            rich_ok = _is_tty() and not self._no_color
            self._format = OutputFormat.RICH if rich_ok else OutputFormat.PLAIN
        else:
            self._format = format

        self._stdout = Console(
            file=sys.stdout,
            no_color=self._no_color,
            force_terminal=(self._format == OutputFormat.RICH),
        )
        self._stderr = Console(file=sys.stderr, no_color=self._no_color, stderr=True)

    @property
    def format(self) -> OutputFormat:
        return self._format

    @property
    def is_quiet(self) -> bool:
        return self._quiet

    @property
    def is_verbose(self) -> bool:
        return self._verbose

    # ------------------------------------------------------------------ #
    # Response data (stdout)
    # ------------------------------------------------------------------ #

    def print_body(self, text: str, content_type: str = "") -> None:
        """Print a response body.

        Args:
            text: The decoded body.
            content_type: The response ``Content-Type``; selects highlighting
                in ``RICH`` mode.
        """
        if self._format == OutputFormat.JSON:
            try:
                document = json.loads(text)
            except ValueError:
                self.print_data(text)
            else:
                self.print_data(json.dumps(document, indent=2, ensure_ascii=False))
        elif self._format == OutputFormat.RICH:
            lexer = _syntax_for(content_type)
            if lexer is None:
                self._stdout.print(text, markup=False, highlight=False)
            else:
                self._stdout.print(Syntax(text, lexer, theme="monokai", word_wrap=True))
        else:
            self.print_data(text)

    def print_entities(self, entities: Sequence[Any]) -> None:
        """Print transformed entities: a JSON array, or one JSON line per entity."""
        values = _entities_to_json(entities)
        if self._format == OutputFormat.PLAIN:
            for value in values:
                self.print_data(json.dumps(value, ensure_ascii=False))
            return
        rendered = json.dumps(values, indent=2, ensure_ascii=False)
        if self._format == OutputFormat.RICH:
            self._stdout.print(Syntax(rendered, "json", theme="monokai", word_wrap=True))
        else:
            self.print_data(rendered)

    def print_data(self, text: str) -> None:
        print(text, file=sys.stdout, flush=True)

    # ------------------------------------------------------------------ #
    # Diagnostics (stderr)
    # ------------------------------------------------------------------ #

    def info(self, message: str) -> None:
        """Status message such as ``HTTP 200``. Suppressed by ``--quiet``."""
        if not self._quiet:
            self._diagnostic(message, message)

    def warning(self, message: str) -> None:
        self._diagnostic(f"Warning: {message}", f"[yellow]Warning:[/yellow] {message}")

    def error(self, message: str) -> None:
        self._diagnostic(f"Error: {message}", f"[bold red]Error:[/bold red] {message}")

    def debug(self, message: str) -> None:
        """Request trace line, shown only with ``--verbose``."""
        if self._verbose:
            self._diagnostic(f"[debug] {message}", f"[dim]\\[debug] {message}[/dim]")

    def _diagnostic(self, plain: str, markup: str) -> None:
        if self._no_color:
            print(plain, file=sys.stderr, flush=True)
        else:
            self._stderr.print(markup, highlight=False)


def _is_tty() -> bool:
    return hasattr(sys.stdout, "isatty") and sys.stdout.isatty()


def _should_disable_color() -> bool:
    """True when NO_COLOR is set (any value) or TERM=dumb."""
    if os.environ.get("NO_COLOR") is not None:
        return True
    return os.environ.get("TERM") == "dumb"


_output: Optional[OutputManager] = None


def get_output() -> OutputManager:
    """Return the global :class:`OutputManager`, creating a quiet default lazily."""
    global _output
    if _output is None:
        _output = OutputManager(quiet=True)
    return _output


def set_output(output: OutputManager) -> None:
    global _output
    _output = output


def reset_output() -> None:
    global _output
    _output = None


def print_body(text: str, content_type: str = "") -> None:
    get_output().print_body(text, content_type)


def print_entities(entities: Sequence[Any]) -> None:
    get_output().print_entities(entities)


def print_data(text: str) -> None:
    get_output().print_data(text)


def info(message: str) -> None:
    get_output().info(message)


def warning(message: str) -> None:
    get_output().warning(message)


def error(message: str) -> None:
    get_output().error(message)


def debug(message: str) -> None:
    get_output().debug(message)
