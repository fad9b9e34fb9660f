"""Console output abstraction.

Services and the CLI print through ``ConsoleProtocol`` so that tests can
capture output with ``MockConsole``.

Results go to stdout. Diagnostics (errors, warnings and the hints under
them) go to stderr, so ``gitup --json`` stdout is exactly one JSON object.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Protocol

__all__ = [
    "ConsoleProtocol",
    "MockConsole",
    "OutputRecord",
    "RichConsole",
    "Stream",
    "Style",
]


class Style(Enum):
    """Text styles for console output."""

    DEFAULT = auto()
    SUCCESS = auto()
    ERROR = auto()
    WARNING = auto()
    INFO = auto()
    DIM = auto()

    def __str__(self) -> str:
        return self.name.lower()


class Stream(Enum):
    STDOUT = auto()
    STDERR = auto()


class ConsoleProtocol(Protocol):
    """Protocol for console output."""

    def print(self, message: str, style: Style = Style.DEFAULT) -> None:
        """Print a plain result line on stdout."""
        ...

    def success(self, message: str) -> None: ...

    def info(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...

    def warning(self, message: str) -> None: ...

    def hint(self, message: str) -> None:
        """Print a dim detail line under an error or warning (stderr)."""
        ...

    def json(self, payload: Mapping[str, object]) -> None:
        """Print ``payload`` as one JSON object on stdout, unstyled."""
        ...


_RICH_STYLES: dict[Style, str] = {
    Style.DEFAULT: "",
    Style.SUCCESS: "green",
    Style.ERROR: "red bold",
    Style.WARNING: "yellow",
    Style.INFO: "cyan",
    Style.DIM: "dim",
}

_PREFIXES: dict[Style, str] = {
    Style.SUCCESS: "OK",
    Style.ERROR: "error:",
    Style.WARNING: "warning:",
    Style.INFO: "info:",
}


class RichConsole:
    """Console implementation using Rich."""

    def __init__(self) -> None:
        # Import Rich lazily to keep `--version` fast
        from rich.console import Console

        self._consoles = {
            Stream.STDOUT: Console(),
            Stream.STDERR: Console(stderr=True),
        }

    def print(self, message: str, style: Style = Style.DEFAULT) -> None:
        self._emit(Stream.STDOUT, message, style)

    def success(self, message: str) -> None:
        self._emit_labelled(Stream.STDOUT, message, Style.SUCCESS)

    def info(self, message: str) -> None:
        self._emit_labelled(Stream.STDOUT, message, Style.INFO)

    def error(self, message: str) -> None:
        self._emit_labelled(Stream.STDERR, message, Style.ERROR)

    def warning(self, message: str) -> None:
        self._emit_labelled(Stream.STDERR, message, Style.WARNING)

    def hint(self, message: str) -> None:
        self._emit(Stream.STDERR, message, Style.DIM)

    def json(self, payload: Mapping[str, object]) -> None:
        # Plain write: no markup, no highlighting, no wrapping.
        self._consoles[Stream.STDOUT].out(
            json.dumps(dict(payload), ensure_ascii=False), highlight=False
        )

    def _emit(self, stream: Stream, message: str, style: Style) -> None:
        # User values may contain square brackets; never interpret them as
        # markup. Long lines are left for the terminal to wrap.
        self._consoles[stream].print(
            message,
            style=_RICH_STYLES[style] or None,
            markup=False,
            highlight=False,
            soft_wrap=True,
        )

    def _emit_labelled(self, stream: Stream, message: str, style: Style) -> None:
        from rich.text import Text

        text = Text()
        text.append(_PREFIXES[style], style=_RICH_STYLES[style])
        text.append(" ")
        text.append(message)
        self._consoles[stream].print(text, highlight=False, soft_wrap=True)


@dataclass
class OutputRecord:
    """A single output record for MockConsole."""

    message: str
    style: Style
    stream: Stream = Stream.STDOUT


def _empty_outputs() -> list[OutputRecord]:
    """Factory for empty outputs list (helps type inference)."""
    return []


@dataclass
class MockConsole:
    """Console implementation that captures output for testing.

    Labelled lines are recorded with their label ("error: ...", "OK ..."),
    exactly as a user would read them.
    """

    outputs: list[OutputRecord] = field(default_factory=_empty_outputs)

    def print(self, message: str, style: Style = Style.DEFAULT) -> None:
        self.outputs.append(OutputRecord(message, style))

    def success(self, message: str) -> None:
        self._labelled(message, Style.SUCCESS, Stream.STDOUT)

    def info(self, message: str) -> None:
        self._labelled(message, Style.INFO, Stream.STDOUT)

    def error(self, message: str) -> None:
        self._labelled(message, Style.ERROR, Stream.STDERR)

    def warning(self, message: str) -> None:
        self._labelled(message, Style.WARNING, Stream.STDERR)

    def hint(self, message: str) -> None:
        self.outputs.append(OutputRecord(message, Style.DIM, Stream.STDERR))

    def json(self, payload: Mapping[str, object]) -> None:
        self.outputs.append(
            OutputRecord(json.dumps(dict(payload), ensure_ascii=False), Style.DEFAULT)
        )

    def _labelled(self, message: str, style: Style, stream: Stream) -> None:
        self.outputs.append(OutputRecord(f"{_PREFIXES[style]} {message}", style, stream))

    # Test helpers

    @property
    def messages(self) -> list[str]:
        return [o.message for o in self.outputs]

    @property
    def stdout(self) -> list[str]:
        return [o.message for o in self.outputs if o.stream is Stream.STDOUT]

    def has_error(self) -> bool:
        return any(o.style == Style.ERROR for o in self.outputs)

    def has_success(self) -> bool:
        return any(o.style == Style.SUCCESS for o in self.outputs)

    def find(self, substring: str) -> list[OutputRecord]:
        """Find all outputs containing a substring."""
        return [o for o in self.outputs if substring in o.message]
