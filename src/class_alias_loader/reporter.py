"""User-visible output for the alias-loader pipeline.

The pipeline never prints directly.  It talks to a ``Reporter``, which
the CLI backs with Rich consoles and the library API backs with an
in-memory buffer.  Every message is also mirrored to the standard
``logging`` module so embedding applications can capture it.
"""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum, auto

from rich.console import Console

logger = logging.getLogger(__name__)


class MessageLevel(Enum):
    """Severity of a reported message."""

    INFO = auto()
    WARNING = auto()


class Reporter(ABC):
    """Sink for informational and warning messages."""

    def write(self, message: str) -> None:
        """Report an informational message."""
        logger.info(message)
        self._emit(MessageLevel.INFO, message)

    def write_error(self, message: str) -> None:
        """Report a warning.  Never aborts the run."""
        logger.warning(message)
        self._emit(MessageLevel.WARNING, message)

    @abstractmethod
    def _emit(self, level: MessageLevel, message: str) -> None:
        ...


class ConsoleReporter(Reporter):
    """Render messages on the terminal; warnings go to stderr.

    Parameters
    ----------
    console:
        Console for informational messages.
    err_console:
        Console for warnings.
    """

    def __init__(self, console: Console | None = None, err_console: Console | None = None) -> None:
        self._console = console or Console()
        self._err_console = err_console or Console(stderr=True)

    def _emit(self, level: MessageLevel, message: str) -> None:
        if level is MessageLevel.WARNING:
            self._err_console.print(message, style="yellow", markup=False, highlight=False)
        else:
            self._console.print(message, style="green", markup=False, highlight=False)


@dataclass
class BufferedReporter(Reporter):
    """Collect messages in memory instead of printing them."""

    messages: list[tuple[MessageLevel, str]] = field(default_factory=list)

    def _emit(self, level: MessageLevel, message: str) -> None:
        self.messages.append((level, message))

    @property
    def infos(self) -> list[str]:
        return [m for level, m in self.messages if level is MessageLevel.INFO]

    @property
    def warnings(self) -> list[str]:
        return [m for level, m in self.messages if level is MessageLevel.WARNING]
