"""Base pipeline logger with shared rich components.

Provides reusable building blocks for the archive logger:
- MessageBlock: context manager for per-message key-value output
- BasePipelineLogger: abstract base with the common logging methods
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any, Generator

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from starboard_archive.utils.logging import console

if TYPE_CHECKING:
    from typing import Self


class MessageBlock:
    """A context manager for displaying one message's processing steps.

    Usage:
        with logger.block("1234567890") as block:
            block.field("stars", 12, color="yellow")
            block.progress("downloading attachment 0...")
            block.result("archived 3 attachments")

    Output:
        1234567890
            stars: 12
            ✓ archived 3 attachments
    """

    def __init__(self, title: str, parent: "BasePipelineLogger") -> None:
        self.title = title
        self.console = parent.console
        self._parent = parent

    def __enter__(self) -> "Self":
        self._parent._clear_progress_line()
        self.console.print(f"\n[bold]{self.title}[/bold]")
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self._parent._clear_progress_line()

    def field(self, key: str, value: Any, color: str | None = None) -> None:
        """Add a key-value field to the block."""
        if color:
            self.console.print(f"    [dim]{key}:[/dim] [{color}]{value}[/{color}]")
        else:
            self.console.print(f"    [dim]{key}:[/dim] {value}")

    def progress(self, message: str) -> None:
        """Show an inline progress update (overwritten by the next line)."""
        print("\033[2K", end="")
        self.console.print(f"    [dim]{message}[/dim]", end="\r")
        self._parent._has_progress_line = True

    def result(self, message: str, success: bool = True) -> None:
        """Show the final result of the block."""
        self._parent._clear_progress_line()
        icon = "[green]✓[/green]" if success else "[red]✗[/red]"
        self.console.print(f"    {icon} {message}")


class BasePipelineLogger(ABC):
    """Abstract base class for pipeline loggers.

    Standard levels (info, warning, error, debug) go through Python logging;
    blocks, progress lines and summaries print straight to the shared console.
    Subclasses implement summary() and their pipeline-specific methods.
    """

    def __init__(self, logger_name: str | None = None) -> None:
        self.console: Console = console
        self._has_progress_line = False
        self._logger = logging.getLogger(logger_name or self.__class__.__module__)

    def _clear_progress_line(self) -> None:
        if self._has_progress_line:
            print("\033[2K", end="\r")
            self._has_progress_line = False

    @contextmanager
    def block(self, title: str) -> Generator[MessageBlock, None, None]:
        """Open a structured block titled ``title``."""
        block = MessageBlock(title, self)
        with block:
            yield block

    # -------------------------------------------------------------------------
    # Standard Logging (goes through Python logging)
    # -------------------------------------------------------------------------

    def info(self, message: str) -> None:
        self._logger.info(message)

    def warning(self, message: str) -> None:
        self._logger.warning(message)

    def error(self, message: str) -> None:
        self._logger.error(message)

    def debug(self, message: str) -> None:
        self._logger.debug(message)

    def exception(self, message: str) -> None:
        """Log an error with the active exception's traceback."""
        self._logger.exception(message)

    def success(self, message: str) -> None:
        """Print a success message with a green checkmark."""
        self.console.print(f"[green]✓[/green] {message}")

    # -------------------------------------------------------------------------
    # Common Rich Output
    # -------------------------------------------------------------------------

    def page_progress(
        self,
        count: int,
        *,
        newest_date: str | None = None,
        prefix: str = "Scanned",
        unit: str = "messages",
    ) -> None:
        """Log walk progress as an inline, overwritten line."""
        date_info = f" [→ {newest_date}]" if newest_date else ""
        print("\033[2K", end="")
        self.console.print(
            f"    [dim]{prefix} {count:,} {unit}{date_info}[/dim]",
            end="\r",
        )
        self._has_progress_line = True

    def print_summary(
        self,
        pipeline_name: str,
        *,
        elapsed: float,
        stats: dict[str, int | str],
        style: str = "cyan",
    ) -> None:
        """Print a summary panel with one row per stat plus elapsed time."""
        self._clear_progress_line()
        self.console.print()

        table = Table.grid(padding=(0, 2))
        table.add_column("Metric", style="bold")
        table.add_column("Value", justify="right", style="green")

        for label, value in stats.items():
            if isinstance(value, int):
                table.add_row(label, f"{value:,}")
            else:
                table.add_row(label, str(value))
        table.add_row("Time elapsed", f"{elapsed:.1f}s")

        panel = Panel(
            table,
            title=f"[bold]{pipeline_name} Complete[/bold]",
            border_style=style,
            padding=(1, 2),
        )
        self.console.print(panel)

    @abstractmethod
    def summary(self, **kwargs: Any) -> None:
        """Print final summary. Implementation varies by pipeline."""
        ...
