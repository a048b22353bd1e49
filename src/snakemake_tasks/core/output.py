"""Named output channel for user-facing diagnostics."""

import logging

from rich.console import Console
from rich.rule import Rule

logger = logging.getLogger(__name__)


class OutputChannel:
    """
    Append-only log sink that is rendered when revealed.

    Lines accumulate in ``lines``; ``show`` prints every line appended since
    the previous ``show`` to the console under a rule titled with the
    channel name.
    """

    def __init__(self, name: str, console: Console | None = None):
        """Initialize channel with optional console (stderr by default)."""
        self.name = name
        self.console = console or Console(stderr=True)
        self.lines: list[str] = []
        self.visible = False
        self._shown = 0

    def append_line(self, text: str) -> None:
        """Append text followed by a line break."""
        self.lines.append(text)
        logger.debug(f"[{self.name}] {text}")

    def show(self, preserve_focus: bool = True) -> None:
        """
        Reveal the channel.

        Args:
            preserve_focus: Keep the user's focus where it is. A console has
                no focus to steal, so this only matters to richer hosts.
        """
        self.visible = True
        pending = self.lines[self._shown:]
        if not pending:
            return

        self.console.print(Rule(self.name, style="yellow"))
        for line in pending:
            self.console.print(line, markup=False, highlight=False)
        self._shown = len(self.lines)
