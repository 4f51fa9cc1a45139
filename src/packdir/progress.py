"""Progress reporting for the archive phase."""

from __future__ import annotations

import sys
from typing import Protocol, TextIO


class ProgressReporter(Protocol):
    def start(self, total: int) -> None: ...

    def advance(self) -> None: ...

    def finish(self) -> None: ...


class NullProgressReporter:
    def start(self, total: int) -> None:
        pass

    def advance(self) -> None:
        pass

    def finish(self) -> None:
        pass


class ConsoleProgressReporter:
    """Renders archive progress in-place on the terminal."""

    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream = stream if stream is not None else sys.stdout
        self._total = 0
        self._done = 0
        self._line_open = False

    def start(self, total: int) -> None:
        self._total = total
        self._done = 0
        self._render()

    def advance(self) -> None:
        self._done += 1
        self._render()

    def finish(self) -> None:
        if self._line_open:
            print(file=self._stream)
            self._line_open = False

    def _render(self) -> None:
        line = f"Archived: {self._done:,} / {self._total:,} entries"
        print(f"\r{line}", end="", flush=True, file=self._stream)
        self._line_open = True
