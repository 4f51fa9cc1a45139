"""Console diagnostics gated by PackOptions, mirrored to logging."""

from __future__ import annotations

import logging
import sys
from typing import TextIO

from .models import PackOptions
from .presenters import render_error, render_warning


class Diagnostics:
    def __init__(
        self,
        options: PackOptions,
        *,
        logger: logging.Logger,
        out: TextIO | None = None,
        err: TextIO | None = None,
    ) -> None:
        self.options = options
        self._logger = logger
        self._out = out if out is not None else sys.stdout
        self._err = err if err is not None else sys.stderr

    def info(self, message: str) -> None:
        self._logger.info(message)
        if self.options.print_info:
            print(message, file=self._out)

    def error(self, message: str) -> None:
        self._logger.warning(message)
        if self.options.print_errors:
            print(render_error(message), file=self._err)

    def warning(self, message: str) -> None:
        self._logger.warning(message)
        if self.options.print_errors:
            print(render_warning(message), file=self._err)

    def trace(self, message: str, *, end: str = "\n") -> None:
        self._logger.debug(message.strip())
        if self.options.verbose:
            print(message, end=end, flush=True, file=self._out)

    def with_logger(self, logger: logging.Logger) -> Diagnostics:
        return Diagnostics(self.options, logger=logger, out=self._out, err=self._err)
