from __future__ import annotations

import logging
from collections.abc import Iterator

import pytest


@pytest.fixture(autouse=True)
def _restore_logging() -> Iterator[None]:
    root = logging.getLogger()
    handlers_before = list(root.handlers)
    yield
    logging.disable(logging.NOTSET)
    for handler in list(root.handlers):
        if isinstance(handler, logging.FileHandler) and handler not in handlers_before:
            root.removeHandler(handler)
            handler.close()
