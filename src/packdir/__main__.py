"""packdir executable module.

Invoked only via `python -m packdir`; the console script calls cli.main()
directly, so error handling lives there.
"""

from __future__ import annotations

import sys

from .cli import main


if __name__ == "__main__":
    sys.exit(main())
