"""``python -m sfclient`` entry point."""

from __future__ import annotations

import sys
from typing import Optional, Sequence

from .cli import cli


def main(argv: Optional[Sequence[str]] = None) -> None:
    # Record JSON may carry characters the console encoding cannot show.
    if hasattr(sys.stdout, "reconfigure"):
        sys.stdout.reconfigure(errors="backslashreplace")
    cli.main(args=list(argv) if argv is not None else None, prog_name="sfclient")


if __name__ == "__main__":
    main()
