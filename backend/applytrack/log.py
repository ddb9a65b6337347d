from __future__ import annotations

import logging
import sys

from applytrack.config import settings

_FORMAT = "%(asctime)s  %(levelname)-8s  %(name)s  %(message)s"
_DATE_FMT = "%Y-%m-%d %H:%M:%S"


def configure_logging(level_name: str | None = None) -> None:
    """Attach a console handler to the root logger once."""
    level = getattr(logging, (level_name or settings.log_level).upper(), logging.INFO)

    root = logging.getLogger()
    root.setLevel(level)
    if root.handlers:
        return

    console = logging.StreamHandler(sys.stdout)
    console.setLevel(level)
    console.setFormatter(logging.Formatter(_FORMAT, datefmt=_DATE_FMT))
    root.addHandler(console)

    # httpx logs every request at INFO, including query strings with credentials.
    logging.getLogger("httpx").setLevel(logging.WARNING)
