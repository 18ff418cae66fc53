import sys
from pathlib import Path

import platformdirs
from loguru import logger

from xpanes.constants import PROG_NAME


def setup_logger(*, debug: bool = False):
    """Send short diagnostics to stderr; with ``debug``, also keep a JSON log file."""
    logger.remove()
    logger.configure(extra={"operation": "-"})

    logger.add(
        sys.stderr,
        level="DEBUG" if debug else "WARNING",
        format=f"{PROG_NAME}: <level>{{level}}</level>: {{message}}",
        colorize=None,
    )

    if debug:
        # Linux: ~/.local/state/xpanes/log/
        log_dir = Path(platformdirs.user_log_dir(appname=PROG_NAME, ensure_exists=True))
        logger.add(
            str(log_dir / "xpanes.jsonl"),
            format="{message}",
            serialize=True,
            rotation="10 MB",
            retention="7 days",
            level="DEBUG",
        )

    return logger
