"""
Logging setup for entry-point scripts.

Library modules only create loggers with logging.getLogger(__name__);
the process that embeds them decides where records go. Scripts call
configure_logging() once at startup.
"""

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

from .config import Settings, get_settings


def configure_logging(
    settings: Optional[Settings] = None,
    console: Optional[Console] = None,
) -> None:
    """Install a RichHandler on the root logger at the configured level."""
    settings = settings or get_settings()
    level = logging.DEBUG if settings.debug else settings.log_level.upper()

    handler = RichHandler(
        console=console,
        show_path=settings.debug,
        rich_tracebacks=True,
    )
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[handler],
        force=True,
    )
    # httpx logs every Supabase request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)
