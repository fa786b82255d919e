# boutique/log.py
import logging

from rich.logging import RichHandler

_configured = False


def configure_logging(level: str = "INFO") -> None:
    """
    Route stdlib logging through rich. Safe to call more than once; only the
    level changes on later calls.
    """
    global _configured
    root = logging.getLogger()
    root.setLevel(level.upper())
    if _configured:
        return
    handler = RichHandler(rich_tracebacks=True, show_path=False)
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s", datefmt="[%X]"))
    root.addHandler(handler)
    _configured = True
