"""Logging setup routed through the rich console."""
import logging

from rich.logging import RichHandler


def setup_logging(level: str = "WARNING", console=None) -> None:
    handler = RichHandler(console=console, show_path=False, rich_tracebacks=True)
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[handler],
        force=True,
    )
    # The Gemini SDK and its HTTP stack are chatty at INFO.
    for name in ("google_genai", "httpx", "httpcore"):
        logging.getLogger(name).setLevel(logging.WARNING)
