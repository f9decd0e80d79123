import logging

from rich.console import Console
from rich.logging import RichHandler

from fonda._src.config import FondaConfig


def configure_logging(config: FondaConfig, console: Console | None = None) -> None:
    level = logging.DEBUG if config.verbose else logging.INFO
    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=config.verbose,
        show_time=config.verbose,
    )
    logger = logging.getLogger("fonda")
    logger.handlers = [handler]
    logger.setLevel(level)
