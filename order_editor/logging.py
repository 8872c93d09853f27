from loguru import logger
from order_editor.config import get_config

DEFAULT_LOGGER_NAME = "order_editor"

class AppLogger:
    """Global logger configuration for the order editor.

    Level and line format come from get_config(). Each line carries the
    `name` bound by get_logger, so messages show the module that wrote them.
    """
    def __init__(self) -> None:
        config = get_config()
        logger.remove()
        logger.configure(extra={"name": DEFAULT_LOGGER_NAME})
        logger.add(
            sink=lambda msg: print(msg, end=""),
            level=config.log_level.upper(),
            format=config.log_format,
        )
        self.logger = logger

    def get_logger(self, name: str = None):
        """Get the configured logger instance.

        Args:
            name (str, optional): Module name shown on each line. Defaults to the package name.
        Returns:
            loguru.Logger: The configured logger instance.
        """
        return self.logger.bind(name=name or DEFAULT_LOGGER_NAME)

def get_logger(name: str = None):
    """Get a new application logger using the latest config."""
    return AppLogger().get_logger(name)
