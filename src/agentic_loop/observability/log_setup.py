import logging

from rich.logging import RichHandler

ROOT_LOGGER_NAME = "agentic_loop"


def setup_logging(level: str = "INFO") -> logging.Logger:
    """
    Configures and returns the package logger with Rich formatting.

    ``SILENT`` disables package log output entirely.
    """
    package_logger = logging.getLogger(ROOT_LOGGER_NAME)
    if level.upper() == "SILENT":
        package_logger.disabled = True
        return package_logger

    package_logger.disabled = False
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
    )
    package_logger.setLevel(level.upper())
    return package_logger
