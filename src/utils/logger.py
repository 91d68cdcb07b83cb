import logging
import os

from rich.logging import RichHandler


class CenteredFormatter(logging.Formatter):
    """
    Centers logger names in a column that widens to the longest name seen.
    One instance is shared by every storefront logger so the column lines up.
    """

    def __init__(self, fmt=None, datefmt=None, style="%", min_width=12):
        super().__init__(fmt, datefmt, style)
        self.width = min_width

    def format(self, record):
        self.width = max(self.width, len(record.name))
        # pad a copy; other handlers still see the real logger name
        padded = logging.makeLogRecord(record.__dict__)
        padded.name = record.name.center(self.width)
        return super().format(padded)


_formatter = CenteredFormatter("[%(name)s]  %(message)s")


def get_logger(name=None) -> logging.Logger:
    """
    Creates and returns a logger configured with RichHandler for rich output.
    Level is DEBUG when the DEBUG environment variable is set, INFO otherwise.
    """
    logger = logging.getLogger(name or "storefront")
    log_level = logging.DEBUG if os.getenv("DEBUG") else logging.INFO
    logger.setLevel(log_level)

    if not logger.handlers:
        handler = RichHandler(
            show_time=True,
            show_level=True,
            show_path=False,
            rich_tracebacks=True,
            log_time_format="[%X]",
        )
        handler.setFormatter(_formatter)
        handler.setLevel(log_level)
        logger.addHandler(handler)

        logger.propagate = False
        logger.debug(f"Logger for '{logger.name}' initialized with RichHandler.")

    return logger
