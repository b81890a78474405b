"""Logging configuration for the Restroom Finder app."""
import logging
import sys
import os


class ColorFormatter(logging.Formatter):
    """Color-coded formatter for console output."""

    COLORS = {
        'DEBUG': '\033[36m',    # Cyan
        'INFO': '\033[32m',     # Green
        'WARNING': '\033[33m',  # Yellow
        'ERROR': '\033[31m',    # Red
        'CRITICAL': '\033[35m', # Magenta
        'RESET': '\033[0m'      # Reset
    }

    def format(self, record):
        levelname = record.levelname
        if levelname in self.COLORS:
            record.levelname = f"{self.COLORS[levelname]}{levelname}{self.COLORS['RESET']}"
        try:
            return super().format(record)
        finally:
            # Other handlers share the record
            record.levelname = levelname


def setup_logging():
    """Setup console logging for the Toga app.

    Level comes from LOG_LEVEL; colors are used when LOG_COLORS is on and
    stdout is a terminal.
    """
    log_level_str = os.getenv('LOG_LEVEL', 'INFO').upper()
    log_level = getattr(logging, log_level_str, logging.INFO)

    logger = logging.getLogger()
    logger.setLevel(log_level)

    color_formatter = ColorFormatter(
        '%(asctime)s %(levelname)s %(name)-25s %(message)s'
    )
    plain_formatter = logging.Formatter(
        '%(asctime)s %(levelname)-8s %(name)-25s %(message)s'
    )

    use_colors = os.getenv('LOG_COLORS', 'true').lower() in ('true', '1', 'yes')

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)

    if use_colors and sys.stdout.isatty():
        console_handler.setFormatter(color_formatter)
    else:
        console_handler.setFormatter(plain_formatter)

    logger.handlers.clear()
    logger.addHandler(console_handler)

    logging.getLogger('urllib3').setLevel(logging.WARNING)

    logger.info(f"Client logging initialized (level: {log_level_str})")

    return logger
