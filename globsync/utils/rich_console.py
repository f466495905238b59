from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from typing import Any
from rich.logging import RichHandler
import logging
import os


LOG_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


# Singleton Console instance
def get_console() -> Console:
    if not hasattr(get_console, "_console"):
        get_console._console = Console()
    return get_console._console


def print_panel(content: str, title: str | None = None, style: str = "bold blue", border_style: str | None = None):
    """Print a styled panel with optional title using Rich library.

    Args:
        content (str): The text content to display in the panel.
        title (str | None, optional): Title of the panel. Defaults to None.
        style (str, optional): Rich styling for the panel's content. Defaults to "bold blue".
        border_style (str | None, optional): Styling for the panel's border. Defaults to None.
    """
    console = get_console()
    border_style = border_style or style
    panel = Panel(content, title=title, style=style, border_style=border_style)
    console.print(panel)


def print_table(headers: list[str], rows: list[list[Any]], title: str | None = None):
    """Print a formatted table using Rich library.

    Args:
        headers (list[str]): Column headers for the table.
        rows (list[list[Any]]): Data rows to display in the table.
        title (str | None, optional): Title of the table. Defaults to None.
    """
    console = get_console()
    table = Table(title=title)
    for header in headers:
        table.add_column(header)
    for row in rows:
        table.add_row(*[str(cell) for cell in row])
    console.print(table)


class RichConsoleLogger(logging.Logger):
    def __init__(self, name: str):
        super().__init__(name)

        # Set log level (default to INFO if invalid)
        log_level_str = os.getenv("GLOBSYNC_LOG_LEVEL", "INFO").upper()
        log_level = LOG_LEVELS.get(log_level_str, logging.INFO)
        self.log_level_str = log_level_str
        self.log_level = log_level
        self.setLevel(log_level)

        # Configure handler with rich tracebacks
        handler = RichHandler(console=get_console(), rich_tracebacks=True, level=log_level)
        self.addHandler(handler)

        # Add file handler if debug mode is enabled
        debug_mode = os.getenv("GLOBSYNC_DEBUG", "").lower() in ["true", "1", "yes"]
        if debug_mode:
            log_file = os.getenv("GLOBSYNC_LOG_FILE", "globsync.log")
            try:
                file_handler = logging.FileHandler(log_file)
            except OSError as error:
                self.error(f"Failed to set up file logging: {error}")
            else:
                file_handler.setLevel(log_level)
                file_formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
                file_handler.setFormatter(file_formatter)
                self.addHandler(file_handler)

    def success(self, message: str, *args, **kwargs):
        """Log a success message at INFO level with a check mark.

        Args:
            message (str): Success message to display.
        """
        if args:
            message = message % args
        super().info(f"✔ {message}", **kwargs)


# Singleton logger instance
_console_logger = None

def get_console_logger() -> RichConsoleLogger:
    """Get a singleton instance of RichConsoleLogger with log level from environment variables.

    Environment variables:
        GLOBSYNC_LOG_LEVEL: Set the log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        GLOBSYNC_DEBUG: Enable debug mode with file logging (true, 1, yes)
        GLOBSYNC_LOG_FILE: Specify the log file path (default: globsync.log)

    Returns:
        RichConsoleLogger: Configured logger instance
    """
    global _console_logger
    if _console_logger is None:
        _console_logger = RichConsoleLogger(__name__)
    return _console_logger
