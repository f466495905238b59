"""
Console and logging helpers.
"""

from globsync.utils.logging import timeit
from globsync.utils.rich_console import get_console, get_console_logger, print_panel, print_table

__all__ = ["timeit", "get_console", "get_console_logger", "print_panel", "print_table"]
