"""
Exit Codes - Process exit statuses of the annosync CLI.
"""

from enum import IntEnum


class ExitCode(IntEnum):
    """Exit statuses returned by ``main``."""

    SUCCESS = 0
    ERROR = 1
    # Configuration incomplete or invalid (nothing was contacted)
    CONFIG_ERROR = 2
    # The issue tracker rejected or failed a request
    TRACKER_ERROR = 3
