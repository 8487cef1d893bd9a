"""dirmon - directory housekeeping: duplicates, disk usage and cleanup advice."""

__version__ = "0.1.0"
