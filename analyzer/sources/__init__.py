"""Log acquisition - resources files and Loki windows."""

from analyzer.sources.files import (
    LogFileError,
    extract_date_from_filename,
    find_json_files,
    read_log_entries,
    read_many,
)
from analyzer.sources.loki import LokiClient, LokiError, TimeRange, fetch_to_directory, generate_time_ranges

__all__ = [
    "LogFileError",
    "LokiClient",
    "LokiError",
    "TimeRange",
    "extract_date_from_filename",
    "fetch_to_directory",
    "find_json_files",
    "generate_time_ranges",
    "read_log_entries",
    "read_many",
]
