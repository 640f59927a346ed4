"""
Core utilities for Document Sync.

Shared errors, paths, formatting and logging.
"""

from .errors import (
    SyncError,
    NetworkError,
    RequestTimeoutError,
    HttpStatusError,
    FormatError,
    WriteVerificationError,
    PersistenceError,
)

from .paths import (
    get_app_dir,
    get_data_dir,
    get_settings_path,
    get_cache_path,
    get_logs_dir,
    get_docs_path,
    ensure_docs_dirs,
)

from .formatting import (
    generate_display_name,
    make_document_id,
    make_relative_path,
    format_file_size,
    parse_timestamp,
    timestamp_date,
    utc_now_iso,
)

from .logging import TeeOutput, debug_log

__all__ = [
    # Errors
    "SyncError",
    "NetworkError",
    "RequestTimeoutError",
    "HttpStatusError",
    "FormatError",
    "WriteVerificationError",
    "PersistenceError",
    # Paths
    "get_app_dir",
    "get_data_dir",
    "get_settings_path",
    "get_cache_path",
    "get_logs_dir",
    "get_docs_path",
    "ensure_docs_dirs",
    # Formatting
    "generate_display_name",
    "make_document_id",
    "make_relative_path",
    "format_file_size",
    "parse_timestamp",
    "timestamp_date",
    "utc_now_iso",
    # Logging
    "TeeOutput",
    "debug_log",
]
