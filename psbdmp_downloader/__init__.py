"""
psbdmp downloader core package.

Exposes the psbdmp.ws API client, the fetch-all helpers and the CLI
orchestration used by the ``psbdmp`` command.
"""

from .config import BASE_URL, DEFAULT_OUT_DIR, ClientConfig, create_session  # noqa: F401
from .client import (  # noqa: F401
    ContentResult,
    Dump,
    DumpClient,
    SearchResult,
    format_date,
    parse_content_envelope,
    parse_search_envelope,
)
from .download import clean_filename, fetch_all, write_dump  # noqa: F401
from .pipeline import date_range_since, process_args, run_query, select_query  # noqa: F401
from .errors import DecodeError, PsbdmpError, RemoteError, TransportError, UsageError  # noqa: F401

__all__ = [
    "BASE_URL",
    "DEFAULT_OUT_DIR",
    "ClientConfig",
    "create_session",
    "ContentResult",
    "Dump",
    "DumpClient",
    "SearchResult",
    "format_date",
    "parse_content_envelope",
    "parse_search_envelope",
    "clean_filename",
    "fetch_all",
    "write_dump",
    "date_range_since",
    "process_args",
    "run_query",
    "select_query",
    "DecodeError",
    "PsbdmpError",
    "RemoteError",
    "TransportError",
    "UsageError",
]
