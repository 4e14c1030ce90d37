"""Data storage layer."""

from pasarantar.storage.sqlite_repo import (
    check_connection,
    connection,
    get_connection,
    init_database,
)

__all__ = [
    "get_connection",
    "connection",
    "init_database",
    "check_connection",
]
