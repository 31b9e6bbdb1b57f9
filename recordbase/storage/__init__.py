"""Storage layer — the Database contract and its backends.

Backends are opened through a factory keyed by application namespace
and storage root:

    from recordbase.storage import fs
    conn = fs.open("myapp", "/var/lib/recordbase")
    db = conn.public_db()
"""

from recordbase.storage import fs, memory
from recordbase.storage.base import PRIVATE_DB_KEY, PUBLIC_DB_KEY, Connection, Database
from recordbase.storage.fs import FileConnection, FileDatabase
from recordbase.storage.memory import MemoryConnection, MemoryDatabase

__all__ = [
    "Connection",
    "Database",
    "FileConnection",
    "FileDatabase",
    "MemoryConnection",
    "MemoryDatabase",
    "PRIVATE_DB_KEY",
    "PUBLIC_DB_KEY",
    "fs",
    "memory",
]
