"""Local reference implementations of the host capabilities.

- **PreferencesStore**: JSON document with async key/value access
- **DirectoryFileArea**: directory-backed file area
- **SQLiteObjectStore**: transactional object store on sqlite3
- **JsonFileFlatStore** / **MemoryFlatStore**: flat key/value stores
- **LocalHost**: platform probe and capability factories from settings
"""

from .filearea import DirectoryFileArea
from .flat import JsonFileFlatStore, MemoryFlatStore
from .local import LocalHost
from .preferences import PreferencesStore
from .sqlite import SQLiteObjectStore

__all__ = [
    "DirectoryFileArea",
    "JsonFileFlatStore",
    "LocalHost",
    "MemoryFlatStore",
    "PreferencesStore",
    "SQLiteObjectStore",
]
