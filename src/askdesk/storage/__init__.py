from askdesk.storage.store import InMemoryKeyValueStore, KeyValueStore, SqliteKeyValueStore
from askdesk.storage.user_store import UserStore

__all__ = [
    "InMemoryKeyValueStore",
    "KeyValueStore",
    "SqliteKeyValueStore",
    "UserStore",
]
