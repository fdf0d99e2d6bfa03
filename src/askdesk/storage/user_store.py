from __future__ import annotations

import json
from collections.abc import Callable, Iterable
from typing import TypeVar

from loguru import logger

from askdesk.models import DEFAULT_FOLDER, DEFAULT_FOLDER_ID, Folder, Message, Session
from askdesk.storage.store import KeyValueStore

T = TypeVar("T")


class UserStore:
    """Per-user view over a key-value store.

    Each user owns three keys: the live conversation, the session archive and
    the folder registry. Values are JSON arrays and are rewritten whole on
    every save.
    """

    def __init__(self, store: KeyValueStore, user_id: str):
        self._store = store
        self._user_id = user_id

    @property
    def user_id(self) -> str:
        return self._user_id

    @property
    def conversation_key(self) -> str:
        return f"chat_{self._user_id}"

    @property
    def sessions_key(self) -> str:
        return f"sessions_{self._user_id}"

    @property
    def folders_key(self) -> str:
        return f"folders_{self._user_id}"

    def load_conversation(self) -> list[Message]:
        return self._load_list(self.conversation_key, Message.from_dict)

    def save_conversation(self, messages: Iterable[Message]) -> None:
        self._save_list(self.conversation_key, [m.to_dict() for m in messages])

    def load_sessions(self) -> list[Session]:
        return self._load_list(self.sessions_key, Session.from_dict)

    def save_sessions(self, sessions: Iterable[Session]) -> None:
        self._save_list(self.sessions_key, [s.to_dict() for s in sessions])

    def load_folders(self) -> list[Folder]:
        folders = self._load_list(self.folders_key, Folder.from_dict)
        if not any(f.id == DEFAULT_FOLDER_ID for f in folders):
            folders.insert(0, DEFAULT_FOLDER)
            self.save_folders(folders)
        return folders

    def save_folders(self, folders: Iterable[Folder]) -> None:
        self._save_list(self.folders_key, [f.to_dict() for f in folders])

    def _load_list(self, key: str, parse: Callable[[dict], T]) -> list[T]:
        raw = self._store.get(key)
        if raw is None:
            return []
        try:
            data = json.loads(raw)
            if not isinstance(data, list):
                raise ValueError(f"expected a JSON array, got {type(data).__name__}")
            return [parse(item) for item in data]
        except (ValueError, KeyError, TypeError, AttributeError) as ex:
            logger.warning(f"Ignoring unreadable value for {key!r}: {ex}")
            return []

    def _save_list(self, key: str, items: list[dict]) -> None:
        self._store.set(key, json.dumps(items, ensure_ascii=False))
        logger.debug(f"Persisted {len(items)} item(s) under {key!r}")
