from __future__ import annotations

from collections.abc import Callable
from datetime import datetime
from pathlib import Path

from loguru import logger

from askdesk.conversation import ConversationEngine
from askdesk.export import export_filename, session_to_text
from askdesk.models import DEFAULT_FOLDER_ID, Session, derive_session_title, new_session_id
from askdesk.storage import UserStore


class SessionArchive:
    """Ordered collection of archived sessions, most recently archived first."""

    def __init__(
        self,
        store: UserStore,
        conversation: ConversationEngine,
        *,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self._store = store
        self._conversation = conversation
        self._clock = clock
        self._sessions: list[Session] = store.load_sessions()

    @property
    def sessions(self) -> list[Session]:
        return list(self._sessions)

    def get(self, session_id: str) -> Session | None:
        return next((s for s in self._sessions if s.id == session_id), None)

    def resolve_session_identifier(self, identifier: str) -> Session | None:
        """Find a session by exact id, unique id prefix, or exact title (case-insensitive)."""
        target = identifier.strip()
        if not target:
            return None

        exact = self.get(target)
        if exact is not None:
            return exact

        by_prefix = [s for s in self._sessions if s.id.startswith(target)]
        if len(by_prefix) == 1:
            return by_prefix[0]
        if len(by_prefix) > 1:
            raise ValueError(f"Session id prefix is ambiguous: {target} ({len(by_prefix)} matches)")

        by_title = [s for s in self._sessions if s.title.casefold() == target.casefold()]
        if len(by_title) == 1:
            return by_title[0]
        if len(by_title) > 1:
            raise ValueError(f"Session title is ambiguous: {target} ({len(by_title)} matches)")
        return None

    def archive_current_conversation(self) -> Session | None:
        if self._conversation.awaiting_response:
            logger.debug("Archive ignored: a response is still being awaited")
            return None
        if self._conversation.is_empty():
            self._conversation.clear()
            return None
        messages = self._conversation.messages

        session = Session(
            id=new_session_id({s.id for s in self._sessions}),
            title=derive_session_title(messages),
            messages=tuple(messages),
            created_at_display=self._clock().strftime("%H:%M"),
            pinned=False,
            folder_id=DEFAULT_FOLDER_ID,
        )
        self._sessions.insert(0, session)
        self._persist()
        self._conversation.clear()
        logger.info(f"Archived conversation as session {session.id} ({len(messages)} messages)")
        return session

    def rename(self, session_id: str, new_title: str) -> bool:
        if not new_title.strip():
            return False
        session = self.get(session_id)
        if session is None:
            return False
        session.title = new_title
        self._persist()
        return True

    def toggle_pin(self, session_id: str) -> bool:
        session = self.get(session_id)
        if session is None:
            return False
        session.pinned = not session.pinned
        self._persist()
        return True

    def delete(self, session_id: str) -> bool:
        remaining = [s for s in self._sessions if s.id != session_id]
        if len(remaining) == len(self._sessions):
            return False
        self._sessions = remaining
        self._persist()
        return True

    def move_to_folder(self, session_id: str, folder_id: str) -> bool:
        session = self.get(session_id)
        if session is None:
            return False
        session.folder_id = folder_id
        self._persist()
        return True

    def reassign_folder(self, old_folder_id: str, new_folder_id: str) -> int:
        moved = 0
        for session in self._sessions:
            if session.folder_id == old_folder_id:
                session.folder_id = new_folder_id
                moved += 1
        if moved:
            self._persist()
        return moved

    def repair_folder_references(self, known_folder_ids: set[str]) -> int:
        """Point sessions whose folder no longer exists back at the default folder."""
        repaired = 0
        for session in self._sessions:
            if session.folder_id not in known_folder_ids:
                logger.warning(f"Session {session.id} referenced missing folder {session.folder_id!r}")
                session.folder_id = DEFAULT_FOLDER_ID
                repaired += 1
        if repaired:
            self._persist()
        return repaired

    def load_into_conversation(self, session_id: str) -> bool:
        if self._conversation.awaiting_response:
            logger.debug("Load ignored: a response is still being awaited")
            return False
        session = self.get(session_id)
        if session is None:
            return False
        self._conversation.replace_messages(session.messages)
        return True

    def export_as_text(self, session_id: str, exported_at: datetime | None = None) -> str | None:
        session = self.get(session_id)
        if session is None:
            return None
        return session_to_text(session, exported_at or self._clock())

    def export_to_file(self, session_id: str, directory: str | Path) -> Path | None:
        session = self.get(session_id)
        if session is None:
            return None
        target_dir = Path(directory)
        target_dir.mkdir(parents=True, exist_ok=True)
        path = target_dir / export_filename(session.title)
        path.write_text(session_to_text(session, self._clock()), encoding="utf-8")
        logger.info(f"Exported session {session.id} to {path}")
        return path

    def _persist(self) -> None:
        self._store.save_sessions(self._sessions)
