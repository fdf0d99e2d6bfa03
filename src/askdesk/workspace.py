from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime

from loguru import logger

from askdesk.answer_service import AnswerService
from askdesk.archive import SessionArchive
from askdesk.conversation import ConversationEngine
from askdesk.folders import FolderRegistry
from askdesk.models import Folder, Session
from askdesk.query import group_by_folder, search_sessions
from askdesk.storage import KeyValueStore, UserStore


@dataclass
class ChatWorkspace:
    user_id: str
    conversation: ConversationEngine
    archive: SessionArchive
    folders: FolderRegistry

    def new_chat(self) -> Session | None:
        return self.archive.archive_current_conversation()

    def move_session_to_folder(self, session_id: str, folder_id: str) -> bool:
        if not self.folders.exists(folder_id):
            logger.debug(f"Move ignored: unknown folder {folder_id!r}")
            return False
        return self.archive.move_to_folder(session_id, folder_id)

    def search(self, query: str = "") -> list[Session]:
        return search_sessions(self.archive.sessions, query)

    def grouped(self, query: str = "") -> list[tuple[Folder, list[Session]]]:
        return group_by_folder(self.search(query), self.folders.folders)


def open_workspace(
    store: KeyValueStore,
    user_id: str,
    answer_service: AnswerService,
    *,
    system_prompt: str,
    ask_timeout_seconds: float | None = 120.0,
    clock: Callable[[], datetime] = datetime.now,
) -> ChatWorkspace:
    user_store = UserStore(store, user_id)
    conversation = ConversationEngine(
        user_store,
        answer_service,
        system_prompt=system_prompt,
        ask_timeout_seconds=ask_timeout_seconds,
    )
    archive = SessionArchive(user_store, conversation, clock=clock)
    folders = FolderRegistry(user_store, archive)
    archive.repair_folder_references({f.id for f in folders.folders})
    logger.info(
        f"Opened workspace for {user_id}: {len(conversation.messages)} live message(s), "
        f"{len(archive.sessions)} session(s), {len(folders.folders)} folder(s)"
    )
    return ChatWorkspace(user_id=user_id, conversation=conversation, archive=archive, folders=folders)
