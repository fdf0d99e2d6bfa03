from __future__ import annotations

from askdesk.models import Folder, Session


def search_sessions(sessions: list[Session], query: str) -> list[Session]:
    """Filter sessions by a case-insensitive substring, then sort pinned first.

    A blank query keeps every session. The sort is stable, so sessions with
    the same pin state keep their archive order.
    """
    matches = sessions
    if query.strip():
        needle = query.lower()
        matches = [
            s
            for s in sessions
            if needle in s.title.lower() or any(needle in m.content.lower() for m in s.messages)
        ]
    return sorted(matches, key=lambda s: not s.pinned)


def group_by_folder(sessions: list[Session], folders: list[Folder]) -> list[tuple[Folder, list[Session]]]:
    groups: list[tuple[Folder, list[Session]]] = []
    for folder in folders:
        members = [s for s in sessions if s.folder_id == folder.id]
        if members:
            groups.append((folder, members))
    return groups
