from __future__ import annotations

from askdesk.models import USER, Folder, Message, Session


class SessionView:
    def __init__(self, *, line_prefix: str, short_id_len: int = 8):
        self._line_prefix = line_prefix
        self._short_id_len = short_id_len

    def short_id(self, value: str) -> str:
        if len(value) <= self._short_id_len:
            return value
        return value[: self._short_id_len]

    def format_session_entry(self, session: Session) -> str:
        marker = "*" if session.pinned else " "
        return (
            f"{self._line_prefix}  {marker} {session.title} [{self.short_id(session.id)}] "
            f"({len(session.messages)} messages, {session.created_at_display})"
        )

    def format_grouped_lines(self, groups: list[tuple[Folder, list[Session]]]) -> list[str]:
        lines: list[str] = []
        for folder, sessions in groups:
            lines.append(f"{self._line_prefix}{folder.name} ({folder.id}):")
            lines.extend(self.format_session_entry(s) for s in sessions)
        return lines

    def format_folder_entry(self, folder: Folder, session_count: int) -> str:
        return f"{self._line_prefix}- {folder.name} (id={folder.id}, sessions={session_count})"

    def format_message_line(self, index: int, message: Message) -> str:
        speaker = "you" if message.role == USER else "ai"
        line = f"{self._line_prefix}[{index}] {speaker}: {message.content}"
        if message.attachment is not None:
            line += f" (attachment: {message.attachment.name}, {message.attachment.mime_type})"
        if message.reactions:
            line += f" [{', '.join(sorted(message.reactions))}]"
        return line
