from __future__ import annotations

from dataclasses import dataclass, field, replace
from uuid import uuid4

USER = "user"
ASSISTANT = "assistant"

DEFAULT_FOLDER_ID = "default"
DEFAULT_FOLDER_NAME = "General"
DEFAULT_SESSION_TITLE = "New Chat"
TITLE_MAX_CHARS = 40


@dataclass(frozen=True)
class Attachment:
    name: str
    mime_type: str
    preview: str | None = None

    @property
    def is_image(self) -> bool:
        return self.mime_type.startswith("image/")

    def to_dict(self) -> dict:
        return {"name": self.name, "mime_type": self.mime_type, "preview": self.preview}

    @classmethod
    def from_dict(cls, data: dict) -> Attachment:
        mime_type = str(data.get("mime_type") or data.get("type") or "")
        preview = data.get("preview") if mime_type.startswith("image/") else None
        return cls(name=str(data.get("name", "")), mime_type=mime_type, preview=preview)


@dataclass(frozen=True)
class Message:
    role: str
    content: str
    attachment: Attachment | None = None
    reactions: frozenset[str] = field(default_factory=frozenset)

    def with_reaction_toggled(self, tag: str) -> Message:
        if tag in self.reactions:
            return replace(self, reactions=self.reactions - {tag})
        return replace(self, reactions=self.reactions | {tag})

    def to_dict(self) -> dict:
        return {
            "role": self.role,
            "content": self.content,
            "attachment": self.attachment.to_dict() if self.attachment else None,
            "reactions": sorted(self.reactions),
        }

    @classmethod
    def from_dict(cls, data: dict) -> Message:
        role = str(data.get("role", USER))
        if role == "ai":
            role = ASSISTANT
        raw_attachment = data.get("attachment")
        raw_reactions = data.get("reactions") or []
        # Older data stored reactions as {tag: bool}.
        if isinstance(raw_reactions, dict):
            reactions = frozenset(str(tag) for tag, active in raw_reactions.items() if active)
        else:
            reactions = frozenset(str(tag) for tag in raw_reactions)
        return cls(
            role=role,
            content=str(data.get("content") or ""),
            attachment=Attachment.from_dict(raw_attachment) if isinstance(raw_attachment, dict) else None,
            reactions=reactions,
        )


@dataclass
class Session:
    id: str
    title: str
    messages: tuple[Message, ...]
    created_at_display: str
    pinned: bool = False
    folder_id: str = DEFAULT_FOLDER_ID

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "messages": [m.to_dict() for m in self.messages],
            "created_at_display": self.created_at_display,
            "pinned": self.pinned,
            "folder_id": self.folder_id,
        }

    @classmethod
    def from_dict(cls, data: dict) -> Session:
        return cls(
            id=str(data["id"]),
            title=str(data.get("title", DEFAULT_SESSION_TITLE)),
            messages=tuple(Message.from_dict(m) for m in data.get("messages", [])),
            created_at_display=str(data.get("created_at_display", data.get("time", ""))),
            pinned=bool(data.get("pinned", False)),
            folder_id=str(data.get("folder_id", data.get("folder", DEFAULT_FOLDER_ID))),
        )


@dataclass(frozen=True)
class Folder:
    id: str
    name: str

    def to_dict(self) -> dict:
        return {"id": self.id, "name": self.name}

    @classmethod
    def from_dict(cls, data: dict) -> Folder:
        return cls(id=str(data["id"]), name=str(data.get("name", "")))


DEFAULT_FOLDER = Folder(id=DEFAULT_FOLDER_ID, name=DEFAULT_FOLDER_NAME)


def derive_session_title(messages: list[Message] | tuple[Message, ...]) -> str:
    """Title a session after its first user message, cut to TITLE_MAX_CHARS."""
    first_user = next((m for m in messages if m.role == USER), None)
    if first_user is None:
        return DEFAULT_SESSION_TITLE
    content = first_user.content
    if len(content) > TITLE_MAX_CHARS:
        return content[:TITLE_MAX_CHARS] + "..."
    return content


def attachment_placeholder(attachment: Attachment) -> str:
    return f"[Attached: {attachment.name}]"


def new_session_id(existing: set[str] | None = None) -> str:
    taken = existing or set()
    while True:
        sid = str(uuid4())
        if sid not in taken:
            return sid


def new_folder_id(existing: set[str] | None = None) -> str:
    taken = existing or set()
    while True:
        fid = f"f_{uuid4().hex[:12]}"
        if fid not in taken and fid != DEFAULT_FOLDER_ID:
            return fid
