"""Plain-text transcript export for archived sessions."""

import re
from datetime import datetime

from askdesk.models import USER, Session

_UNSAFE_FILENAME_CHARS = re.compile(r"[^a-zA-Z0-9]")


def session_to_text(session: Session, exported_at: datetime) -> str:
    """Render a session as ``[You]:`` / ``[AI]:`` lines under a short header."""
    lines = "\n\n".join(
        f"[{'You' if m.role == USER else 'AI'}]: {m.content}" for m in session.messages
    )
    stamp = exported_at.strftime("%Y-%m-%d %H:%M:%S")
    return f"Chat: {session.title}\nExported: {stamp}\n\n{lines}"


def export_filename(title: str) -> str:
    return f"{_UNSAFE_FILENAME_CHARS.sub('_', title)}.txt"
