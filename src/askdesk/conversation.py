from __future__ import annotations

import asyncio
import base64
import mimetypes
from pathlib import Path

from loguru import logger

from askdesk.answer_service import AnswerService
from askdesk.models import ASSISTANT, USER, Attachment, Message, attachment_placeholder
from askdesk.storage import UserStore

ERROR_MESSAGE = "❌ Error connecting to server"


class ConversationEngine:
    """Owns the live conversation for one user.

    Only one ask may be outstanding at a time. ``submit``, ``edit_and_resubmit``
    and ``regenerate_last`` are rejected (not queued) while a response is being
    awaited. Every structural change is written straight to the store.
    """

    def __init__(
        self,
        store: UserStore,
        answer_service: AnswerService,
        *,
        system_prompt: str,
        ask_timeout_seconds: float | None = 120.0,
    ):
        self._store = store
        self._answer_service = answer_service
        self._system_prompt = system_prompt
        self._ask_timeout_seconds = ask_timeout_seconds if ask_timeout_seconds and ask_timeout_seconds > 0 else None
        self._messages: list[Message] = store.load_conversation()
        self._pending_attachment: Attachment | None = None
        self._awaiting_response = False
        self._ask_task: asyncio.Task | None = None
        self._cancel_requested = False

    @property
    def messages(self) -> list[Message]:
        return list(self._messages)

    @property
    def awaiting_response(self) -> bool:
        return self._awaiting_response

    @property
    def pending_attachment(self) -> Attachment | None:
        return self._pending_attachment

    def is_empty(self) -> bool:
        return not self._messages

    async def attach(self, path: str | Path) -> Attachment:
        file_path = Path(path)
        mime_type = mimetypes.guess_type(file_path.name)[0] or "application/octet-stream"
        preview: str | None = None
        if mime_type.startswith("image/"):
            data = await asyncio.to_thread(file_path.read_bytes)
            preview = f"data:{mime_type};base64,{base64.b64encode(data).decode('ascii')}"
        elif not file_path.is_file():
            raise FileNotFoundError(f"No such file: {file_path}")
        attachment = Attachment(name=file_path.name, mime_type=mime_type, preview=preview)
        self.stage_attachment(attachment)
        return attachment

    def stage_attachment(self, attachment: Attachment) -> None:
        self._pending_attachment = attachment

    def clear_attachment(self) -> None:
        self._pending_attachment = None

    async def submit(self, text: str, attachment: Attachment | None = None) -> bool:
        if attachment is None:
            attachment = self._pending_attachment
        if self._awaiting_response:
            logger.debug("Submit ignored: a response is already being awaited")
            return False
        if not text.strip() and attachment is None:
            logger.debug("Submit ignored: blank message without attachment")
            return False

        content = text if text.strip() else attachment_placeholder(attachment)
        self._append(Message(role=USER, content=content, attachment=attachment))
        self.clear_attachment()
        await self._ask_and_append(content)
        return True

    async def regenerate_last(self) -> bool:
        if self._awaiting_response:
            logger.debug("Regenerate ignored: a response is already being awaited")
            return False
        index = self._last_user_index()
        if index is None:
            return False

        content = self._messages[index].content
        self._truncate(index + 1)
        await self._ask_and_append(content)
        return True

    async def edit_and_resubmit(self, index: int, new_text: str) -> bool:
        if self._awaiting_response:
            logger.debug("Edit ignored: a response is already being awaited")
            return False
        if not new_text.strip():
            return False
        if not 0 <= index < len(self._messages) or self._messages[index].role != USER:
            logger.debug(f"Edit ignored: message {index} is not a user message")
            return False

        del self._messages[index:]
        self._append(Message(role=USER, content=new_text))
        await self._ask_and_append(new_text)
        return True

    def toggle_reaction(self, index: int, tag: str) -> bool:
        if not 0 <= index < len(self._messages):
            return False
        self._messages[index] = self._messages[index].with_reaction_toggled(tag)
        self._persist()
        return True

    def cancel(self) -> bool:
        """Cancel the in-flight ask. The cancelled turn gets no assistant reply."""
        if self._ask_task is None or self._ask_task.done():
            return False
        self._cancel_requested = True
        self._ask_task.cancel()
        return True

    def replace_messages(self, messages: list[Message] | tuple[Message, ...]) -> None:
        self._messages = list(messages)
        self._persist()

    def clear(self) -> None:
        self._messages = []
        self._persist()

    async def _ask_and_append(self, content: str) -> None:
        self._awaiting_response = True
        self._ask_task = asyncio.ensure_future(self._ask(content))
        try:
            reply = await self._ask_task
        except asyncio.CancelledError:
            if not self._cancel_requested:
                raise
            logger.info("Ask cancelled before a reply arrived")
            return
        finally:
            self._awaiting_response = False
            self._ask_task = None
            self._cancel_requested = False
        self._append(Message(role=ASSISTANT, content=reply))

    async def _ask(self, content: str) -> str:
        try:
            return await asyncio.wait_for(
                self._answer_service.ask(content, self._system_prompt),
                timeout=self._ask_timeout_seconds,
            )
        except TimeoutError:
            logger.warning(f"Ask timed out after {self._ask_timeout_seconds}s")
            return ERROR_MESSAGE
        except Exception as ex:
            logger.error(f"Ask failed: {type(ex).__name__}: {ex}")
            return ERROR_MESSAGE

    def _last_user_index(self) -> int | None:
        for index in range(len(self._messages) - 1, -1, -1):
            if self._messages[index].role == USER:
                return index
        return None

    def _truncate(self, length: int) -> None:
        del self._messages[length:]
        self._persist()

    def _append(self, message: Message) -> None:
        self._messages.append(message)
        self._persist()

    def _persist(self) -> None:
        self._store.save_conversation(self._messages)
