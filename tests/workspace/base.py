import asyncio
import unittest
from datetime import datetime

from askdesk.storage import InMemoryKeyValueStore
from askdesk.workspace import ChatWorkspace, open_workspace

USER_ID = "tester@example.com"
FIXED_NOW = datetime(2026, 2, 19, 9, 30, 15)


class ScriptedAnswerService:
    def __init__(self, replies: list[str] | None = None, *, error: Exception | None = None):
        self.calls: list[tuple[str, str]] = []
        self.error = error
        self._replies = list(replies or [])

    async def ask(self, message: str, system_prompt: str) -> str:
        self.calls.append((message, system_prompt))
        if self.error is not None:
            raise self.error
        if self._replies:
            return self._replies.pop(0)
        return f"echo: {message}"


class BlockingAnswerService:
    """Never answers until ``release`` is set."""

    def __init__(self, reply: str = "late reply"):
        self.calls: list[str] = []
        self.release: asyncio.Event | None = None
        self._reply = reply

    async def ask(self, message: str, system_prompt: str) -> str:
        self.calls.append(message)
        if self.release is None:
            self.release = asyncio.Event()
        await self.release.wait()
        return self._reply


class WorkspaceTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self._kv = InMemoryKeyValueStore()
        self._answers = ScriptedAnswerService()
        self._workspace = self._open()

    def _open(self, answer_service=None, *, ask_timeout_seconds: float | None = 5.0) -> ChatWorkspace:
        return open_workspace(
            self._kv,
            USER_ID,
            answer_service or self._answers,
            system_prompt="Assistant",
            ask_timeout_seconds=ask_timeout_seconds,
            clock=lambda: FIXED_NOW,
        )

    def _say(self, *texts: str) -> None:
        async def scenario() -> None:
            for text in texts:
                await self._workspace.conversation.submit(text)

        asyncio.run(scenario())

    def _archive(self, *texts: str):
        self._say(*texts)
        session = self._workspace.archive.archive_current_conversation()
        self.assertIsNotNone(session)
        return session
