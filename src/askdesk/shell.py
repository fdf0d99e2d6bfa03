from __future__ import annotations

from pathlib import Path

from loguru import logger

from askdesk.commands.router import CommandRouter, command_args, split_leading_argument
from askdesk.models import ASSISTANT, Session
from askdesk.services.session_view import SessionView
from askdesk.workspace import ChatWorkspace


class ChatShell:
    _LINE_PREFIX = "assistant> "

    def __init__(self, workspace: ChatWorkspace, *, export_directory: str = "."):
        self._workspace = workspace
        self._export_directory = export_directory
        self._view = SessionView(line_prefix=self._LINE_PREFIX)
        self._router = CommandRouter(
            handlers={
                "help": self._on_help,
                "new": self._on_new,
                "history": self._on_history,
                "load": self._on_load,
                "rename": self._on_rename,
                "pin": self._on_pin,
                "delete": self._on_delete,
                "move": self._on_move,
                "export": self._on_export,
                "folders": self._on_folders,
                "folder": self._on_folder,
                "edit": self._on_edit,
                "regen": self._on_regen,
                "react": self._on_react,
                "attach": self._on_attach,
                "detach": self._on_detach,
                "show": self._on_show,
            },
            on_unknown=self._on_unknown_command,
        )

    async def handle(self, user_input: str) -> None:
        if await self._router.try_handle(user_input):
            return
        await self._submit(user_input)

    async def _submit(self, text: str) -> None:
        conversation = self._workspace.conversation
        if not await conversation.submit(text):
            print(f"{self._LINE_PREFIX}Nothing to send (type a message or /attach a file).")
            return
        self._print_last_reply()

    def _print_last_reply(self) -> None:
        messages = self._workspace.conversation.messages
        if messages and messages[-1].role == ASSISTANT:
            print(f"{self._LINE_PREFIX}{messages[-1].content}")

    def _resolve_session(self, identifier: str) -> Session | None:
        if not identifier:
            return None
        try:
            session = self._workspace.archive.resolve_session_identifier(identifier)
        except ValueError as ex:
            print(f"{self._LINE_PREFIX}{ex}")
            return None
        if session is None:
            print(f"{self._LINE_PREFIX}Session not found: {identifier}")
        return session

    def _session_argument(self, command: str, usage: str) -> Session | None:
        """Resolve a command whose whole argument names one session (quotes optional)."""
        identifier = command_args(command)
        if len(identifier) >= 2 and identifier[0] == identifier[-1] and identifier[0] in "\"'":
            identifier = identifier[1:-1].strip()
        if not identifier:
            print(f"{self._LINE_PREFIX}Usage: {usage}")
            return None
        return self._resolve_session(identifier)

    def _leading_session_and_rest(self, command: str, usage: str) -> tuple[Session, str] | None:
        """Resolve a leading session argument and return it with the remaining text.

        A session title containing spaces must be quoted: ``/rename "Daily standup" Standup``.
        """
        try:
            identifier, rest = split_leading_argument(command_args(command))
        except ValueError:
            identifier, rest = "", ""
        if not identifier or not rest:
            print(f"{self._LINE_PREFIX}Usage: {usage}")
            return None
        session = self._resolve_session(identifier)
        if session is None:
            return None
        return session, rest

    async def _on_help(self, _: str) -> None:
        print(f"{self._LINE_PREFIX}Available commands:")
        for line in (
            "/help",
            "/new",
            "/history [query]",
            "/load <session>",
            "/rename <session> <title> (quote a session title that has spaces)",
            "/pin <session>",
            "/delete <session>",
            "/move <session> <folder-id> (quote a session title that has spaces)",
            "/export <session>",
            "/folders",
            "/folder new <name> | /folder delete <folder-id>",
            "/show",
            "/edit <index> <text>",
            "/regen",
            "/react <index> <tag>",
            "/attach <path>",
            "/detach",
        ):
            print(f"{self._LINE_PREFIX}- {line}")

    def _on_unknown_command(self, trimmed: str) -> None:
        print(f"{self._LINE_PREFIX}Unknown local command: {trimmed}")

    async def _on_new(self, _: str) -> None:
        if self._workspace.conversation.awaiting_response:
            print(f"{self._LINE_PREFIX}Still waiting for a reply; try again shortly.")
            return
        session = self._workspace.new_chat()
        if session is None:
            print(f"{self._LINE_PREFIX}Started a new chat.")
            return
        print(
            f"{self._LINE_PREFIX}Saved chat as {session.title} "
            f"[{self._view.short_id(session.id)}]. Started a new chat."
        )

    async def _on_history(self, command: str) -> None:
        query = command_args(command)
        groups = self._workspace.grouped(query)
        if not groups:
            print(f"{self._LINE_PREFIX}No sessions found.")
            return
        for line in self._view.format_grouped_lines(groups):
            print(line)

    async def _on_load(self, command: str) -> None:
        session = self._session_argument(command, "/load <session>")
        if session is None:
            return
        if not self._workspace.archive.load_into_conversation(session.id):
            print(f"{self._LINE_PREFIX}Cannot load while waiting for a reply.")
            return
        print(f"{self._LINE_PREFIX}Loaded {session.title} ({len(session.messages)} messages)")
        await self._on_show(command)

    async def _on_rename(self, command: str) -> None:
        parsed = self._leading_session_and_rest(command, "/rename <session> <title>")
        if parsed is None:
            return
        session, title = parsed
        if not self._workspace.archive.rename(session.id, title):
            print(f"{self._LINE_PREFIX}Usage: /rename <session> <title>")
            return
        print(f"{self._LINE_PREFIX}Session renamed: {title}")

    async def _on_pin(self, command: str) -> None:
        session = self._session_argument(command, "/pin <session>")
        if session is None:
            return
        self._workspace.archive.toggle_pin(session.id)
        state = "Pinned" if session.pinned else "Unpinned"
        print(f"{self._LINE_PREFIX}{state}: {session.title}")

    async def _on_delete(self, command: str) -> None:
        session = self._session_argument(command, "/delete <session>")
        if session is None:
            return
        self._workspace.archive.delete(session.id)
        print(f"{self._LINE_PREFIX}Deleted: {session.title}")

    async def _on_move(self, command: str) -> None:
        parsed = self._leading_session_and_rest(command, "/move <session> <folder-id>")
        if parsed is None:
            return
        session, folder_id = parsed
        if not self._workspace.move_session_to_folder(session.id, folder_id):
            print(f"{self._LINE_PREFIX}Folder not found: {folder_id}")
            return
        folder = self._workspace.folders.get(folder_id)
        print(f"{self._LINE_PREFIX}Moved {session.title} to {folder.name if folder else folder_id}")

    async def _on_export(self, command: str) -> None:
        session = self._session_argument(command, "/export <session>")
        if session is None:
            return
        try:
            path = self._workspace.archive.export_to_file(session.id, Path(self._export_directory))
        except OSError as ex:
            logger.error(f"Export failed for session {session.id}: {ex}")
            print(f"{self._LINE_PREFIX}Export failed: {ex}")
            return
        print(f"{self._LINE_PREFIX}Exported to {path}")

    async def _on_folders(self, _: str) -> None:
        sessions = self._workspace.archive.sessions
        print(f"{self._LINE_PREFIX}Folders:")
        for folder in self._workspace.folders.folders:
            count = sum(1 for s in sessions if s.folder_id == folder.id)
            print(self._view.format_folder_entry(folder, count))

    async def _on_folder(self, command: str) -> None:
        parts = command.split(maxsplit=2)
        if len(parts) == 3 and parts[1] == "new":
            folder = self._workspace.folders.create(parts[2])
            if folder is None:
                print(f"{self._LINE_PREFIX}Usage: /folder new <name>")
                return
            print(f"{self._LINE_PREFIX}Created folder {folder.name} (id={folder.id})")
            return
        if len(parts) == 3 and parts[1] == "delete":
            folder_id = parts[2].strip()
            if not self._workspace.folders.delete(folder_id):
                print(f"{self._LINE_PREFIX}Cannot delete folder: {folder_id}")
                return
            print(f"{self._LINE_PREFIX}Deleted folder {folder_id}; its sessions moved to General")
            return
        print(f"{self._LINE_PREFIX}Usage: /folder new <name> | /folder delete <folder-id>")

    async def _on_show(self, _: str) -> None:
        messages = self._workspace.conversation.messages
        if not messages:
            print(f"{self._LINE_PREFIX}The conversation is empty.")
            return
        for index, message in enumerate(messages):
            print(self._view.format_message_line(index, message))

    async def _on_edit(self, command: str) -> None:
        parts = command.split(maxsplit=2)
        if len(parts) < 3:
            print(f"{self._LINE_PREFIX}Usage: /edit <index> <text>")
            return
        try:
            index = int(parts[1])
        except ValueError:
            print(f"{self._LINE_PREFIX}Usage: /edit <index> <text>")
            return
        if not await self._workspace.conversation.edit_and_resubmit(index, parts[2]):
            print(f"{self._LINE_PREFIX}Message {index} cannot be edited.")
            return
        self._print_last_reply()

    async def _on_regen(self, _: str) -> None:
        if not await self._workspace.conversation.regenerate_last():
            print(f"{self._LINE_PREFIX}Nothing to regenerate.")
            return
        self._print_last_reply()

    async def _on_react(self, command: str) -> None:
        parts = command.split()
        if len(parts) != 3:
            print(f"{self._LINE_PREFIX}Usage: /react <index> <tag>")
            return
        try:
            index = int(parts[1])
        except ValueError:
            print(f"{self._LINE_PREFIX}Usage: /react <index> <tag>")
            return
        if not self._workspace.conversation.toggle_reaction(index, parts[2]):
            print(f"{self._LINE_PREFIX}No message at index {index}.")
            return
        message = self._workspace.conversation.messages[index]
        state = "added" if parts[2] in message.reactions else "removed"
        print(f"{self._LINE_PREFIX}Reaction {parts[2]} {state}.")

    async def _on_attach(self, command: str) -> None:
        path = command_args(command)
        if not path:
            print(f"{self._LINE_PREFIX}Usage: /attach <path>")
            return
        try:
            attachment = await self._workspace.conversation.attach(path)
        except OSError as ex:
            print(f"{self._LINE_PREFIX}Cannot attach file: {ex}")
            return
        print(f"{self._LINE_PREFIX}Attached {attachment.name} ({attachment.mime_type})")

    async def _on_detach(self, _: str) -> None:
        self._workspace.conversation.clear_attachment()
        print(f"{self._LINE_PREFIX}Attachment cleared.")
