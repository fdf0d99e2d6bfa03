from __future__ import annotations

from loguru import logger

from askdesk.archive import SessionArchive
from askdesk.models import DEFAULT_FOLDER_ID, Folder, new_folder_id
from askdesk.storage import UserStore


class FolderRegistry:
    def __init__(self, store: UserStore, archive: SessionArchive):
        self._store = store
        self._archive = archive
        self._folders: list[Folder] = store.load_folders()

    @property
    def folders(self) -> list[Folder]:
        return list(self._folders)

    def get(self, folder_id: str) -> Folder | None:
        return next((f for f in self._folders if f.id == folder_id), None)

    def exists(self, folder_id: str) -> bool:
        return self.get(folder_id) is not None

    def create(self, name: str) -> Folder | None:
        if not name.strip():
            return None
        folder = Folder(id=new_folder_id({f.id for f in self._folders}), name=name)
        self._folders.append(folder)
        self._persist()
        logger.info(f"Created folder {folder.name!r} ({folder.id})")
        return folder

    def delete(self, folder_id: str) -> bool:
        """Remove a folder, moving its sessions to the default folder first."""
        if folder_id == DEFAULT_FOLDER_ID or not self.exists(folder_id):
            return False
        moved = self._archive.reassign_folder(folder_id, DEFAULT_FOLDER_ID)
        self._folders = [f for f in self._folders if f.id != folder_id]
        self._persist()
        logger.info(f"Deleted folder {folder_id}; moved {moved} session(s) to {DEFAULT_FOLDER_ID!r}")
        return True

    def _persist(self) -> None:
        self._store.save_folders(self._folders)
