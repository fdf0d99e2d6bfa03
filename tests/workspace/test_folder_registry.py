import json

from askdesk.models import DEFAULT_FOLDER_ID, DEFAULT_FOLDER_NAME
from tests.workspace.base import USER_ID, WorkspaceTestCase


class FolderRegistryTests(WorkspaceTestCase):
    def test_default_folder_is_seeded_and_persisted(self) -> None:
        folders = self._workspace.folders.folders
        self.assertEqual([(DEFAULT_FOLDER_ID, DEFAULT_FOLDER_NAME)], [(f.id, f.name) for f in folders])
        stored = json.loads(self._kv.get(f"folders_{USER_ID}"))
        self.assertEqual([{"id": "default", "name": "General"}], stored)

    def test_create_appends_folder_with_fresh_id(self) -> None:
        work = self._workspace.folders.create("Work")
        home = self._workspace.folders.create("Home")

        self.assertIsNotNone(work)
        self.assertTrue(work.id.startswith("f_"))
        self.assertNotEqual(work.id, home.id)
        self.assertEqual(["General", "Work", "Home"], [f.name for f in self._workspace.folders.folders])

    def test_create_with_blank_name_is_ignored(self) -> None:
        self.assertIsNone(self._workspace.folders.create("   "))
        self.assertEqual(1, len(self._workspace.folders.folders))

    def test_default_folder_cannot_be_deleted(self) -> None:
        self.assertFalse(self._workspace.folders.delete(DEFAULT_FOLDER_ID))
        self.assertTrue(self._workspace.folders.exists(DEFAULT_FOLDER_ID))
        self.assertFalse(self._workspace.folders.delete("f_unknown"))

    def test_deleting_folder_moves_sessions_to_default(self) -> None:
        session = self._archive("quarterly plan")
        untouched = self._archive("other")
        work = self._workspace.folders.create("Work")
        self.assertTrue(self._workspace.move_session_to_folder(session.id, work.id))
        self.assertEqual(work.id, self._workspace.archive.get(session.id).folder_id)

        self.assertTrue(self._workspace.folders.delete(work.id))

        self.assertEqual(DEFAULT_FOLDER_ID, self._workspace.archive.get(session.id).folder_id)
        self.assertEqual(DEFAULT_FOLDER_ID, self._workspace.archive.get(untouched.id).folder_id)
        self.assertFalse(self._workspace.folders.exists(work.id))
        folder_ids = {f.id for f in self._workspace.folders.folders}
        for stored in json.loads(self._kv.get(f"sessions_{USER_ID}")):
            self.assertIn(stored["folder_id"], folder_ids)

    def test_move_to_unknown_folder_is_rejected(self) -> None:
        session = self._archive("q1")
        self.assertFalse(self._workspace.move_session_to_folder(session.id, "f_missing"))
        self.assertEqual(DEFAULT_FOLDER_ID, self._workspace.archive.get(session.id).folder_id)

    def test_dangling_folder_reference_is_repaired_on_open(self) -> None:
        session = self._archive("q1")
        work = self._workspace.folders.create("Work")
        self._workspace.move_session_to_folder(session.id, work.id)
        self._kv.set(f"folders_{USER_ID}", json.dumps([{"id": "default", "name": "General"}]))

        reopened = self._open()

        self.assertEqual(DEFAULT_FOLDER_ID, reopened.archive.get(session.id).folder_id)
