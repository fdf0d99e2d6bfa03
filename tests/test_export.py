import unittest
from datetime import datetime

from askdesk.export import export_filename, session_to_text
from askdesk.models import ASSISTANT, USER, Message, Session


class ExportTests(unittest.TestCase):
    def test_session_to_text_labels_speakers(self) -> None:
        session = Session(
            id="s1",
            title="Greetings",
            messages=(Message(role=USER, content="hi"), Message(role=ASSISTANT, content="hello\nthere")),
            created_at_display="10:00",
        )

        text = session_to_text(session, datetime(2026, 1, 2, 3, 4, 5))

        self.assertEqual(
            "Chat: Greetings\nExported: 2026-01-02 03:04:05\n\n[You]: hi\n\n[AI]: hello\nthere",
            text,
        )

    def test_session_without_messages_has_header_only(self) -> None:
        session = Session(id="s1", title="Empty", messages=(), created_at_display="10:00")
        self.assertEqual("Chat: Empty\nExported: 2026-01-02 03:04:05\n\n", session_to_text(session, datetime(2026, 1, 2, 3, 4, 5)))

    def test_export_filename_replaces_non_alphanumerics(self) -> None:
        self.assertEqual("Q3_plan__draft_.txt", export_filename("Q3 plan (draft)"))
        self.assertEqual("caf_.txt", export_filename("café"))


if __name__ == "__main__":
    unittest.main()
