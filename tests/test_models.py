import unittest

from askdesk.models import (
    ASSISTANT,
    USER,
    Attachment,
    Message,
    derive_session_title,
    new_folder_id,
    new_session_id,
)


class ModelTests(unittest.TestCase):
    def test_title_uses_first_user_message(self) -> None:
        messages = [
            Message(role=ASSISTANT, content="Welcome!"),
            Message(role=USER, content="first question"),
            Message(role=USER, content="second question"),
        ]
        self.assertEqual("first question", derive_session_title(messages))

    def test_title_truncation_adds_ellipsis(self) -> None:
        content = "x" * 41
        self.assertEqual("x" * 40 + "...", derive_session_title([Message(role=USER, content=content)]))

    def test_title_defaults_without_user_message(self) -> None:
        self.assertEqual("New Chat", derive_session_title([Message(role=ASSISTANT, content="hi")]))

    def test_reaction_toggle_returns_new_message(self) -> None:
        original = Message(role=ASSISTANT, content="answer")
        toggled = original.with_reaction_toggled("up")
        self.assertEqual(frozenset(), original.reactions)
        self.assertEqual(frozenset({"up"}), toggled.reactions)
        self.assertEqual(original, toggled.with_reaction_toggled("up"))

    def test_attachment_preview_kept_only_for_images(self) -> None:
        image = Attachment.from_dict({"name": "a.png", "type": "image/png", "preview": "data:image/png;base64,AA=="})
        doc = Attachment.from_dict({"name": "a.pdf", "mime_type": "application/pdf", "preview": "data:..."})
        self.assertTrue(image.is_image)
        self.assertEqual("data:image/png;base64,AA==", image.preview)
        self.assertFalse(doc.is_image)
        self.assertIsNone(doc.preview)

    def test_null_content_reads_as_empty_text(self) -> None:
        message = Message.from_dict({"role": "ai", "content": None})
        self.assertEqual("", message.content)
        self.assertEqual(ASSISTANT, message.role)

    def test_generated_ids_avoid_existing_ones(self) -> None:
        ids = {new_session_id() for _ in range(50)}
        self.assertEqual(50, len(ids))
        self.assertNotIn(new_session_id(ids), ids)
        folder_id = new_folder_id({"default"})
        self.assertTrue(folder_id.startswith("f_"))
        self.assertNotEqual("default", folder_id)


if __name__ == "__main__":
    unittest.main()
