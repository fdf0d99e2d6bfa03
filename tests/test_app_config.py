import os
import unittest
from unittest.mock import patch

from askdesk.app_config import parse_app_config, resolve_runtime_env
from askdesk.system_prompt import get_system_prompt


class AppConfigTests(unittest.TestCase):
    def test_defaults(self) -> None:
        app = parse_app_config({})

        self.assertEqual("http", app.answer_backend)
        self.assertEqual("http://127.0.0.1:8000", app.answer_endpoint)
        self.assertEqual(120.0, app.ask_timeout_seconds)
        self.assertEqual(1, app.ask_max_attempts)
        self.assertEqual("user@example.com", app.user_id)
        self.assertIsNone(app.system_prompt)
        self.assertIsNone(app.log_consumers)

    def test_values_are_normalized(self) -> None:
        app = parse_app_config(
            {
                "AnswerBackend": " OpenAI ",
                "MaxTokens": "256",
                "Temperature": "0.5",
                "AskTimeoutSeconds": "0",
                "AskMaxAttempts": 3,
                "UserId": "  ",
                "StorageDbPath": "data/chat.db",
            }
        )

        self.assertEqual("openai", app.answer_backend)
        self.assertEqual(256, app.max_tokens)
        self.assertEqual(0.5, app.temperature)
        self.assertEqual(0.0, app.ask_timeout_seconds)
        self.assertEqual(3, app.ask_max_attempts)
        self.assertEqual("user@example.com", app.user_id)
        self.assertEqual("data/chat.db", app.storage_db_path)

    def test_runtime_env_picks_provider_key(self) -> None:
        env = {"ANTHROPIC_API_KEY": "a-key", "OPENAI_API_KEY": "o-key", "ASKDESK_USER": " me@example.com "}
        with patch.dict(os.environ, env, clear=True):
            anthropic_env = resolve_runtime_env("anthropic")
            openai_env = resolve_runtime_env("openai")
            http_env = resolve_runtime_env("http")

        self.assertEqual(("a-key", "ANTHROPIC_API_KEY"), (anthropic_env.provider_api_key, anthropic_env.provider_env_var))
        self.assertEqual("o-key", openai_env.provider_api_key)
        self.assertEqual(("", ""), (http_env.provider_api_key, http_env.provider_env_var))
        self.assertEqual("me@example.com", http_env.user_id_override)

    def test_runtime_env_without_user_override(self) -> None:
        with patch.dict(os.environ, {}, clear=True):
            self.assertIsNone(resolve_runtime_env("http").user_id_override)

    def test_system_prompt(self) -> None:
        self.assertEqual("Assistant", get_system_prompt())
        self.assertEqual("Assistant", get_system_prompt("   "))
        self.assertEqual("Be brief.", get_system_prompt("Be brief."))


if __name__ == "__main__":
    unittest.main()
