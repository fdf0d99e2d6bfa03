import shutil
import unittest
from pathlib import Path

from askdesk.answer_services.http_service import HttpAnswerService
from askdesk.app_config import RuntimeEnv, parse_app_config
from askdesk.bootstrap import bootstrap_runtime


class BootstrapTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = Path(".test-artifacts") / "bootstrap"
        self._tmp.mkdir(parents=True, exist_ok=True)

    def tearDown(self) -> None:
        shutil.rmtree(self._tmp, ignore_errors=True)

    def _config(self, **overrides):
        config = {"LogConsumers": [], "StorageDbPath": str((self._tmp / "store.db").resolve())}
        config.update(overrides)
        return parse_app_config(config)

    def test_provider_backend_requires_api_key(self) -> None:
        app = self._config(AnswerBackend="anthropic")
        env = RuntimeEnv(provider_api_key="", provider_env_var="ANTHROPIC_API_KEY", user_id_override=None)

        with self.assertRaises(ValueError) as ctx:
            bootstrap_runtime(app, env)
        self.assertIn("ANTHROPIC_API_KEY", str(ctx.exception))

    def test_http_backend_opens_workspace_for_user(self) -> None:
        app = self._config(UserId="config@example.com")
        env = RuntimeEnv(provider_api_key="", provider_env_var="", user_id_override="env@example.com")

        runtime = bootstrap_runtime(app, env)
        try:
            self.assertIsInstance(runtime.answer_service, HttpAnswerService)
            self.assertEqual("env@example.com", runtime.workspace.user_id)
            self.assertEqual(["General"], [f.name for f in runtime.workspace.folders.folders])
            self.assertEqual([], runtime.log_descriptions)
            self.assertTrue((self._tmp / "store.db").exists())
        finally:
            runtime.close()

    def test_disabled_ask_timeout_reaches_http_backend_as_none(self) -> None:
        env = RuntimeEnv(provider_api_key="", provider_env_var="", user_id_override=None)

        for configured, expected in ((0, None), (-5, None), (30, 30.0)):
            runtime = bootstrap_runtime(self._config(AskTimeoutSeconds=configured), env)
            try:
                self.assertEqual(expected, runtime.answer_service.timeout_seconds)
            finally:
                runtime.close()


if __name__ == "__main__":
    unittest.main()
