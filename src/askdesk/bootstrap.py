from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from askdesk.answer_service import AnswerService, create_answer_service
from askdesk.app_config import AppConfig, RuntimeEnv
from askdesk.logging_config import setup_logging
from askdesk.shell import ChatShell
from askdesk.storage import SqliteKeyValueStore
from askdesk.system_prompt import get_system_prompt
from askdesk.workspace import ChatWorkspace, open_workspace


@dataclass
class AppRuntime:
    workspace: ChatWorkspace
    shell: ChatShell
    answer_service: AnswerService
    store: SqliteKeyValueStore
    log_descriptions: list[str]

    def close(self) -> None:
        self.store.close()


def bootstrap_runtime(app: AppConfig, env: RuntimeEnv) -> AppRuntime:
    user_id = env.user_id_override or app.user_id
    db_path = Path(app.storage_db_path)
    if not db_path.is_absolute():
        db_path = Path.cwd() / db_path
    log_descriptions = setup_logging(
        level=app.log_level,
        consumers=app.log_consumers,
        user_id=user_id,
        log_dir=db_path.parent,
    )

    if app.answer_backend in ("anthropic", "openai") and not env.provider_api_key:
        raise ValueError(f"{env.provider_env_var} environment variable is required for the {app.answer_backend} backend.")

    answer_service = create_answer_service(
        app.answer_backend,
        endpoint_url=app.answer_endpoint,
        api_key=env.provider_api_key,
        model=app.model,
        max_tokens=app.max_tokens,
        temperature=app.temperature,
        timeout_seconds=app.ask_timeout_seconds if app.ask_timeout_seconds > 0 else None,
        max_attempts=app.ask_max_attempts,
    )

    store = SqliteKeyValueStore(str(db_path))

    workspace = open_workspace(
        store,
        user_id,
        answer_service,
        system_prompt=get_system_prompt(app.system_prompt),
        ask_timeout_seconds=app.ask_timeout_seconds,
    )
    shell = ChatShell(workspace, export_directory=app.export_directory)

    return AppRuntime(
        workspace=workspace,
        shell=shell,
        answer_service=answer_service,
        store=store,
        log_descriptions=log_descriptions,
    )
