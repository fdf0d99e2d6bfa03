from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path

_DEFAULT_USER_ID = "user@example.com"


@dataclass
class RuntimeEnv:
    provider_api_key: str
    provider_env_var: str
    user_id_override: str | None


@dataclass
class AppConfig:
    answer_backend: str
    answer_endpoint: str
    model: str
    max_tokens: int
    temperature: float
    system_prompt: str | None
    ask_timeout_seconds: float
    ask_max_attempts: int
    storage_db_path: str
    user_id: str
    export_directory: str
    log_level: str
    log_consumers: list | None


def load_json_config() -> dict:
    config_path = Path.cwd() / "config.json"
    if config_path.exists():
        with open(config_path) as f:
            return json.load(f)
    return {}


def parse_app_config(config: dict) -> AppConfig:
    return AppConfig(
        answer_backend=str(config.get("AnswerBackend", "http")).strip().lower(),
        answer_endpoint=str(config.get("AnswerEndpoint", "http://127.0.0.1:8000")),
        model=config.get("Model", "claude-sonnet-4-5-20250929"),
        max_tokens=int(config.get("MaxTokens", 4096)),
        temperature=float(config.get("Temperature", 1.0)),
        system_prompt=config.get("SystemPrompt"),
        ask_timeout_seconds=float(config.get("AskTimeoutSeconds", 120)),
        ask_max_attempts=int(config.get("AskMaxAttempts", 1)),
        storage_db_path=str(config.get("StorageDbPath", ".askdesk/store.db")),
        user_id=str(config.get("UserId", "")).strip() or _DEFAULT_USER_ID,
        export_directory=str(config.get("ExportDirectory", ".")),
        log_level=config.get("LogLevel", "INFO"),
        log_consumers=config.get("LogConsumers"),
    )


def resolve_runtime_env(answer_backend: str) -> RuntimeEnv:
    if answer_backend == "openai":
        provider_env_var = "OPENAI_API_KEY"
    elif answer_backend == "anthropic":
        provider_env_var = "ANTHROPIC_API_KEY"
    else:
        provider_env_var = ""

    return RuntimeEnv(
        provider_api_key=os.environ.get(provider_env_var, "") if provider_env_var else "",
        provider_env_var=provider_env_var,
        user_id_override=os.environ.get("ASKDESK_USER", "").strip() or None,
    )
