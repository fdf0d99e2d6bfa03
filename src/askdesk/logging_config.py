"""Loguru sinks for the askdesk shell.

Every record carries the active user identity (``extra["user"]``), and base64
image previews are shortened before any sink sees them.
"""

import re
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from loguru import logger

_CONSOLE_FORMAT = (
    "<level>{level:<8}</level> | <magenta>{extra[user]}</magenta> | "
    "<cyan>{name}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
)
_FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level:<8} | {extra[user]} | {name}:{function}:{line} - {message}"

_DATA_URL = re.compile(r"data:(?P<mime>[\w.+-]+/[\w.+-]+);base64,[A-Za-z0-9+/=]{32,}")

# The REPL owns stdout, so the console sink only carries warnings unless configured.
_DEFAULT_CONSUMERS: list[dict[str, Any]] = [
    {"type": "console", "level": "WARNING"},
    {"type": "file"},
]


def elide_data_urls(text: str) -> str:
    return _DATA_URL.sub(lambda m: f"data:{m.group('mime')};base64,<{len(m.group(0))} chars>", text)


def _patch_record(record: dict) -> None:
    record["message"] = elide_data_urls(record["message"])


def _flag(value: object) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes", "on"}
    return bool(value)


@dataclass
class LogSink:
    kind: str
    level: str
    path: Path | None = None
    rotation: str = "5 MB"
    retention: int = 3
    serialize: bool = False

    def register(self) -> None:
        if self.kind == "console":
            logger.add(sys.stderr, level=self.level, format=_CONSOLE_FORMAT)
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            self.path,
            level=self.level,
            format=_FILE_FORMAT,
            rotation=self.rotation,
            retention=self.retention,
            serialize=self.serialize,
            encoding="utf-8",
        )

    def describe(self) -> str:
        if self.kind == "console":
            return f"console (stderr, {self.level})"
        layout = "jsonl" if self.serialize else "text"
        return f"file ({self.path}, {self.level}, {layout})"


def parse_log_sink(config: dict[str, Any], default_level: str, log_dir: Path) -> LogSink | None:
    """Build a sink from one ``LogConsumers`` entry; relative file paths land in ``log_dir``."""
    kind = str(config.get("type", "")).strip().lower()
    level = str(config.get("level", default_level)).upper()
    if kind == "console":
        return LogSink(kind=kind, level=level)
    if kind == "file":
        path = Path(str(config.get("path", "askdesk.log")))
        if not path.is_absolute():
            path = log_dir / path
        return LogSink(
            kind=kind,
            level=level,
            path=path,
            rotation=str(config.get("rotation", "5 MB")),
            retention=int(config.get("retention", 3)),
            serialize=_flag(config.get("serialize", False)),
        )
    logger.warning(f"Unknown log consumer type: {kind!r}")
    return None


def setup_logging(
    level: str = "INFO",
    consumers: list[dict[str, Any]] | None = None,
    *,
    user_id: str = "-",
    log_dir: str | Path = ".askdesk",
) -> list[str]:
    """Replace loguru's default sink with the configured consumers.

    Returns a description of each consumer that was registered.
    """
    logger.remove()
    logger.configure(extra={"user": user_id}, patcher=_patch_record)

    descriptions: list[str] = []
    for config in consumers if consumers is not None else _DEFAULT_CONSUMERS:
        sink = parse_log_sink(config, level, Path(log_dir))
        if sink is None:
            continue
        sink.register()
        descriptions.append(sink.describe())
    return descriptions
