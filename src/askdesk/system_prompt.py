_DEFAULT_SYSTEM_PROMPT = "Assistant"


def get_system_prompt(configured: str | None = None) -> str:
    if configured and configured.strip():
        return configured.strip()
    return _DEFAULT_SYSTEM_PROMPT
