from typing import Protocol, runtime_checkable


@runtime_checkable
class AnswerService(Protocol):
    async def ask(self, message: str, system_prompt: str) -> str:
        """Send one user message and return the assistant's reply text."""
        ...


def create_answer_service(
    backend: str,
    *,
    endpoint_url: str = "",
    api_key: str = "",
    model: str = "",
    max_tokens: int = 4096,
    temperature: float = 1.0,
    timeout_seconds: float | None = 120.0,
    max_attempts: int = 1,
) -> AnswerService:
    """Factory: create an AnswerService by backend name."""
    name = backend.strip().lower()
    if name == "http":
        from askdesk.answer_services.http_service import HttpAnswerService
        return HttpAnswerService(endpoint_url, timeout_seconds=timeout_seconds, max_attempts=max_attempts)
    if name == "anthropic":
        from askdesk.answer_services.anthropic_service import AnthropicAnswerService
        return AnthropicAnswerService(
            api_key,
            model=model,
            max_tokens=max_tokens,
            temperature=temperature,
            max_attempts=max_attempts,
        )
    if name == "openai":
        from askdesk.answer_services.openai_service import OpenAIAnswerService
        return OpenAIAnswerService(
            api_key,
            model=model,
            max_tokens=max_tokens,
            temperature=temperature,
            max_attempts=max_attempts,
        )
    raise ValueError(f"Unknown answer backend: {backend!r}. Supported: 'http', 'anthropic', 'openai'")
