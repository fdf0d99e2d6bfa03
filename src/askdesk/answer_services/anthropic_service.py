import anthropic
from loguru import logger
from tenacity import retry

from askdesk.answer_services.common import ask_retry_kwargs


class AnthropicAnswerService:
    def __init__(
        self,
        api_key: str,
        *,
        model: str,
        max_tokens: int = 4096,
        temperature: float = 1.0,
        max_attempts: int = 1,
    ):
        self._client = anthropic.AsyncAnthropic(api_key=api_key, max_retries=0)
        self._model = model
        self._max_tokens = max_tokens
        self._temperature = temperature
        self._ask_with_retry = retry(
            **ask_retry_kwargs(
                (
                    anthropic.RateLimitError,
                    anthropic.APIConnectionError,
                    anthropic.APITimeoutError,
                ),
                max_attempts,
            )
        )(self._create_message)

    async def ask(self, message: str, system_prompt: str) -> str:
        return await self._ask_with_retry(message, system_prompt)

    async def _create_message(self, message: str, system_prompt: str) -> str:
        logger.debug(f"API request: model={self._model}, max_tokens={self._max_tokens}")
        response = await self._client.messages.create(
            model=self._model,
            max_tokens=self._max_tokens,
            temperature=self._temperature,
            system=system_prompt,
            messages=[{"role": "user", "content": message}],
        )
        usage = response.usage
        logger.debug(
            f"API response: stop_reason={response.stop_reason}, "
            f"input_tokens={usage.input_tokens}, output_tokens={usage.output_tokens}"
        )
        return "".join(block.text for block in response.content if block.type == "text")
