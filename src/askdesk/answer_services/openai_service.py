import openai
from loguru import logger
from tenacity import retry

from askdesk.answer_services.common import ask_retry_kwargs


class OpenAIAnswerService:
    def __init__(
        self,
        api_key: str,
        *,
        model: str,
        max_tokens: int = 4096,
        temperature: float = 1.0,
        max_attempts: int = 1,
    ):
        self._client = openai.AsyncOpenAI(api_key=api_key, max_retries=0)
        self._model = model
        self._max_tokens = max_tokens
        self._temperature = temperature
        self._ask_with_retry = retry(
            **ask_retry_kwargs(
                (
                    openai.RateLimitError,
                    openai.APIConnectionError,
                    openai.APITimeoutError,
                ),
                max_attempts,
            )
        )(self._create_completion)

    async def ask(self, message: str, system_prompt: str) -> str:
        return await self._ask_with_retry(message, system_prompt)

    async def _create_completion(self, message: str, system_prompt: str) -> str:
        messages: list[dict] = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": message})

        logger.debug(f"API request: model={self._model}, messages={len(messages)}")
        response = await self._client.chat.completions.create(
            model=self._model,
            max_tokens=self._max_tokens,
            temperature=self._temperature,
            messages=messages,
        )
        text = response.choices[0].message.content or ""
        logger.debug(f"API response: len={len(text)}")
        return text
