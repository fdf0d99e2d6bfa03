import httpx
from loguru import logger
from tenacity import retry

from askdesk.answer_services.common import ask_retry_kwargs

_ASK_PATH = "/ask"
_DEFAULT_TIMEOUT_SECONDS = 120.0


class HttpAnswerService:
    """Client for an answering server exposing ``POST /ask``.

    The request body is ``{"message": ..., "system_prompt": ...}`` and the
    server replies with ``{"response": ...}``.
    """

    def __init__(
        self,
        endpoint_url: str,
        *,
        timeout_seconds: float | None = _DEFAULT_TIMEOUT_SECONDS,
        max_attempts: int = 1,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._url = endpoint_url.rstrip("/") + _ASK_PATH
        self._timeout_seconds = timeout_seconds
        self._transport = transport
        self._ask_with_retry = retry(**ask_retry_kwargs((httpx.TransportError,), max_attempts))(self._post)

    @property
    def url(self) -> str:
        return self._url

    @property
    def timeout_seconds(self) -> float | None:
        """Per-request httpx timeout; None waits indefinitely."""
        return self._timeout_seconds

    async def ask(self, message: str, system_prompt: str) -> str:
        return await self._ask_with_retry(message, system_prompt)

    async def _post(self, message: str, system_prompt: str) -> str:
        logger.debug(f"Ask request: url={self._url}, chars={len(message)}")
        async with httpx.AsyncClient(timeout=self._timeout_seconds, transport=self._transport) as client:
            response = await client.post(
                self._url,
                json={"message": message, "system_prompt": system_prompt},
            )

        if response.status_code >= 400:
            raise httpx.HTTPStatusError(
                f"HTTP {response.status_code} from answering server",
                request=response.request,
                response=response,
            )

        data = response.json()
        reply = data.get("response") if isinstance(data, dict) else None
        if not isinstance(reply, str):
            raise ValueError("Answering server reply has no 'response' text")
        logger.debug(f"Ask response: chars={len(reply)}")
        return reply
