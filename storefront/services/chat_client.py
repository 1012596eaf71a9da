# storefront/services/chat_client.py
import openai
from openai import OpenAI

from storefront.domain.errors import UpstreamUnavailableError
from storefront.utils import settings
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

SYSTEM_PROMPT = "You are a helpful sales and support assistant for a solar and security company."
EMPTY_MESSAGE_REPLY = "Please share how we can help."


class ChatService:
    """
    Chat widget replies.
    scripted - canned acknowledgement, no network
    openai   - proxied to a chat completions API
    """

    def __init__(
        self,
        mode: str | None = None,
        api_key: str | None = None,
        base_url: str | None = None,
        model: str | None = None,
        timeout: float | None = None,
        store_name: str | None = None,
        client: OpenAI | None = None,
    ):
        self.mode = (mode or settings.CHAT_MODE).lower()
        self.api_key = settings.OPENAI_API_KEY if api_key is None else api_key
        self.base_url = (base_url or settings.OPENAI_BASE_URL).rstrip("/")
        self.model = model or settings.OPENAI_MODEL
        self.timeout = timeout or settings.HTTP_TIMEOUT_SECONDS
        self.store_name = store_name or settings.STORE_SHORT_NAME
        self._client = client

    def reply(self, message: str | None) -> str:
        if self.mode == "openai":
            return self._completion(message or "")
        return self._scripted(message)

    def _scripted(self, message: str | None) -> str:
        if not message:
            return EMPTY_MESSAGE_REPLY
        return f'Thanks for your message: "{message}". A {self.store_name} specialist will reply shortly.'

    def _get_client(self) -> OpenAI:
        if self._client is None:
            self._client = OpenAI(
                api_key=self.api_key,
                base_url=self.base_url,
                timeout=self.timeout,
                max_retries=0,
            )
        return self._client

    def _completion(self, message: str) -> str:
        if not self.api_key:
            raise UpstreamUnavailableError("Chat service not configured")

        logger.info(f"ChatService completion via {self.base_url} ({self.model})")
        try:
            resp = self._get_client().chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": message},
                ],
                max_tokens=400,
            )
        except openai.OpenAIError as e:
            logger.error(f"Chat provider call failed: {e}")
            raise UpstreamUnavailableError("Chat error") from e

        if not resp.choices:
            return "No reply"
        return resp.choices[0].message.content or "No reply"
