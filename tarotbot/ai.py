from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional
import logging

from openai import OpenAI, OpenAIError

log = logging.getLogger("tarotbot.ai")


class AIError(RuntimeError):
    """The generative step failed (network, quota, model or configuration)."""


class ChatGenerator(ABC):
    @abstractmethod
    def generate(self, messages: List[Dict[str, str]]) -> str:
        """Return the reply text; may contain several blank-line separated messages."""


# -------------------------------------------------------------------
# OPENAI
# -------------------------------------------------------------------

class OpenAIChatGenerator(ChatGenerator):
    def __init__(
        self,
        api_key: Optional[str],
        model: str = "gpt-3.5-turbo",
        temperature: float = 0.7,
        max_tokens: int = 400,
        timeout_seconds: float = 60.0,
        client: Any = None,
    ):
        self.api_key = api_key
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.timeout_seconds = timeout_seconds
        self._client = client

    def _get_client(self):
        if self._client is None:
            if not self.api_key or not self.api_key.strip():
                raise AIError("OPENAI_API_KEY is not configured")
            self._client = OpenAI(api_key=self.api_key, timeout=self.timeout_seconds)
        return self._client

    def generate(self, messages: List[Dict[str, str]]) -> str:
        client = self._get_client()
        log.debug("OpenAI request model=%s messages=%d", self.model, len(messages))
        try:
            response = client.chat.completions.create(
                model=self.model,
                messages=messages,
                max_tokens=self.max_tokens,
                temperature=self.temperature,
            )
        except OpenAIError as e:
            raise AIError(f"OpenAI API failed: {e}") from e

        content = ""
        if response.choices:
            content = response.choices[0].message.content or ""
        content = content.strip()
        if not content:
            raise AIError("OpenAI returned an empty reply")
        return content
