"""
Groq chat completions (OpenAI-compatible API)
"""
import logging
from typing import Dict, List, Optional

import httpx

from sharesathi.config import settings
from sharesathi.exceptions import DataSourceError, QuotaExceededError

logger = logging.getLogger(__name__)

CHAT_URL = "https://api.groq.com/openai/v1/chat/completions"

# quota / billing exhausted
QUOTA_STATUS_CODES = (402, 429)

NO_REPLY = "I could not generate a response."


class GroqClient:
    """Groq LLM client"""

    def __init__(
        self,
        api_key: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key if api_key is not None else settings.GROQ_API_KEY
        self.model = settings.GROQ_MODEL
        self.transport = transport

    @property
    def enabled(self) -> bool:
        return bool(self.api_key)

    def _get_headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

    async def chat(self, messages: List[Dict[str, str]], system_prompt: str) -> str:
        """
        One chat completion turn

        Args:
            messages: [{"role", "content"}, ...] conversation so far
            system_prompt: prepended as the system message

        Returns:
            Assistant reply text

        Raises:
            QuotaExceededError: provider answered 429 / 402
            DataSourceError: anything else went wrong
        """
        if not self.enabled:
            raise DataSourceError("Groq", "GROQ_API_KEY not configured")

        payload = {
            "model": self.model,
            "messages": [{"role": "system", "content": system_prompt}, *messages],
            "max_tokens": settings.GROQ_MAX_TOKENS,
            "temperature": settings.GROQ_TEMPERATURE,
        }

        try:
            async with httpx.AsyncClient(transport=self.transport) as client:
                response = await client.post(
                    CHAT_URL,
                    headers=self._get_headers(),
                    json=payload,
                    timeout=30.0,
                )
        except httpx.HTTPError as e:
            raise DataSourceError("Groq", str(e)) from e

        if response.status_code != 200:
            logger.error(f"Groq error: {response.status_code} - {response.text[:200]}")
            if response.status_code in QUOTA_STATUS_CODES:
                raise QuotaExceededError("Groq", f"HTTP {response.status_code}")
            raise DataSourceError("Groq", f"HTTP {response.status_code}")

        try:
            data = response.json()
        except ValueError as e:
            raise DataSourceError("Groq", "invalid JSON") from e

        choices = data.get("choices") or [{}]
        return (choices[0].get("message") or {}).get("content") or NO_REPLY


groq = GroqClient()
