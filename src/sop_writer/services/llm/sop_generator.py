"""
SOP generation with an OpenRouter chat-completion model.
"""
import json
from typing import Any, Dict, Optional

import aiohttp

from ...config import Settings
from ...errors import GenerationFailed
from ...logging_config import setup_logging
from .llm_service import LLMService

logger = setup_logging(__name__)


def message_content(data: Dict[str, Any]) -> Optional[str]:
    try:
        return data["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError):
        return None


class SOPGenerator(LLMService):
    """Sends a finished prompt to the SOP model and returns the draft."""

    error_class = GenerationFailed
    service_name = "OpenRouter"

    def __init__(self, settings: Settings, session: Optional[aiohttp.ClientSession] = None):
        super().__init__(settings.llm_request_timeout, session)
        self.api_key = settings.openrouter_api_key
        self.api_url = settings.openrouter_api_url
        self.model_name = settings.openrouter_model
        self.site_url = settings.openrouter_site_url
        self.app_name = settings.openrouter_app_name

    def headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.api_key}",
            "HTTP-Referer": self.site_url,
            "X-Title": self.app_name,
        }

    async def generate(self, prompt_text: str) -> str:
        """Generate SOP prose for a prompt.

        The prompt is sent as-is, without truncation.

        Raises:
            GenerationFailed: On transport/HTTP failure or a response without content
        """
        logger.info(f"Sending prompt to OpenRouter model: {self.model_name}")
        data = await self.post_json(
            self.api_url,
            {
                "model": self.model_name,
                "messages": [{"role": "user", "content": prompt_text}],
            },
            headers=self.headers(),
        )
        logger.debug("Received JSON data from OpenRouter", extra={"response": json.dumps(data, default=str)[:2000]})

        sop_text = message_content(data)
        if not isinstance(sop_text, str) or not sop_text.strip():
            logger.error('Could not find "content" in the API response structure')
            raise GenerationFailed("No content found in OpenRouter API response.")

        logger.info("SOP content successfully extracted from API response")
        return sop_text.strip()
