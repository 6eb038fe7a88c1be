"""
Shared HTTP plumbing for the language-model services.
"""
import asyncio
from typing import Any, Dict, Optional, Type

import aiohttp

from ...errors import SOPWriterError
from ...logging_config import setup_logging

logger = setup_logging(__name__)


class LLMService:
    """Base class for services that POST JSON to a language-model API."""

    #: Exception raised for every failure of this service
    error_class: Type[SOPWriterError] = SOPWriterError
    service_name = "LLM"

    def __init__(self, timeout: float, session: Optional[aiohttp.ClientSession] = None):
        """Initialize the LLM service.

        Args:
            timeout: Total request timeout in seconds
            session: Optional shared HTTP session; one is opened per call otherwise
        """
        self.timeout = aiohttp.ClientTimeout(total=timeout)
        self._session = session

    async def post_json(
        self, url: str, payload: Dict[str, Any], headers: Optional[Dict[str, str]] = None
    ) -> Dict[str, Any]:
        """POST ``payload`` and return the decoded JSON response.

        Raises:
            error_class: On transport errors, timeouts, non-2xx statuses or a
                response body that is not JSON
        """
        logger.debug(f"Sending request to {self.service_name} API", extra={"url": url})
        try:
            if self._session is not None:
                return await self._send(self._session, url, payload, headers)
            async with aiohttp.ClientSession(timeout=self.timeout) as session:
                return await self._send(session, url, payload, headers)
        except self.error_class as e:
            logger.error(f"{self.service_name} API call failed", extra={"error": str(e)})
            raise
        except asyncio.TimeoutError as e:
            logger.error(f"{self.service_name} API request timed out", extra={"url": url})
            raise self.error_class(
                f"{self.service_name} API request timed out after {self.timeout.total}s"
            ) from e
        except (aiohttp.ClientError, ValueError) as e:
            logger.error(f"{self.service_name} API request failed", extra={"error": str(e)})
            raise self.error_class(f"{self.service_name} API request failed: {e!s}") from e

    async def _send(
        self,
        session: aiohttp.ClientSession,
        url: str,
        payload: Dict[str, Any],
        headers: Optional[Dict[str, str]],
    ) -> Dict[str, Any]:
        request_headers = {"Content-Type": "application/json"}
        request_headers.update(headers or {})
        async with session.post(
            url, json=payload, headers=request_headers, timeout=self.timeout
        ) as response:
            if not 200 <= response.status < 300:
                error_body = await response.text()
                raise self.error_class(
                    f"{self.service_name} API request failed: {response.status} - {error_body}"
                )
            data = await response.json(content_type=None)

        if not isinstance(data, dict):
            raise self.error_class(f"{self.service_name} API returned a non-object response")
        return data
