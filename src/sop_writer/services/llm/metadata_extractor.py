"""
Course metadata extraction with the Gemini ``generateContent`` API.
"""
import json
from typing import Any, Dict, Optional

import aiohttp

from ...config import Settings
from ...errors import ExtractionFailed
from ...logging_config import setup_logging
from ...models import CourseMetadata
from .llm_service import LLMService

logger = setup_logging(__name__)

MAX_COURSE_TEXT_CHARS = 30000

EXTRACTION_DIRECTIVE = """
Analyze the following course information and extract the specified details.
Return the output as a single, minified, valid JSON object with no other text before or after it.
The JSON object must have these exact keys: "courseName", "universityName", "country", "summary".

- "courseName": The official name of the course.
- "universityName": The name of the university offering the course.
- "country": The country where the university is located.
- "summary": A concise, 10-line summary covering the course focus, key modules, skills gained, and potential career paths.

Course Information:
---
{course_text}
---
"""


def strip_code_fences(text: str) -> str:
    return text.replace("```json", "").replace("```", "").strip()


def response_text(raw: Dict[str, Any]) -> str:
    """Pull the first candidate's text out of a generateContent response."""
    try:
        return raw["candidates"][0]["content"]["parts"][0].get("text") or ""
    except (KeyError, IndexError, TypeError, AttributeError):
        return ""


def parse_metadata(raw_text: str) -> CourseMetadata:
    """Parse the model's JSON answer, filling any missing field with a placeholder.

    Raises:
        ExtractionFailed: If the cleaned text is not a JSON object
    """
    cleaned = strip_code_fences(raw_text)
    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError as e:
        raise ExtractionFailed(f"Could not parse metadata JSON from model output: {e}") from e
    if not isinstance(data, dict):
        raise ExtractionFailed("Model output is not a JSON object")

    return CourseMetadata(
        course=_text(data.get("courseName")) or "Unknown Course",
        university=_text(data.get("universityName")) or "Unknown University",
        country=_text(data.get("country")) or "Unknown Country",
        course_info=_text(data.get("summary")) or "Info not available.",
    )


def _text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, list):
        return "\n".join(str(item) for item in value)
    return str(value).strip()


class MetadataExtractor(LLMService):
    """Turns free-form course text into structured course metadata."""

    error_class = ExtractionFailed
    service_name = "Gemini"

    def __init__(self, settings: Settings, session: Optional[aiohttp.ClientSession] = None):
        super().__init__(settings.request_timeout, session)
        self.api_key = settings.gemini_api_key
        self.model_name = settings.gemini_model
        self.generation_config = settings.generation_config()
        self.api_url = f"{settings.gemini_api_base.rstrip('/')}/models/{self.model_name}:generateContent"

    def build_request(self, course_text: str) -> Dict[str, Any]:
        prompt = EXTRACTION_DIRECTIVE.format(course_text=course_text[:MAX_COURSE_TEXT_CHARS])
        return {
            "contents": [{"parts": [{"text": prompt}]}],
            "generationConfig": self.generation_config,
        }

    async def extract(self, course_text: str) -> CourseMetadata:
        """Extract course, university, country and a course summary.

        Args:
            course_text: Plain course description; truncated before submission

        Returns:
            CourseMetadata: The extracted details

        Raises:
            ExtractionFailed: On transport/HTTP failure or unparsable model output
        """
        logger.info(
            "Extracting course and university metadata",
            extra={"model": self.model_name, "text_length": len(course_text)},
        )
        raw = await self.post_json(
            self.api_url,
            self.build_request(course_text),
            headers={"x-goog-api-key": self.api_key},
        )
        raw_text = response_text(raw)
        try:
            metadata = parse_metadata(raw_text)
        except ExtractionFailed:
            logger.error("Failed to extract metadata from Gemini", extra={"raw_response": raw_text[:500]})
            raise

        logger.info(
            "Course/University info extracted",
            extra={
                "course": metadata.course,
                "university": metadata.university,
                "country": metadata.country,
            },
        )
        return metadata
