"""
One-off prompt generation for a single course, outside the CSV store.
"""
from pathlib import Path
from typing import Optional

from ...config import Settings
from ...logging_config import setup_logging
from ...utils.content_fetcher import ContentFetcher, save_text_file
from ..llm.metadata_extractor import MetadataExtractor
from ..prompts.prompt_builder import build_sop_prompt
from .pipeline import prompt_file_name

logger = setup_logging(__name__)


def output_file_name(output_name: str) -> str:
    name = Path(output_name).name
    if not name.lower().endswith(".txt"):
        name += ".txt"
    return name


async def generate_single_prompt(
    settings: Settings,
    course_input: str,
    resume_file: Optional[str] = None,
    output_name: Optional[str] = None,
    fetcher: Optional[ContentFetcher] = None,
    extractor: Optional[MetadataExtractor] = None,
) -> Path:
    """Build and save the SOP prompt for one course.

    Args:
        settings: Runtime configuration
        course_input: Course URL or literal course description
        resume_file: Optional resume identifier in the resume directory
        output_name: Optional file name; ``.txt`` is appended when missing
        fetcher: Content fetcher to use instead of the default
        extractor: Metadata extractor to use instead of the default

    Returns:
        Path of the saved prompt

    Raises:
        CourseTextUnavailable: If no course text could be resolved
        ExtractionFailed: If metadata extraction fails
    """
    fetcher = fetcher or ContentFetcher(settings.resumes_dir, settings.request_timeout)
    extractor = extractor or MetadataExtractor(settings)

    logger.info(
        "Single prompt configuration",
        extra={
            "model": settings.gemini_model,
            "temperature": settings.gemini_temperature,
            "max_tokens": settings.gemini_max_output_tokens,
            "resume_file": resume_file,
        },
    )

    course_text = await fetcher.fetch_course_text(course_input)
    metadata = await extractor.extract(course_text)

    resume_text = await fetcher.read_resume(resume_file)
    if resume_file and not resume_text:
        logger.warning(f"Could not read resume {resume_file}, proceeding without it.")

    prompt_text = build_sop_prompt(metadata, resume_text)
    if output_name:
        file_name = output_file_name(output_name)
    else:
        file_name = prompt_file_name(metadata.course, metadata.university)

    saved_path = save_text_file(settings.prompts_dir, file_name, prompt_text)
    logger.info(f"SOP Prompt successfully saved to: {saved_path}")
    return saved_path
