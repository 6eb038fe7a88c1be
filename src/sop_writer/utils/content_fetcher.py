"""
Content fetching for the prompt pass.

Resolves course descriptions from a URL or literal text and resume text from
PDF files in the resume directory.
"""

import asyncio
import io
import re
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Optional

import aiohttp
from bs4 import BeautifulSoup
from pypdf import PdfReader

from ..errors import CourseTextUnavailable
from ..logging_config import setup_logging

logger = setup_logging(__name__)

USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36"
)
INVALID_FILENAME_CHARS = re.compile(r'[<>:"/\\|?*]+')


@dataclass
class WebPageResult:
    url: str
    content: Optional[str] = None
    error: Optional[str] = None
    timestamp: Optional[datetime] = None

    @property
    def success(self) -> bool:
        return self.error is None and bool(self.content)


def is_url(course_input: str) -> bool:
    return course_input.strip().lower().startswith(("http://", "https://"))


def html_to_text(html: str) -> str:
    """Strip tags, scripts and styles from an HTML page and collapse whitespace."""
    soup = BeautifulSoup(html, "html.parser")

    # Remove script and style elements
    for script in soup(["script", "style"]):
        script.decompose()

    text = soup.get_text(separator=" ")
    return re.sub(r"\s+", " ", text).strip()


def sanitize_file_name(name: Optional[str]) -> str:
    """Make a course or university name safe to use inside a file name."""
    if not name:
        return "untitled"
    cleaned = INVALID_FILENAME_CHARS.sub("", re.sub(r"\s+", "_", name.strip())).lower()
    return cleaned or "untitled"


def save_text_file(directory: Path, file_name: str, text: str) -> Path:
    """Write ``text`` to ``directory/file_name``, creating the directory if needed."""
    directory = Path(directory)
    directory.mkdir(parents=True, exist_ok=True)
    file_path = directory / file_name
    file_path.write_text(text, encoding="utf-8")
    return file_path


class ContentFetcher:
    """Resolves course text and resume text for an application."""

    def __init__(
        self,
        resumes_dir: Path,
        request_timeout: float = 30,
        session: Optional[aiohttp.ClientSession] = None,
    ):
        """Initialize the fetcher.

        Args:
            resumes_dir: Directory holding ``<resume id>.pdf`` files
            request_timeout: Total timeout for a course page request, in seconds
            session: Optional shared HTTP session
        """
        self.resumes_dir = Path(resumes_dir)
        self.timeout = aiohttp.ClientTimeout(total=request_timeout)
        self._session = session

    async def crawl_course_page(self, url: str) -> WebPageResult:
        """
        Fetch a course page and return its visible text.

        Args:
            url: The URL to fetch

        Returns:
            WebPageResult: The page text, or the error that prevented fetching it
        """
        try:
            if self._session is not None:
                html = await self._get(self._session, url)
            else:
                async with aiohttp.ClientSession(timeout=self.timeout) as session:
                    html = await self._get(session, url)
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.error(f"Failed to fetch from URL {url}: {e!s}")
            return WebPageResult(url=url, error=str(e) or type(e).__name__)

        text = html_to_text(html)
        logger.info(
            f"Successfully fetched URL: {url}", extra={"content_length": len(text)}
        )
        return WebPageResult(url=url, content=text, timestamp=datetime.now())

    async def _get(self, session: aiohttp.ClientSession, url: str) -> str:
        async with session.get(
            url, headers={"User-Agent": USER_AGENT}, timeout=self.timeout
        ) as response:
            response.raise_for_status()
            return await response.text()

    async def fetch_course_text(self, course_input: str) -> str:
        """Return plain course text for a URL or a literal description.

        Raises:
            CourseTextUnavailable: If the page cannot be fetched or no text remains
        """
        if not is_url(course_input):
            logger.debug("Using provided text as course content")
            text = (course_input or "").strip()
            if not text:
                raise CourseTextUnavailable("Could not retrieve course text.")
            return text

        logger.info(f"Fetching course content from URL: {course_input}")
        result = await self.crawl_course_page(course_input.strip())
        if not result.success:
            raise CourseTextUnavailable(
                f"Could not retrieve course text from {result.url}: {result.error or 'empty page'}"
            )
        return result.content

    def resume_path(self, resume_file: str) -> Path:
        name = resume_file.strip()
        if not name.lower().endswith(".pdf"):
            name = f"{name}.pdf"
        return self.resumes_dir / name

    async def read_resume(self, resume_file: Optional[str]) -> Optional[str]:
        """Extract resume text for an application.

        Args:
            resume_file: Resume identifier, resolved to ``<resumes_dir>/<id>.pdf``

        Returns:
            The resume text, or None when no resume is given or it cannot be read
        """
        if not resume_file or not resume_file.strip():
            logger.info("No resume filename provided for this application.")
            return None

        pdf_path = self.resume_path(resume_file)
        if not pdf_path.is_file():
            logger.warning(f"Resume file not found at: {pdf_path}")
            return None

        try:
            text = await asyncio.to_thread(extract_pdf_text, pdf_path.read_bytes())
        except Exception as e:
            # Parser failures surface as many exception types; none may abort the record
            logger.warning(
                f"Failed to read or parse resume PDF: {pdf_path}",
                extra={"error": str(e), "error_type": type(e).__name__},
            )
            return None

        if not text:
            logger.warning(f"No text could be extracted from resume PDF: {pdf_path}")
            return None
        return text


def extract_pdf_text(data: bytes) -> str:
    reader = PdfReader(io.BytesIO(data))
    chunks = []
    for page in reader.pages:
        content = page.extract_text() or ""
        if content:
            chunks.append(content)
    return "\n".join(chunks).strip()
