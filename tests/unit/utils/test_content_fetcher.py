"""Tests for course text and resume resolution."""

from unittest.mock import MagicMock, patch

import aiohttp
import pytest
from pypdf.errors import PdfReadError

from sop_writer.errors import CourseTextUnavailable
from sop_writer.utils.content_fetcher import (
    ContentFetcher,
    html_to_text,
    is_url,
    sanitize_file_name,
    save_text_file,
)

COURSE_PAGE = """
<html>
  <head><title>MSc Data Science</title><style>body { color: red; }</style></head>
  <body>
    <script>var tracking = true;</script>
    <h1>MSc   Data Science</h1>
    <p>Study machine learning
       at Leeds.</p>
  </body>
</html>
"""


@pytest.mark.parametrize(
    "value, expected",
    [
        ("https://example.edu/course", True),
        ("http://example.edu/course", True),
        ("  HTTPS://example.edu/course", True),
        ("httpfoo is not a url", False),
        ("MSc Data Science at Leeds", False),
    ],
)
def test_is_url(value, expected):
    assert is_url(value) is expected


def test_html_to_text_strips_markup():
    text = html_to_text(COURSE_PAGE)
    assert "tracking" not in text
    assert "color: red" not in text
    assert "MSc Data Science" in text
    assert "Study machine learning at Leeds." in text


@pytest.mark.parametrize(
    "name, expected",
    [
        ("Data Science", "data_science"),
        ("MSc  Computer/Science: AI?", "msc_computerscience_ai"),
        ("University of Leeds", "university_of_leeds"),
        ("", "untitled"),
        (None, "untitled"),
        ('<>:"|?*', "untitled"),
    ],
)
def test_sanitize_file_name(name, expected):
    assert sanitize_file_name(name) == expected


def test_save_text_file_creates_directory(tmp_path):
    path = save_text_file(tmp_path / "prompts" / "nested", "a_prompt.txt", "hello")
    assert path == tmp_path / "prompts" / "nested" / "a_prompt.txt"
    assert path.read_text(encoding="utf-8") == "hello"


@pytest.mark.asyncio
async def test_literal_course_text_is_used_as_is(tmp_path, http_session):
    fetcher = ContentFetcher(tmp_path, session=http_session())
    text = await fetcher.fetch_course_text("  MSc Data Science at Leeds  ")
    assert text == "MSc Data Science at Leeds"
    fetcher._session.get.assert_not_called()


@pytest.mark.asyncio
async def test_empty_literal_course_text_is_unavailable(tmp_path):
    fetcher = ContentFetcher(tmp_path)
    with pytest.raises(CourseTextUnavailable):
        await fetcher.fetch_course_text("   ")


@pytest.mark.asyncio
async def test_url_course_text_is_fetched_and_stripped(tmp_path, http_session):
    session = http_session(text=COURSE_PAGE)
    fetcher = ContentFetcher(tmp_path, session=session)

    text = await fetcher.fetch_course_text("https://example.edu/msc-data-science")

    assert "Study machine learning at Leeds." in text
    assert "<h1>" not in text
    session.get.assert_called_once()
    assert session.get.call_args.args[0] == "https://example.edu/msc-data-science"


@pytest.mark.asyncio
async def test_unreachable_url_is_unavailable(tmp_path, http_session):
    session = http_session(error=aiohttp.ClientConnectionError("connection refused"))
    fetcher = ContentFetcher(tmp_path, session=session)

    with pytest.raises(CourseTextUnavailable, match="connection refused"):
        await fetcher.fetch_course_text("https://example.edu/down")


@pytest.mark.asyncio
async def test_url_with_blank_page_is_unavailable(tmp_path, http_session):
    session = http_session(text="<html><body>  </body></html>")
    fetcher = ContentFetcher(tmp_path, session=session)

    with pytest.raises(CourseTextUnavailable):
        await fetcher.fetch_course_text("https://example.edu/blank")


@pytest.mark.asyncio
async def test_crawl_reports_http_error(tmp_path, http_session):
    session = http_session()
    session.response.raise_for_status.side_effect = aiohttp.ClientResponseError(
        request_info=MagicMock(), history=(), status=404, message="Not Found"
    )
    fetcher = ContentFetcher(tmp_path, session=session)

    result = await fetcher.crawl_course_page("https://example.edu/missing")

    assert not result.success
    assert "404" in result.error


@pytest.mark.asyncio
@pytest.mark.parametrize("resume_file", [None, "", "   "])
async def test_no_resume_identifier_returns_none(tmp_path, resume_file):
    assert await ContentFetcher(tmp_path).read_resume(resume_file) is None


@pytest.mark.asyncio
async def test_missing_resume_file_returns_none(tmp_path):
    assert await ContentFetcher(tmp_path).read_resume("nobody") is None


def _fake_reader(*page_texts):
    pages = []
    for page_text in page_texts:
        page = MagicMock()
        page.extract_text.return_value = page_text
        pages.append(page)
    return MagicMock(pages=pages)


@pytest.mark.asyncio
async def test_resume_text_is_extracted_from_pdf(tmp_path):
    (tmp_path / "asha_cv.pdf").write_bytes(b"%PDF-1.4 fake")

    with patch(
        "sop_writer.utils.content_fetcher.PdfReader",
        return_value=_fake_reader("Asha Rao", None, "Python, SQL"),
    ):
        text = await ContentFetcher(tmp_path).read_resume("asha_cv")

    assert text == "Asha Rao\nPython, SQL"


@pytest.mark.asyncio
async def test_resume_identifier_with_pdf_extension(tmp_path):
    (tmp_path / "asha_cv.pdf").write_bytes(b"%PDF-1.4 fake")

    with patch(
        "sop_writer.utils.content_fetcher.PdfReader", return_value=_fake_reader("Asha Rao")
    ):
        text = await ContentFetcher(tmp_path).read_resume("asha_cv.pdf")

    assert text == "Asha Rao"


@pytest.mark.asyncio
async def test_unparsable_resume_returns_none(tmp_path):
    (tmp_path / "broken.pdf").write_bytes(b"not a pdf")

    with patch(
        "sop_writer.utils.content_fetcher.PdfReader", side_effect=PdfReadError("EOF marker not found")
    ):
        assert await ContentFetcher(tmp_path).read_resume("broken") is None


@pytest.mark.asyncio
async def test_resume_without_text_returns_none(tmp_path):
    (tmp_path / "scanned.pdf").write_bytes(b"%PDF-1.4 fake")

    with patch("sop_writer.utils.content_fetcher.PdfReader", return_value=_fake_reader("", None)):
        assert await ContentFetcher(tmp_path).read_resume("scanned") is None


@pytest.mark.asyncio
@pytest.mark.parametrize("error", [KeyError("/Root"), TypeError("'NoneType' object is not subscriptable"), RecursionError()])
async def test_any_parser_error_on_resume_returns_none(tmp_path, error, caplog):
    (tmp_path / "odd.pdf").write_bytes(b"%PDF-1.7 odd")
    page = MagicMock()
    page.extract_text.side_effect = error

    with patch("sop_writer.utils.content_fetcher.PdfReader", return_value=MagicMock(pages=[page])):
        assert await ContentFetcher(tmp_path).read_resume("odd") is None

    assert "Failed to read or parse resume PDF" in caplog.text
