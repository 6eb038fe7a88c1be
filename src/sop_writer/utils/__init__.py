"""
File, web and CSV helpers used by the pipeline.
"""

from .content_fetcher import (
    ContentFetcher,
    WebPageResult,
    html_to_text,
    is_url,
    sanitize_file_name,
    save_text_file,
)
from .storage import ApplicationStore

__all__ = [
    "ApplicationStore",
    "ContentFetcher",
    "WebPageResult",
    "html_to_text",
    "is_url",
    "sanitize_file_name",
    "save_text_file",
]
