"""
Application record model and the status rules for both pipeline passes.
"""
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

FAILED_PROCESSING = "FAILED_PROCESSING"
FAILED_MISSING_PROMPT = "FAILED_MISSING_PROMPT"
FAILURE_SENTINELS = (FAILED_PROCESSING, FAILED_MISSING_PROMPT)

CSV_HEADERS = [
    "candidateName",
    "resumeFile",
    "courseInput",
    "courseName",
    "universityName",
    "promptPath",
    "sopPath",
]


class FieldState(str, Enum):
    """State of a status column (``promptPath`` / ``sopPath``)."""

    ABSENT = "absent"
    EMPTY = "empty"
    FAILED = "failed"
    PATH = "path"


def field_state(value: Optional[str]) -> FieldState:
    """Classify a status value as absent, empty, a failure sentinel or a path."""
    if value is None:
        return FieldState.ABSENT
    if not value.strip():
        return FieldState.EMPTY
    if any(sentinel in value for sentinel in FAILURE_SENTINELS):
        return FieldState.FAILED
    return FieldState.PATH


class ApplicationRecord(BaseModel):
    """One candidate/course pairing, i.e. one row of the applications CSV."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    candidate_name: str = Field(default="", alias="candidateName")
    resume_file: Optional[str] = Field(default=None, alias="resumeFile")
    course_input: str = Field(default="", alias="courseInput")
    course_name: Optional[str] = Field(default=None, alias="courseName")
    university_name: Optional[str] = Field(default=None, alias="universityName")
    prompt_path: Optional[str] = Field(default=None, alias="promptPath")
    sop_path: Optional[str] = Field(default=None, alias="sopPath")

    @field_validator("candidate_name", "course_input", mode="before")
    @classmethod
    def _blank_if_missing(cls, value):
        return "" if value is None else value

    @property
    def prompt_state(self) -> FieldState:
        return field_state(self.prompt_path)

    @property
    def sop_state(self) -> FieldState:
        return field_state(self.sop_path)

    def to_row(self) -> dict:
        """Return the record keyed by CSV header, absent values as empty cells."""
        data = self.model_dump(by_alias=True)
        return {header: data[header] if data[header] is not None else "" for header in CSV_HEADERS}


class CourseMetadata(BaseModel):
    """Structured course details extracted from free-form course text."""

    course: str
    university: str
    country: str
    course_info: str


def needs_prompt(record: ApplicationRecord) -> bool:
    """A record enters the prompt pass only while its prompt path is unset."""
    return record.prompt_state in (FieldState.ABSENT, FieldState.EMPTY)


def needs_sop(record: ApplicationRecord) -> bool:
    """A record enters the SOP pass once it has a usable prompt and no SOP yet."""
    return record.prompt_state is FieldState.PATH and record.sop_state in (
        FieldState.ABSENT,
        FieldState.EMPTY,
    )
