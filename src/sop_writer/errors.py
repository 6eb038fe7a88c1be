"""Exception hierarchy for the SOP writer pipeline."""


class SOPWriterError(Exception):
    """Base exception for SOP writer errors."""

    pass


class ConfigurationError(SOPWriterError):
    """Exception raised when required configuration is missing or invalid."""

    pass


class CourseTextUnavailable(SOPWriterError):
    """Exception raised when no course text could be resolved for a record."""

    pass


class ExtractionFailed(SOPWriterError):
    """Exception raised when course metadata extraction fails."""

    pass


class PromptFileMissing(SOPWriterError):
    """Exception raised when a record's prompt file cannot be read."""

    pass


class GenerationFailed(SOPWriterError):
    """Exception raised when the SOP model call fails."""

    pass
