"""Exception types raised by the resume parsing pipeline.

Input errors are rejected before any extraction happens and surface as HTTP 400.
Everything else that escapes the pipeline is reported as a failed parse result.
"""
from __future__ import annotations


class ResumeInputError(ValueError):
    """The uploaded file cannot be accepted (missing, empty, too large)."""

    status_code = 400


class UnsupportedFileTypeError(ResumeInputError):
    """The upload is neither a PDF nor a DOCX document."""

    def __init__(self, mime_type: str | None = None):
        self.mime_type = mime_type
        super().__init__("Unsupported file type")


class DocumentTextError(ValueError):
    """The text-extraction adapter could not recover any text from the document."""
