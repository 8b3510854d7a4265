"""Exception hierarchy for fetching and parsing archive pages."""

from typing import Optional


class FicSyncError(Exception):
    """Base exception for all ficsync errors."""

    retryable = False

    def __init__(self, message: str, details: Optional[dict] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    def __str__(self) -> str:
        if self.details:
            detail_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({detail_str})"
        return self.message


class TransportError(FicSyncError):
    """Network failure, timeout or non-2xx response."""

    retryable = True

    def __init__(self, message: str, status_code: Optional[int] = None, url: Optional[str] = None):
        details = {}
        if url:
            details["url"] = url
        super().__init__(message, details)
        self.status_code = status_code
        self.url = url


class ParseError(FicSyncError):
    """A required part of the page is missing."""


class WorkNotFoundError(ParseError):
    """Work preface missing: deleted, locked or behind the adult-content gate."""

    def __init__(self, work_id: str):
        super().__init__("Work not found", {"work_id": work_id})
        self.work_id = work_id


class ChapterContentNotFoundError(ParseError):
    """Chapter body missing from the page."""

    def __init__(self, work_id: str, chapter_number: Optional[int] = None):
        details = {"work_id": work_id}
        if chapter_number is not None:
            details["chapter"] = chapter_number
        super().__init__("Chapter content not found", details)
        self.work_id = work_id
        self.chapter_number = chapter_number
