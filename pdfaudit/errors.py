"""Exception hierarchy shared by the scanner, exporter and report stages."""

from __future__ import annotations


class PipelineError(Exception):
    """Base class for every error the toolkit raises on purpose."""


class InvalidInputError(PipelineError, ValueError):
    """A user-supplied argument or input file is unusable."""


class InvalidDateFormat(InvalidInputError):
    """A start-date filter did not match ``MM-DD-YYYY``."""


class OutputError(PipelineError, OSError):
    """An output file could not be opened for writing."""


class ReportDirectoryError(PipelineError, OSError):
    """The report directory is missing or cannot be listed."""


class MalformedReportError(PipelineError, ValueError):
    """A report file is not valid JSON or lacks the expected sections."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"Malformed report {path!r}: {reason}")
        self.path = path
        self.reason = reason
