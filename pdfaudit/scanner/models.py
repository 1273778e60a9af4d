"""Data models for the PDF-link scanner."""

from __future__ import annotations

import enum
from dataclasses import dataclass


class ClassificationResult(enum.Enum):
    """What a URL string says about the document behind it."""

    DIRECT_MATCH = "direct_match"
    POTENTIAL_REDIRECT = "potential_redirect"
    NOT_A_TARGET = "not_a_target"


@dataclass(frozen=True)
class Site:
    """One site of a (possibly multi-site) content store."""

    id: int
    url: str
    archived: bool = False


@dataclass(frozen=True)
class ContentRecord:
    """A single published post as returned by the content store."""

    id: int
    body: str
    date: str
    title: str
    permalink: str
    post_type: str = "post"
    status: str = "publish"
    site_id: int = 1


@dataclass(frozen=True)
class CandidateLink:
    """A URL extracted from a record body, tagged with its owner."""

    url: str
    record_id: int


@dataclass(frozen=True)
class ExportRow:
    """One discovered (record, PDF URL) pair, ready for CSV export."""

    post_id: int
    pdf_url: str
    post_date: str
    post_title: str
    post_url: str

    def as_list(self) -> list[str]:
        return [
            str(self.post_id),
            self.pdf_url,
            self.post_date,
            self.post_title,
            self.post_url,
        ]
