"""Candidate-link extraction from record bodies."""

from __future__ import annotations

import html
import re
from typing import List, Optional
from urllib.parse import urljoin, urlsplit

from pdfaudit.scanner.models import CandidateLink, ContentRecord

_HREF_PATTERN = re.compile(
    r"""<a\s[^>]*?(?<![\w-])href\s*=\s*(?:"([^"]*)"|'([^']*)')""",
    re.IGNORECASE,
)
_SCHEME_PATTERN = re.compile(r"^([a-z][a-z0-9+.\-]*):", re.IGNORECASE)


def _normalise_href(value: str, base_url: Optional[str] = None) -> Optional[str]:
    """Decode, trim and absolutise an href; ``None`` if it cannot be a web URL."""
    href = html.unescape(value).strip()
    if not href or href.startswith("#"):
        return None

    scheme = _SCHEME_PATTERN.match(href)
    if scheme:
        return href if scheme.group(1).lower() in {"http", "https"} else None

    # Relative or protocol-relative: only usable against an absolute base.
    if base_url and urlsplit(base_url).scheme in {"http", "https"}:
        return urljoin(base_url, href)
    return None


def extract_hrefs(body: str, base_url: Optional[str] = None) -> List[str]:
    """Return every usable ``href`` value of ``<a>`` tags in *body*, in order.

    Duplicates are kept; de-duplication is the scanner's job.
    """
    hrefs: List[str] = []
    for m in _HREF_PATTERN.finditer(body or ""):
        raw = m.group(1) if m.group(1) is not None else m.group(2)
        href = _normalise_href(raw, base_url)
        if href:
            hrefs.append(href)
    return hrefs


def extract_candidates(record: ContentRecord) -> List[CandidateLink]:
    """Wrap :func:`extract_hrefs` output for *record* as candidate links."""
    return [
        CandidateLink(url=url, record_id=record.id)
        for url in extract_hrefs(record.body, base_url=record.permalink)
    ]
