"""URL classification: is this a PDF, a short link to one, or neither?"""

from __future__ import annotations

import re
from functools import lru_cache
from typing import Iterable, Optional
from urllib.parse import parse_qsl, unquote, urlsplit

from pdfaudit.config import settings
from pdfaudit.scanner.models import ClassificationResult


@lru_cache(maxsize=64)
def _compile(pattern: str) -> re.Pattern[str]:
    return re.compile(pattern, re.IGNORECASE)


def matches_redirector(url: str, patterns: Iterable[str]) -> bool:
    """Return ``True`` if *url* matches any redirector pattern.

    Patterns are regular expressions searched anywhere in the URL, so a plain
    host or path fragment such as ``bit.ly/`` also works as a substring rule.
    """
    return any(_compile(p).search(url) for p in patterns)


def is_target_url(url: str, extension: Optional[str] = None) -> bool:
    """Return ``True`` if *url* itself points at a target document.

    The path (query string ignored) must end in *extension*, or one of the
    query-parameter values must, e.g. ``/download?file=report.PDF``.
    """
    ext = (extension or settings.target_extension).lower()
    parts = urlsplit(url.strip())
    if unquote(parts.path).lower().endswith(ext):
        return True
    for _, value in parse_qsl(parts.query, keep_blank_values=False):
        if value.strip().lower().endswith(ext):
            return True
    return False


def classify(
    url: str,
    redirect_patterns: Optional[Iterable[str]] = None,
    extension: Optional[str] = None,
) -> ClassificationResult:
    """Classify *url* without touching the network.

    Redirector patterns win over the extension check: a short link is only a
    match once its destination has been resolved.
    """
    patterns = settings.redirect_patterns if redirect_patterns is None else redirect_patterns
    if matches_redirector(url, patterns):
        return ClassificationResult.POTENTIAL_REDIRECT
    if is_target_url(url, extension):
        return ClassificationResult.DIRECT_MATCH
    return ClassificationResult.NOT_A_TARGET
