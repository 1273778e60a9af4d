"""Content scanner: finds PDF links (direct or behind short links) in records.

Pipeline per record:

    extract hrefs → classify → (resolve redirect) → dedupe → ExportRow

Two consumption modes are offered.  :meth:`ContentScanner.scan_records`
returns every distinct matched URL of every record (CSV export), while
:meth:`ContentScanner.has_target_link` stops at the first match (existence
checks).
"""

from __future__ import annotations

import re
from datetime import date, datetime
from typing import TYPE_CHECKING, Iterable, Optional, Sequence
from urllib.parse import urlsplit, urlunsplit

from pdfaudit.config import settings
from pdfaudit.errors import InvalidDateFormat
from pdfaudit.scanner.classifier import classify
from pdfaudit.scanner.extractor import extract_candidates
from pdfaudit.scanner.models import ClassificationResult, ContentRecord, ExportRow
from pdfaudit.scanner.resolver import RedirectResolver

if TYPE_CHECKING:
    from pdfaudit.store.records import ContentStore

START_DATE_FORMAT = "%m-%d-%Y"


def parse_start_date(value: Optional[str]) -> Optional[date]:
    """Parse a ``MM-DD-YYYY`` start date; ``None``/empty means no filter.

    Raises:
        InvalidDateFormat: If *value* is malformed or not a real calendar day.
    """
    if value is None or not value.strip():
        return None
    try:
        return datetime.strptime(value.strip(), START_DATE_FORMAT).date()
    except ValueError as exc:
        raise InvalidDateFormat(
            f"Invalid start date {value!r}: expected MM-DD-YYYY"
        ) from exc


class ContentScanner:
    """Scan content records for links to target documents.

    One scanner (and its :class:`RedirectResolver` cache) belongs to one run.
    """

    def __init__(
        self,
        resolver: Optional[RedirectResolver] = None,
        redirect_patterns: Optional[Sequence[str]] = None,
        extension: Optional[str] = None,
        prod_host_map: Optional[dict[str, str]] = None,
        default_prod_host: Optional[str] = None,
    ) -> None:
        self.resolver = resolver or RedirectResolver()
        self._patterns = list(
            settings.redirect_patterns if redirect_patterns is None else redirect_patterns
        )
        self._extension = extension or settings.target_extension
        host_map = settings.prod_host_map if prod_host_map is None else prod_host_map
        self._host_map = {k.lower(): v for k, v in host_map.items()}
        self._default_host = default_prod_host or settings.default_prod_host

    # ------------------------------------------------------------------
    # Per-URL / per-record decisions
    # ------------------------------------------------------------------
    def accepts(self, url: str) -> bool:
        """Return ``True`` if *url* is a target or redirects straight to one."""
        result = classify(url, self._patterns, self._extension)
        if result is ClassificationResult.DIRECT_MATCH:
            return True
        if result is ClassificationResult.POTENTIAL_REDIRECT:
            destination = self.resolver.resolve(url)
            return bool(destination) and (
                classify(destination, self._patterns, self._extension)
                is ClassificationResult.DIRECT_MATCH
            )
        return False

    def matched_urls(self, record: ContentRecord) -> list[str]:
        """Distinct accepted URLs of *record*, in order of first appearance."""
        seen: set[str] = set()
        matched: list[str] = []
        for candidate in extract_candidates(record):
            if candidate.url in seen:
                continue
            seen.add(candidate.url)
            if self.accepts(candidate.url):
                matched.append(candidate.url)
        return matched

    def has_target_link(self, record: ContentRecord) -> bool:
        """Existence mode: stop at the first accepted URL."""
        seen: set[str] = set()
        for candidate in extract_candidates(record):
            if candidate.url in seen:
                continue
            seen.add(candidate.url)
            if self.accepts(candidate.url):
                return True
        return False

    def find_records_with_targets(
        self, records: Iterable[ContentRecord]
    ) -> list[ContentRecord]:
        """Return the records that link to at least one target document."""
        return [r for r in records if self.has_target_link(r)]

    # ------------------------------------------------------------------
    # Permalinks
    # ------------------------------------------------------------------
    def production_host(self, environment_host: str) -> str:
        """Look up the production host for *environment_host*."""
        return self._host_map.get(environment_host.lower(), self._default_host)

    def rewrite_permalink(
        self, permalink: str, environment_host: Optional[str] = None
    ) -> str:
        """Swap the environment host in *permalink* for its production host.

        When *environment_host* is omitted, the permalink's own host is used.
        Permalinks on any other host are returned unchanged.
        """
        parts = urlsplit(permalink)
        host = parts.hostname or ""
        env_host = (environment_host or host).lower()
        if not host or host.lower() != env_host:
            return permalink
        netloc = re.sub(
            re.escape(host), self.production_host(env_host), parts.netloc, count=1, flags=re.IGNORECASE
        )
        return urlunsplit(parts._replace(netloc=netloc))

    # ------------------------------------------------------------------
    # Full scans
    # ------------------------------------------------------------------
    def scan_records(
        self,
        records: Iterable[ContentRecord],
        environment_host: Optional[str] = None,
    ) -> list[ExportRow]:
        """Return one :class:`ExportRow` per distinct (record, matched URL)."""
        rows: list[ExportRow] = []
        seen: set[tuple[int, int, str]] = set()
        for record in records:
            urls = self.matched_urls(record)
            if not urls:
                continue
            permalink = self.rewrite_permalink(record.permalink, environment_host)
            for url in urls:
                key = (record.site_id, record.id, url)
                if key in seen:
                    continue
                seen.add(key)
                rows.append(
                    ExportRow(
                        post_id=record.id,
                        pdf_url=url,
                        post_date=record.date,
                        post_title=record.title,
                        post_url=permalink,
                    )
                )
        return rows

    def scan(
        self,
        store: "ContentStore",
        post_types: Sequence[str],
        start_date: Optional[date] = None,
        network: bool = False,
    ) -> list[ExportRow]:
        """Scan the store's sites and return the export rows.

        Archived sites are skipped.  Without *network* only the first active
        site is scanned.
        """
        sites = store.list_sites()
        if not sites:
            records = store.query_records(post_types, after=start_date)
            return self.scan_records(records)

        rows: list[ExportRow] = []
        for site in sites:
            if site.archived:
                print(f"[find-pdfs] Site {site.url} archived, skipping indexing.")
                continue

            print(f"[find-pdfs] Processing site: {site.url}")
            records = store.query_records(post_types, after=start_date, site_id=site.id)
            site_rows = self.scan_records(records, urlsplit(site.url).hostname)
            print(f"[find-pdfs] {len(site_rows)} PDF link(s) in {len(records)} record(s).")
            rows.extend(site_rows)

            if not network:
                break
        return rows
