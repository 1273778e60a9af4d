"""One-hop redirect resolution with a per-run memo cache."""

from __future__ import annotations

from typing import Optional
from urllib.parse import urlsplit

import httpx

from pdfaudit.config import settings

_DEFAULT_HEADERS = {
    "User-Agent": "Mozilla/5.0 (compatible; PDFAudit-Bot/1.0)",
}


def _is_absolute_url(value: str) -> bool:
    parts = urlsplit(value.strip())
    return parts.scheme in {"http", "https"} and bool(parts.netloc)


class RedirectResolver:
    """Resolve short links to their destination, one hop, at most once per URL.

    The cache maps a source URL to its destination, or to ``None`` when the
    lookup failed.  Failed lookups are never retried within a run.

    A shared :class:`httpx.Client` may be injected; otherwise a short-lived
    client is opened per lookup.
    """

    def __init__(
        self,
        client: Optional[httpx.Client] = None,
        timeout: Optional[float] = None,
    ) -> None:
        self._client = client
        self._timeout = settings.request_timeout if timeout is None else timeout
        self._cache: dict[str, Optional[str]] = {}

    @property
    def cache(self) -> dict[str, Optional[str]]:
        """Read-only view of the resolved URLs (copy)."""
        return dict(self._cache)

    def resolve(self, url: str) -> Optional[str]:
        """Return the ``Location`` target of *url*, or ``None``.

        Network errors, unparsable URLs and non-redirect responses resolve
        to ``None``.  When
        several ``Location`` values are present the last absolute URL wins.
        """
        if url in self._cache:
            destination = self._cache[url]
            print(f"[resolver] Cached redirection from {url} to: {destination}")
            return destination

        print(f"[resolver] Checking redirect URL: {url}")
        destination = self._lookup(url)
        if destination:
            print(f"[resolver] Found redirection to: {destination}")
        self._cache[url] = destination
        return destination

    def _lookup(self, url: str) -> Optional[str]:
        try:
            if self._client is not None:
                response = self._client.head(url, follow_redirects=False)
            else:
                with httpx.Client(
                    headers=_DEFAULT_HEADERS,
                    timeout=self._timeout,
                    follow_redirects=False,
                ) as client:
                    response = client.head(url)
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            print(f"[resolver] request failed for {url}: {exc}")
            return None

        if not response.is_redirect:
            return None

        destination: Optional[str] = None
        for location in response.headers.get_list("location"):
            if _is_absolute_url(location):
                destination = location.strip()
        return destination
