"""Centralised settings for the PDF audit toolkit.

All runtime configuration is resolved here in one place.  Values can be
overridden via environment variables or a `.env` file in the project root
(loaded automatically when this module is imported).
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

# Load .env from the project root (one level up from this package)
_env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(_env_path, override=False)

_DEFAULT_REDIRECT_PATTERNS = (
    r"^https?://aka\.ms/",
    r"^https?://bit\.ly/",
    r"^https?://go\.microsoft\.com/fwlink",
)

_DEFAULT_PROD_HOST_MAP = (
    "azure.test=azure.microsoft.com,"
    "opensource.test=opensource.microsoft.com,"
    "quantum.test=azure.microsoft.com"
)


def _env_list(name: str, default: str) -> list[str]:
    """Split a comma-separated environment variable into stripped items."""
    raw = os.environ.get(name, default)
    return [item.strip() for item in raw.split(",") if item.strip()]


def _env_words(name: str, default: str) -> list[str]:
    """Split a whitespace-separated environment variable.

    Used for regex lists, where commas are legal (``x{2,3}``).
    """
    return os.environ.get(name, default).split()


def _env_mapping(name: str, default: str) -> dict[str, str]:
    """Parse ``key=value,key=value`` pairs from an environment variable."""
    mapping: dict[str, str] = {}
    for item in _env_list(name, default):
        key, sep, value = item.partition("=")
        if sep and key.strip() and value.strip():
            mapping[key.strip().lower()] = value.strip()
    return mapping


def _env_bool(name: str, default: str = "false") -> bool:
    return os.environ.get(name, default).strip().lower() in {"1", "true", "yes", "on"}


@dataclass
class Settings:
    # ------------------------------------------------------------------
    # Workspace / storage
    # ------------------------------------------------------------------
    workspace_dir: Path = field(
        default_factory=lambda: Path(
            os.environ.get("PDFAUDIT_WORKSPACE", Path.home() / ".pdfaudit_data")
        )
    )

    @property
    def db_path(self) -> Path:
        """Absolute path to the SQLite content store."""
        return self.workspace_dir / "content.db"

    # ------------------------------------------------------------------
    # Link discovery
    # ------------------------------------------------------------------
    request_timeout: float = field(
        default_factory=lambda: float(os.environ.get("REQUEST_TIMEOUT", "10.0"))
    )
    target_extension: str = field(
        default_factory=lambda: os.environ.get("TARGET_EXTENSION", ".pdf")
    )
    redirect_patterns: list[str] = field(
        default_factory=lambda: _env_words(
            "REDIRECT_PATTERNS", " ".join(_DEFAULT_REDIRECT_PATTERNS)
        )
    )

    # ------------------------------------------------------------------
    # Permalink rewriting (environment host -> production host)
    # ------------------------------------------------------------------
    prod_host_map: dict[str, str] = field(
        default_factory=lambda: _env_mapping("PROD_HOST_MAP", _DEFAULT_PROD_HOST_MAP)
    )
    default_prod_host: str = field(
        default_factory=lambda: os.environ.get("DEFAULT_PROD_HOST", "www.microsoft.com")
    )

    # ------------------------------------------------------------------
    # CSV export
    # ------------------------------------------------------------------
    csv_delimiter: str = field(
        default_factory=lambda: os.environ.get("CSV_DELIMITER", ",")
    )

    # ------------------------------------------------------------------
    # Report aggregation
    # ------------------------------------------------------------------
    reports_dir: Path = field(
        default_factory=lambda: Path(
            os.environ.get("REPORTS_DIR", "output/PDFAccessibilityChecker")
        )
    )
    output_dir: Path = field(
        default_factory=lambda: Path(os.environ.get("OUTPUT_DIR", "output"))
    )
    short_link_domains: list[str] = field(
        default_factory=lambda: _env_list("SHORT_LINK_DOMAINS", "aka.ms")
    )
    skip_malformed_reports: bool = field(
        default_factory=lambda: _env_bool("SKIP_MALFORMED_REPORTS")
    )

    def ensure_workspace(self) -> None:
        """Create the workspace directory if it does not exist."""
        self.workspace_dir.mkdir(parents=True, exist_ok=True)


# Module-level singleton, import this everywhere:
#   from pdfaudit.config import settings
settings = Settings()
