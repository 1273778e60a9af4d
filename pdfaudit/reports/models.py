"""Data models for accessibility reports and the merged CSV.

Report JSON is validated with pydantic; the merged-CSV side uses plain
dataclasses.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, Optional, Sequence

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


# ---------------------------------------------------------------------------
# Report JSON
# ---------------------------------------------------------------------------

class Summary(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    description: Optional[str] = Field(None, alias="Description")
    needs_manual_check: Optional[int] = Field(None, alias="Needs manual check")
    passed_manually: Optional[int] = Field(None, alias="Passed manually")
    failed_manually: Optional[int] = Field(None, alias="Failed manually")
    skipped: Optional[int] = Field(None, alias="Skipped")
    passed: Optional[int] = Field(None, alias="Passed")
    failed: Optional[int] = Field(None, alias="Failed")


class RuleResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    rule: str = Field(..., alias="Rule")
    status: str = Field("", alias="Status")
    description: str = Field("", alias="Description")

    @property
    def cell(self) -> str:
        """Merged-CSV cell value: ``"<Status> - <Description>"``."""
        return f"{self.status} - {self.description}"


class AccessibilityReport(BaseModel):
    """One checker report: summary counters plus per-category rule results."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    summary: Summary = Field(..., alias="Summary")
    detailed_report: dict[str, list[RuleResult]] = Field(
        ...,
        validation_alias=AliasChoices("Detailed Report", "DetailedReport", "detailed_report"),
    )

    def rule_keys(self) -> list[str]:
        """``category/rule`` keys in document order, duplicates removed."""
        return list(dict.fromkeys(key for key, _ in self.rule_cells()))

    def rule_cells(self) -> Iterator[tuple[str, str]]:
        """Yield ``(category/rule, cell)`` for every rule result."""
        for category, results in self.detailed_report.items():
            for result in results:
                yield f"{category}/{result.rule}", result.cell


# ---------------------------------------------------------------------------
# Merged CSV
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class InputRecord:
    """One line of the input CSV."""

    url: str
    date: str = ""
    title: str = ""
    post_url: str = ""


@dataclass(frozen=True)
class Column:
    id: str
    title: str


BASE_COLUMNS: tuple[Column, ...] = (
    Column("url", "url"),
    Column("date", "date"),
    Column("title", "title"),
    Column("post_url", "post_url"),
    Column("Description", "Description"),
    Column("Needs_manual_check", "Needs manual check"),
    Column("Passed_manually", "Passed manually"),
    Column("failed_manually", "failed manually"),
    Column("skipped", "skipped"),
    Column("passed", "passed"),
    Column("failed", "failed"),
    Column("full_report", "Full Report"),
)

PASSTHROUGH_IDS = ("url", "date", "title", "post_url")


class ColumnLayout:
    """Ordered, duplicate-free column list shared by every merged row."""

    def __init__(self, dynamic_keys: Sequence[str] = ()) -> None:
        base_ids = {c.id for c in BASE_COLUMNS}
        extra = [k for k in dict.fromkeys(dynamic_keys) if k not in base_ids]
        self._columns: tuple[Column, ...] = BASE_COLUMNS + tuple(Column(k, k) for k in extra)
        self._ids = frozenset(c.id for c in self._columns)

    def __iter__(self) -> Iterator[Column]:
        return iter(self._columns)

    def __len__(self) -> int:
        return len(self._columns)

    def __contains__(self, column_id: object) -> bool:
        return column_id in self._ids

    @property
    def ids(self) -> list[str]:
        return [c.id for c in self._columns]

    @property
    def titles(self) -> list[str]:
        return [c.title for c in self._columns]

    @property
    def dynamic_keys(self) -> list[str]:
        return [c.id for c in self._columns[len(BASE_COLUMNS):]]


@dataclass
class MergedRow:
    """Values of one merged-CSV row keyed by column id.

    Columns without a value render blank.
    """

    values: dict[str, str] = field(default_factory=dict)

    def get(self, column_id: str) -> str:
        return self.values.get(column_id, "")

    def as_list(self, layout: ColumnLayout) -> list[str]:
        return [self.get(column_id) for column_id in layout.ids]
