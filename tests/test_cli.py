"""Tests for the CLI command groups (store, find-pdfs, reports)."""

from __future__ import annotations

import csv
import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from cli.main import app

runner = CliRunner()


@pytest.fixture
def workspace(tmp_path, monkeypatch):
    """Point the content store at a fresh workspace for each test."""
    monkeypatch.setattr("pdfaudit.config.settings.workspace_dir", tmp_path / "ws")
    return tmp_path


def _import(tmp_path: Path) -> None:
    data = {
        "sites": [
            {"id": 1, "url": "https://azure.test"},
            {"id": 2, "url": "https://opensource.test"},
        ],
        "posts": [
            {
                "id": 11,
                "site_id": 1,
                "date": "2024-01-05 10:00:00",
                "title": "Whitepaper",
                "content": '<a href="https://cdn.example.com/white.pdf">a</a>'
                           '<a href="https://cdn.example.com/white.pdf">again</a>',
                "permalink": "https://azure.test/blog/whitepaper/",
            },
            {
                "id": 12,
                "site_id": 1,
                "date": "2024-03-05 10:00:00",
                "title": "Later",
                "content": '<a href="https://cdn.example.com/later.pdf">a</a>',
                "permalink": "https://azure.test/blog/later/",
            },
            {
                "id": 21,
                "site_id": 2,
                "date": "2024-03-05 10:00:00",
                "title": "OSS",
                "content": '<a href="https://cdn.example.com/oss.pdf">a</a>',
                "permalink": "https://opensource.test/oss/",
            },
        ],
    }
    source = tmp_path / "content.json"
    source.write_text(json.dumps(data), encoding="utf-8")
    result = runner.invoke(app, ["store", "import", str(source)])
    assert result.exit_code == 0, result.stdout


def _read(path: Path) -> list[list[str]]:
    with path.open(newline="", encoding="utf-8") as fh:
        return list(csv.reader(fh))


class TestStoreCommands:
    def test_init(self, workspace) -> None:
        result = runner.invoke(app, ["store", "init"])
        assert result.exit_code == 0
        assert (workspace / "ws" / "content.db").exists()

    def test_import_and_list_sites(self, workspace) -> None:
        _import(workspace)
        result = runner.invoke(app, ["store", "sites"])
        assert result.exit_code == 0
        assert "https://azure.test" in result.stdout
        assert "https://opensource.test" in result.stdout

    def test_import_bad_file(self, workspace) -> None:
        bad = workspace / "bad.json"
        bad.write_text("[1, 2]", encoding="utf-8")
        result = runner.invoke(app, ["store", "import", str(bad)])
        assert result.exit_code == 1
        assert "❌" in result.stdout

    def test_import_conflicting_site_id_changes_nothing(self, workspace) -> None:
        _import(workspace)
        bad = workspace / "conflict.json"
        data = {"sites": [{"id": 1, "url": "https://other.test"}], "posts": []}
        bad.write_text(json.dumps(data), encoding="utf-8")
        result = runner.invoke(app, ["store", "import", str(bad)])
        assert result.exit_code == 1
        assert "conflicts" in result.stdout
        sites = runner.invoke(app, ["store", "sites"]).stdout
        assert "https://other.test" not in sites
        assert "https://azure.test" in sites


class TestFindPdfsExport:
    def test_exports_primary_site(self, workspace) -> None:
        _import(workspace)
        out = workspace / "pdfs.csv"
        result = runner.invoke(app, ["find-pdfs", "export", str(out)])

        assert result.exit_code == 0, result.stdout
        assert "2 posts with PDFs have been exported" in result.stdout
        lines = _read(out)
        assert lines[0] == ["Post ID", "PDF URL", "Post Date", "Post Title", "Post URL"]
        assert [line[1] for line in lines[1:]] == [
            "https://cdn.example.com/white.pdf",
            "https://cdn.example.com/later.pdf",
        ]
        assert lines[1][4] == "https://azure.microsoft.com/blog/whitepaper/"

    def test_default_filename_uses_first_active_site(self, workspace, monkeypatch) -> None:
        source = workspace / "content.json"
        data = {
            "sites": [
                {"id": 1, "url": "https://archived.test", "archived": True},
                {"id": 2, "url": "https://azure.test"},
            ],
            "posts": [
                {
                    "id": 5,
                    "site_id": 2,
                    "date": "2024-01-05 10:00:00",
                    "content": '<a href="https://cdn.example.com/a.pdf">a</a>',
                    "permalink": "https://azure.test/a/",
                }
            ],
        }
        source.write_text(json.dumps(data), encoding="utf-8")
        assert runner.invoke(app, ["store", "import", str(source)]).exit_code == 0

        monkeypatch.chdir(workspace)
        result = runner.invoke(app, ["find-pdfs", "export"])

        assert result.exit_code == 0, result.stdout
        out = workspace / "pdfs-https-azure-test.csv"
        assert out.exists()
        assert not (workspace / "pdfs-https-archived-test.csv").exists()
        assert [line[1] for line in _read(out)[1:]] == ["https://cdn.example.com/a.pdf"]

    def test_network_and_start_date(self, workspace) -> None:
        _import(workspace)
        out = workspace / "pdfs.csv"
        result = runner.invoke(
            app,
            ["find-pdfs", "export", str(out), "--network", "--start-date", "02-01-2024"],
        )
        assert result.exit_code == 0, result.stdout
        assert [line[0] for line in _read(out)[1:]] == ["12", "21"]

    def test_invalid_start_date_aborts_without_output(self, workspace) -> None:
        out = workspace / "pdfs.csv"
        result = runner.invoke(
            app, ["find-pdfs", "export", str(out), "--start-date", "13-40-2024"]
        )
        assert result.exit_code == 1
        assert "MM-DD-YYYY" in result.stdout
        assert not out.exists()

    def test_invalid_start_date_leaves_existing_file_untouched(self, workspace) -> None:
        out = workspace / "pdfs.csv"
        out.write_text("previous run\n", encoding="utf-8")
        result = runner.invoke(
            app, ["find-pdfs", "export", str(out), "--start_date", "13-40-2024"]
        )
        assert result.exit_code == 1
        assert out.read_text(encoding="utf-8") == "previous run\n"

    def test_unwritable_output(self, workspace) -> None:
        _import(workspace)
        out = workspace / "missing" / "pdfs.csv"
        result = runner.invoke(app, ["find-pdfs", "export", str(out)])
        assert result.exit_code == 1
        assert "❌" in result.stdout

    def test_no_results_writes_header_only(self, workspace) -> None:
        out = workspace / "pdfs.csv"
        result = runner.invoke(app, ["find-pdfs", "export", str(out), "--post-types", "page"])
        assert result.exit_code == 0
        assert "No posts with PDFs found" in result.stdout
        assert len(_read(out)) == 1


class TestReportsMerge:
    def _setup(self, workspace: Path) -> tuple[Path, Path]:
        reports = workspace / "reports"
        reports.mkdir()
        (reports / "abc123.pdf.json").write_text(
            json.dumps(
                {
                    "Summary": {"Description": "d", "Failed": 2, "Passed": 10},
                    "Detailed Report": {"Document": [{"Rule": "Title", "Status": "Failed", "Description": "x"}]},
                }
            ),
            encoding="utf-8",
        )
        source = workspace / "list.csv"
        source.write_text(
            "url,date,title,post_url\nhttps://aka.ms/abc123,2024-01-01,T,https://site/t\n",
            encoding="utf-8",
        )
        return reports, source

    def test_merge_writes_output(self, workspace) -> None:
        reports, source = self._setup(workspace)
        out = workspace / "merged" / "output.csv"
        result = runner.invoke(
            app,
            ["reports", "merge", "list", "--input", str(source),
             "--reports-dir", str(reports), "--output", str(out)],
        )
        assert result.exit_code == 0, result.stdout
        lines = _read(out)
        assert lines[0][-1] == "Document/Title"
        assert lines[1][lines[0].index("failed")] == "2"
        assert lines[1][-1] == "Failed - x"

    def test_default_output_location(self, workspace, monkeypatch) -> None:
        reports, source = self._setup(workspace)
        monkeypatch.setattr("pdfaudit.config.settings.output_dir", workspace / "output")
        result = runner.invoke(
            app, ["reports", "merge", "list", "--input", str(source), "--reports-dir", str(reports)]
        )
        assert result.exit_code == 0, result.stdout
        assert (workspace / "output" / "list" / "output.csv").exists()

    def test_malformed_report_aborts_unless_skipped(self, workspace) -> None:
        reports, source = self._setup(workspace)
        (reports / "abc123.pdf.json").write_text("{broken", encoding="utf-8")
        out = workspace / "out.csv"
        args = ["reports", "merge", "list", "--input", str(source),
                "--reports-dir", str(reports), "--output", str(out)]

        failed = runner.invoke(app, args)
        assert failed.exit_code == 1
        assert "Malformed report" in failed.stdout

        skipped = runner.invoke(app, args + ["--skip-malformed"])
        assert skipped.exit_code == 0, skipped.stdout
        assert len(_read(out)) == 2

    def test_missing_reports_dir(self, workspace) -> None:
        _, source = self._setup(workspace)
        result = runner.invoke(
            app,
            ["reports", "merge", "list", "--input", str(source),
             "--reports-dir", str(workspace / "nope"), "--output", str(workspace / "o.csv")],
        )
        assert result.exit_code == 1
        assert "Directory not found" in result.stdout
