"""Tests for the opportunity-import CLI."""

import json
import sys
from argparse import Namespace
from pathlib import Path
from unittest.mock import patch

import pytest

from opportunity_import.cli.main import _run_import, _run_normalize, _run_staging, main
from opportunity_import.errors import StagingWriteError
from opportunity_import.models.scraped import ScrapeResult
from opportunity_import.models.staging import TempOpportunityCreate
from opportunity_import.store import TempOpportunityStore
from tests.conftest import FakeScraper


class TestNormalizeCommand:
    """Tests for the normalize subcommand."""

    def test_writes_previews(self, tmp_path: Path, sample_scrape_result: ScrapeResult) -> None:
        input_path = tmp_path / "scrape.json"
        input_path.write_text(json.dumps({"results": [sample_scrape_result.model_dump(mode="json")]}))
        enhanced_path = tmp_path / "enhanced.json"
        enhanced_path.write_text(json.dumps({"https://austin.example.gov/bids/bridge": {"risk": "high"}}))
        output_path = tmp_path / "previews.json"

        _run_normalize(Namespace(input=input_path, enhanced=enhanced_path, output=output_path))

        previews = json.loads(output_path.read_text())
        assert [p["preview"]["project_name"] for p in previews] == [
            "Highway Repaving",
            "Bridge Inspection Services",
        ]
        assert previews[1]["create_payload"]["risk_level"] == "high"

    def test_accepts_bare_list(self, tmp_path: Path, capsys: pytest.CaptureFixture) -> None:
        input_path = tmp_path / "scrape.json"
        input_path.write_text(json.dumps([{"url": "https://a.example", "error": "HTTP 404"}]))

        _run_normalize(Namespace(input=input_path, enhanced=None, output=None))

        out = json.loads(capsys.readouterr().out)
        assert out == [{"source_url": "https://a.example", "error": "HTTP 404"}]


class TestStagingCommand:
    """Tests for the staging subcommand."""

    def test_count_and_list(self, temp_db_path: Path, capsys: pytest.CaptureFixture) -> None:
        TempOpportunityStore(temp_db_path).create_temp(TempOpportunityCreate(project_title="Roof"))

        _run_staging(Namespace(action="count", db=temp_db_path, status=None))
        assert capsys.readouterr().out.strip() == "1"

        _run_staging(Namespace(action="list", db=temp_db_path, status="pending_review"))
        records = json.loads(capsys.readouterr().out)
        assert records[0]["project_title"] == "Roof"

    def test_main_dispatch(self, temp_db_path: Path, capsys: pytest.CaptureFixture) -> None:
        argv = ["opportunity-import", "staging", "count", "--db", str(temp_db_path), "--status", "approved"]
        with patch.object(sys, "argv", argv):
            main()
        assert capsys.readouterr().out.strip() == "0"


class TestRunCommand:
    """Tests for the run subcommand with the scraper replaced."""

    def test_run_sqlite_backend(
        self,
        tmp_path: Path,
        temp_db_path: Path,
        sample_scrape_result: ScrapeResult,
        capsys: pytest.CaptureFixture,
    ) -> None:
        args = Namespace(
            urls=["https://austin.example.gov/bids"],
            config=None,
            backend="sqlite",
            db=temp_db_path,
            no_enrich=True,
            output=tmp_path / "report.json",
        )
        with patch(
            "opportunity_import.connectors.HttpScraper",
            return_value=FakeScraper([sample_scrape_result]),
        ):
            _run_import(args)

        report = json.loads((tmp_path / "report.json").read_text())
        assert report["stored"] == 2
        assert report["outcome"] == "all_stored"
        assert "Stored 2 new leads." in capsys.readouterr().err
        assert TempOpportunityStore(temp_db_path).count() == 2

    def test_staging_failure_exits(self, temp_db_path: Path, sample_scrape_result: ScrapeResult) -> None:
        args = Namespace(
            urls=["https://austin.example.gov/bids"],
            config=None,
            backend="sqlite",
            db=temp_db_path,
            no_enrich=True,
            output=None,
        )
        with patch(
            "opportunity_import.connectors.HttpScraper",
            return_value=FakeScraper([sample_scrape_result]),
        ), patch.object(
            TempOpportunityStore, "create_temp", side_effect=StagingWriteError("Could not store 'Roof'")
        ):
            with pytest.raises(SystemExit, match="Staging write failed"):
                _run_import(args)
