"""Tests for signature-based duplicate detection and the import report."""

from opportunity_import.dedup import (
    ImportOutcome,
    ImportReport,
    SignatureSet,
    build_signature,
    deduplicate,
    signature_for_payload,
    signature_for_preview,
    signature_for_record,
)
from opportunity_import.models.preview import ImportedOpportunityPreview
from opportunity_import.models.staging import StagedRecord, TempOpportunityCreate


def _preview(name: str, client: str = "City of Austin", location: str | None = "Austin, TX"):
    return ImportedOpportunityPreview(project_name=name, client_name=client, location=location)


class TestSignatures:
    """Tests for signature construction."""

    def test_case_and_whitespace_insensitive(self) -> None:
        assert build_signature(" Highway Repaving ", "CITY OF AUSTIN", "austin, tx ") == build_signature(
            "highway repaving", "City of Austin", "Austin, TX"
        )

    def test_missing_parts_are_empty(self) -> None:
        assert build_signature("A", None, None) == "a||"

    def test_preview_matches_record(self) -> None:
        """A staged record and a preview with the same identity collide."""
        record = StagedRecord(project_title="HIGHWAY REPAVING", client_name="city of austin", location="Austin, TX")
        assert signature_for_record(record) == signature_for_preview(_preview("Highway Repaving"))

    def test_location_distinguishes(self) -> None:
        assert signature_for_preview(_preview("A", location="Austin")) != signature_for_preview(
            _preview("A", location="Dallas")
        )

    def test_payload_matches_stored_record(self) -> None:
        """Payload signatures use the stored, already truncated, fields."""
        payload = TempOpportunityCreate(
            project_title="Highway Repaving", client_name="City of Austin", location="Austin, TX"
        )
        record = StagedRecord(project_title="highway repaving", client_name="CITY OF AUSTIN", location="austin, tx")
        assert signature_for_payload(payload) == signature_for_record(record)


class TestSignatureSet:
    """Tests for SignatureSet."""

    def test_seeded_from_records(self) -> None:
        signatures = SignatureSet.from_records([StagedRecord(project_title="A", client_name="B")])
        assert "a|b|" in signatures
        assert len(signatures) == 1

    def test_check_and_add_adds_duplicates_too(self) -> None:
        """The first occurrence is new; later ones are duplicates."""
        signatures = SignatureSet()
        assert signatures.check_and_add("x") is False
        assert signatures.check_and_add("x") is True
        assert signatures.check_and_add("x") is True
        assert len(signatures) == 1


class TestDeduplicate:
    """Tests for deduplicate."""

    def test_within_batch_order(self) -> None:
        """[A, A', B] keeps A and B; A' differs only by case and is skipped."""
        a = _preview("Highway Repaving")
        a_prime = _preview("HIGHWAY REPAVING ", client="city of austin")
        b = _preview("Bridge Inspection Services")

        decisions = deduplicate([a, a_prime, b], SignatureSet())

        assert [d.is_duplicate for d in decisions] == [False, True, False]
        assert decisions[1].preview is a_prime

    def test_against_existing(self) -> None:
        signatures = SignatureSet.from_records(
            [StagedRecord(project_title="Highway Repaving", client_name="City of Austin", location="Austin, TX")]
        )
        decisions = deduplicate([_preview("Highway Repaving"), _preview("New")], signatures)
        assert [d.is_duplicate for d in decisions] == [True, False]
        assert len(signatures) == 2


class TestImportReport:
    """Tests for ImportReport outcomes and messages."""

    def test_nothing_found(self) -> None:
        report = ImportReport()
        assert report.outcome == ImportOutcome.NOTHING_FOUND
        assert report.summary_message() == "No opportunities found."

    def test_all_stored(self) -> None:
        report = ImportReport(stored=2)
        assert report.outcome == ImportOutcome.ALL_STORED
        assert report.summary_message() == "Stored 2 new leads."

    def test_all_duplicates(self) -> None:
        report = ImportReport(skipped_duplicates=1)
        assert report.outcome == ImportOutcome.ALL_DUPLICATES
        assert report.summary_message() == "All leads already queued (1 duplicate skipped)."

    def test_partial(self) -> None:
        report = ImportReport(stored=1, skipped_duplicates=3)
        assert report.outcome == ImportOutcome.PARTIAL
        assert report.summary_message() == "Stored 1 new lead, skipped 3 duplicates."

    def test_failed(self) -> None:
        report = ImportReport(errors=["https://x.example: HTTP 500"])
        assert report.outcome == ImportOutcome.FAILED
        assert report.summary_message() == "Import failed: https://x.example: HTTP 500"

    def test_warnings_deduplicated(self) -> None:
        report = ImportReport()
        report.add_warning("w1")
        report.add_warning("w2")
        report.add_warning("w1")
        report.add_warning("")
        assert report.warnings == ["w1", "w2"]

    def test_outcome_serialized(self) -> None:
        assert ImportReport(stored=1).model_dump(mode="json")["outcome"] == "all_stored"
