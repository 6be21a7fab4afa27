"""Tests for batch parse/generate."""

from edi_engine.batch import BatchReport, generate_batch, parse_batch
from edi_engine.exceptions import MalformedSegmentError, MissingRequiredFieldError, UnknownDocumentTypeError
from edi_engine.parallel_executor import DocumentOutcome, ParallelExecutor


class TestParseBatch:
    """Tests for parse_batch."""

    def test_all_valid(self, sample_850_text, sample_855_text, sample_810_text):
        """Should parse every document and keep input order."""
        report = parse_batch({
            "po.txt": sample_850_text,
            "ack.txt": sample_855_text,
            "inv.txt": sample_810_text,
        }, max_threads=2)

        assert report.all_ok
        assert [o.key for o in report.outcomes] == ["po.txt", "ack.txt", "inv.txt"]
        assert [o.result.doc_type for o in report.outcomes] == ["850", "855", "810"]

    def test_malformed_document_fails_alone(self, sample_850_text, sample_810_text):
        """Should report the bad document and still parse its siblings."""
        report = parse_batch([sample_850_text, "PO1*1*ABC~", "", sample_810_text])

        assert len(report.succeeded) == 2
        assert len(report.failed) == 2
        assert not report.all_ok
        assert isinstance(report.get("1").error, UnknownDocumentTypeError)
        assert isinstance(report.get("2").error, MalformedSegmentError)
        assert report.get("0").result.document.po_number == "PO123456"
        assert report.get("3").result.document.invoice_number == "INV987654"

    def test_empty_batch(self):
        """Should return an empty report."""
        report = parse_batch({})
        assert report.outcomes == []
        assert report.all_ok


class TestGenerateBatch:
    """Tests for generate_batch."""

    def test_failed_document_is_reported(self, sample_850_json):
        """Should keep generating after a document is refused."""
        bad = dict(sample_850_json, poNumber="")
        report = generate_batch({"good": sample_850_json, "bad": bad})

        assert report.get("good").ok
        assert report.get("good").result.startswith("BEG*00*NE*PO123456")
        assert isinstance(report.get("bad").error, MissingRequiredFieldError)


class TestParallelExecutor:
    """Tests for ParallelExecutor."""

    def test_captures_unexpected_errors(self):
        """Should turn any exception into a failed outcome."""
        def work(value):
            if value == 0:
                raise ZeroDivisionError("boom")
            return 10 // value

        outcomes = ParallelExecutor(max_threads=3).process_parallel({"a": 5, "b": 0, "c": 2}, work)

        assert list(outcomes) == ["a", "b", "c"]
        assert outcomes["a"].result == 2
        assert isinstance(outcomes["b"].error, ZeroDivisionError)
        assert outcomes["c"].ok

    def test_report_lookup(self):
        """Should find outcomes by key."""
        report = BatchReport(outcomes=[DocumentOutcome(key="x", result=1)])
        assert report.get("x").result == 1
        assert report.get("y") is None
