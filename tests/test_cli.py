"""
Tests for the command line entry point.
"""

import json
import logging

import pytest

import main


@pytest.fixture(autouse=True)
def _isolated(monkeypatch, tmp_path):
    """No OCR credentials, no stray settings, root logging restored afterwards."""
    monkeypatch.delenv("GOOGLE_CLOUD_KEY", raising=False)
    monkeypatch.setattr("docsim.utils.ocr_engine.VISION_SECRET_FILE", tmp_path / "no-secret.json")
    monkeypatch.setenv("DOCSIM_OCR_BACKEND", "vision")
    monkeypatch.setenv("DOCSIM_GOOGLE_KEY_FILE", str(tmp_path / "no-key.json"))
    monkeypatch.setenv("DOCSIM_TEMP_DIR", str(tmp_path / "pages"))

    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    for handler in root.handlers[:]:
        root.removeHandler(handler)
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level)


def test_json_report(make_pdf, capsys):
    first = make_pdf("first.pdf", ["Sorting algorithms overview\nQuick sort picks a pivot"])
    second = make_pdf("second.pdf", ["Sorting algorithms overview\nMerge sort splits the list"])

    assert main.main([str(first), str(second), "--json"]) == 0

    report = json.loads(capsys.readouterr().out)
    assert report["totalLines"] == 2
    assert report["matchingLines"] == 1
    assert report["lineComparisons"][0]["matched"] is True
    assert report["similarity"] == pytest.approx(0.5)


def test_text_report_lists_unmatched(make_pdf, capsys):
    first = make_pdf("first.pdf", ["Sorting algorithms overview\nQuick sort picks a pivot"])
    second = make_pdf("second.pdf", ["Sorting algorithms overview\nMerge sort splits the list"])

    assert main.main([str(first), str(second), "--show-unmatched"]) == 0

    out = capsys.readouterr().out
    assert out.startswith("Similarity: 50.0% (1/2 lines matched)")
    assert "Merge sort splits the list" in out
    assert "Sorting algorithms overview" not in out


def test_scanned_documents_without_ocr_exit_2(make_pdf, capsys):
    first = make_pdf("scan1.pdf", [None])
    second = make_pdf("scan2.pdf", [None])

    assert main.main([str(first), str(second)]) == 2
    assert "clearer" in capsys.readouterr().err


def test_invalid_threshold_exit_1(make_pdf, capsys):
    first = make_pdf("a.pdf", ["anything long enough to compare here"])

    assert main.main([str(first), str(first), "--threshold", "2"]) == 1
    assert "threshold" in capsys.readouterr().err


def test_missing_file_exit_1(tmp_path, make_pdf):
    first = make_pdf("a.pdf", ["anything long enough to compare here"])

    assert main.main([str(first), str(tmp_path / "missing.pdf")]) == 1
