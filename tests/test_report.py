# File: tests/test_report.py
import json

import pytest

from error_scout.aggregator import CrawlAggregate, CrawlSnapshot
from error_scout.crawler.models import ConsoleErrorRecord, PageOutcome, ResourceErrorRecord
from error_scout.report import render_html, render_json, render_text, write_reports

SEED = "https://x.test/context:proj"
ITEM = "https://x.test/o:proj/item1"
GONE = "https://x.test/o:proj/gone"


@pytest.fixture()
def snapshot() -> CrawlSnapshot:
    agg = CrawlAggregate(SEED)
    seed = agg.claim_next()
    agg.record_outcome(seed, PageOutcome(status=200, links=[ITEM, GONE]))
    item = agg.claim_next()
    agg.add_console_error(ConsoleErrorRecord(ITEM, "Uncaught TypeError: <b> is null", "2024-05-01T10:00:00.000Z"))
    agg.add_resource_error(ResourceErrorRecord(f"{ITEM}/thumb.jpg", ITEM, 404, "2024-05-01T10:00:01.000Z"))
    agg.record_outcome(item, PageOutcome(status=200))
    gone = agg.claim_next()
    agg.record_outcome(gone, PageOutcome(status=404, error="Page not found"))
    return agg.finish()


@pytest.fixture()
def empty_snapshot() -> CrawlSnapshot:
    agg = CrawlAggregate(SEED)
    agg.record_outcome(agg.claim_next(), PageOutcome(status=200))
    return agg.finish()


def test_render_json(tmp_path, snapshot):
    path = render_json(snapshot, tmp_path / "nested" / "report.json")
    data = json.loads(path.read_text(encoding="utf-8"))
    assert data["summary"] == {
        "pages_checked": 3,
        "console_errors_found": 1,
        "broken_links_found": 1,
        "resource_404s_found": 1,
    }
    assert data["visited_pages"] == [SEED, ITEM, GONE]
    assert data["resource_404s"][0] == {
        "resource_url": f"{ITEM}/thumb.jpg",
        "page_url": ITEM,
        "status": 404,
        "timestamp": "2024-05-01T10:00:01.000Z",
    }
    assert data["broken_links"][0]["found_on"] == SEED
    assert data["url_sources"][GONE] == SEED


def test_render_text(tmp_path, snapshot):
    text = render_text(snapshot, tmp_path / "report.txt").read_text(encoding="utf-8")
    assert text.startswith("=== WEBSITE CONSOLE ERROR CHECK REPORT ===\n")
    assert f"Start URL: {SEED}\n" in text
    assert "Pages checked: 3\n" in text
    assert "404 Resources found: 1\n" in text
    assert f"1. {SEED}\n   Found on: START\n" in text
    assert f"2. {ITEM}\n   Found on: {SEED}\n" in text
    assert f"1. {ITEM}/thumb.jpg\n   Found on page: {ITEM}\n" in text
    assert f"1. {GONE}\n   Status: 404\n   Error: Page not found\n   Found on: {SEED}\n" in text
    # plain text keeps markup as-is
    assert "Error: Uncaught TypeError: <b> is null" in text


def test_render_text_empty_sections(tmp_path, empty_snapshot):
    text = render_text(empty_snapshot, tmp_path / "report.txt").read_text(encoding="utf-8")
    assert "No 404 resource errors found!" in text
    assert "No broken links found!" in text
    assert "No console errors found!" in text


def test_render_html_escapes(tmp_path, snapshot):
    html = render_html(snapshot, None, tmp_path / "report.html").read_text(encoding="utf-8")
    assert "<html" in html
    assert "&lt;b&gt; is null" in html
    assert f"{ITEM}/thumb.jpg" in html


def test_write_reports(tmp_path, snapshot):
    paths = write_reports(snapshot, tmp_path / "reports", ["json", "txt", "html", "json"])
    assert set(paths) == {"json", "txt", "html"}
    for fmt, path in paths.items():
        assert path.exists()
        assert path.name.startswith("report-")
        assert path.suffix == f".{fmt}"
        assert ":" not in path.name
    assert paths["json"].stem == paths["txt"].stem


def test_write_reports_unknown_format(tmp_path, snapshot):
    with pytest.raises(ValueError):
        write_reports(snapshot, tmp_path, ["pdf"])
