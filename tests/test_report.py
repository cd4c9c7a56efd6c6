# File: tests/test_report.py
import json

import pytest

from conftest import FIXED_NOW
from menu_scout.models import MenuEntry, ScanReport, SiteResult
from menu_scout.report import dump_json, render_json


@pytest.fixture()
def report() -> ScanReport:
    return ScanReport([
        SiteResult(
            site_url="сайт.рф",
            scanned_at=FIXED_NOW,
            items=[MenuEntry("Главная", "/"), MenuEntry("Блог", "/blog", target="_blank")],
        ),
        SiteResult(site_url="bad", scanned_at=FIXED_NOW, error="Invalid address 'bad'"),
    ])


def test_menu_entry_equality_ignores_attributes():
    assert MenuEntry("A", "/a", target="_blank") == MenuEntry("A", "/a", rel="nofollow")
    assert MenuEntry("A", "/a") != MenuEntry("a", "/a")
    assert MenuEntry("A", "/a") != MenuEntry("A", "/A")
    assert len({MenuEntry("A", "/a"), MenuEntry("A", "/a", target="x")}) == 1


def test_error_result_cannot_have_items():
    with pytest.raises(ValueError):
        SiteResult(site_url="x.com", scanned_at=FIXED_NOW, items=[MenuEntry("A", "/a")], error="boom")


def test_counts(report):
    assert report.total_processed == 2
    assert report.error_count == 1
    assert [r.site_url for r in report.failed()] == ["bad"]


def test_envelope_shape(report):
    data = report.to_envelope()
    assert data["success"] is True
    assert data["totalProcessed"] == 2
    assert data["errors"] == 1
    first = data["results"][0]
    assert first == {
        "siteUrl": "сайт.рф",
        "items": [{"text": "Главная", "url": "/"}, {"text": "Блог", "url": "/blog", "target": "_blank"}],
        "scannedAt": "2024-05-01T12:00:00+00:00",
        "error": None,
    }


def test_dump_json_keeps_cyrillic(report):
    text = dump_json(report, envelope=False, indent=None)
    assert "Главная" in text
    assert json.loads(text)["errorCount"] == 1


def test_render_json_creates_parents(tmp_path, report):
    out = render_json(report, tmp_path / "nested" / "menus.json")
    assert out.exists()
    assert json.loads(out.read_text(encoding="utf-8"))["results"][1]["error"] == "Invalid address 'bad'"
