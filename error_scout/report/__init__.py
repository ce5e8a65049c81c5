# File: error_scout/report/__init__.py
"""error_scout.report: запись отчётов (JSON, текст, HTML) по снимку обхода."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, Iterable, Union

from error_scout.aggregator import CrawlSnapshot
from error_scout.report.html_report import render_html
from error_scout.report.json_report import render_json
from error_scout.report.text_report import render_text
from error_scout.utils import file_stamp

FORMATS = ("json", "txt", "html")


def write_reports(
    snapshot: CrawlSnapshot,
    output_dir: Union[str, Path],
    formats: Iterable[str] = ("json", "txt"),
) -> Dict[str, Path]:
    """Пишет ``report-<timestamp>.<ext>`` для каждого формата в output_dir и возвращает пути."""
    out = Path(output_dir)
    out.mkdir(parents=True, exist_ok=True)
    stem = f"report-{file_stamp()}"
    paths: Dict[str, Path] = {}
    for fmt in dict.fromkeys(formats):
        if fmt == "json":
            paths[fmt] = render_json(snapshot, out / f"{stem}.json")
        elif fmt == "txt":
            paths[fmt] = render_text(snapshot, out / f"{stem}.txt")
        elif fmt == "html":
            paths[fmt] = render_html(snapshot, None, out / f"{stem}.html")
        else:
            raise ValueError(f"Неизвестный формат отчёта: {fmt}")
    return paths


__all__ = ["FORMATS", "render_json", "render_text", "render_html", "write_reports"]
