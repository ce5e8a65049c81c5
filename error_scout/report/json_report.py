# error_scout/report/json_report.py
"""
JSON-отчёт ErrorScout: ``CrawlSnapshot.to_dict()`` с отступами, UTF-8 без экранирования.
"""
from pathlib import Path

from error_scout.aggregator import CrawlSnapshot


def render_json(snapshot: CrawlSnapshot, output_path: Path | str) -> Path:
    """
    Сохраняет снимок обхода в JSON и возвращает путь к файлу.

    Ключи верхнего уровня: start_url, started_at, finished_at, end_reason,
    pending, summary, visited_pages, console_errors, broken_links,
    resource_404s, url_sources.
    """
    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(snapshot.json(pretty=True) + "\n", encoding="utf-8")
    return output
