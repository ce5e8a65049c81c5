"""error_scout.report.html_report: HTML-отчёт (шаблон Jinja2 ``report.html.j2``)."""

from __future__ import annotations

from pathlib import Path
from typing import Union

from jinja2 import Environment, FileSystemLoader, StrictUndefined, select_autoescape

from error_scout.aggregator import CrawlSnapshot
from error_scout.report.text_report import DEFAULT_TEMPLATE_DIR


def html_environment(template_dir: Union[Path, str, None] = None) -> Environment:
    # URLs and console messages come from the crawled site: always escape
    return Environment(
        loader=FileSystemLoader(str(template_dir or DEFAULT_TEMPLATE_DIR)),
        autoescape=select_autoescape(["html", "xml", "j2"]),
        undefined=StrictUndefined,
    )


def render_html(
    snapshot: CrawlSnapshot,
    template_dir: Union[Path, str, None],
    output_path: Union[Path, str],
) -> Path:
    """Рендерит HTML-отчёт и сохраняет его по указанному пути.

    Args:
        snapshot: итоговый снимок обхода.
        template_dir: каталог с шаблонами (None означает встроенные шаблоны).
        output_path: путь к итоговому HTML-файлу.

    Returns:
        Path сохранённого файла.
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    template = html_environment(template_dir).get_template("report.html.j2")
    output_path.write_text(template.render(snapshot=snapshot, summary=snapshot.summary), encoding="utf-8")
    return output_path
