"""error_scout.report.text_report: человекочитаемый текстовый отчёт (шаблон Jinja2)."""

from __future__ import annotations

from pathlib import Path
from typing import Union

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from error_scout.aggregator import CrawlSnapshot

DEFAULT_TEMPLATE_DIR = Path(__file__).resolve().parent.parent / "templates"


def text_environment(template_dir: Union[Path, str, None] = None) -> Environment:
    return Environment(
        loader=FileSystemLoader(str(template_dir or DEFAULT_TEMPLATE_DIR)),
        autoescape=False,
        keep_trailing_newline=True,
        trim_blocks=True,
        lstrip_blocks=True,
        undefined=StrictUndefined,
    )


def render_text_string(snapshot: CrawlSnapshot, template_dir: Union[Path, str, None] = None) -> str:
    template = text_environment(template_dir).get_template("report.txt.j2")
    return template.render(snapshot=snapshot, summary=snapshot.summary)


def render_text(
    snapshot: CrawlSnapshot,
    output_path: Union[Path, str],
    template_dir: Union[Path, str, None] = None,
) -> Path:
    """Рендерит текстовый отчёт и сохраняет его по указанному пути."""
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(render_text_string(snapshot, template_dir), encoding="utf-8")
    return output_path
