# === FILE: error_scout/cli.py ===
#!/usr/bin/env python3
"""
Точка входа для запуска краулера ErrorScout через командную строку.

Команды:
  crawl     Обойти проект, вывести сводку и сохранить отчёты
  config    Показать текущую конфигурацию

Общие опции:
  --config PATH       Путь к YAML/JSON-конфигу (по умолчанию configs/default.yaml, если есть)
  --log-level LEVEL   Уровень логирования (DEBUG, INFO, ...)
  --log-file PATH     Файл для логов (stdout, если не указан)
  --log-format FORMAT Формат логирования (e.g. "%(asctime)s %(levelname)s %(message)s")

Команда crawl опции:
  START_URL           Стартовый URL (перекрывает start_url из конфига)
  --max-pages INT     Предохранитель: максимум страниц
  --workers INT       Число параллельных вкладок браузера
  --timeout SEC       Таймаут навигации одной страницы
  --settle SEC        Пауза после загрузки страницы
  --deadline SEC      Лимит времени всего обхода
  --output-dir DIR    Каталог для отчётов
  --format FMT        json, txt, html (можно повторять)
  --headful           Показать окно браузера

Дополнительно:
  --version, -v       Показать версию ErrorScout

Пример:
  error-scout crawl https://gams.uni-graz.at/context:lidal --format json --format txt
"""
import asyncio
import json
import sys
from pathlib import Path

import click
from pydantic import ValidationError

from error_scout import __version__
from error_scout.aggregator import CrawlSnapshot
from error_scout.config import DEFAULT_CONFIG_PATH, CrawlerConfig, load_config
from error_scout.crawler.crawler import BrowserLaunchError
from error_scout.engine import start_crawl
from error_scout.logger import DEFAULT_FORMAT, init_logging
from error_scout.report import FORMATS, write_reports

CONTEXT_SETTINGS = dict(help_option_names=["--help"])
#: сколько ошибок ресурсов показывать в сводке
RESOURCE_PREVIEW = 20


def print_error(message: str):
    click.secho(message, fg='red', err=True)
    sys.exit(1)


def print_summary(snapshot: CrawlSnapshot) -> None:
    """Краткая сводка обхода в stdout."""
    summary = snapshot.summary
    click.echo('\n=== CRAWL COMPLETE ===')
    click.echo(f"Pages checked: {summary['pages_checked']}")
    click.echo(f"404 Resources found: {summary['resource_404s_found']}")
    click.echo(f"Console errors found: {summary['console_errors_found']}")
    click.echo(f"Broken links found: {summary['broken_links_found']}\n")

    if snapshot.resource_errors:
        click.echo('404 RESOURCE ERRORS:')
        for i, err in enumerate(snapshot.resource_errors[:RESOURCE_PREVIEW], 1):
            click.echo(f'\n{i}. {err.resource_url}')
            click.echo(f'   Found on: {err.page_url}')
        rest = len(snapshot.resource_errors) - RESOURCE_PREVIEW
        if rest > 0:
            click.echo(f'\n... and {rest} more 404 resources')
        click.echo('')

    if snapshot.broken_links:
        click.echo('BROKEN LINKS:')
        for i, link in enumerate(snapshot.broken_links, 1):
            click.echo(f'\n{i}. {link.url}')
            click.echo(f'   Status: {link.status}')
            click.echo(f'   Found on: {link.found_on}')
        click.echo('')

    if snapshot.console_errors:
        click.echo('CONSOLE ERRORS:')
        for i, err in enumerate(snapshot.console_errors, 1):
            click.echo(f'\n{i}. {err.url}')
            click.echo(f'   {err.error}')
    else:
        click.secho('✓ No console errors found!', fg='green')


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, '--version', '-v', message='ErrorScout, version %(version)s')
@click.option(
    '--config', '-c', 'config_path',
    default=None,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help='Путь к файлу конфигурации YAML/JSON.'
)
@click.option(
    '--log-level', 'log_level',
    default='INFO', show_default=True,
    type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']),
    help='Уровень логирования'
)
@click.option(
    '--log-file', 'log_file',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Путь к файлу логов (stdout, если не указан)'
)
@click.option(
    '--log-format', 'log_format',
    default=DEFAULT_FORMAT,
    show_default=True,
    help='Строка формата для логов'
)
@click.pass_context
def cli(ctx, config_path, log_level, log_file, log_format):
    """Группа команд ErrorScout CLI."""
    init_logging(
        level=log_level,
        log_file=str(log_file) if log_file else None,
        log_format=log_format
    )
    ctx.ensure_object(dict)
    ctx.obj['config_path'] = config_path


def _build_config(config_path, start_url, overrides) -> CrawlerConfig:
    overrides = {k: v for k, v in overrides.items() if v is not None}
    if start_url:
        overrides['start_url'] = start_url
    if config_path is None and DEFAULT_CONFIG_PATH.is_file():
        config_path = DEFAULT_CONFIG_PATH
    if config_path is None:
        if 'start_url' not in overrides:
            raise click.UsageError('Укажите START_URL, --config или configs/default.yaml с полем start_url')
        return CrawlerConfig(**overrides)
    cfg = load_config(config_path)
    if overrides:
        # frozen model: validate the merged values again
        cfg = CrawlerConfig(**{**cfg.model_dump(), **overrides})
    return cfg


@cli.command('crawl', context_settings=CONTEXT_SETTINGS)
@click.argument('start_url', required=False)
@click.option('--max-pages', 'max_pages', type=int, default=None, help='Максимум посещённых страниц')
@click.option('--workers', '-w', 'workers', type=int, default=None, help='Число параллельных вкладок')
@click.option('--timeout', 'nav_timeout', type=float, default=None, help='Таймаут навигации (секунд)')
@click.option('--settle', 'settle_delay', type=float, default=None, help='Пауза после загрузки (секунд)')
@click.option('--deadline', 'deadline', type=float, default=None, help='Лимит времени обхода (секунд)')
@click.option(
    '--output-dir', '-o', 'output_dir',
    default=None,
    type=click.Path(file_okay=False, path_type=Path),
    help='Каталог для отчётов'
)
@click.option(
    '--format', '-f', 'formats',
    multiple=True,
    type=click.Choice(FORMATS),
    help='Формат отчёта (по умолчанию json и txt)'
)
@click.option('--headful', is_flag=True, help='Показать окно браузера')
@click.pass_context
def crawl(ctx, start_url, max_pages, workers, nav_timeout, settle_delay, deadline, output_dir, formats, headful):
    """Обойти проект и сохранить отчёты об ошибках."""
    overrides = {
        'max_pages': max_pages,
        'workers': workers,
        'nav_timeout': nav_timeout,
        'settle_delay': settle_delay,
        'deadline': deadline,
        'output_dir': str(output_dir) if output_dir else None,
        'headless': False if headful else None,
    }
    try:
        cfg = _build_config(ctx.obj['config_path'], start_url, overrides)
    except (ValidationError, FileNotFoundError, ValueError, TypeError) as e:
        print_error(f'Ошибка загрузки конфигурации: {e}')

    click.echo(f'Starting crawl: {cfg.start_url}')
    try:
        snapshot = asyncio.run(start_crawl(cfg))
    except BrowserLaunchError as e:
        print_error(f'Не удалось запустить браузер: {e}')
    except Exception as e:
        print_error(f'Ошибка при обходе: {e}')

    print_summary(snapshot)

    try:
        paths = write_reports(snapshot, cfg.output_dir, formats or ('json', 'txt'))
    except OSError as e:
        print_error(f'Ошибка при сохранении отчётов: {e}')

    click.echo('\n=== REPORTS GENERATED ===')
    for fmt, path in paths.items():
        click.echo(f'{fmt.upper()} report: {path}')


@cli.command('config', context_settings=CONTEXT_SETTINGS)
@click.argument('start_url', required=False)
@click.pass_context
def show_config(ctx, start_url):
    """Показать текущую конфигурацию в JSON."""
    try:
        cfg = _build_config(ctx.obj['config_path'], start_url, {})
    except (ValidationError, FileNotFoundError, ValueError, TypeError) as e:
        print_error(f'Ошибка загрузки конфигурации: {e}')
    click.echo(json.dumps(cfg.model_dump(), indent=2, ensure_ascii=False))


if __name__ == "__main__":
    cli()
