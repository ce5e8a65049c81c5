# File: error_scout/engine.py
"""error_scout.engine: запуск обхода по конфигурации."""

from __future__ import annotations

from typing import Any

from error_scout.aggregator import CrawlSnapshot
from error_scout.config import CrawlerConfig
from error_scout.crawler.crawler import BrowserCrawler
from error_scout.logger import get_logger

__all__ = ["start_crawl"]

logger = get_logger("engine")


async def start_crawl(cfg: CrawlerConfig, browser: Any = None) -> CrawlSnapshot:
    """
    Запускает BrowserCrawler в контексте и возвращает итоговый снимок обхода.

    Parameters
    ----------
    cfg : CrawlerConfig
        Конфигурация обхода.
    browser
        Уже запущенный браузер Playwright (или совместимый объект). Если не
        передан, браузер запускается и закрывается внутри.
    """
    logger.info("Starting crawl of %s (%d worker(s))", cfg.start_url, cfg.workers)
    try:
        async with BrowserCrawler(cfg, browser=browser) as crawler:
            return await crawler.crawl()
    except Exception as exc:
        logger.error("Crawl failed: %s", exc)
        raise
