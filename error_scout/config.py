# === FILE: error_scout/config.py ===
"""
Модуль для загрузки и валидации конфигурации краулера ErrorScout.
Схема описана моделью Pydantic, файлы читаются из YAML или JSON.
"""
from __future__ import annotations

import errno
import json
import os
from pathlib import Path
from typing import Any, Callable, Literal, Optional, Union
from urllib.parse import urlsplit

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator


class CrawlerConfig(BaseModel):
    """Конфигурация для одного запуска обхода."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    start_url: str = Field(..., description="Стартовый URL (например https://gams.uni-graz.at/context:lidal).")
    nav_timeout: float = Field(30.0, gt=0, description="Таймаут навигации одной страницы (секунд).")
    settle_delay: float = Field(1.0, ge=0, description="Пауза после загрузки для поздних ошибок (секунд).")
    max_pages: Optional[int] = Field(None, ge=1, description="Предохранитель: максимум посещённых страниц.")
    workers: int = Field(1, ge=1, le=16, description="Число параллельных вкладок браузера.")
    deadline: Optional[float] = Field(None, gt=0, description="Общий лимит времени обхода (секунд).")
    headless: bool = Field(True, description="Запускать браузер без окна.")
    browser: Literal["chromium", "firefox", "webkit"] = Field("chromium", description="Движок Playwright.")
    user_agent: Optional[str] = Field(None, min_length=1, description="Заголовок User-Agent.")
    output_dir: str = Field("reports", min_length=1, description="Каталог для отчётов.")
    count_navigation_as_resource: bool = Field(
        False, description="Считать 404 самой страницы также ошибкой ресурса."
    )

    @field_validator("start_url", mode="before")
    def _check_start_url(cls, v: Any) -> Any:
        if isinstance(v, str):
            v = v.strip()
            parts = urlsplit(v)
            if parts.scheme not in ("http", "https") or not parts.netloc:
                raise ValueError(f"start_url должен быть абсолютным http(s) URL, получено {v!r}")
        return v


DEFAULT_CONFIG_PATH = Path("configs") / "default.yaml"

_PARSERS: dict[str, tuple[str, Callable[[str], Any], type[Exception]]] = {
    ".yaml": ("YAML", yaml.safe_load, yaml.YAMLError),
    ".yml": ("YAML", yaml.safe_load, yaml.YAMLError),
    ".json": ("JSON", json.loads, json.JSONDecodeError),
}


def read_config_mapping(path: Path) -> dict[str, Any]:
    """Разбирает файл конфига по расширению; верхний уровень должен быть mapping."""
    try:
        kind, parse, parse_error = _PARSERS[path.suffix.lower()]
    except KeyError:
        raise ValueError(f"Неподдерживаемый формат конфига: {path.suffix or path.name}") from None
    try:
        data = parse(path.read_text(encoding="utf-8"))
    except parse_error as exc:
        raise ValueError(f"Неправильный {kind} в {path}: {exc}") from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise TypeError(f"Верхний уровень {kind} должен быть mapping, получено {type(data).__name__}")
    return data


def load_config(path: Union[str, Path, None]) -> CrawlerConfig:
    """
    Читает YAML или JSON и возвращает проверенный объект CrawlerConfig.
    Без пути берётся configs/default.yaml относительно текущего каталога.
    При отсутствии файла бросает FileNotFoundError.
    """
    path_obj = DEFAULT_CONFIG_PATH if path is None else Path(path).expanduser()
    if not path_obj.is_file():
        raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(path_obj))
    return CrawlerConfig(**read_config_mapping(path_obj))


__all__ = ["CrawlerConfig", "DEFAULT_CONFIG_PATH", "load_config", "read_config_mapping", "ValidationError"]
