# File: error_scout/utils.py
"""error_scout.utils: временные метки для записей краулера и имён файлов отчётов."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional, Sequence

__all__: Sequence[str] = ("utc_now", "utc_now_iso", "file_stamp")


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _iso(moment: datetime) -> str:
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def utc_now_iso() -> str:
    """Текущее время UTC в ISO-8601 с миллисекундами, например ``2024-05-01T10:00:00.000Z``."""
    return _iso(utc_now())


def file_stamp(moment: Optional[datetime] = None) -> str:
    """ISO-метка времени, пригодная для имени файла (``:`` и ``.`` заменены на ``-``)."""
    return _iso(moment or utc_now()).replace(":", "-").replace(".", "-")
