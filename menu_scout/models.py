# menu_scout/models.py
"""
Data models for MenuScout scan results.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

__all__ = ("MenuEntry", "SiteResult", "ScanReport")


@dataclass(frozen=True, slots=True)
class MenuEntry:
    """Одна ссылка навигационного меню.

    Равенство (и хэш) определяется только парой ``(url, text)``;
    ``target`` и ``rel`` в сравнении не участвуют.
    """

    text: str
    url: str
    target: Optional[str] = field(default=None, compare=False)
    rel: Optional[str] = field(default=None, compare=False)

    def to_dict(self) -> Dict[str, str]:
        data = {"text": self.text, "url": self.url}
        if self.target is not None:
            data["target"] = self.target
        if self.rel is not None:
            data["rel"] = self.rel
        return data


@dataclass(frozen=True, slots=True)
class SiteResult:
    """Результат сканирования одного адреса."""

    site_url: str
    scanned_at: datetime
    items: Tuple[MenuEntry, ...] = ()
    error: Optional[str] = None

    def __post_init__(self) -> None:
        if not isinstance(self.items, tuple):
            object.__setattr__(self, "items", tuple(self.items))
        if self.error is not None and self.items:
            raise ValueError("SiteResult with an error must not carry menu items")

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "siteUrl": self.site_url,
            "items": [item.to_dict() for item in self.items],
            "scannedAt": self.scanned_at.isoformat(),
            "error": self.error,
        }


@dataclass(frozen=True, slots=True)
class ScanReport:
    """Итоговый отчёт: по одному SiteResult на каждый входной адрес, в порядке ввода."""

    results: Tuple[SiteResult, ...] = ()

    def __post_init__(self) -> None:
        if not isinstance(self.results, tuple):
            object.__setattr__(self, "results", tuple(self.results))

    @property
    def total_processed(self) -> int:
        return len(self.results)

    @property
    def error_count(self) -> int:
        return sum(1 for r in self.results if r.error is not None)

    @property
    def success(self) -> bool:
        # per-address failures never fail the scan as a whole
        return True

    def to_dict(self) -> Dict[str, Any]:
        return {
            "results": [r.to_dict() for r in self.results],
            "totalProcessed": self.total_processed,
            "errorCount": self.error_count,
        }

    def to_envelope(self) -> Dict[str, Any]:
        """Shape returned to the transport layer."""
        return {
            "success": self.success,
            "results": [r.to_dict() for r in self.results],
            "totalProcessed": self.total_processed,
            "errors": self.error_count,
        }

    def failed(self) -> List[SiteResult]:
        return [r for r in self.results if r.error is not None]
