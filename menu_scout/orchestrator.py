# === FILE: menu_scout/orchestrator.py ===
from __future__ import annotations

import asyncio
import time
from datetime import datetime, timezone
from typing import Callable, List, Optional, Protocol, Sequence, TypeVar

from aiohttp import ClientSession

from menu_scout.config import ScanOptions
from menu_scout.extractor import extract
from menu_scout.fetcher import Fetcher, FetchError
from menu_scout.logger import logger
from menu_scout.models import ScanReport, SiteResult
from menu_scout.normalizer import AddressValidationError, normalize

__all__ = ("MenuScanner", "PageSource", "chunked")

T = TypeVar("T")
Clock = Callable[[], datetime]


class PageSource(Protocol):
    async def fetch(self, url: str) -> str: ...


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def chunked(items: Sequence[T], size: int) -> List[List[T]]:
    """Режет последовательность на подряд идущие группы длиной не более size."""
    if size < 1:
        raise ValueError("size must be >= 1")
    return [list(items[i:i + size]) for i in range(0, len(items), size)]


class MenuScanner:
    """Пакетный сканер меню: группы идут последовательно, адреса внутри группы — параллельно."""

    def __init__(
        self,
        options: Optional[ScanOptions] = None,
        fetcher: Optional[PageSource] = None,
        clock: Clock = _utcnow,
    ) -> None:
        self.options = options or ScanOptions()
        self.fetcher = fetcher
        self.session: Optional[ClientSession] = None
        self._clock = clock

    async def __aenter__(self) -> MenuScanner:
        if self.fetcher is None:
            self.session = ClientSession(raise_for_status=False)
            self.fetcher = Fetcher(
                self.session,
                self.options.retry_policy(),
                headers=self.options.request_headers(),
            )
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if self.session and not self.session.closed:
            await self.session.close()

    async def scan(self, addresses: Sequence[str]) -> ScanReport:
        if self.fetcher is None:
            raise RuntimeError("Fetcher not initialized; use 'async with MenuScanner(...)'")

        total = len(addresses)
        logger.info("Старт сканирования: %d адресов, пакеты по %d", total, self.options.batch_size)
        start = time.monotonic()

        slots: List[Optional[SiteResult]] = [None] * total
        indexed = list(enumerate(addresses))
        for number, batch in enumerate(chunked(indexed, self.options.batch_size), start=1):
            logger.debug("Пакет %d: %s", number, [address for _, address in batch])
            await asyncio.gather(*(self._process(i, address, slots) for i, address in batch))

        report = ScanReport(tuple(slots))  # type: ignore[arg-type]
        duration = time.monotonic() - start
        logger.info(
            "Завершено: %d сайтов за %.2f с, ошибок: %d",
            report.total_processed,
            duration,
            report.error_count,
        )
        return report

    async def _process(self, index: int, address: str, slots: List[Optional[SiteResult]]) -> None:
        slots[index] = await self.scan_one(address)

    async def scan_one(self, address: str) -> SiteResult:
        """Обрабатывает один адрес; любой сбой превращается в SiteResult.error."""
        try:
            return await self._scan_address(address)
        except Exception as exc:
            logger.exception("Unexpected error while scanning %r", address)
            return SiteResult(
                site_url=str(address).strip(),
                scanned_at=self._clock(),
                error=f"Unexpected error: {exc}",
            )

    async def _scan_address(self, address: str) -> SiteResult:
        site_url = address.strip()
        try:
            url = normalize(address)
        except AddressValidationError as exc:
            logger.info("Rejected address %r: %s", address, exc.reason)
            return SiteResult(site_url=site_url, scanned_at=self._clock(), error=str(exc))

        try:
            html = await self.fetcher.fetch(url)  # type: ignore[union-attr]
        except FetchError as exc:
            return SiteResult(site_url=site_url, scanned_at=self._clock(), error=str(exc))

        items = extract(html)
        logger.debug("%s: %d menu items", url, len(items))
        return SiteResult(site_url=site_url, scanned_at=self._clock(), items=tuple(items))
