# === FILE: menu_scout/scanner.py ===
"""
Модуль-обёртка для функций запуска сканирования.
"""
import asyncio
from typing import Optional, Sequence

from menu_scout.config import ScanOptions
from menu_scout.models import ScanReport
from menu_scout.orchestrator import MenuScanner


async def start_scan(addresses: Sequence[str], options: Optional[ScanOptions] = None) -> ScanReport:
    """
    Запускает пакетный сканер в контексте и возвращает итоговый отчёт.

    Parameters
    ----------
    addresses : Sequence[str]
        Адреса сайтов в порядке ввода.
    options : ScanOptions, optional
        Настройки сканирования; по умолчанию значения ScanOptions().

    Returns
    -------
    ScanReport
        По одному SiteResult на каждый адрес, в исходном порядке.
    """
    async with MenuScanner(options) as scanner:
        return await scanner.scan(addresses)


def scan_sites(addresses: Sequence[str], options: Optional[ScanOptions] = None) -> ScanReport:
    """Синхронный вызов: блокирует до получения полного отчёта."""
    return asyncio.run(start_scan(addresses, options))


__all__ = ["start_scan", "scan_sites"]
