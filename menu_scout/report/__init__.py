"""menu_scout.report: Сохранение отчётов сканирования, используется CLI и тестами."""

from menu_scout.report.json_report import dump_json, render_json

__all__ = ["dump_json", "render_json"]
