# menu_scout/report/json_report.py

"""
Генерация JSON-отчёта для проекта MenuScout.

Сериализация объекта ScanReport в строку или файл.
"""
import json
from pathlib import Path
from typing import Optional

from menu_scout.models import ScanReport


def dump_json(report: ScanReport, *, envelope: bool = True, indent: Optional[int] = 2) -> str:
    """Возвращает JSON-строку отчёта (конверт транспортного слоя или голый отчёт)."""
    data = report.to_envelope() if envelope else report.to_dict()
    return json.dumps(data, ensure_ascii=False, indent=indent)


def render_json(report: ScanReport, output_path: Path | str, *, envelope: bool = True) -> Path:
    """
    Сохраняет отчёт report в формате JSON по указанному пути.

    :param report: объект ScanReport с данными сканирования
    :param output_path: путь к JSON-файлу
    :param envelope: обернуть в {success, results, totalProcessed, errors}
    :return: Path сохранённого файла

    Пример:
    ```python
    from menu_scout.report.json_report import render_json
    report_path = render_json(report, 'reports/menus.json')
    print(f"JSON report saved to: {report_path}")
    ```
    """
    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(dump_json(report, envelope=envelope), encoding="utf-8")
    return output
