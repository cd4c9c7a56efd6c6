#!/usr/bin/env python3
"""
Точка входа для запуска сканера меню MenuScout через командную строку.

Команды:
  scan      Просканировать адреса и вывести/сохранить отчёт
  config    Показать действующие настройки

Общие опции:
  --config PATH       Путь к YAML/JSON-конфигу (default: configs/default.yaml, если есть)
  --log-level LEVEL   Уровень логирования (DEBUG, INFO, ...)
  --log-file PATH     Файл для логов (stderr, если не указан)
  --log-format FORMAT Формат логирования (e.g. "%(asctime)s %(levelname)s %(message)s")

Команда scan опции:
  ADDRESS...          Адреса сайтов (example.com, сайт.рф, https://site.org)
  --file PATH         Файл со списком адресов, по одному на строку
  --request PATH      JSON-запрос вида {"urls": [...], "options": {...}}
  --batch-size INT    Размер пакета (1-10)
  --timeout MS        Таймаут одной попытки, мс (1000-30000)
  --retries INT       Число попыток (1-5)
  --json PATH         Сохранить JSON-отчёт в файл
  --pretty            Преформатировать JSON-вывод (отступ 2)
  --scan-timeout SEC  Таймаут всего сканирования (секунд)

Дополнительно:
  --version, -v       Показать версию MenuScout

Пример:
  menu-scout scan example.com сайт.рф --batch-size 5 --json menus.json
"""
import asyncio
import json
import sys
from pathlib import Path
from typing import Any, Dict, List

import click

from menu_scout import __version__
from menu_scout.config import ScanOptions, load_config, parse_request, read_mapping
from menu_scout.logger import init_logging
from menu_scout.report.json_report import dump_json, render_json
from menu_scout.scanner import start_scan

CONTEXT_SETTINGS = dict(help_option_names=["--help"])


def print_error(message: str):
    click.secho(message, fg='red', err=True)
    sys.exit(1)


def read_addresses(path: Path) -> List[str]:
    """Читает адреса из файла, пропуская пустые строки."""
    return [line.strip() for line in path.read_text(encoding="utf-8").splitlines() if line.strip()]


def merge_options(base: ScanOptions, overrides: Dict[str, Any]) -> ScanOptions:
    """Накладывает непустые overrides на base с повторной валидацией."""
    data = base.model_dump()
    data.update({k: v for k, v in overrides.items() if v is not None})
    return ScanOptions(**data)


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, '--version', '-v', message='MenuScout, version %(version)s')
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
    help='Путь к файлу логов (stderr, если не указан)'
)
@click.option(
    '--log-format', 'log_format',
    default='%(asctime)s %(levelname)s %(message)s',
    show_default=True,
    help='Строка формата для логов'
)
@click.pass_context
def cli(ctx, config_path, log_level, log_file, log_format):
    """Группа команд MenuScout CLI."""
    init_logging(
        level=log_level,
        log_file=str(log_file) if log_file else None,
        log_format=log_format
    )
    try:
        cfg = load_config(config_path)
    except Exception as e:
        print_error(f'Ошибка загрузки конфигурации: {e}')
    ctx.ensure_object(dict)
    ctx.obj['config'] = cfg


@cli.command('scan', context_settings=CONTEXT_SETTINGS)
@click.argument('addresses', nargs=-1)
@click.option(
    '--file', '-f', 'address_file',
    default=None,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help='Файл с адресами, по одному на строку'
)
@click.option(
    '--request', '-r', 'request_file',
    default=None,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help='JSON-запрос {"urls": [...], "options": {...}}'
)
@click.option('--batch-size', 'batch_size', type=click.IntRange(1, 10), default=None, help='Размер пакета')
@click.option('--timeout', 'timeout_ms', type=click.IntRange(1000, 30000), default=None, help='Таймаут попытки, мс')
@click.option('--retries', 'max_retries', type=click.IntRange(1, 5), default=None, help='Число попыток')
@click.option(
    '--json', '-j', 'json_output',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Сохранить JSON-отчёт в файл'
)
@click.option(
    '--pretty', is_flag=True,
    help='Преформатировать JSON-вывод (отступ 2)'
)
@click.option(
    '--scan-timeout', 'scan_timeout',
    type=float,
    default=None,
    help='Таймаут всего сканирования (секунд)'
)
@click.pass_context
def scan(ctx, addresses, address_file, request_file, batch_size, timeout_ms, max_retries,
         json_output, pretty, scan_timeout):
    """Просканировать адреса и сформировать отчёт."""
    options: ScanOptions = ctx.obj['config']
    urls: List[str] = list(addresses)

    if request_file:
        try:
            request = parse_request(read_mapping(request_file))
        except Exception as e:
            print_error(f'Некорректный запрос: {e}')
        urls.extend(request.urls)
        options = merge_options(options, request.options.model_dump(exclude_unset=True))

    if address_file:
        urls.extend(read_addresses(address_file))

    if not urls:
        print_error('Не указано ни одного адреса')

    try:
        options = merge_options(
            options,
            {'batch_size': batch_size, 'timeout_ms': timeout_ms, 'max_retries': max_retries},
        )
    except Exception as e:
        print_error(f'Некорректные опции: {e}')

    try:
        if scan_timeout:
            report = asyncio.run(
                asyncio.wait_for(start_scan(urls, options), timeout=scan_timeout)
            )
        else:
            report = asyncio.run(start_scan(urls, options))
    except asyncio.TimeoutError:
        print_error(f'Сканирование не завершено за {scan_timeout} секунд')
    except Exception as e:
        print_error(f'Ошибка при сканировании: {e}')

    if not json_output:
        click.echo(dump_json(report, indent=2 if pretty else None))
        return

    try:
        saved_json = render_json(report, json_output)
        click.echo(f'JSON report: {saved_json}', err=True)
    except Exception as e:
        print_error(f'Ошибка при сохранении JSON: {e}')


@cli.command('config', context_settings=CONTEXT_SETTINGS)
@click.pass_context
def show_config(ctx):
    """Показать текущие настройки в JSON."""
    cfg: ScanOptions = ctx.obj['config']
    click.echo(json.dumps(cfg.model_dump(), indent=2, ensure_ascii=False))


if __name__ == "__main__":
    cli()
