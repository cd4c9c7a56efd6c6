# === FILE: menu_scout/config.py ===
"""
Модуль для загрузки и валидации настроек сканера MenuScout.
Используется Pydantic для описания схемы и проверки данных.
"""
from __future__ import annotations

import errno
import json
import os
from pathlib import Path
from typing import Any, Dict, List, Mapping, Union

import yaml
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
)

from menu_scout.fetcher import DEFAULT_USER_AGENT, RetryPolicy
from menu_scout.normalizer import is_valid_address

INVALID_URL_MESSAGE = (
    "Неверный формат URL. Поддерживаются обычные и кириллические домены "
    "(например: example.com, сайт.рф)"
)


class RequestShapeError(ValueError):
    """Входящий запрос не соответствует схеме ``{urls: [...], options: {...}}``."""

    def __init__(self, message: str, errors: List[Dict[str, Any]] | None = None) -> None:
        super().__init__(message)
        self.errors = errors or []


class ScanOptions(BaseModel):
    """Настройки одного запуска сканирования."""
    model_config = ConfigDict(extra="forbid", frozen=True, populate_by_name=True)

    batch_size: int = Field(3, ge=1, le=10, alias="batchSize", description="Размер пакета адресов.")
    timeout_ms: int = Field(10000, ge=1000, le=30000, alias="timeout", description="Таймаут одной попытки (мс).")
    max_retries: int = Field(3, ge=1, le=5, alias="retries", description="Число попыток загрузки.")
    retry_delay_ms: int = Field(1000, ge=0, alias="retryDelay", description="Шаг линейной задержки между попытками (мс).")
    user_agent: str = Field(DEFAULT_USER_AGENT, min_length=1, alias="userAgent", description="Заголовок User-Agent.")
    headers: Dict[str, str] = Field(default_factory=dict, description="Дополнительные заголовки запроса.")

    def retry_policy(self) -> RetryPolicy:
        return RetryPolicy(
            timeout=self.timeout_ms / 1000,
            max_retries=self.max_retries,
            retry_delay=self.retry_delay_ms / 1000,
        )

    def request_headers(self) -> Dict[str, str]:
        """User-Agent плюс пользовательские заголовки (они важнее)."""
        return {"User-Agent": self.user_agent, **self.headers}


class ScanRequest(BaseModel):
    """Запрос от транспортного слоя: список адресов и опции."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    urls: List[str]
    options: ScanOptions = Field(default_factory=ScanOptions)

    @field_validator("urls")
    @classmethod
    def _check_addresses(cls, v: List[str]) -> List[str]:
        for i, url in enumerate(v):
            if not url.strip():
                raise ValueError(f"urls[{i}]: URL не может быть пустым")
            if not is_valid_address(url):
                raise ValueError(f"urls[{i}]: {INVALID_URL_MESSAGE}")
        return v


def parse_request(payload: Any) -> ScanRequest:
    """Проверяет тело запроса; при ошибке бросает RequestShapeError."""
    if not isinstance(payload, Mapping):
        raise RequestShapeError(f"Тело запроса должно быть объектом, получено {type(payload).__name__}")
    try:
        return ScanRequest.model_validate(dict(payload))
    except ValidationError as exc:
        raise RequestShapeError("Ошибка валидации", exc.errors(include_url=False)) from exc


_DEFAULT_CFG = Path("configs/default.yaml")


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ValueError(f"Неправильный YAML в {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Верхний уровень YAML должен быть mapping, получено {type(data).__name__}")
    return data


def _read_json(path: Path) -> dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8")) or {}
    except json.JSONDecodeError as exc:
        raise ValueError(f"Неправильный JSON в {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Верхний уровень JSON должен быть mapping, получено {type(data).__name__}")
    return data


def read_mapping(path: Union[str, Path]) -> dict[str, Any]:
    path_obj = Path(path).expanduser().resolve()
    if not path_obj.is_file():
        raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(path_obj))
    suffix = path_obj.suffix.lower()
    if suffix in (".yaml", ".yml"):
        return _read_yaml(path_obj)
    if suffix == ".json":
        return _read_json(path_obj)
    raise ValueError(f"Неподдерживаемый формат конфига: {suffix}")


def load_config(path: Union[str, Path, None] = None) -> ScanOptions:
    """
    Читает YAML или JSON и возвращает проверенный объект ScanOptions.
    Без пути берёт configs/default.yaml, если он есть, иначе значения по умолчанию.
    """
    if path is None:
        if not _DEFAULT_CFG.exists():
            return ScanOptions()
        path = _DEFAULT_CFG
    return ScanOptions(**read_mapping(path))
