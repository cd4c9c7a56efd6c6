# File: menu_scout/normalizer.py
"""menu_scout.normalizer: Проверка и приведение адресов сайтов к URL, пригодному для загрузки.

Поддерживаются обычные ASCII-домены и кириллические домены (например, ``сайт.рф``).
Кириллические метки хоста кодируются в punycode с префиксом ``xn--``.
"""
from __future__ import annotations

import re
from typing import List, Sequence, Tuple
from urllib.parse import urlsplit

__all__: Sequence[str] = (
    "AddressValidationError",
    "normalize",
    "is_valid_address",
    "has_cyrillic",
)

_SCHEME_RE = re.compile(r"^https?://")
_CYRILLIC_RE = re.compile(r"[а-яё]", re.IGNORECASE)
_CYRILLIC_TLD_RE = re.compile(r"^[а-яё]+$", re.IGNORECASE)
_CYRILLIC_LABEL_RE = re.compile(r"^[а-яё0-9][а-яё0-9-]*[а-яё0-9]$|^[а-яё0-9]$", re.IGNORECASE)
_ASCII_LABEL_RE = re.compile(r"^[A-Za-z0-9][A-Za-z0-9-]*[A-Za-z0-9]$|^[A-Za-z0-9]$")

_DEFAULT_SCHEME = "http://"


class AddressValidationError(ValueError):
    """Адрес не прошёл структурную проверку домена."""

    def __init__(self, address: str, reason: str) -> None:
        super().__init__(f"Invalid address {address!r}: {reason}")
        self.address = address
        self.reason = reason


def has_cyrillic(text: str) -> bool:
    return bool(_CYRILLIC_RE.search(text))


def _split_scheme(address: str) -> Tuple[str, str]:
    """Отделяет явную схему ``http://``/``https://`` и один завершающий слеш."""
    match = _SCHEME_RE.match(address)
    scheme = match.group(0) if match else ""
    rest = address[len(scheme):]
    if rest.endswith("/"):
        rest = rest[:-1]
    return scheme, rest


def _check_label(label: str, pattern: re.Pattern[str], address: str) -> None:
    if not label:
        raise AddressValidationError(address, "empty domain label")
    if label.startswith("-") or label.endswith("-"):
        raise AddressValidationError(address, f"label {label!r} starts or ends with a hyphen")
    if not pattern.fullmatch(label):
        raise AddressValidationError(address, f"label {label!r} contains invalid characters")


def _validate_labels(labels: List[str], address: str) -> None:
    if len(labels) < 2:
        raise AddressValidationError(address, "domain must have at least two labels")

    if has_cyrillic(".".join(labels)):
        tld = labels[-1]
        # a Latin TLD under a Cyrillic name ("сайт.com") is rejected
        if not _CYRILLIC_TLD_RE.fullmatch(tld):
            raise AddressValidationError(address, f"TLD {tld!r} of a Cyrillic domain must be Cyrillic")
        for label in labels[:-1]:
            _check_label(label, _CYRILLIC_LABEL_RE, address)
    else:
        for label in labels:
            _check_label(label, _ASCII_LABEL_RE, address)


def _to_ascii_label(label: str) -> str:
    if not has_cyrillic(label):
        return label
    return "xn--" + label.lower().encode("punycode").decode("ascii")


def normalize(raw: str) -> str:
    """
    Проверяет адрес и возвращает абсолютный URL, готовый к загрузке.

    Явно указанная схема сохраняется, иначе добавляется ``http://``.
    Для кириллического хоста каждая кириллическая метка переводится в
    ASCII-совместимую форму ``xn--…``, остальные метки не изменяются.

    Raises
    ------
    AddressValidationError
        Если адрес не является корректным доменом. Сетевых обращений нет.
    """
    address = raw.strip()
    scheme, host = _split_scheme(address)
    labels = host.split(".")
    _validate_labels(labels, address)

    if has_cyrillic(host):
        host = ".".join(_to_ascii_label(label) for label in labels)

    candidate = f"{scheme or _DEFAULT_SCHEME}{host}"
    try:
        parsed = urlsplit(candidate)
        hostname = parsed.hostname
    except ValueError as exc:
        raise AddressValidationError(address, f"not a parseable URL ({exc})") from exc
    if not hostname:
        raise AddressValidationError(address, "not a parseable URL")
    return candidate


def is_valid_address(raw: str) -> bool:
    """Проверка без исключений; удобна для фильтрации ввода."""
    try:
        normalize(raw)
    except AddressValidationError:
        return False
    return True
