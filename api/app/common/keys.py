"""User-visible copy catalogue.

Messages live in ``locales/<COPY_LOCALE>.yml`` at the repository root as nested
mappings; they are flattened into dot keys (``errors.block.not_found``) and read
through ``t(key, **kwargs)``. A missing key renders as the key itself so gaps
show up in the UI instead of raising.
"""

from __future__ import annotations

import threading
from pathlib import Path
from typing import Any

import yaml

_LOCALES_DIR = Path(__file__).resolve().parents[3] / 'locales'
_LOCK = threading.RLock()
_CATALOGUE: dict[str, str] = {}
_LOADED_FROM: tuple[Path, float] | None = None


def _flatten(prefix: str, data: dict[str, Any], out: dict[str, str]) -> None:
    for k, v in data.items():
        key = f'{prefix}.{k}' if prefix else str(k)
        if isinstance(v, dict):
            _flatten(key, v, out)
        else:
            out[key] = v if isinstance(v, str) else str(v)


def _locale_file() -> Path:
    from django.conf import settings  # local import: usable before settings are configured

    locale = getattr(settings, 'COPY_LOCALE', 'en') or 'en'
    candidate = _LOCALES_DIR / f'{locale}.yml'
    return candidate if candidate.exists() else _LOCALES_DIR / 'en.yml'


def _load(force: bool = False) -> None:
    global _CATALOGUE, _LOADED_FROM
    path = _locale_file()
    if not path.exists():  # pragma: no cover - packaging error
        return
    mtime = path.stat().st_mtime
    if not force and _LOADED_FROM == (path, mtime):
        return
    with _LOCK:
        with path.open('r', encoding='utf-8') as f:
            raw = yaml.safe_load(f) or {}
        flat: dict[str, str] = {}
        if isinstance(raw, dict):
            _flatten('', raw, flat)
        _CATALOGUE = flat
        _LOADED_FROM = (path, mtime)


def t(key: str, **kwargs: Any) -> str:
    """Look up ``key`` and interpolate ``kwargs`` with ``str.format``.

    Placeholders without a matching kwarg are left as-is.
    """
    from django.conf import settings

    if getattr(settings, 'DEBUG', False) or not _CATALOGUE:
        _load()  # picks up edits to the yml while developing
    msg = _CATALOGUE.get(key, key)
    if not kwargs:
        return msg
    try:
        return msg.format(**kwargs)
    except (KeyError, IndexError, ValueError):
        return msg


def ready() -> None:
    """Initialize the catalogue (called from AppConfig.ready)."""
    _load(force=True)


__all__ = ['t', 'ready']
