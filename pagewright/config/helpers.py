"""Utility helpers shared by the pagewright configuration loader."""

from __future__ import annotations

import typing as typ
from pathlib import Path

from pagewright._logging import LOG_FORMATS

from .models import LoggingConfig, PathsConfig, SiteConfigError, ThemeConfig


def _section(raw: typ.Mapping[str, typ.Any], name: str) -> typ.Mapping[str, typ.Any]:
    """Return the mapping stored under ``name``, or an empty mapping."""
    value = raw.get(name)
    if value is None:
        return {}
    if not isinstance(value, dict):
        msg = f"Section '{name}' must be a mapping."
        raise SiteConfigError(msg)
    return value


def _optional_str(value: object | None) -> str | None:
    """Return a stripped string value or None when empty."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _positive_int(value: object, *, field: str, allow_zero: bool = False) -> int:
    """Return ``value`` as an int, rejecting negatives (and zero unless allowed)."""
    if isinstance(value, bool) or not isinstance(value, int):
        msg = f"'{field}' must be an integer, got {value!r}."
        raise SiteConfigError(msg)
    if value < 0 or (value == 0 and not allow_zero):
        msg = f"'{field}' must be {'non-negative' if allow_zero else 'positive'}."
        raise SiteConfigError(msg)
    return value


def _as_bool(value: object, *, field: str) -> bool:
    if not isinstance(value, bool):
        msg = f"'{field}' must be true or false, got {value!r}."
        raise SiteConfigError(msg)
    return value


def _build_paths_config(payload: typ.Mapping[str, typ.Any], root: Path) -> PathsConfig:
    """Resolve configured directories against the config file's directory."""
    base = PathsConfig()
    resolved: dict[str, Path] = {}
    for field in ("pages", "templates", "components", "output"):
        text = _optional_str(payload.get(field))
        path = Path(text) if text else getattr(base, field)
        resolved[field] = path if path.is_absolute() else root / path
    return PathsConfig(**resolved)


def _build_theme_config(payload: typ.Mapping[str, typ.Any]) -> ThemeConfig:
    """Build a ThemeConfig instance from the provided mapping payload."""
    base = ThemeConfig()
    slots_raw = payload.get("slots") or {}
    if not isinstance(slots_raw, dict):
        msg = "'theme.slots' must be a mapping of slot names to markup."
        raise SiteConfigError(msg)
    slots = {
        str(name): "" if value is None else str(value)
        for name, value in slots_raw.items()
    }
    return ThemeConfig(
        site_name=_optional_str(payload.get("site_name")) or base.site_name,
        slots=slots,
    )


def _build_logging_config(payload: typ.Mapping[str, typ.Any]) -> LoggingConfig:
    base = LoggingConfig()
    level = (_optional_str(payload.get("level")) or base.level).upper()
    fmt = (_optional_str(payload.get("format")) or base.format).lower()
    if fmt not in LOG_FORMATS:
        msg = f"'logging.format' must be one of {LOG_FORMATS}, got {fmt!r}."
        raise SiteConfigError(msg)
    return LoggingConfig(level=level, format=fmt)


__all__ = [
    "_as_bool",
    "_build_logging_config",
    "_build_paths_config",
    "_build_theme_config",
    "_optional_str",
    "_positive_int",
    "_section",
]
