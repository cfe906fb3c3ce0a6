"""Load site configuration YAML into typed dataclasses."""

from __future__ import annotations

import typing as typ
from pathlib import Path

from ruamel.yaml import YAML

from pagewright._constants import DEFAULT_MAX_DEPTH

from .helpers import (
    _as_bool,
    _build_logging_config,
    _build_paths_config,
    _build_theme_config,
    _optional_str,
    _positive_int,
    _section,
)
from .models import SiteConfig, SiteConfigError, TransformConfig


def load_site_config(path: Path) -> SiteConfig:
    """Load the YAML configuration describing a site build.

    Parameters
    ----------
    path : Path
        Filesystem path to the YAML configuration file (for example,
        ``site.yaml``). Relative directories inside it resolve against the
        file's parent directory.

    Returns
    -------
    SiteConfig
        Parsed configuration with defaults applied for missing sections.

    Raises
    ------
    FileNotFoundError
        If the configuration file does not exist at ``path``.
    SiteConfigError
        If the document is not a mapping, or a section or value is invalid.
    YAMLError
        If the YAML content cannot be parsed by the underlying loader.

    Examples
    --------
    >>> from pathlib import Path
    >>> from pagewright.config import load_site_config
    >>> config = load_site_config(Path("site.yaml"))  # doctest: +SKIP
    >>> config.paths.templates.name  # doctest: +SKIP
    'templates'
    """
    if not path.exists():
        msg = f"Configuration file '{path}' not found."
        raise FileNotFoundError(msg)

    loader = YAML(typ="safe")
    loader.version = (1, 2)
    with path.open("r", encoding="utf-8") as handle:
        loaded = loader.load(handle) or {}
    if not isinstance(loaded, dict):
        msg = f"Configuration file '{path}' must hold a mapping of sections."
        raise SiteConfigError(msg)
    raw: dict[str, typ.Any] = dict(loaded)
    root = path.resolve().parent

    resolver_raw = _section(raw, "resolver")
    build_raw = _section(raw, "build")
    max_depth = _positive_int(
        resolver_raw.get("max_depth", DEFAULT_MAX_DEPTH),
        field="resolver.max_depth",
        allow_zero=True,
    )
    workers_raw = build_raw.get("max_workers")
    max_workers = (
        None
        if workers_raw is None
        else _positive_int(workers_raw, field="build.max_workers")
    )

    return SiteConfig(
        root=root,
        paths=_build_paths_config(_section(raw, "paths"), root),
        transform=_build_transform_config(_section(raw, "transform")),
        theme=_build_theme_config(_section(raw, "theme")),
        logging=_build_logging_config(_section(raw, "logging")),
        max_depth=max_depth,
        max_workers=max_workers,
    )


def _build_transform_config(payload: typ.Mapping[str, typ.Any]) -> TransformConfig:
    """Build a TransformConfig from the ``transform`` section."""
    base = TransformConfig()
    return TransformConfig(
        input_capacity=_positive_int(
            payload.get("input_capacity", base.input_capacity),
            field="transform.input_capacity",
        ),
        output_capacity=_positive_int(
            payload.get("output_capacity", base.output_capacity),
            field="transform.output_capacity",
        ),
        raw_html=_as_bool(
            payload.get("raw_html", base.raw_html), field="transform.raw_html"
        ),
        pygments_style=_optional_str(payload.get("pygments_style"))
        or base.pygments_style,
    )


__all__ = ["load_site_config"]
