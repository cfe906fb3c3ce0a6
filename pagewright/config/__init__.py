"""Load and validate site configuration YAML for pagewright builds.

This subpackage parses a project's ``site.yaml``, applies defaults for missing
sections, resolves directories relative to the config file, and produces typed
dataclasses (:class:`SiteConfig`, :class:`TransformConfig`, etc.) consumed by
the site builder and CLI. The primary entry point is :func:`load_site_config`.

Examples
--------
>>> from pathlib import Path
>>> from pagewright.config import load_site_config
>>> site = load_site_config(Path("site.yaml"))  # doctest: +SKIP
>>> site.transform.output_capacity  # doctest: +SKIP
4194304
"""

from .loader import load_site_config
from .models import (
    LoggingConfig,
    PathsConfig,
    SiteConfig,
    SiteConfigError,
    ThemeConfig,
    TransformConfig,
)

__all__ = [
    "LoggingConfig",
    "PathsConfig",
    "SiteConfig",
    "SiteConfigError",
    "ThemeConfig",
    "TransformConfig",
    "load_site_config",
]
