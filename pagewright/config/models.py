"""Typed dataclasses describing pagewright site configuration."""

from __future__ import annotations

import dataclasses as dc
from pathlib import Path

from pagewright._constants import (
    DEFAULT_INPUT_CAPACITY,
    DEFAULT_MAX_DEPTH,
    DEFAULT_OUTPUT_CAPACITY,
    DEFAULT_PYGMENTS_STYLE,
)


class SiteConfigError(ValueError):
    """Raised when the site configuration is invalid or incomplete."""


@dc.dataclass(slots=True)
class PathsConfig:
    """Directories the site build reads from and writes to."""

    pages: Path = Path("pages")
    templates: Path = Path("templates")
    components: Path = Path("components")
    output: Path = Path("public")


@dc.dataclass(slots=True)
class TransformConfig:
    """Buffer capacities and markdown options for the transform channel."""

    input_capacity: int = DEFAULT_INPUT_CAPACITY
    output_capacity: int = DEFAULT_OUTPUT_CAPACITY
    raw_html: bool = True
    pygments_style: str = DEFAULT_PYGMENTS_STYLE


@dc.dataclass(slots=True)
class ThemeConfig:
    """Site-wide named markup available to template directives."""

    site_name: str = "pagewright"
    slots: dict[str, str] = dc.field(default_factory=dict)

    def slot_map(self) -> dict[str, str]:
        """Return the theme slots, with ``site_name`` unless overridden."""
        return {"site_name": self.site_name, **self.slots}


@dc.dataclass(slots=True)
class LoggingConfig:
    """Log level and renderer used by the CLI."""

    level: str = "INFO"
    format: str = "console"


@dc.dataclass(slots=True)
class SiteConfig:
    """Complete configuration for one site build."""

    root: Path
    paths: PathsConfig = dc.field(default_factory=PathsConfig)
    transform: TransformConfig = dc.field(default_factory=TransformConfig)
    theme: ThemeConfig = dc.field(default_factory=ThemeConfig)
    logging: LoggingConfig = dc.field(default_factory=LoggingConfig)
    max_depth: int = DEFAULT_MAX_DEPTH
    max_workers: int | None = None
