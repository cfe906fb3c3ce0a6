"""Cyclopts CLI entrypoint for building pagewright sites.

The ``pagewright`` console script defined here loads ``site.yaml``, configures
structured logging, and assembles every page (or one selected page) into the
output directory. Options can also be supplied through ``PAGEWRIGHT_*``
environment variables, which keeps CI invocations short.

Examples
--------
Build every page for the default configuration:

>>> from pagewright.cli import main
>>> main()  # doctest: +SKIP

Rebuild a single page into a custom directory:

>>> from pagewright.cli import app
>>> app(
...     ["build", "--page", "guide/intro.md", "--output-dir", "dist"]
... )  # doctest: +SKIP
"""

from __future__ import annotations

import typing as typ
from pathlib import Path

import cyclopts
from cyclopts import App, Parameter

from ._logging import configure_logging
from .config import load_site_config
from .site import SiteBuilder

DEFAULT_CONFIG = Path("site.yaml")

app = App(name="pagewright", config=cyclopts.config.Env("PAGEWRIGHT_", command=False))  # type: ignore[unknown-argument]


def _format_path(path: Path) -> str:
    """Return a cwd-relative path when possible, otherwise the absolute path."""
    if path.is_absolute():
        try:
            return str(path.relative_to(Path.cwd()))
        except ValueError:  # pragma: no cover - fallback for different roots
            return str(path)
    return str(path)


@app.command(help="Assemble pages, templates, and components into HTML.")
def build(
    *,
    config: typ.Annotated[
        Path, Parameter(help="Path to site config", env_var="PAGEWRIGHT_CONFIG")
    ] = DEFAULT_CONFIG,
    page: typ.Annotated[
        str | None,
        Parameter(
            help="Page identifier relative to the pages directory",
            env_var="PAGEWRIGHT_PAGE",
        ),
    ] = None,
    output_dir: typ.Annotated[
        Path | None,
        Parameter(help="Override the output folder", env_var="PAGEWRIGHT_OUTPUT_DIR"),
    ] = None,
    log_level: typ.Annotated[
        str | None,
        Parameter(
            help="Override the configured log level",
            env_var="PAGEWRIGHT_LOG_LEVEL",
        ),
    ] = None,
) -> int:
    """Build the site described by ``config``.

    Parameters
    ----------
    config : Path, optional
        Path to the ``site.yaml`` configuration file (overridable via
        ``PAGEWRIGHT_CONFIG``).
    page : str or None, optional
        Identifier of a single page, such as ``guide/intro.md``; when ``None``
        (default) every page is built.
    output_dir : Path or None, optional
        Override for the configured output directory.
    log_level : str or None, optional
        Log level overriding the ``logging.level`` config value.

    Returns
    -------
    int
        ``0`` when every page was built, ``1`` when any page failed.
    """
    site_config = load_site_config(config)
    configure_logging(
        log_level or site_config.logging.level, site_config.logging.format
    )

    result = SiteBuilder(site_config, output_dir=output_dir).run(only=page)
    for path in result.written:
        print(f"wrote {_format_path(path)}")
    for page_id, error in sorted(result.failures.items()):
        print(f"failed {page_id}: {error}")
    return 0 if result.ok else 1


def main() -> None:
    """Invoke the Cyclopts application that powers the ``pagewright`` command.

    Examples
    --------
    >>> main()  # doctest: +SKIP
    """
    raise SystemExit(app())


if __name__ == "__main__":  # pragma: no cover - manual invocation helper
    main()
