"""Discover page sources, assemble them, and write the results to disk.

:class:`SiteBuilder` is the calling tool around the page assembly pipeline. It
wires a :class:`~pagewright.config.SiteConfig` into one transform channel, one
component registry, and one template store for the whole run, builds every
page concurrently, and writes each successful document to the output directory
mirroring the page's path.

Example
-------
>>> from pathlib import Path
>>> from pagewright.config import load_site_config
>>> from pagewright.site import SiteBuilder
>>> builder = SiteBuilder(load_site_config(Path("site.yaml")))  # doctest: +SKIP
>>> result = builder.run()  # doctest: +SKIP
>>> result.written  # doctest: +SKIP
[PosixPath('public/index.html')]
"""

from __future__ import annotations

import dataclasses as dc
import typing as typ
from pathlib import PurePosixPath

import structlog

from pagewright._constants import HIGHLIGHT_CSS_SLOT, OUTPUT_SUFFIX, PAGE_SUFFIX
from pagewright.assembler import PageAssembler
from pagewright.components import ComponentRegistry
from pagewright.errors import PipelineError
from pagewright.pages import load_page
from pagewright.templates import TemplateStore
from pagewright.transform import MarkdownTransformModule, TransformChannel

if typ.TYPE_CHECKING:
    from pathlib import Path

    from pagewright.config import SiteConfig
    from pagewright.pages import Page

logger = structlog.get_logger(__name__)


@dc.dataclass(slots=True)
class SiteBuildResult:
    """Files written and pages that failed during one site build."""

    written: list[Path] = dc.field(default_factory=list)
    failures: dict[str, PipelineError] = dc.field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.failures


class SiteBuilder:
    """Build every page of a site described by a :class:`SiteConfig`."""

    def __init__(self, config: SiteConfig, *, output_dir: Path | None = None) -> None:
        """Create the run-scoped collaborators for ``config``.

        Parameters
        ----------
        config : SiteConfig
            Parsed site configuration.
        output_dir : Path, optional
            Override for the configured output directory.
        """
        self.config = config
        self.output_dir = output_dir or config.paths.output
        module = MarkdownTransformModule(
            config.transform.pygments_style, raw_html=config.transform.raw_html
        )
        channel = TransformChannel(
            module,
            input_capacity=config.transform.input_capacity,
            output_capacity=config.transform.output_capacity,
        )
        theme_slots = {HIGHLIGHT_CSS_SLOT: module.stylesheet}
        theme_slots.update(config.theme.slot_map())
        self.assembler = PageAssembler(
            channel,
            ComponentRegistry(config.paths.components),
            TemplateStore(config.paths.templates),
            theme_slots=theme_slots,
            max_depth=config.max_depth,
        )

    def discover(self) -> list[Path]:
        """Return page sources under the pages directory in a stable order."""
        pages_dir = self.config.paths.pages
        if not pages_dir.is_dir():
            msg = f"Pages directory '{pages_dir}' not found."
            raise FileNotFoundError(msg)
        return sorted(
            path for path in pages_dir.rglob(f"*{PAGE_SUFFIX}") if path.is_file()
        )

    def run(self, only: str | None = None) -> SiteBuildResult:
        """Build all pages, or only the page identified by ``only``.

        Returns
        -------
        SiteBuildResult
            Paths written for successful pages and the error for each failed
            page. A failed page writes nothing.

        Raises
        ------
        FileNotFoundError
            If the pages directory is missing, or ``only`` names no page.
        """
        result = SiteBuildResult()
        pages: list[Page] = []
        pages_dir = self.config.paths.pages
        for path in self.discover():
            identifier = path.relative_to(pages_dir).as_posix()
            if only is not None and identifier != only:
                continue
            try:
                pages.append(load_page(path, pages_dir))
            except PipelineError as exc:
                exc.stage = exc.stage or "parse"
                result.failures[identifier] = exc
        if only is not None and not pages and not result.failures:
            msg = f"Page '{only}' not found under '{pages_dir}'."
            raise FileNotFoundError(msg)

        report = self.assembler.build_all(pages, max_workers=self.config.max_workers)
        result.failures.update(report.failures)
        for page_id, document in report.documents.items():
            output_path = self.output_dir / _output_name(page_id)
            output_path.parent.mkdir(parents=True, exist_ok=True)
            text = document.text
            if not text.endswith("\n"):
                text += "\n"
            output_path.write_text(text, encoding="utf-8")
            result.written.append(output_path)
        logger.info(
            "site_built",
            written=len(result.written),
            failed=len(result.failures),
        )
        return result


def _output_name(page_id: str) -> str:
    """Map a page identifier such as ``docs/intro.md`` to ``docs/intro.html``."""
    return PurePosixPath(page_id).with_suffix(OUTPUT_SUFFIX).as_posix()


__all__ = ["SiteBuildResult", "SiteBuilder"]
