"""Assemble final documents from pages, templates, and components.

The assembler owns the ordering of the pipeline for one page:

1. ``validate``: the page's front-matter must name a template.
2. ``transform``: the markdown body goes through the transform channel, once.
3. ``template``: the selected template is fetched from the template store.
4. ``resolve``: directives are expanded with a fresh asset collector. No text
   produced here is ever handed back to the transform.
5. ``splice``: collected styles and scripts are placed at their anchors, or
   appended to the end of the document when the template declares none.

A failure at any stage aborts only that page. The original error is re-raised
with the page identifier and stage attached, and no partial document is
returned.

Example
-------
.. code-block:: python

    from pathlib import Path
    from pagewright.assembler import PageAssembler
    from pagewright.components import ComponentRegistry
    from pagewright.pages import parse_page
    from pagewright.templates import TemplateStore
    from pagewright.transform import MarkdownTransformModule, TransformChannel

    assembler = PageAssembler(
        TransformChannel(MarkdownTransformModule()),
        ComponentRegistry(Path("site/components")),
        TemplateStore(Path("site/templates")),
    )
    page = parse_page("index.md", Path("site/pages/index.md").read_text())
    document = assembler.build(page)
"""

from __future__ import annotations

import collections.abc as cabc
import concurrent.futures as cf
import dataclasses as dc
import typing as typ
import uuid

import structlog

from pagewright._constants import DEFAULT_MAX_DEPTH, SCRIPTS_ANCHOR, STYLES_ANCHOR
from pagewright.assets import AssetCollector
from pagewright.errors import (
    BuildCancelled,
    MissingTemplateReference,
    PageBuildError,
    PipelineError,
)
from pagewright.resolver import PlaceholderResolver, ResolutionContext, anchor_marker

if typ.TYPE_CHECKING:
    import threading

    from pagewright.assets import AssetSet
    from pagewright.components import ComponentRegistry
    from pagewright.pages import Page
    from pagewright.templates import TemplateStore
    from pagewright.transform import TransformChannel

logger = structlog.get_logger(__name__)


@dc.dataclass(frozen=True, slots=True)
class FinalDocument:
    """Complete output text for one page."""

    page_id: str
    text: str


@dc.dataclass(slots=True)
class BuildReport:
    """Outcome of building several pages.

    Attributes
    ----------
    documents : dict[str, FinalDocument]
        Successfully assembled documents keyed by page identifier.
    failures : dict[str, PipelineError]
        The error that aborted each failed page, keyed by page identifier.
    """

    documents: dict[str, FinalDocument] = dc.field(default_factory=dict)
    failures: dict[str, PipelineError] = dc.field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.failures


class PageAssembler:
    """Run the transform, resolve, and splice stages for pages."""

    def __init__(
        self,
        channel: TransformChannel,
        registry: ComponentRegistry,
        templates: TemplateStore,
        *,
        theme_slots: cabc.Mapping[str, str] | None = None,
        max_depth: int = DEFAULT_MAX_DEPTH,
    ) -> None:
        """Initialize the assembler with its shared collaborators.

        Parameters
        ----------
        channel : TransformChannel
            Converts page-body markdown into an HTML fragment.
        registry : ComponentRegistry
            Shared component cache for every page built by this assembler.
        templates : TemplateStore
            Shared template cache.
        theme_slots : Mapping[str, str], optional
            Site-wide named markup available to ``{{& name }}`` directives.
        max_depth : int, optional
            Sub-template nesting ceiling passed to the resolver.
        """
        self.channel = channel
        self.registry = registry
        self.templates = templates
        self.resolver = PlaceholderResolver(
            registry, theme_slots, max_depth=max_depth
        )

    def build(
        self,
        page: Page,
        template_identifier: str | None = None,
        *,
        cancel: threading.Event | None = None,
    ) -> FinalDocument:
        """Assemble the final document for ``page``.

        Parameters
        ----------
        page : Page
            Parsed page whose front-matter names a template.
        template_identifier : str, optional
            Template to use instead of the front-matter reference.
        cancel : threading.Event, optional
            When set, the build stops before its next stage.

        Returns
        -------
        FinalDocument
            The fully resolved document.

        Raises
        ------
        PipelineError
            Any taxonomy error, with ``page_id`` and ``stage`` filled in.
            Errors outside the taxonomy arrive as :class:`PageBuildError`.
        """
        stage = "validate"
        try:
            reference = page.template
            if reference is None:
                msg = "Front-matter does not name a template."
                raise MissingTemplateReference(msg)
            identifier = template_identifier or reference

            stage = "transform"
            _checkpoint(cancel)
            content = self.channel.transform(page.body)

            stage = "template"
            _checkpoint(cancel)
            template = self.templates.get(identifier)

            stage = "resolve"
            _checkpoint(cancel)
            collector = AssetCollector()
            token = uuid.uuid4().hex
            context = ResolutionContext(
                page_id=page.identifier,
                content=content,
                variables=page.variables(),
                anchor_token=token,
            )
            resolved = self.resolver.resolve(template.text, context, collector)

            stage = "splice"
            _checkpoint(cancel)
            text = splice_assets(resolved, collector.drain(), token)
        except PipelineError as exc:
            exc.page_id = exc.page_id or page.identifier
            exc.stage = exc.stage or stage
            _log_failure(exc)
            raise
        except Exception as exc:
            msg = f"Unexpected {type(exc).__name__}: {exc}"
            error = PageBuildError(msg, page_id=page.identifier, stage=stage)
            _log_failure(error)
            raise error from exc

        logger.info("page_built", page=page.identifier, template=identifier)
        return FinalDocument(page_id=page.identifier, text=text)

    def build_all(
        self,
        pages: cabc.Iterable[Page],
        *,
        max_workers: int | None = None,
        cancel: threading.Event | None = None,
    ) -> BuildReport:
        """Build ``pages`` concurrently, isolating each page's failure."""
        report = BuildReport()
        with cf.ThreadPoolExecutor(max_workers=max_workers) as executor:
            futures = {
                page.identifier: executor.submit(self.build, page, cancel=cancel)
                for page in pages
            }
            for page_id, future in futures.items():
                try:
                    report.documents[page_id] = future.result()
                except PipelineError as exc:
                    report.failures[page_id] = exc
        return report


def splice_assets(text: str, assets: AssetSet, token: str) -> str:
    """Place collected assets at their anchors or at the end of ``text``.

    Each anchor receives its assets at its first occurrence; later
    occurrences are removed. Asset kinds without an anchor are appended after
    the document, styles before scripts.
    """
    trailer: list[str] = []
    for name, html in (
        (STYLES_ANCHOR, assets.style_html()),
        (SCRIPTS_ANCHOR, assets.script_html()),
    ):
        marker = anchor_marker(token, name)
        if marker in text:
            head, _, tail = text.partition(marker)
            text = head + html + tail.replace(marker, "")
        elif html:
            trailer.append(html)
    if trailer:
        text = "\n".join([text, *trailer])
    return text


def _log_failure(error: PipelineError) -> None:
    logger.warning(
        "page_build_failed",
        page=error.page_id,
        stage=error.stage,
        directive=error.directive,
        error=error.message,
    )


def _checkpoint(cancel: threading.Event | None) -> None:
    if cancel is not None and cancel.is_set():
        msg = "Build cancelled."
        raise BuildCancelled(msg)


__all__ = ["BuildReport", "FinalDocument", "PageAssembler", "splice_assets"]
