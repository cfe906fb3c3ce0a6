"""Error taxonomy for the page assembly pipeline.

Every failure that can abort a page build derives from :class:`PipelineError`.
The stage that raised the error fills in what it knows (for example the
resolver records the directive being expanded) and the
:class:`~pagewright.assembler.PageAssembler` attaches the page identifier and
stage before re-raising, so callers always receive the original error type.

Examples
--------
>>> from pagewright.errors import ComponentNotFound
>>> err = ComponentNotFound("missing.py")
>>> err.page_id = "pages/index.md"
>>> err.stage = "resolve"
>>> str(err)
'missing.py [page=pages/index.md stage=resolve]'
"""

from __future__ import annotations


class PipelineError(RuntimeError):
    """Base class for page-scoped build failures.

    Attributes
    ----------
    page_id : str | None
        Identifier of the page whose build failed, once known.
    stage : str | None
        Pipeline stage (``validate``, ``transform``, ``template``,
        ``resolve``, ``splice``) that failed.
    directive : str | None
        Source text of the directive being resolved, when applicable.
    """

    def __init__(
        self,
        message: str,
        *,
        page_id: str | None = None,
        stage: str | None = None,
        directive: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.page_id = page_id
        self.stage = stage
        self.directive = directive

    def __str__(self) -> str:
        context = [
            f"{label}={value}"
            for label, value in (
                ("page", self.page_id),
                ("stage", self.stage),
                ("directive", self.directive),
            )
            if value
        ]
        if not context:
            return self.message
        return f"{self.message} [{' '.join(context)}]"


class ComponentNotFound(PipelineError):
    """Raised when a component identifier does not resolve to a module file."""


class ComponentLoadError(PipelineError):
    """Raised when a component module fails to evaluate or lacks ``render``."""


class ComponentRenderError(PipelineError):
    """Raised when a component's ``render`` raises or returns non-text."""


class InputOverflow(PipelineError):
    """Raised when transform input exceeds the input buffer capacity."""


class OutputOverflow(PipelineError):
    """Raised when a transform result exceeds the output buffer capacity."""


class TransformModuleError(PipelineError):
    """Raised when the isolated transform module reports a failure."""


class TemplateRecursionLimitExceeded(PipelineError):
    """Raised when nested sub-template expansion passes the depth ceiling."""


class TemplateSyntaxError(PipelineError):
    """Raised when template text contains a malformed directive."""


class TemplateNotFound(PipelineError):
    """Raised when a template identifier does not resolve to a file."""


class TemplateLoadError(PipelineError):
    """Raised when a template file exists but cannot be read as UTF-8 text."""


class MissingTemplateReference(PipelineError):
    """Raised when a page's front-matter has no ``template`` key."""


class PageReadError(PipelineError):
    """Raised when a page source cannot be read as UTF-8 text."""


class FrontMatterError(PipelineError):
    """Raised when a page's front-matter block cannot be parsed."""


class BuildCancelled(PipelineError):
    """Raised when a page build is cancelled between stages."""


class PageBuildError(PipelineError):
    """Raised when a page build fails with an error outside this taxonomy."""


__all__ = [
    "BuildCancelled",
    "ComponentLoadError",
    "ComponentNotFound",
    "ComponentRenderError",
    "FrontMatterError",
    "InputOverflow",
    "MissingTemplateReference",
    "OutputOverflow",
    "PageBuildError",
    "PageReadError",
    "PipelineError",
    "TemplateLoadError",
    "TemplateNotFound",
    "TemplateRecursionLimitExceeded",
    "TemplateSyntaxError",
    "TransformModuleError",
]
