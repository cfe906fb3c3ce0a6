r"""Resolve ``{{& ... }}`` directives in template text.

Template text is scanned once, left to right. Each directive is replaced by an
already-final fragment and scanning resumes after the directive, so replacement
text is never scanned again. The only exception is a component that declares
itself a sub-template: its rendered output is resolved as a nested template,
one level deeper, up to the resolver's depth ceiling.
Any other component whose output still contains directive syntax fails the
page rather than publishing unresolved text.

Directive forms
---------------
``{{& content }}``
    The page body, already transformed to HTML.
``{{& component tabs/tab.py title="One" }}``
    A component render; trailing ``key=value`` pairs become its props.
``{{& styles }}`` / ``{{& scripts }}``
    Anchors where the page's collected component assets are spliced.
``{{& name }}``
    The page front-matter value ``name`` (HTML-escaped), else the theme slot
    ``name`` (verbatim), else empty text.

Example
-------
>>> from pagewright.resolver import parse_directive
>>> parse_directive(' component tab.py title="Tab one" ').props
{'title': 'Tab one'}
"""

from __future__ import annotations

import collections.abc as cabc
import dataclasses as dc
import enum
import shlex
import typing as typ
from html import escape

import structlog

from pagewright._constants import (
    ASSET_ANCHORS,
    COMPONENT_DIRECTIVE,
    CONTENT_DIRECTIVE,
    DEFAULT_MAX_DEPTH,
)
from pagewright.errors import (
    PipelineError,
    TemplateRecursionLimitExceeded,
    TemplateSyntaxError,
)

if typ.TYPE_CHECKING:
    from pagewright.assets import AssetCollector
    from pagewright.components import ComponentRegistry

logger = structlog.get_logger(__name__)

OPEN_DELIMITER = "{{&"
CLOSE_DELIMITER = "}}"


class DirectiveKind(enum.Enum):
    """Kinds of directive recognized in template text."""

    CONTENT = "content"
    COMPONENT = "component"
    ANCHOR = "anchor"
    VARIABLE = "variable"


@dc.dataclass(frozen=True, slots=True)
class Directive:
    """A parsed directive occurrence.

    Attributes
    ----------
    kind : DirectiveKind
        What the directive resolves to.
    argument : str
        Component path, variable/slot name, or anchor name; empty for content.
    props : dict[str, str]
        Keyword arguments passed to a component's ``render``.
    """

    kind: DirectiveKind
    argument: str = ""
    props: dict[str, str] = dc.field(default_factory=dict)


@dc.dataclass(frozen=True, slots=True)
class ResolutionContext:
    """Per-page values consulted while resolving directives.

    Attributes
    ----------
    page_id : str
        Identifier of the page being built, used in log events.
    content : str
        The page body fragment, already produced by the transform channel.
    variables : Mapping[str, str]
        Front-matter values as plain text.
    anchor_token : str
        Token making asset anchor markers unique to this build.
    """

    page_id: str
    content: str
    variables: cabc.Mapping[str, str]
    anchor_token: str


def anchor_marker(token: str, name: str) -> str:
    """Return the placeholder left at an asset anchor for the final splice."""
    return f"<!--pagewright:{token}:{name}-->"


def parse_directive(inner: str) -> Directive:
    """Parse the text between ``{{&`` and ``}}`` into a :class:`Directive`.

    Raises
    ------
    TemplateSyntaxError
        If the directive is empty, has unbalanced quotes, or has arguments its
        kind does not accept.
    """
    try:
        tokens = shlex.split(inner)
    except ValueError as exc:
        msg = f"Cannot parse directive: {exc}"
        raise TemplateSyntaxError(msg) from exc
    if not tokens:
        msg = "Empty directive."
        raise TemplateSyntaxError(msg)

    head, *rest = tokens
    if head == COMPONENT_DIRECTIVE:
        if not rest:
            msg = "Component directive requires a path."
            raise TemplateSyntaxError(msg)
        path, *pairs = rest
        return Directive(DirectiveKind.COMPONENT, path, _parse_props(pairs))
    if rest:
        msg = f"Directive '{head}' takes no arguments."
        raise TemplateSyntaxError(msg)
    if head == CONTENT_DIRECTIVE:
        return Directive(DirectiveKind.CONTENT)
    if head in ASSET_ANCHORS:
        return Directive(DirectiveKind.ANCHOR, head)
    return Directive(DirectiveKind.VARIABLE, head)


def find_directive_end(text: str, start: int) -> int:
    """Return the index of the ``}}`` closing the directive body at ``start``.

    Delimiters inside single or double quotes do not close the directive, so
    a prop value such as ``title="a }} b"`` stays whole. When the quotes never
    balance, the first plain ``}}`` is returned and parsing reports the
    unbalanced quote. Returns ``-1`` when there is no closing delimiter.
    """
    quote: str | None = None
    index = start
    while index < len(text):
        char = text[index]
        if quote is not None:
            if char == "\\" and quote == '"':
                index += 2
                continue
            if char == quote:
                quote = None
        elif char in "'\"":
            quote = char
        elif char == "\\":
            index += 2
            continue
        elif text.startswith(CLOSE_DELIMITER, index):
            return index
        index += 1
    return text.find(CLOSE_DELIMITER, start)


def _parse_props(pairs: cabc.Sequence[str]) -> dict[str, str]:
    props: dict[str, str] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            msg = f"Component argument '{pair}' is not of the form key=value."
            raise TemplateSyntaxError(msg)
        props[key] = value
    return props


class PlaceholderResolver:
    """Expand directives against a page context, a registry, and theme slots."""

    def __init__(
        self,
        registry: ComponentRegistry,
        theme_slots: cabc.Mapping[str, str] | None = None,
        *,
        max_depth: int = DEFAULT_MAX_DEPTH,
    ) -> None:
        """Initialize the resolver.

        Parameters
        ----------
        registry : ComponentRegistry
            Source of component renders and assets.
        theme_slots : Mapping[str, str], optional
            Site-wide named markup used when a page defines no value.
        max_depth : int, optional
            Deepest allowed sub-template nesting; the top-level template is
            depth zero.
        """
        self.registry = registry
        self.theme_slots = dict(theme_slots or {})
        self.max_depth = max_depth

    def resolve(
        self,
        template_text: str,
        context: ResolutionContext,
        collector: AssetCollector,
        depth: int = 0,
    ) -> str:
        """Return ``template_text`` with every directive replaced.

        Raises
        ------
        TemplateRecursionLimitExceeded
            If sub-template expansion nests deeper than ``max_depth``.
        TemplateSyntaxError
            If the text contains a malformed or unterminated directive.
        ComponentNotFound, ComponentLoadError, ComponentRenderError
            If a referenced component cannot be loaded or rendered.
        """
        if depth > self.max_depth:
            msg = f"Sub-template nesting exceeded {self.max_depth} levels."
            raise TemplateRecursionLimitExceeded(msg)

        parts: list[str] = []
        position = 0
        while True:
            start = template_text.find(OPEN_DELIMITER, position)
            if start == -1:
                parts.append(template_text[position:])
                break
            end = find_directive_end(template_text, start + len(OPEN_DELIMITER))
            if end == -1:
                msg = "Unterminated directive."
                raise TemplateSyntaxError(msg, directive=template_text[start:].strip())
            source = template_text[start : end + len(CLOSE_DELIMITER)]
            parts.append(template_text[position:start])
            try:
                directive = parse_directive(
                    template_text[start + len(OPEN_DELIMITER) : end]
                )
                parts.append(self._replace(directive, context, collector, depth))
            except PipelineError as exc:
                if exc.directive is None:
                    exc.directive = source
                raise
            position = end + len(CLOSE_DELIMITER)
        return "".join(parts)

    def _replace(
        self,
        directive: Directive,
        context: ResolutionContext,
        collector: AssetCollector,
        depth: int,
    ) -> str:
        match directive.kind:
            case DirectiveKind.CONTENT:
                return context.content
            case DirectiveKind.COMPONENT:
                return self._component(directive, context, collector, depth)
            case DirectiveKind.ANCHOR:
                return anchor_marker(context.anchor_token, directive.argument)
            case _:
                return self._lookup(directive.argument, context)

    def _component(
        self,
        directive: Directive,
        context: ResolutionContext,
        collector: AssetCollector,
        depth: int,
    ) -> str:
        definition = self.registry.load(directive.argument)
        identifier = definition.identifier
        fragment = self.registry.render(identifier, directive.props)
        if identifier not in collector and (
            definition.has_script or definition.has_style
        ):
            collector.register_if_absent(
                identifier,
                self.registry.script_of(identifier),
                self.registry.style_of(identifier),
            )
        logger.debug(
            "component_rendered",
            page=context.page_id,
            identifier=identifier,
            depth=depth,
        )
        if definition.is_subtemplate:
            return self.resolve(fragment, context, collector, depth + 1)
        if OPEN_DELIMITER in fragment:
            msg = (
                f"Component '{identifier}' rendered directive syntax; set "
                "SUBTEMPLATE = True in the component to have it resolved."
            )
            raise TemplateSyntaxError(msg)
        return fragment

    def _lookup(self, name: str, context: ResolutionContext) -> str:
        if name in context.variables:
            return escape(context.variables[name], quote=True)
        return self.theme_slots.get(name, "")


__all__ = [
    "Directive",
    "DirectiveKind",
    "PlaceholderResolver",
    "ResolutionContext",
    "anchor_marker",
    "find_directive_end",
    "parse_directive",
]
