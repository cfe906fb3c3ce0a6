"""Load, cache, and render component modules.

A component is a Python file under the components root exposing
``render(props) -> str`` and, optionally, ``script`` and ``style`` (either
callables returning text or plain strings). Setting ``SUBTEMPLATE = True`` in
the module asks the resolver to expand directives found in its rendered
output.

The registry evaluates each module at most once per registry lifetime, even
when several page builds ask for the same identifier at the same moment: the
first caller loads while the others wait on a per-identifier lock.

Example
-------
.. code-block:: python

    from pathlib import Path
    from pagewright.components import ComponentRegistry

    registry = ComponentRegistry(Path("site/components"))
    html = registry.render("button.py", {"label": "Click"})
    script = registry.script_of("button.py")
"""

from __future__ import annotations

import collections.abc as cabc
import dataclasses as dc
import importlib.util
import re
import threading
import typing as typ
from pathlib import Path

import structlog

from pagewright._constants import COMPONENT_SUFFIX
from pagewright.errors import (
    ComponentLoadError,
    ComponentNotFound,
    ComponentRenderError,
)

if typ.TYPE_CHECKING:
    from types import ModuleType

logger = structlog.get_logger(__name__)

_MODULE_NAME_PATTERN = re.compile(r"[^0-9A-Za-z_]+")

Producer = cabc.Callable[[], str]


@dc.dataclass(frozen=True, slots=True)
class ComponentDefinition:
    """Capability record for a loaded component module.

    Attributes
    ----------
    identifier : str
        Path of the component relative to the components root.
    render : Callable[[Mapping[str, Any]], str]
        Produces the component's HTML fragment from props.
    script : Callable[[], str] | None
        Produces the component's script text, when it has one.
    style : Callable[[], str] | None
        Produces the component's style text, when it has one.
    is_subtemplate : bool
        Whether rendered output is resolved again as a nested template.
    """

    identifier: str
    render: cabc.Callable[[cabc.Mapping[str, typ.Any]], str]
    script: Producer | None = None
    style: Producer | None = None
    is_subtemplate: bool = False

    @property
    def has_render(self) -> bool:
        return callable(self.render)

    @property
    def has_script(self) -> bool:
        return self.script is not None

    @property
    def has_style(self) -> bool:
        return self.style is not None


class ComponentRegistry:
    """Per-build cache of component definitions keyed by identifier."""

    def __init__(self, root: Path) -> None:
        """Initialize an empty registry for components under ``root``."""
        self.root = root
        self.evaluations = 0
        self._definitions: dict[str, ComponentDefinition] = {}
        self._inflight: dict[str, threading.Lock] = {}
        self._guard = threading.Lock()

    def canonical(self, identifier: str) -> str:
        """Return the root-relative POSIX path ``identifier`` resolves to.

        ``button``, ``button.py`` and ``./button.py`` all name the same
        component and share the canonical form ``button.py``.

        Raises
        ------
        ComponentNotFound
            If the identifier does not resolve to a file under the root.
        """
        path = self._resolve_path(identifier)
        return path.relative_to(self.root.resolve()).as_posix()

    def load(self, identifier: str) -> ComponentDefinition:
        """Return the cached definition for ``identifier``, loading it once.

        The cache is keyed by :meth:`canonical`, so every spelling of one
        component shares a single evaluation.

        Raises
        ------
        ComponentNotFound
            If the identifier does not resolve to a file under the root.
        ComponentLoadError
            If evaluating the module fails or it does not expose ``render``.
        """
        key = self.canonical(identifier)
        with self._guard:
            cached = self._definitions.get(key)
            if cached is not None:
                return cached
            key_lock = self._inflight.setdefault(key, threading.Lock())

        with key_lock:
            with self._guard:
                cached = self._definitions.get(key)
            if cached is not None:
                return cached
            definition = self._evaluate(key)
            with self._guard:
                self._definitions[key] = definition
                self._inflight.pop(key, None)
        logger.debug("component_loaded", identifier=key)
        return definition

    def render(self, identifier: str, props: cabc.Mapping[str, typ.Any]) -> str:
        """Render ``identifier`` with ``props``; results are never cached."""
        definition = self.load(identifier)
        try:
            rendered = definition.render(dict(props))
        except Exception as exc:
            msg = f"Component '{identifier}' failed to render: {exc}"
            raise ComponentRenderError(msg) from exc
        if not isinstance(rendered, str):
            msg = (
                f"Component '{identifier}' rendered {type(rendered).__name__}, "
                "expected str."
            )
            raise ComponentRenderError(msg)
        return rendered

    def script_of(self, identifier: str) -> str | None:
        """Return the component's script text, or ``None`` when absent."""
        return self._produce(identifier, self.load(identifier).script, "script")

    def style_of(self, identifier: str) -> str | None:
        """Return the component's style text, or ``None`` when absent."""
        return self._produce(identifier, self.load(identifier).style, "style")

    def _resolve_path(self, identifier: str) -> Path:
        relative = Path(identifier)
        if not relative.suffix:
            relative = relative.with_suffix(COMPONENT_SUFFIX)
        root = self.root.resolve()
        candidate = (root / relative).resolve()
        if not candidate.is_relative_to(root) or not candidate.is_file():
            msg = f"Component '{identifier}' not found under '{self.root}'."
            raise ComponentNotFound(msg)
        return candidate

    def _evaluate(self, identifier: str) -> ComponentDefinition:
        path = self._resolve_path(identifier)
        module_name = "pagewright_component_" + _MODULE_NAME_PATTERN.sub(
            "_", identifier
        )
        spec = importlib.util.spec_from_file_location(module_name, path)
        if spec is None or spec.loader is None:  # pragma: no cover - importlib guard
            msg = f"Component '{identifier}' is not a loadable Python module."
            raise ComponentLoadError(msg)
        module = importlib.util.module_from_spec(spec)
        with self._guard:
            self.evaluations += 1
        try:
            spec.loader.exec_module(module)
        except Exception as exc:
            msg = f"Component '{identifier}' failed to load: {exc}"
            raise ComponentLoadError(msg) from exc
        return _build_definition(identifier, module)

    @staticmethod
    def _produce(identifier: str, producer: Producer | None, kind: str) -> str | None:
        if producer is None:
            return None
        try:
            text = producer()
        except Exception as exc:
            msg = f"Component '{identifier}' failed to produce its {kind}: {exc}"
            raise ComponentRenderError(msg) from exc
        if not isinstance(text, str):
            msg = f"Component '{identifier}' {kind} is not text."
            raise ComponentRenderError(msg)
        return text


def _build_definition(identifier: str, module: ModuleType) -> ComponentDefinition:
    """Check the module's exports and wrap them in a capability record."""
    render = getattr(module, "render", None)
    if not callable(render):
        msg = f"Component '{identifier}' does not export a callable 'render'."
        raise ComponentLoadError(msg)
    return ComponentDefinition(
        identifier=identifier,
        render=render,
        script=_as_producer(identifier, module, "script"),
        style=_as_producer(identifier, module, "style"),
        is_subtemplate=bool(getattr(module, "SUBTEMPLATE", False)),
    )


def _as_producer(identifier: str, module: ModuleType, name: str) -> Producer | None:
    """Normalize an optional ``script``/``style`` export into a producer."""
    match getattr(module, name, None):
        case None:
            return None
        case str() as text:
            return lambda: text
        case export if callable(export):
            return export
        case _:
            msg = f"Component '{identifier}' export '{name}' must be text or callable."
            raise ComponentLoadError(msg)


__all__ = ["ComponentDefinition", "ComponentRegistry"]
