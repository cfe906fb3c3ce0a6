"""Load and cache template text by identifier."""

from __future__ import annotations

import dataclasses as dc
import threading
from pathlib import Path

import structlog

from pagewright.errors import TemplateLoadError, TemplateNotFound

logger = structlog.get_logger(__name__)


@dc.dataclass(frozen=True, slots=True)
class Template:
    """Template text shared read-only by every page that selects it."""

    identifier: str
    text: str


class TemplateStore:
    """Read each template under ``root`` once and share it across pages."""

    def __init__(self, root: Path) -> None:
        self.root = root
        self._templates: dict[str, Template] = {}
        self._guard = threading.Lock()

    def get(self, identifier: str) -> Template:
        """Return the template named ``identifier``.

        Raises
        ------
        TemplateNotFound
            If no file named ``identifier`` exists under the templates root.
        TemplateLoadError
            If the file cannot be read or is not valid UTF-8.
        """
        with self._guard:
            cached = self._templates.get(identifier)
            if cached is not None:
                return cached
            root = self.root.resolve()
            path = (root / identifier).resolve()
            if not path.is_relative_to(root) or not path.is_file():
                msg = f"Template '{identifier}' not found under '{self.root}'."
                raise TemplateNotFound(msg)
            try:
                text = path.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as exc:
                msg = f"Template '{identifier}' could not be read: {exc}"
                raise TemplateLoadError(msg) from exc
            template = Template(identifier, text)
            self._templates[identifier] = template
        logger.debug("template_loaded", identifier=identifier)
        return template

    def add(self, identifier: str, text: str) -> Template:
        """Register in-memory template text under ``identifier``."""
        template = Template(identifier, text)
        with self._guard:
            self._templates[identifier] = template
        return template


__all__ = ["Template", "TemplateStore"]
