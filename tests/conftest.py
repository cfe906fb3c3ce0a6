"""Shared fixtures for pagewright tests.

The fixtures lay out a throwaway site under ``tmp_path`` with ``templates``
and ``components`` directories, and expose small writers so each test can
declare exactly the templates and component modules it needs.
"""

from __future__ import annotations

import textwrap
import typing as typ

import pytest

from pagewright.assembler import PageAssembler
from pagewright.components import ComponentRegistry
from pagewright.templates import TemplateStore
from pagewright.transform import MarkdownTransformModule, TransformChannel

if typ.TYPE_CHECKING:
    import collections.abc as cabc
    from pathlib import Path

BUTTON_COMPONENT = """
def render(props):
    return "<button>Click</button>"

def script():
    return "console.log(1)"
"""


@pytest.fixture
def site_root(tmp_path: Path) -> Path:
    """Return a temp site root with empty templates and components folders."""
    for name in ("templates", "components", "pages"):
        (tmp_path / name).mkdir()
    return tmp_path


@pytest.fixture
def write_component(site_root: Path) -> cabc.Callable[[str, str], Path]:
    """Return a writer that stores dedented component source by identifier."""

    def _write(identifier: str, source: str) -> Path:
        path = site_root / "components" / identifier
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(textwrap.dedent(source).lstrip(), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def write_template(site_root: Path) -> cabc.Callable[[str, str], Path]:
    """Return a writer that stores template text by identifier."""

    def _write(identifier: str, text: str) -> Path:
        path = site_root / "templates" / identifier
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def button_component(write_component: cabc.Callable[[str, str], Path]) -> str:
    """Write the sample button component and return its identifier."""
    write_component("button.py", BUTTON_COMPONENT)
    return "button.py"


@pytest.fixture
def registry(site_root: Path) -> ComponentRegistry:
    return ComponentRegistry(site_root / "components")


@pytest.fixture
def make_assembler(
    site_root: Path, registry: ComponentRegistry
) -> cabc.Callable[..., PageAssembler]:
    """Return a factory building assemblers over the temp site."""

    def _make(
        *,
        theme_slots: cabc.Mapping[str, str] | None = None,
        max_depth: int = 16,
        output_capacity: int = 64 * 1024,
        raw_html: bool = True,
    ) -> PageAssembler:
        channel = TransformChannel(
            MarkdownTransformModule(raw_html=raw_html),
            output_capacity=output_capacity,
        )
        return PageAssembler(
            channel,
            registry,
            TemplateStore(site_root / "templates"),
            theme_slots=theme_slots,
            max_depth=max_depth,
        )

    return _make
