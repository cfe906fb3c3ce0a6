"""Tests for front-matter parsing and template lookup."""

from __future__ import annotations

import typing as typ

import pytest

from pagewright.errors import (
    FrontMatterError,
    PageReadError,
    TemplateLoadError,
    TemplateNotFound,
)
from pagewright.pages import load_page, parse_page
from pagewright.templates import TemplateStore

if typ.TYPE_CHECKING:
    import collections.abc as cabc
    from pathlib import Path


def test_front_matter_and_body_are_split() -> None:
    page = parse_page(
        "index.md", "---\ntemplate: t.html\ntitle: Home\n---\n# Hi\n\nBody\n"
    )
    assert page.template == "t.html"
    assert page.title == "Home"
    assert page.body == "# Hi\n\nBody\n"


def test_source_without_front_matter_is_all_body() -> None:
    page = parse_page("notes.md", "# Notes\n---\nmore\n")
    assert dict(page.front_matter) == {}
    assert page.template is None
    assert page.body == "# Notes\n---\nmore\n"


def test_byte_order_mark_and_crlf_are_tolerated() -> None:
    page = parse_page("win.md", "\ufeff---\r\ntemplate: t.html\r\n---\r\n# Hi\r\n")
    assert page.template == "t.html"
    assert page.body.strip() == "# Hi"


def test_empty_front_matter_block() -> None:
    page = parse_page("empty.md", "---\n---\nText\n")
    assert dict(page.front_matter) == {}
    assert page.body == "Text\n"


def test_blank_template_reference_is_absent() -> None:
    page = parse_page("blank.md", "---\ntemplate: '  '\n---\n")
    assert page.template is None


def test_front_matter_is_read_only() -> None:
    page = parse_page("ro.md", "---\ntitle: Home\n---\n")
    with pytest.raises(TypeError):
        page.front_matter["title"] = "Other"  # type: ignore[index]


def test_variables_render_scalars_as_text() -> None:
    page = parse_page(
        "vars.md", "---\ndraft: false\norder: 3\nratio: 0.5\nnote: null\n---\n"
    )
    assert page.variables() == {
        "draft": "false",
        "order": "3",
        "ratio": "0.5",
        "note": "",
    }


@pytest.mark.parametrize(
    ("source", "message"),
    [
        ("---\ntitle: Home\n# no closing line\n", "not terminated"),
        ("---\ntitle: [unclosed\n---\n", "not valid YAML"),
        ("---\n- one\n- two\n---\n", "must be a mapping"),
        ("---\ntags:\n  - a\n---\n", "scalar"),
    ],
)
def test_invalid_front_matter_is_reported(source: str, message: str) -> None:
    with pytest.raises(FrontMatterError, match=message) as excinfo:
        parse_page("bad.md", source)
    assert excinfo.value.page_id == "bad.md"


def test_load_page_uses_relative_posix_identifier(site_root: Path) -> None:
    path = site_root / "pages" / "docs" / "intro.md"
    path.parent.mkdir(parents=True)
    path.write_text("---\ntitle: Intro\n---\nHello\n", encoding="utf-8")
    page = load_page(path, site_root / "pages")
    assert page.identifier == "docs/intro.md"
    assert page.body == "Hello\n"


def test_template_store_caches_by_identifier(
    site_root: Path, write_template: cabc.Callable[[str, str], Path]
) -> None:
    path = write_template("t.html", "<main>{{& content }}</main>")
    store = TemplateStore(site_root / "templates")
    first = store.get("t.html")
    path.write_text("changed", encoding="utf-8")
    assert store.get("t.html") is first
    assert first.text == "<main>{{& content }}</main>"


def test_template_store_in_memory_templates(site_root: Path) -> None:
    store = TemplateStore(site_root / "templates")
    store.add("inline", "{{& content }}")
    assert store.get("inline").text == "{{& content }}"


@pytest.mark.parametrize("identifier", ["missing.html", "../outside.html"])
def test_template_store_rejects_unknown_templates(
    site_root: Path, identifier: str
) -> None:
    (site_root / "outside.html").write_text("x", encoding="utf-8")
    store = TemplateStore(site_root / "templates")
    with pytest.raises(TemplateNotFound):
        store.get(identifier)


def test_undecodable_page_source_is_a_read_error(site_root: Path) -> None:
    path = site_root / "pages" / "bad.md"
    path.write_bytes(b"---\ntemplate: t.html\n---\n\xff\n")
    with pytest.raises(PageReadError) as excinfo:
        load_page(path, site_root / "pages")
    assert excinfo.value.page_id == "bad.md"
    assert isinstance(excinfo.value.__cause__, UnicodeDecodeError)


def test_undecodable_template_is_a_load_error(site_root: Path) -> None:
    (site_root / "templates" / "bad.html").write_bytes(b"\xff\xfe{{& content }}")
    store = TemplateStore(site_root / "templates")
    with pytest.raises(TemplateLoadError, match="bad.html"):
        store.get("bad.html")
