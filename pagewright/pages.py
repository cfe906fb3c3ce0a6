r"""Parse page sources into front-matter and markdown body.

A page source may open with a front-matter block: a line of three dashes, a
YAML mapping of scalar values, and a closing line of three dashes. Everything
after the block is the markdown body. Sources without a leading ``---`` line
have empty front-matter.

Example
-------
>>> from pagewright.pages import parse_page
>>> page = parse_page("index.md", "---\ntemplate: t.html\ntitle: Hello\n---\n# Hi\n")
>>> page.template
't.html'
>>> page.body
'# Hi\n'
"""

from __future__ import annotations

import dataclasses as dc
import datetime as dt
import re
import types
import typing as typ

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from pagewright._constants import TEMPLATE_KEY
from pagewright.errors import FrontMatterError, PageReadError

if typ.TYPE_CHECKING:
    import collections.abc as cabc
    from pathlib import Path

FRONT_MATTER_DELIMITER = re.compile(r"^---[ \t]*\r?$", re.MULTILINE)

Scalar = str | int | float | bool | dt.date | None


@dc.dataclass(frozen=True, slots=True)
class Page:
    """An immutable parsed page source.

    Attributes
    ----------
    identifier : str
        Source path of the page, used in reports and output placement.
    front_matter : Mapping[str, Scalar]
        Read-only front-matter values.
    body : str
        Markdown body following the front-matter block.
    """

    identifier: str
    front_matter: cabc.Mapping[str, Scalar]
    body: str

    @property
    def template(self) -> str | None:
        """Return the template reference, or ``None`` when absent or blank."""
        value = self.front_matter.get(TEMPLATE_KEY)
        if value is None:
            return None
        text = str(value).strip()
        return text or None

    @property
    def title(self) -> str | None:
        value = self.front_matter.get("title")
        return None if value is None else _as_text(value)

    def variables(self) -> dict[str, str]:
        """Return every front-matter value rendered as plain text."""
        return {key: _as_text(value) for key, value in self.front_matter.items()}


def parse_page(identifier: str, source: str) -> Page:
    """Split ``source`` into front-matter and body.

    Raises
    ------
    FrontMatterError
        If the front-matter block is unterminated, is not valid YAML, is not
        a mapping, or holds non-scalar values.
    """
    source = source.removeprefix("\ufeff")
    first_line, newline, _rest = source.partition("\n")
    if not newline or not FRONT_MATTER_DELIMITER.fullmatch(first_line.rstrip("\r")):
        return Page(identifier, types.MappingProxyType({}), source)

    header_start = len(first_line) + 1
    closing = FRONT_MATTER_DELIMITER.search(source, header_start)
    if closing is None:
        msg = "Front-matter block is not terminated by a '---' line."
        raise FrontMatterError(msg, page_id=identifier)

    header = source[header_start : closing.start()]
    body = source[closing.end() :]
    body = body.removeprefix("\n")
    front_matter = _load_front_matter(identifier, header)
    return Page(identifier, types.MappingProxyType(front_matter), body)


def load_page(path: Path, root: Path) -> Page:
    """Read and parse the page at ``path``, identified relative to ``root``.

    Raises
    ------
    PageReadError
        If the file cannot be read or is not valid UTF-8.
    FrontMatterError
        If the front-matter block is malformed.
    """
    identifier = path.relative_to(root).as_posix()
    try:
        source = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        msg = f"Page source could not be read: {exc}"
        raise PageReadError(msg, page_id=identifier) from exc
    return parse_page(identifier, source)


def _load_front_matter(identifier: str, header: str) -> dict[str, Scalar]:
    loader = YAML(typ="safe")
    loader.version = (1, 2)
    try:
        loaded = loader.load(header)
    except YAMLError as exc:
        msg = f"Front-matter is not valid YAML: {exc}"
        raise FrontMatterError(msg, page_id=identifier) from exc
    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        msg = "Front-matter must be a mapping."
        raise FrontMatterError(msg, page_id=identifier)

    front_matter: dict[str, Scalar] = {}
    for key, value in loaded.items():
        if isinstance(value, (list, dict)):
            msg = f"Front-matter key '{key}' must hold a scalar value."
            raise FrontMatterError(msg, page_id=identifier)
        front_matter[str(key)] = value
    return front_matter


def _as_text(value: Scalar) -> str:
    match value:
        case None:
            return ""
        case bool():
            return "true" if value else "false"
        case dt.date():
            return value.isoformat()
        case _:
            return str(value)


__all__ = ["Page", "load_page", "parse_page"]
