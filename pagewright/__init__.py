"""Compose static pages from markdown, templates, and components.

This package exposes the page assembly pipeline (transform channel, component
registry, placeholder resolver, asset collector, and page assembler) together
with the ``pagewright`` CLI entry point that builds a whole site.

Exports
-------
- ``PageAssembler``: Builds one final document per page.
- ``app``: Cyclopts application entry for subcommands.
- ``main``: Convenience function that invokes the Cyclopts app.

Examples
--------
>>> from pagewright import main
>>> main()  # doctest: +SKIP
>>> from pagewright import PageAssembler
>>> PageAssembler.__name__
'PageAssembler'
"""

from __future__ import annotations

from .assembler import BuildReport, FinalDocument, PageAssembler
from .cli import app, main

__all__ = ["BuildReport", "FinalDocument", "PageAssembler", "app", "main"]
