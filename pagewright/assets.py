"""Collect component scripts and styles contributed during one page build."""

from __future__ import annotations

import dataclasses as dc
from html import escape


@dc.dataclass(frozen=True, slots=True)
class AssetEntry:
    """Script and style text contributed by one component."""

    identifier: str
    script: str | None = None
    style: str | None = None


@dc.dataclass(frozen=True, slots=True)
class AssetSet:
    """Ordered, deduplicated assets drained from an :class:`AssetCollector`."""

    entries: tuple[AssetEntry, ...] = ()

    def __len__(self) -> int:
        return len(self.entries)

    def style_html(self) -> str:
        """Return one ``<style>`` element per contributing component."""
        return "\n".join(
            _element("style", entry.identifier, entry.style)
            for entry in self.entries
            if entry.style
        )

    def script_html(self) -> str:
        """Return one ``<script>`` element per contributing component."""
        return "\n".join(
            _element("script", entry.identifier, entry.script)
            for entry in self.entries
            if entry.script
        )


class AssetCollector:
    """Insertion-ordered asset registry keyed by component identifier.

    First registration wins; later ones for the same identifier are ignored.
    A collector belongs to exactly one page build.
    """

    def __init__(self) -> None:
        self._entries: dict[str, AssetEntry] = {}

    def __contains__(self, identifier: object) -> bool:
        return identifier in self._entries

    def register_if_absent(
        self, identifier: str, script: str | None, style: str | None
    ) -> bool:
        """Record assets for ``identifier`` unless it is already present.

        Returns
        -------
        bool
            ``True`` when the entry was added, ``False`` for a repeat.
        """
        if identifier in self._entries:
            return False
        self._entries[identifier] = AssetEntry(identifier, script, style)
        return True

    def drain(self) -> AssetSet:
        """Return the collected assets and reset the collector."""
        drained = AssetSet(tuple(self._entries.values()))
        self._entries = {}
        return drained


def _element(tag: str, identifier: str, body: str | None) -> str:
    return f'<{tag} data-component="{escape(identifier, quote=True)}">{body}</{tag}>'


__all__ = ["AssetCollector", "AssetEntry", "AssetSet"]
