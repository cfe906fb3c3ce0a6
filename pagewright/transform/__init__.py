"""Bounded-buffer transform channel and the default markdown module."""

from .channel import TransformChannel
from .module import (
    MarkdownTransformModule,
    TransformModule,
    TransformSignal,
    TransformStatus,
)
from .renderer import HtmlContentRenderer

__all__ = [
    "HtmlContentRenderer",
    "MarkdownTransformModule",
    "TransformChannel",
    "TransformModule",
    "TransformSignal",
    "TransformStatus",
]
