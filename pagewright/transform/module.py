"""The isolated markdown transform module and its completion signal.

A transform module sits on the far side of the channel boundary: it receives an
input buffer plus the logical length of its content, writes its result into an
output buffer, and reports completion with a :class:`TransformSignal`. It never
sees or returns Python strings across that boundary.
"""

from __future__ import annotations

import dataclasses as dc
import enum
import typing as typ

import structlog

from pagewright._constants import DEFAULT_PYGMENTS_STYLE
from pagewright.transform.buffers import read_text
from pagewright.transform.renderer import HtmlContentRenderer

if typ.TYPE_CHECKING:
    from pagewright.transform.buffers import Buffer

logger = structlog.get_logger(__name__)


class TransformStatus(enum.Enum):
    """Completion states a transform module can report."""

    OK = "ok"
    OVERFLOW = "overflow"
    ERROR = "error"


@dc.dataclass(frozen=True, slots=True)
class TransformSignal:
    """Completion signal returned by a transform module.

    Attributes
    ----------
    status : TransformStatus
        Outcome of the call.
    length : int
        Bytes written on success, or bytes required on overflow.
    message : str
        Human-readable detail for error signals.
    """

    status: TransformStatus
    length: int = 0
    message: str = ""

    @classmethod
    def ok(cls, length: int) -> TransformSignal:
        return cls(TransformStatus.OK, length)

    @classmethod
    def overflow(cls, required: int) -> TransformSignal:
        return cls(TransformStatus.OVERFLOW, required)

    @classmethod
    def error(cls, message: str) -> TransformSignal:
        return cls(TransformStatus.ERROR, message=message)


class TransformModule(typ.Protocol):
    """Callable contract implemented by isolated transform modules."""

    single_instance: bool

    def __call__(
        self, input_buffer: Buffer, length: int, output_buffer: Buffer
    ) -> TransformSignal: ...


class MarkdownTransformModule:
    """Convert markdown held in an input buffer to HTML in an output buffer.

    The module owns a single :class:`HtmlContentRenderer`, whose markdown
    instance is reset between calls, so callers must serialize access.
    """

    single_instance = True

    def __init__(
        self,
        pygments_style: str = DEFAULT_PYGMENTS_STYLE,
        *,
        raw_html: bool = True,
    ) -> None:
        self.renderer = HtmlContentRenderer(pygments_style, raw_html=raw_html)

    @property
    def stylesheet(self) -> str:
        """Return the highlight CSS matching the rendered code blocks."""
        return self.renderer.stylesheet

    def __call__(
        self, input_buffer: Buffer, length: int, output_buffer: Buffer
    ) -> TransformSignal:
        """Transform ``length`` bytes of ``input_buffer`` into ``output_buffer``.

        Parameters
        ----------
        input_buffer : bytearray or memoryview
            Buffer holding UTF-8 markdown; a zero byte ends the text early.
        length : int
            Logical length of the markdown, which may be zero.
        output_buffer : bytearray or memoryview
            Destination for the UTF-8 HTML result.

        Returns
        -------
        TransformSignal
            ``ok`` with the bytes written, ``overflow`` with the bytes the
            result needs, or ``error`` when the input cannot be decoded.
        """
        try:
            source = read_text(input_buffer, length)
        except (UnicodeDecodeError, ValueError) as exc:
            return TransformSignal.error(f"Unreadable input: {exc}")

        data = self.renderer.markdown(source).encode("utf-8")
        if len(data) > len(output_buffer):
            logger.debug(
                "transform_output_overflow",
                required=len(data),
                capacity=len(output_buffer),
            )
            return TransformSignal.overflow(len(data))
        output_buffer[: len(data)] = data
        return TransformSignal.ok(len(data))


__all__ = [
    "MarkdownTransformModule",
    "TransformModule",
    "TransformSignal",
    "TransformStatus",
]
