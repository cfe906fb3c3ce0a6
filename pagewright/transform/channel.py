"""Bounded-buffer request/response channel to an isolated transform module.

The channel is the only place where raw byte-buffer semantics are exposed.
Callers hand it text and receive text; underneath, each call allocates a fresh
input and output buffer of fixed capacity, writes the encoded source into the
input buffer, and reads the module's result back from the output buffer once
the module has signalled completion.

Example
-------
>>> from pagewright.transform import MarkdownTransformModule, TransformChannel
>>> channel = TransformChannel(MarkdownTransformModule())
>>> channel.transform("# Hi")
'<h1>Hi</h1>'
"""

from __future__ import annotations

import contextlib
import threading
import typing as typ

import structlog

from pagewright._constants import DEFAULT_INPUT_CAPACITY, DEFAULT_OUTPUT_CAPACITY
from pagewright.errors import OutputOverflow, PipelineError, TransformModuleError
from pagewright.transform.buffers import read_text, write_text
from pagewright.transform.module import TransformStatus

if typ.TYPE_CHECKING:
    from pagewright.transform.module import TransformModule, TransformSignal

logger = structlog.get_logger(__name__)


class TransformChannel:
    """Invoke a transform module through fixed-capacity byte buffers."""

    def __init__(
        self,
        module: TransformModule,
        *,
        input_capacity: int = DEFAULT_INPUT_CAPACITY,
        output_capacity: int = DEFAULT_OUTPUT_CAPACITY,
    ) -> None:
        """Initialize the channel around ``module``.

        Parameters
        ----------
        module : TransformModule
            Callable taking ``(input_buffer, length, output_buffer)`` and
            returning a :class:`~pagewright.transform.module.TransformSignal`.
            Modules declaring ``single_instance = True`` are called by one
            thread at a time.
        input_capacity : int, optional
            Size in bytes of the per-call input buffer.
        output_capacity : int, optional
            Size in bytes of the per-call output buffer.
        """
        if input_capacity < 0 or output_capacity < 0:
            msg = "Buffer capacities must not be negative."
            raise ValueError(msg)
        self.module = module
        self.input_capacity = input_capacity
        self.output_capacity = output_capacity
        self._lock = threading.Lock()

    def transform(self, source_text: str) -> str:
        """Send ``source_text`` through the module and return its fragment.

        Returns
        -------
        str
            The decoded result, truncated at the first zero byte if the module
            emitted one.

        Raises
        ------
        InputOverflow
            If the encoded source does not fit in the input buffer.
        OutputOverflow
            If the module's result does not fit in the output buffer.
        TransformModuleError
            If the module signals an error, raises, or produces undecodable
            output.
        """
        input_buffer = bytearray(self.input_capacity)
        output_buffer = bytearray(self.output_capacity)
        length = write_text(input_buffer, source_text)

        signal = self._invoke(input_buffer, length, output_buffer)
        match signal.status:
            case TransformStatus.OK:
                if signal.length > self.output_capacity:
                    msg = (
                        f"Transform module reported {signal.length} bytes for a "
                        f"{self.output_capacity}-byte output buffer."
                    )
                    raise TransformModuleError(msg)
                try:
                    return read_text(output_buffer, signal.length)
                except UnicodeDecodeError as exc:
                    msg = f"Transform module produced invalid UTF-8: {exc}"
                    raise TransformModuleError(msg) from exc
            case TransformStatus.OVERFLOW:
                msg = (
                    f"Transform result of {signal.length} bytes exceeds the "
                    f"{self.output_capacity}-byte output buffer."
                )
                raise OutputOverflow(msg)
            case _:
                msg = signal.message or "Transform module reported an error."
                raise TransformModuleError(msg)

    def _invoke(
        self, input_buffer: bytearray, length: int, output_buffer: bytearray
    ) -> TransformSignal:
        """Call the module once, serialized when it is single-instance."""
        guard = (
            self._lock
            if getattr(self.module, "single_instance", False)
            else contextlib.nullcontext()
        )
        with guard:
            logger.debug("transform_started", length=length)
            try:
                signal = self.module(
                    memoryview(input_buffer), length, memoryview(output_buffer)
                )
            except PipelineError:
                raise
            except Exception as exc:
                msg = f"Transform module raised {type(exc).__name__}: {exc}"
                raise TransformModuleError(msg) from exc
        logger.debug("transform_finished", status=signal.status.value)
        return signal


__all__ = ["TransformChannel"]
