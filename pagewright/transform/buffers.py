r"""Byte-buffer codec shared by the transform channel and its modules.

Text crosses the transform boundary as UTF-8 bytes in fixed-capacity buffers.
A zero byte marks the logical end of a string: decoding never reads past it,
so a source containing a raw ``\x00`` is truncated at that byte.

Example
-------
>>> from pagewright.transform.buffers import read_text, write_text
>>> buffer = bytearray(16)
>>> write_text(buffer, "hi\x00there")
8
>>> read_text(buffer, 8)
'hi'
"""

from __future__ import annotations

import typing as typ

from pagewright.errors import InputOverflow

if typ.TYPE_CHECKING:
    Buffer = bytearray | memoryview
else:  # pragma: no cover - type-checking fallback
    Buffer = typ.Any


def read_text(buffer: Buffer, length: int) -> str:
    """Decode ``length`` bytes of ``buffer``, stopping at the first zero byte.

    Parameters
    ----------
    buffer : bytearray or memoryview
        Buffer holding UTF-8 encoded text.
    length : int
        Logical length of the content; zero is a valid, empty document.

    Returns
    -------
    str
        Decoded text, truncated at the first zero byte within ``length``.

    Raises
    ------
    UnicodeDecodeError
        If the bytes before the terminator are not valid UTF-8.
    """
    if length < 0 or length > len(buffer):
        msg = f"Logical length {length} is outside buffer of {len(buffer)} bytes."
        raise ValueError(msg)
    payload = bytes(buffer[:length])
    end = payload.find(0)
    if end != -1:
        payload = payload[:end]
    return payload.decode("utf-8")


def write_text(buffer: Buffer, text: str) -> int:
    """Encode ``text`` into ``buffer`` and return the logical length written.

    Raises
    ------
    InputOverflow
        If the encoded text does not fit in ``buffer``.
    """
    return write_bytes(buffer, text.encode("utf-8"))


def write_bytes(buffer: Buffer, data: bytes) -> int:
    """Copy ``data`` into the start of ``buffer`` and return its length."""
    size = len(data)
    if size > len(buffer):
        msg = f"{size} bytes do not fit in a {len(buffer)}-byte buffer."
        raise InputOverflow(msg)
    buffer[:size] = data
    return size


__all__ = ["read_text", "write_bytes", "write_text"]
