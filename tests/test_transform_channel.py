"""Unit tests for the bounded-buffer transform channel.

These tests pin down the buffer contract between the channel and an isolated
transform module: logical lengths (including zero), zero-byte termination,
exact-capacity output, overflow reporting, error signals, and serialization of
single-instance modules.

Usage
-----
Run ``pytest tests/test_transform_channel.py -v``. No fixtures beyond pytest's
built-ins are required.
"""

from __future__ import annotations

import threading
import time

import pytest

from pagewright.errors import InputOverflow, OutputOverflow, TransformModuleError
from pagewright.transform import (
    MarkdownTransformModule,
    TransformChannel,
    TransformSignal,
)
from pagewright.transform.buffers import read_text, write_text
from pagewright.transform.renderer import normalize_fences


class EchoModule:
    """Copy input to output unchanged, recording the lengths it saw."""

    single_instance = False

    def __init__(self) -> None:
        self.lengths: list[int] = []

    def __call__(self, input_buffer, length, output_buffer) -> TransformSignal:  # noqa: ANN001
        self.lengths.append(length)
        data = read_text(input_buffer, length).encode("utf-8")
        if len(data) > len(output_buffer):
            return TransformSignal.overflow(len(data))
        output_buffer[: len(data)] = data
        return TransformSignal.ok(len(data))


def test_markdown_module_renders_heading() -> None:
    channel = TransformChannel(MarkdownTransformModule())
    assert channel.transform("# Hi") == "<h1>Hi</h1>"


def test_zero_length_input_is_an_empty_document() -> None:
    module = EchoModule()
    channel = TransformChannel(module, input_capacity=8, output_capacity=8)
    assert channel.transform("") == ""
    assert module.lengths == [0], "zero length must be passed through as-is"


def test_logical_length_is_not_capacity() -> None:
    module = EchoModule()
    channel = TransformChannel(module, input_capacity=64, output_capacity=64)
    channel.transform("abc")
    assert module.lengths == [3]


def test_result_equal_to_capacity_succeeds() -> None:
    channel = TransformChannel(EchoModule(), input_capacity=16, output_capacity=5)
    assert channel.transform("hello") == "hello"


def test_result_one_byte_over_capacity_overflows() -> None:
    channel = TransformChannel(EchoModule(), input_capacity=16, output_capacity=5)
    with pytest.raises(OutputOverflow):
        channel.transform("hello!")


def test_markdown_output_at_exact_capacity() -> None:
    expected = "<h1>Hi</h1>".encode()
    exact = TransformChannel(MarkdownTransformModule(), output_capacity=len(expected))
    assert exact.transform("# Hi") == "<h1>Hi</h1>"
    short = TransformChannel(
        MarkdownTransformModule(), output_capacity=len(expected) - 1
    )
    with pytest.raises(OutputOverflow):
        short.transform("# Hi")


def test_zero_byte_truncates_decoded_text() -> None:
    buffer = bytearray(32)
    length = write_text(buffer, "abc\x00def")
    decoded = read_text(buffer, length)
    assert decoded == "abc"
    assert len(decoded) == 3


def test_zero_byte_in_source_truncates_transform_input() -> None:
    channel = TransformChannel(EchoModule(), input_capacity=32, output_capacity=32)
    assert channel.transform("keep\x00drop") == "keep"


def test_input_larger_than_capacity_fails() -> None:
    channel = TransformChannel(EchoModule(), input_capacity=4, output_capacity=64)
    with pytest.raises(InputOverflow):
        channel.transform("too long")


def test_error_signal_surfaces_as_module_error() -> None:
    calls: list[int] = []

    def failing(input_buffer, length, output_buffer) -> TransformSignal:  # noqa: ANN001
        calls.append(length)
        return TransformSignal.error("parser exploded")

    channel = TransformChannel(failing)
    with pytest.raises(TransformModuleError, match="parser exploded"):
        channel.transform("# Hi")
    assert calls == [4], "a failed call must not be retried"


def test_exception_in_module_surfaces_as_module_error() -> None:
    def raising(input_buffer, length, output_buffer) -> TransformSignal:  # noqa: ANN001
        raise RuntimeError("boom")

    channel = TransformChannel(raising)
    with pytest.raises(TransformModuleError, match="boom"):
        channel.transform("text")


def test_single_instance_module_calls_are_serialized() -> None:
    class SlowModule(EchoModule):
        single_instance = True

        def __init__(self) -> None:
            super().__init__()
            self.active = 0
            self.peak = 0
            self._counter = threading.Lock()

        def __call__(self, input_buffer, length, output_buffer) -> TransformSignal:  # noqa: ANN001
            with self._counter:
                self.active += 1
                self.peak = max(self.peak, self.active)
            time.sleep(0.01)
            try:
                return super().__call__(input_buffer, length, output_buffer)
            finally:
                with self._counter:
                    self.active -= 1

    module = SlowModule()
    channel = TransformChannel(module, input_capacity=64, output_capacity=64)
    threads = [
        threading.Thread(target=channel.transform, args=(f"page {idx}",))
        for idx in range(6)
    ]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    assert module.peak == 1
    assert len(module.lengths) == 6


def test_raw_html_passthrough_can_be_disabled() -> None:
    passthrough = TransformChannel(MarkdownTransformModule())
    escaped = TransformChannel(MarkdownTransformModule(raw_html=False))
    assert "<b>bold</b>" in passthrough.transform("Some <b>bold</b> text")
    assert "&lt;b&gt;" in escaped.transform("Some <b>bold</b> text")


def test_fenced_code_is_highlighted_with_language() -> None:
    channel = TransformChannel(MarkdownTransformModule())
    html = channel.transform("```python\nprint('hi')\n```\n")
    assert 'data-language="python"' in html


def test_fence_labels_and_indentation_are_normalized() -> None:
    source = "- item\n\n  ```rust,no_run\n  fn main() {}\n  ```\n\n```\nplain\n```\n"
    normalized, languages = normalize_fences(source)
    assert languages == ["rust", "text"]
    assert "```rust\n" in normalized
    assert ",no_run" not in normalized
