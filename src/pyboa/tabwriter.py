# Copyright 2025 CrownOps Engineering
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Elastic tab-stop writer used to align help and usage columns.

Text written to a :class:`TabWriter` is buffered until :meth:`TabWriter.flush`.
Each line is split into cells at tab characters; a cell followed by a tab is
*tab-terminated* and takes part in alignment, the trailing cell of a line does
not. Consecutive lines that all have a tab-terminated cell at the same column
index form a *column block*, and every cell in the block is padded to the
block's width::

    width = max(minwidth, max(len(cell) + padding for cell in block))

A line with fewer cells ends the block, so blank lines and section headers
naturally separate independently aligned tables inside one help text.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

from pyboa.compat import Self

if TYPE_CHECKING:
    from types import TracebackType


class _TextStream(Protocol):
    def write(self, s: str, /) -> int: ...


class TabWriter:
    """Buffering writer that aligns tab-separated cells into columns.

    Attributes:
        minwidth: Minimal cell width including padding.
        tabwidth: Width of a tab stop, used when ``padchar`` is a tab.
        padding: Padding added to the widest cell of a column.
        padchar: Character used for padding.
    """

    def __init__(
        self,
        output: _TextStream,
        minwidth: int = 0,
        tabwidth: int = 8,
        padding: int = 1,
        padchar: str = " ",
    ) -> None:
        if minwidth < 0 or tabwidth < 0 or padding < 0:
            msg = "minwidth, tabwidth and padding must be non-negative"
            raise ValueError(msg)
        if len(padchar) != 1:
            msg = "padchar must be a single character"
            raise ValueError(msg)
        self._output = output
        self.minwidth = minwidth
        self.tabwidth = tabwidth
        self.padding = padding
        self.padchar = padchar
        self._buffer: list[str] = []

    def write(self, text: str, /) -> int:
        """Buffer ``text`` until the next flush and return its length."""
        self._buffer.append(text)
        return len(text)

    def flush(self) -> None:
        """Align all buffered text and write it to the underlying stream."""
        text = "".join(self._buffer)
        self._buffer.clear()
        if not text:
            return
        lines = [line.split("\t") for line in text.split("\n")]
        parts: list[str] = []
        self._format(parts, lines, [], 0, len(lines))
        self._output.write("".join(parts))

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.flush()

    def _format(
        self,
        parts: list[str],
        lines: list[list[str]],
        widths: list[int],
        line0: int,
        line1: int,
    ) -> None:
        column = len(widths)
        this = line0
        while this < line1:
            if column >= len(lines[this]) - 1:
                this += 1
                continue
            # lines before the block are already aligned up to this column
            self._write_lines(parts, lines, widths, line0, this)
            line0 = this
            width = self.minwidth
            while this < line1 and column < len(lines[this]) - 1:
                width = max(width, len(lines[this][column]) + self.padding)
                this += 1
            widths.append(width)
            self._format(parts, lines, widths, line0, this)
            widths.pop()
            line0 = this
        self._write_lines(parts, lines, widths, line0, line1)

    def _write_lines(
        self,
        parts: list[str],
        lines: list[list[str]],
        widths: list[int],
        line0: int,
        line1: int,
    ) -> None:
        for index in range(line0, line1):
            for column, cell in enumerate(lines[index]):
                parts.append(cell)
                if column < len(widths):
                    parts.append(self._padding_for(len(cell), widths[column]))
            if index + 1 < len(lines):
                parts.append("\n")

    def _padding_for(self, text_width: int, cell_width: int) -> str:
        if self.padchar == "\t":
            if self.tabwidth == 0:
                return ""
            # round the cell up to the next tab stop
            cell_width = -(-cell_width // self.tabwidth) * self.tabwidth
            return "\t" * -(-(cell_width - text_width) // self.tabwidth)
        return self.padchar * (cell_width - text_width)


__all__ = ["TabWriter"]
