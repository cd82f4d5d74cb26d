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

"""Jinja2 rendering for usage and help templates.

Templates receive the command as ``cmd`` and may use these filters:

``trim``
    Strip surrounding whitespace.
``trim_right_space`` / ``trim_trailing_whitespaces``
    Strip trailing whitespace only.
``rpad(width)``
    Left-align the value in a field of ``width`` characters.
``slice_to_csv``
    Join a sequence of strings with ``", "``.
"""

from __future__ import annotations

from functools import lru_cache
from typing import TYPE_CHECKING, Protocol

from jinja2 import Environment, StrictUndefined

from pyboa.exceptions import TemplateRenderError

if TYPE_CHECKING:
    from collections.abc import Iterable


class _TextStream(Protocol):
    def write(self, s: str, /) -> int: ...


def trim_right_space(value: str) -> str:
    """Return ``value`` without trailing whitespace."""
    return value.rstrip()


def rpad(value: object, padding: int) -> str:
    """Pad ``value`` on the right to ``padding`` characters."""
    return f"{value!s:<{padding}}"


def slice_to_csv(values: Iterable[str]) -> str:
    """Join ``values`` into a ``", "`` separated string."""
    return ", ".join(values)


@lru_cache(maxsize=1)
def template_environment() -> Environment:
    """Return the shared Jinja2 environment used for usage/help templates.

    Whitespace is preserved exactly (no block trimming) and a template's final
    newline is kept, so the template text is the literal layout of the output.
    """
    env = Environment(  # noqa: S701 - plain-text terminal output, not HTML
        autoescape=False,
        keep_trailing_newline=True,
        undefined=StrictUndefined,
    )
    env.filters.update(
        {
            "trim": str.strip,
            "trim_right_space": trim_right_space,
            "trim_trailing_whitespaces": trim_right_space,
            "rpad": rpad,
            "slice_to_csv": slice_to_csv,
        },
    )
    return env


def render_template(writer: _TextStream, text: str, data: object) -> None:
    """Render ``text`` with ``data`` bound to ``cmd`` and write it to ``writer``.

    The whole template is rendered before anything is written, so a failing
    template leaves ``writer`` untouched.

    Args:
        writer: Destination stream (typically a ``TabWriter``).
        text: Jinja2 template source.
        data: Object exposed to the template as ``cmd``.

    Raises:
        TemplateRenderError: If the template cannot be parsed or rendered.
    """
    try:
        rendered = template_environment().from_string(text).render(cmd=data)
    # ignore JUSTIFIED: expressions call arbitrary command attributes; any failure
    # while executing them is reported like a template error
    except Exception as exc:  # pylint: disable=broad-exception-caught
        raise TemplateRenderError(exc) from exc
    writer.write(rendered)


__all__ = [
    "render_template",
    "rpad",
    "slice_to_csv",
    "template_environment",
    "trim_right_space",
]
