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

"""Shared Hypothesis strategies for property-based tests."""

from __future__ import annotations

from hypothesis import strategies as st

__all__ = [
    "cell_text",
    "descriptions",
    "option_names",
    "table_rows",
]


def cell_text(min_size: int = 0, max_size: int = 16) -> st.SearchStrategy[str]:
    """Return a strategy that yields cell contents without tabs, newlines or spaces."""
    return st.text(
        alphabet=st.characters(blacklist_categories=("Cs", "Cc", "Zs", "Zl", "Zp")),
        min_size=min_size,
        max_size=max_size,
    )


def table_rows(max_rows: int = 8) -> st.SearchStrategy[list[tuple[str, str]]]:
    """Two-column rows suitable for feeding a tab writer.

    Args:
        max_rows: Maximum number of rows emitted.

    Returns:
        Hypothesis strategy producing (key, value) pairs.
    """
    return st.lists(st.tuples(cell_text(min_size=1), cell_text()), min_size=1, max_size=max_rows)


def option_names(max_size: int = 6) -> st.SearchStrategy[list[str]]:
    """Return a strategy that yields distinct lowercase option names."""
    name = st.from_regex(r"[a-z][a-z0-9-]{0,11}", fullmatch=True)
    return st.lists(name, min_size=1, max_size=max_size, unique=True)


def descriptions() -> st.SearchStrategy[str]:
    """Single-word descriptions, so rendered rows carry no trailing whitespace."""
    return st.from_regex(r"[a-z]{1,10}", fullmatch=True)
