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

"""Fixtures shared across all unit tests."""

from __future__ import annotations

import io

import pytest

from pyboa import Option, Profile


@pytest.fixture
def sample_options() -> tuple[Option, ...]:
    """Return the two options used by the rendering scenarios.

    Returns:
        ``option1``/``opt1`` and ``option2`` in display order.
    """
    return (
        Option(("option1", "opt1"), "opt1 description"),
        Option(("option2",), "opt2 description"),
    )


@pytest.fixture
def sample_profiles() -> tuple[Profile, ...]:
    """Return two profiles that reference ``sample_options`` by different aliases."""
    return (
        Profile(("profile1", "prof1"), ("opt1", "option2"), "prof1 description"),
        Profile(("profile2",), ("option1",), "prof2 description"),
    )


@pytest.fixture
def out() -> io.StringIO:
    return io.StringIO()


@pytest.fixture
def err() -> io.StringIO:
    return io.StringIO()
