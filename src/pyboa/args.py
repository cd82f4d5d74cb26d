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

"""Positional argument validators for ``CommandBuilder.with_args``.

A validator receives the command and its positional arguments and raises
:class:`~pyboa.exceptions.ArgsError` when they are not acceptable::

    builder.with_args(match_all(maximum_n_args(1), only_valid_args))
"""

from __future__ import annotations

from typing import TYPE_CHECKING, TypeAlias

from pyboa.exceptions import ArgsError

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from pyboa.command import Command

PositionalArgs: TypeAlias = "Callable[[Command, Sequence[str]], None]"


def no_args(cmd: Command, args: Sequence[str]) -> None:
    """Reject any positional argument."""
    if args:
        msg = f'unknown command "{args[0]}" for "{cmd.command_path}"'
        raise ArgsError(msg)


def arbitrary_args(cmd: Command, args: Sequence[str]) -> None:  # noqa: ARG001
    """Accept any positional arguments."""


def only_valid_args(cmd: Command, args: Sequence[str]) -> None:
    """Accept only values listed in ``valid_args`` or ``arg_aliases``.

    ``valid_args`` entries may carry a tab-separated description; only the part
    before the tab is compared.
    """
    if not cmd.valid_args:
        return
    accepted = {entry.split("\t", 1)[0] for entry in cmd.valid_args}
    accepted.update(cmd.arg_aliases)
    for value in args:
        if value not in accepted:
            msg = f'invalid argument "{value}" for "{cmd.command_path}"{cmd.find_suggestions(value)}'
            raise ArgsError(msg)


def minimum_n_args(count: int) -> PositionalArgs:
    """Require at least ``count`` positional arguments."""

    def validate(cmd: Command, args: Sequence[str]) -> None:  # noqa: ARG001
        if len(args) < count:
            msg = f"requires at least {count} arg(s), only received {len(args)}"
            raise ArgsError(msg)

    return validate


def maximum_n_args(count: int) -> PositionalArgs:
    """Allow at most ``count`` positional arguments."""

    def validate(cmd: Command, args: Sequence[str]) -> None:  # noqa: ARG001
        if len(args) > count:
            msg = f"accepts at most {count} arg(s), received {len(args)}"
            raise ArgsError(msg)

    return validate


def exact_args(count: int) -> PositionalArgs:
    """Require exactly ``count`` positional arguments."""

    def validate(cmd: Command, args: Sequence[str]) -> None:  # noqa: ARG001
        if len(args) != count:
            msg = f"accepts {count} arg(s), received {len(args)}"
            raise ArgsError(msg)

    return validate


def range_args(minimum: int, maximum: int) -> PositionalArgs:
    """Require between ``minimum`` and ``maximum`` positional arguments (inclusive)."""

    def validate(cmd: Command, args: Sequence[str]) -> None:  # noqa: ARG001
        if not minimum <= len(args) <= maximum:
            msg = f"accepts between {minimum} and {maximum} arg(s), received {len(args)}"
            raise ArgsError(msg)

    return validate


def match_all(*validators: PositionalArgs) -> PositionalArgs:
    """Run ``validators`` in order; the first failure wins."""

    def validate(cmd: Command, args: Sequence[str]) -> None:
        for validator in validators:
            validator(cmd, args)

    return validate


__all__ = [
    "PositionalArgs",
    "arbitrary_args",
    "exact_args",
    "match_all",
    "maximum_n_args",
    "minimum_n_args",
    "no_args",
    "only_valid_args",
    "range_args",
]
