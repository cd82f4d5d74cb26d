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

"""Public exception types raised by builders, commands and the renderer.

Two families live here. ``CommandError`` and its subclasses describe failures
caused by user input while a command executes (unknown subcommands, bad
flags, wrong positional arguments); ``Command.execute`` reports them and the
entry point maps them to an exit code. The ``BoaValidationError`` subclasses
describe misuse of the builder API and are raised immediately.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from pyboa._internal.exceptions import BoaError, BoaTypeError, BoaValidationError

if TYPE_CHECKING:
    from collections.abc import Sequence


class CommandError(BoaError):
    """Raised when a command cannot complete for the given input."""


class UnknownCommandError(CommandError):
    """Raised when a root command receives an unknown subcommand name."""

    def __init__(self, name: str, parent: str, suggestions: Sequence[str] = ()) -> None:
        """Initialise the error with the offending name and any suggestions.

        Args:
            name: Token the user typed in place of a subcommand.
            parent: Command path of the command that was searched.
            suggestions: Close matches to offer in the message.
        """
        self.name = name
        self.parent = parent
        self.suggestions = tuple(suggestions)
        message = f'unknown command "{name}" for "{parent}"'
        if self.suggestions:
            lines = "".join(f"\t{suggestion}\n" for suggestion in self.suggestions)
            message = f"{message}\n\nDid you mean this?\n{lines}"
        super().__init__(message)


class ArgsError(CommandError):
    """Raised when positional arguments fail a command's validator."""


class FlagError(CommandError):
    """Raised when flag parsing fails."""


class FlagNotFoundError(BoaValidationError):
    """Raised when a builder references a flag that was never registered."""

    def __init__(self, name: str) -> None:
        """Record the missing flag name.

        Args:
            name: Flag name passed to the builder.
        """
        self.name = name
        super().__init__(f'flag "{name}" does not exist')


class DuplicateOptionError(BoaValidationError):
    """Raised when two options share a canonical alias."""

    def __init__(self, alias: str) -> None:
        """Record the duplicated alias.

        Args:
            alias: Canonical alias declared twice.
        """
        self.alias = alias
        super().__init__(f'option "{alias}" is already declared')


class ProfileReferenceError(BoaValidationError):
    """Raised when a profile references options the command does not declare."""

    def __init__(self, unresolved: Sequence[tuple[str, str]]) -> None:
        """Record every ``(profile, option)`` pair that failed to resolve.

        Args:
            unresolved: Canonical profile alias and missing option reference.
        """
        self.unresolved = tuple(unresolved)
        details = ", ".join(f"{profile} -> {option}" for profile, option in self.unresolved)
        super().__init__(f"profiles reference undeclared options: {details}")


class TemplateRenderError(BoaError):
    """Raised when a usage or help template cannot be parsed or executed."""

    def __init__(self, error: Exception) -> None:
        """Wrap the underlying template engine error.

        Args:
            error: Exception raised by the template engine.
        """
        self.error = error
        super().__init__(f"template: {error}")


__all__ = [
    "ArgsError",
    "BoaError",
    "BoaTypeError",
    "BoaValidationError",
    "CommandError",
    "DuplicateOptionError",
    "FlagError",
    "FlagNotFoundError",
    "ProfileReferenceError",
    "TemplateRenderError",
    "UnknownCommandError",
]
