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

"""Options-aware commands and their usage/help rendering.

An :class:`Option` documents one accepted positional argument; a
:class:`Profile` bundles several options under a shorthand name. A
:class:`BoaCommand` wraps a :class:`~pyboa.command.Command`, forwards every
attribute it does not define itself, and renders usage and help with extra
``Options`` and ``Profiles`` sections aligned by a :class:`TabWriter`::

    Options:
      option1, opt1   opt1 description
      option2         opt2 description

    Profiles:
      profile1, prof1   prof1 description
        ↳ Options:      opt1, option2
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Final, NamedTuple

from pyboa._internal.logging_utils import structured_extra
from pyboa.core.model_types import LogComponent
from pyboa.exceptions import BoaValidationError, ProfileReferenceError, TemplateRenderError
from pyboa.tabwriter import TabWriter
from pyboa.template import render_template
from pyboa.templates import OPTIONS_TEMPLATE

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from pyboa.builder import BoaCommandBuilder
    from pyboa.command import Command

logger: logging.Logger = logging.getLogger("pyboa.render")


class TabSettings(NamedTuple):
    """``TabWriter`` geometry for one kind of output."""

    minwidth: int
    tabwidth: int
    padding: int


USAGE_TABS: Final[TabSettings] = TabSettings(minwidth=8, tabwidth=8, padding=8)
HELP_TABS: Final[TabSettings] = TabSettings(minwidth=3, tabwidth=3, padding=3)


@dataclass(frozen=True, slots=True)
class Option:
    """A documented positional argument.

    Attributes:
        args: Aliases in display order; the first one is canonical.
        desc: Description shown next to the aliases.
    """

    args: tuple[str, ...]
    desc: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "args", _aliases(self.args, "option"))

    @property
    def name(self) -> str:
        return self.args[0]


@dataclass(frozen=True, slots=True)
class Profile:
    """A shorthand that stands for several options.

    Attributes:
        args: Aliases in display order; the first one is canonical.
        opts: Option references (any alias of a declared option).
        desc: Description shown next to the aliases.
    """

    args: tuple[str, ...]
    opts: tuple[str, ...] = ()
    desc: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "args", _aliases(self.args, "profile"))
        opts = (self.opts,) if isinstance(self.opts, str) else tuple(self.opts)
        object.__setattr__(self, "opts", opts)

    @property
    def name(self) -> str:
        return self.args[0]


def _aliases(values: Sequence[str] | str, kind: str) -> tuple[str, ...]:
    aliases = (values,) if isinstance(values, str) else tuple(values)
    if not aliases or not all(aliases):
        msg = f"{kind} aliases must be non-empty strings"
        raise BoaValidationError(msg)
    return aliases


class BoaCommand:
    """A command with documented options and profiles.

    Attribute access falls through to the wrapped :class:`Command`, so a
    ``BoaCommand`` can be handed to templates (and most callers) in place of
    the command itself.

    Attributes:
        command: The wrapped command.
        opts: Declared options in display order (read-only).
        profiles: Declared profiles in display order (read-only).
    """

    def __init__(
        self,
        command: Command,
        opts: Sequence[Option] = (),
        profiles: Sequence[Profile] = (),
    ) -> None:
        self.command = command
        self._opts: tuple[Option, ...] = tuple(opts)
        self._profiles: tuple[Profile, ...] = tuple(profiles)

    def __getattr__(self, name: str) -> object:
        if name in {"command", "_opts", "_profiles"}:
            raise AttributeError(name)
        return getattr(self.command, name)

    def __repr__(self) -> str:
        return f"BoaCommand(use={self.command.use!r}, opts={len(self.opts)}, profiles={len(self.profiles)})"

    @property
    def opts(self) -> tuple[Option, ...]:
        return self._opts

    @property
    def profiles(self) -> tuple[Profile, ...]:
        return self._profiles

    @property
    def has_options(self) -> bool:
        return bool(self.opts)

    @property
    def has_profiles(self) -> bool:
        return bool(self.profiles)

    def options_template(self) -> str:
        """Return the usage template that adds ``Options`` and ``Profiles`` sections."""
        return OPTIONS_TEMPLATE

    def usage_func(self, template: str) -> Callable[[Command], TemplateRenderError | None]:
        """Build a usage function that renders ``template`` for this command.

        The returned function writes to the command's output stream through a
        ``TabWriter(8, 8, 8)``. A template failure is printed on the error
        stream and returned.

        Commands that inherit the function render without this command's
        options and profiles.
        """

        def usage(cmd: Command) -> TemplateRenderError | None:
            return self._render(cmd, template, USAGE_TABS)

        return usage

    def help_func(self, template: str) -> Callable[[Command, list[str]], None]:
        """Build a help function that renders ``template`` for this command.

        Same as :meth:`usage_func` with a ``TabWriter(3, 3, 3)``; template
        failures are reported on the error stream only.
        """

        def help_(cmd: Command, args: list[str]) -> None:  # noqa: ARG001
            self._render(cmd, template, HELP_TABS)

        return help_

    def _view_for(self, cmd: Command) -> BoaCommand:
        return self if cmd is self.command else BoaCommand(cmd)

    def _render(self, cmd: Command, template: str, tabs: TabSettings) -> TemplateRenderError | None:
        with TabWriter(cmd.out_or_stdout(), tabs.minwidth, tabs.tabwidth, tabs.padding, " ") as writer:
            try:
                render_template(writer, template, self._view_for(cmd))
            except TemplateRenderError as exc:
                logger.debug(
                    "Template rendering failed for %s: %s",
                    cmd.command_path,
                    exc,
                    extra=structured_extra(component=LogComponent.RENDER, command=cmd.command_path),
                )
                cmd.print_errln(exc)
                return exc
        return None

    def option_aliases(self) -> set[str]:
        """Return every alias of every declared option."""
        return {alias for option in self.opts for alias in option.args}

    def unresolved_profile_options(self) -> list[tuple[str, str]]:
        """List ``(profile, option)`` references that match no declared option."""
        known = self.option_aliases()
        return [(profile.name, ref) for profile in self.profiles for ref in profile.opts if ref not in known]

    def validate_profiles(self) -> None:
        """Raise if any profile references an undeclared option.

        Raises:
            ProfileReferenceError: With every unresolved ``(profile, option)`` pair.
        """
        unresolved = self.unresolved_profile_options()
        if unresolved:
            raise ProfileReferenceError(unresolved)

    def to_builder(self) -> BoaCommandBuilder:
        """Return a builder that keeps modifying this command."""
        from pyboa.builder import BoaCommandBuilder  # noqa: PLC0415 - builder imports this module

        return BoaCommandBuilder.from_boa_command(self)


__all__ = ["HELP_TABS", "USAGE_TABS", "BoaCommand", "Option", "Profile", "TabSettings"]
