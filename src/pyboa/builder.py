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

# ignore JUSTIFIED: flag helpers mirror the flag type names one-to-one and take
# the default value positionally, matching how callers read the flag table
# ruff: noqa: FBT001, FBT002, PLR0904

"""Fluent builders for commands and options-aware commands.

Each method sets one field or registers one flag and returns the builder::

    cmd = (
        new_command("serve")
        .with_short_description("Run the server")
        .with_int_flag("port", 8080, "listen port", shorthand="p")
        .with_run(serve)
        .build()
    )

:class:`BoaCommandBuilder` adds options and profiles plus the template that
renders them.
"""

from __future__ import annotations

import logging
from datetime import timedelta
from typing import TYPE_CHECKING

from pyboa._internal.logging_utils import structured_extra
from pyboa.boa import BoaCommand, Option, Profile
from pyboa.command import Command, Group
from pyboa.compat import Self
from pyboa.core.model_types import LogComponent
from pyboa.exceptions import DuplicateOptionError
from pyboa.values import (
    BOOL,
    BYTES_BASE64,
    BYTES_HEX,
    DURATION,
    FLOAT32,
    FLOAT64,
    INT,
    INT8,
    INT16,
    INT32,
    INT64,
    IP,
    IP_MASK,
    IP_NET,
    STRING,
    UINT,
    UINT8,
    UINT16,
    UINT32,
    UINT64,
    CountValue,
    ScalarValue,
    array_value,
    map_value,
    slice_value,
)

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping, Sequence
    from typing import TextIO

    from pyboa.args import PositionalArgs
    from pyboa.exceptions import TemplateRenderError
    from pyboa.flags import Flag, FlagSet
    from pyboa.values import FlagValue, IPAddress, IPNetwork

    Hook = Callable[[Command, list[str]], None]

logger: logging.Logger = logging.getLogger("pyboa.builder")


def _noop(cmd: Command, args: list[str]) -> None:  # noqa: ARG001
    """Run hook that does nothing."""


class CommandBuilder:
    """Builder over a mutable :class:`Command`.

    The builder owns the command until :meth:`build` hands it out; methods
    called afterwards keep mutating the same object.
    """

    def __init__(self, use: str = "", *, command: Command | None = None) -> None:
        self._command = command if command is not None else Command(use=use)

    @property
    def command(self) -> Command:
        return self._command

    # --- descriptive fields ----------------------------------------------

    def with_aliases(self, *aliases: str) -> Self:
        self._command.aliases = list(aliases)
        return self

    def suggest_for(self, *names: str) -> Self:
        self._command.suggest_for = list(names)
        return self

    def with_short_description(self, short: str) -> Self:
        self._command.short = short
        return self

    def with_long_description(self, long: str) -> Self:
        self._command.long = long
        return self

    def with_group_id(self, group_id: str) -> Self:
        self._command.group_id = group_id
        return self

    def with_groups(self, *groups: Group) -> Self:
        self._command.add_group(*groups)
        return self

    def with_example(self, example: str) -> Self:
        self._command.example = example
        return self

    def with_valid_args(self, *valid_args: str) -> Self:
        """Append accepted positional values (see ``only_valid_args``)."""
        self._command.valid_args.extend(valid_args)
        return self

    def with_args(self, validator: PositionalArgs) -> Self:
        self._command.args = validator
        return self

    def with_arg_aliases(self, *aliases: str) -> Self:
        self._command.arg_aliases = list(aliases)
        return self

    def deprecated(self, message: str) -> Self:
        """Mark the command deprecated; it is hidden and prints ``message`` on use."""
        self._command.deprecated = message
        return self

    def with_annotations(self, annotations: Mapping[str, str]) -> Self:
        self._command.annotations = dict(annotations)
        return self

    def with_version(self, version: str) -> Self:
        """Set the version printed by the ``--version`` flag."""
        self._command.version = version
        return self

    def hidden(self) -> Self:
        self._command.hidden = True
        return self

    def silence_errors(self) -> Self:
        self._command.silence_errors = True
        return self

    def silence_usage(self) -> Self:
        self._command.silence_usage = True
        return self

    def disable_flag_parsing(self) -> Self:
        self._command.disable_flag_parsing = True
        return self

    def disable_flags_in_use_line(self) -> Self:
        self._command.disable_flags_in_use_line = True
        return self

    def disable_suggestions(self) -> Self:
        self._command.disable_suggestions = True
        return self

    def with_suggestions_minimum_distance(self, distance: int) -> Self:
        self._command.suggestions_minimum_distance = distance
        return self

    def with_unknown_flags_whitelisted(self) -> Self:
        """Pass unknown flags through as positionals instead of failing."""
        self._command.unknown_flags_whitelisted = True
        return self

    def with_sub_commands(self, *commands: Command | BoaCommand) -> Self:
        self._command.add_command(*(_unwrap(command) for command in commands))
        return self

    def with_usage_template(self, template: str) -> Self:
        self._command.usage_template = template
        return self

    def with_help_template(self, template: str) -> Self:
        self._command.help_template = template
        return self

    def with_usage_func(self, function: Callable[[Command], TemplateRenderError | None]) -> Self:
        self._command.usage_func = function
        return self

    def with_help_func(self, function: Callable[[Command, list[str]], None]) -> Self:
        self._command.help_func = function
        return self

    def with_out(self, stream: TextIO) -> Self:
        self._command.set_out(stream)
        return self

    def with_err(self, stream: TextIO) -> Self:
        self._command.set_err(stream)
        return self

    # --- lifecycle hooks -------------------------------------------------
    #
    # Hooks run as: persistent pre-run, pre-run, run, post-run, persistent
    # post-run. Persistent hooks are inherited by descendants; the nearest
    # one wins.

    def with_persistent_pre_run(self, hook: Hook) -> Self:
        self._command.persistent_pre_run = hook
        return self

    def with_pre_run(self, hook: Hook) -> Self:
        self._command.pre_run = hook
        return self

    def with_run(self, hook: Hook) -> Self:
        self._command.run = hook
        return self

    def with_post_run(self, hook: Hook) -> Self:
        self._command.post_run = hook
        return self

    def with_persistent_post_run(self, hook: Hook) -> Self:
        self._command.persistent_post_run = hook
        return self

    def with_no_op(self) -> Self:
        """Make the command runnable without doing anything."""
        return self.with_run(_noop)

    # --- flags -----------------------------------------------------------

    def _flag_set(self, *, persistent: bool) -> FlagSet:
        return self._command.persistent_flags() if persistent else self._command.flags()

    def _register(
        self,
        value: FlagValue,
        name: str,
        usage: str,
        *,
        shorthand: str | None,
        persistent: bool,
        no_opt_def_val: str | None = None,
    ) -> Self:
        flag: Flag = self._flag_set(persistent=persistent).var(
            value,
            name,
            usage,
            shorthand=shorthand,
            no_opt_def_val=no_opt_def_val,
        )
        logger.debug(
            "Registered flag --%s (%s)",
            flag.name,
            value.type_name(),
            extra=structured_extra(component=LogComponent.BUILDER, command=self._command.name, flag=flag.name),
        )
        return self

    def with_var_flag(
        self,
        value: FlagValue,
        name: str,
        usage: str = "",
        *,
        shorthand: str | None = None,
        persistent: bool = False,
    ) -> Self:
        """Register a caller-defined :class:`~pyboa.values.FlagValue`."""
        no_opt = "true" if value.type_name() == "bool" else None
        return self._register(value, name, usage, shorthand=shorthand, persistent=persistent, no_opt_def_val=no_opt)

    def with_flag_set(self, flag_set: FlagSet) -> Self:
        """Merge ``flag_set`` into the local flags; existing names win."""
        self._command.flags().add_flag_set(flag_set)
        return self

    def with_persistent_flag_set(self, flag_set: FlagSet) -> Self:
        """Merge ``flag_set`` into the persistent flags; existing names win."""
        self._command.persistent_flags().add_flag_set(flag_set)
        return self

    def with_bool_flag(
        self,
        name: str,
        value: bool = False,
        usage: str = "",
        *,
        shorthand: str | None = None,
        persistent: bool = False,
    ) -> Self:
        return self._register(
            ScalarValue(BOOL, value),
            name,
            usage,
            shorthand=shorthand,
            persistent=persistent,
            no_opt_def_val="true",
        )

    def with_bool_slice_flag(
        self,
        name: str,
        value: Sequence[bool] = (),
        usage: str = "",
        *,
        shorthand: str | None = None,
        persistent: bool = False,
    ) -> Self:
        return self._register(
            slice_value(BOOL, value, "boolSlice"),
            name,
            usage,
            shorthand=shorthand,
            persistent=persistent,
        )

    def with_bytes_base64_flag(
        self,
        name: str,
        value: bytes = b"",
        usage: str = "",
        *,
        shorthand: str | None = None,
        persistent: bool = False,
    ) -> Self:
        return self._register(
            ScalarValue(BYTES_BASE64, value),
            name,
            usage,
            shorthand=shorthand,
            persistent=persistent,
        )

    def with_bytes_hex_flag(
        self,
        name: str,
        value: bytes = b"",
        usage: str = "",
        *,
        shorthand: str | None = None,
        persistent: bool = False,
    ) -> Self:
        return self._register(ScalarValue(BYTES_HEX, value), name, usage, shorthand=shorthand, persistent=persistent)

    def with_count_flag(
        self,
        name: str,
        usage: str = "",
        *,
        shorthand: str | None = None,
        persistent: bool = False,
    ) -> Self:
        """Register a counter; each bare occurrence (``-vvv``) adds one."""
        return self._register(
            CountValue(),
            name,
            usage,
            shorthand=shorthand,
            persistent=persistent,
            no_opt_def_val="+1",
        )

    def with_duration_flag(
        self,
        name: str,
        value: timedelta = timedelta(0),
        usage: str = "",
        *,
        shorthand: str | None = None,
        persistent: bool = False,
    ) -> Self:
        return self._register(ScalarValue(DURATION, value), name, usage, shorthand=shorthand, persistent=persistent)

    def with_duration_slice_flag(
        self,
        name: str,
        value: Sequence[timedelta] = (),
        usage: str = "",
        *,
        shorthand: str | None = None,
        persistent: bool = False,
    ) -> Self:
        return self._register(
            slice_value(DURATION, value, "durationSlice"),
            name,
            usage,
            shorthand=shorthand,
            persistent=persistent,
        )

    def with_float32_flag(
        self,
        name: str,
        value: float = 0.0,
        usage: str = "",
        *,
        shorthand: str | None = None,
        persistent: bool = False,
    ) -> Self:
        return self._register(ScalarValue(FLOAT32, value), name, usage, shorthand=shorthand, persistent=persistent)

    def with_float32_slice_flag(
        self,
        name: str,
        value: Sequence[float] = (),
        usage: str = "",
        *,
        shorthand: str | None = None,
        persistent: bool = False,
    ) -> Self:
        return self._register(
            slice_value(FLOAT32, value, "float32Slice"),
            name,
            usage,
            shorthand=shorthand,
            persistent=persistent,
        )

    def with_float64_flag(
        self,
        name: str,
        value: float = 0.0,
        usage: str = "",
        *,
        shorthand: str | None = None,
        persistent: bool = False,
    ) -> Self:
        return self._register(ScalarValue(FLOAT64, value), name, usage, shorthand=shorthand, persistent=persistent)

    def with_float64_slice_flag(
        self,
        name: str,
        value: Sequence[float] = (),
        usage: str = "",
        *,
        shorthand: str | None = None,
        persistent: bool = False,
    ) -> Self:
        return self._register(
            slice_value(FLOAT64, value, "float64Slice"),
            name,
            usage,
            shorthand=shorthand,
            persistent=persistent,
        )

    def with_int_flag(
        self,
        name: str,
        value: int = 0,
        usage: str = "",
        *,
        shorthand: str | None = None,
        persistent: bool = False,
    ) -> Self:
        return self._register(ScalarValue(INT, value), name, usage, shorthand=shorthand, persistent=persistent)

    def with_int_slice_flag(
        self,
        name: str,
        value: Sequence[int] = (),
        usage: str = "",
        *,
        shorthand: str | None = None,
        persistent: bool = False,
    ) -> Self:
        return self._register(
            slice_value(INT, value, "intSlice"),
            name,
            usage,
            shorthand=shorthand,
            persistent=persistent,
        )

    def with_int8_flag(
        self,
        name: str,
        value: int = 0,
        usage: str = "",
        *,
        shorthand: str | None = None,
        persistent: bool = False,
    ) -> Self:
        return self._register(ScalarValue(INT8, value), name, usage, shorthand=shorthand, persistent=persistent)

    def with_int16_flag(
        self,
        name: str,
        value: int = 0,
        usage: str = "",
        *,
        shorthand: str | None = None,
        persistent: bool = False,
    ) -> Self:
        return self._register(ScalarValue(INT16, value), name, usage, shorthand=shorthand, persistent=persistent)

    def with_int32_flag(
        self,
        name: str,
        value: int = 0,
        usage: str = "",
        *,
        shorthand: str | None = None,
        persistent: bool = False,
    ) -> Self:
        return self._register(ScalarValue(INT32, value), name, usage, shorthand=shorthand, persistent=persistent)

    def with_int32_slice_flag(
        self,
        name: str,
        value: Sequence[int] = (),
        usage: str = "",
        *,
        shorthand: str | None = None,
        persistent: bool = False,
    ) -> Self:
        return self._register(
            slice_value(INT32, value, "int32Slice"),
            name,
            usage,
            shorthand=shorthand,
            persistent=persistent,
        )

    def with_int64_flag(
        self,
        name: str,
        value: int = 0,
        usage: str = "",
        *,
        shorthand: str | None = None,
        persistent: bool = False,
    ) -> Self:
        return self._register(ScalarValue(INT64, value), name, usage, shorthand=shorthand, persistent=persistent)

    def with_int64_slice_flag(
        self,
        name: str,
        value: Sequence[int] = (),
        usage: str = "",
        *,
        shorthand: str | None = None,
        persistent: bool = False,
    ) -> Self:
        return self._register(
            slice_value(INT64, value, "int64Slice"),
            name,
            usage,
            shorthand=shorthand,
            persistent=persistent,
        )

    def with_uint_flag(
        self,
        name: str,
        value: int = 0,
        usage: str = "",
        *,
        shorthand: str | None = None,
        persistent: bool = False,
    ) -> Self:
        return self._register(ScalarValue(UINT, value), name, usage, shorthand=shorthand, persistent=persistent)

    def with_uint_slice_flag(
        self,
        name: str,
        value: Sequence[int] = (),
        usage: str = "",
        *,
        shorthand: str | None = None,
        persistent: bool = False,
    ) -> Self:
        return self._register(
            slice_value(UINT, value, "uintSlice"),
            name,
            usage,
            shorthand=shorthand,
            persistent=persistent,
        )

    def with_uint8_flag(
        self,
        name: str,
        value: int = 0,
        usage: str = "",
        *,
        shorthand: str | None = None,
        persistent: bool = False,
    ) -> Self:
        return self._register(ScalarValue(UINT8, value), name, usage, shorthand=shorthand, persistent=persistent)

    def with_uint16_flag(
        self,
        name: str,
        value: int = 0,
        usage: str = "",
        *,
        shorthand: str | None = None,
        persistent: bool = False,
    ) -> Self:
        return self._register(ScalarValue(UINT16, value), name, usage, shorthand=shorthand, persistent=persistent)

    def with_uint32_flag(
        self,
        name: str,
        value: int = 0,
        usage: str = "",
        *,
        shorthand: str | None = None,
        persistent: bool = False,
    ) -> Self:
        return self._register(ScalarValue(UINT32, value), name, usage, shorthand=shorthand, persistent=persistent)

    def with_uint64_flag(
        self,
        name: str,
        value: int = 0,
        usage: str = "",
        *,
        shorthand: str | None = None,
        persistent: bool = False,
    ) -> Self:
        return self._register(ScalarValue(UINT64, value), name, usage, shorthand=shorthand, persistent=persistent)

    def with_string_flag(
        self,
        name: str,
        value: str = "",
        usage: str = "",
        *,
        shorthand: str | None = None,
        persistent: bool = False,
    ) -> Self:
        return self._register(ScalarValue(STRING, value), name, usage, shorthand=shorthand, persistent=persistent)

    def with_string_slice_flag(
        self,
        name: str,
        value: Sequence[str] = (),
        usage: str = "",
        *,
        shorthand: str | None = None,
        persistent: bool = False,
    ) -> Self:
        """Register a list flag; values are split CSV-style and accumulate."""
        return self._register(
            slice_value(STRING, value, "stringSlice"),
            name,
            usage,
            shorthand=shorthand,
            persistent=persistent,
        )

    def with_string_array_flag(
        self,
        name: str,
        value: Sequence[str] = (),
        usage: str = "",
        *,
        shorthand: str | None = None,
        persistent: bool = False,
    ) -> Self:
        """Register a list flag that keeps each value whole (no comma split)."""
        return self._register(array_value(value), name, usage, shorthand=shorthand, persistent=persistent)

    def with_string_to_int_flag(
        self,
        name: str,
        value: Mapping[str, int] | None = None,
        usage: str = "",
        *,
        shorthand: str | None = None,
        persistent: bool = False,
    ) -> Self:
        return self._register(
            map_value(INT, dict(value or {}), "stringToInt"),
            name,
            usage,
            shorthand=shorthand,
            persistent=persistent,
        )

    def with_string_to_int64_flag(
        self,
        name: str,
        value: Mapping[str, int] | None = None,
        usage: str = "",
        *,
        shorthand: str | None = None,
        persistent: bool = False,
    ) -> Self:
        return self._register(
            map_value(INT64, dict(value or {}), "stringToInt64"),
            name,
            usage,
            shorthand=shorthand,
            persistent=persistent,
        )

    def with_string_to_string_flag(
        self,
        name: str,
        value: Mapping[str, str] | None = None,
        usage: str = "",
        *,
        shorthand: str | None = None,
        persistent: bool = False,
    ) -> Self:
        return self._register(
            map_value(STRING, dict(value or {}), "stringToString"),
            name,
            usage,
            shorthand=shorthand,
            persistent=persistent,
        )

    def with_ip_flag(
        self,
        name: str,
        value: IPAddress | None = None,
        usage: str = "",
        *,
        shorthand: str | None = None,
        persistent: bool = False,
    ) -> Self:
        return self._register(ScalarValue(IP, value), name, usage, shorthand=shorthand, persistent=persistent)

    def with_ip_slice_flag(
        self,
        name: str,
        value: Sequence[IPAddress] = (),
        usage: str = "",
        *,
        shorthand: str | None = None,
        persistent: bool = False,
    ) -> Self:
        return self._register(
            slice_value(IP, value, "ipSlice"),
            name,
            usage,
            shorthand=shorthand,
            persistent=persistent,
        )

    def with_ip_mask_flag(
        self,
        name: str,
        value: IPAddress | None = None,
        usage: str = "",
        *,
        shorthand: str | None = None,
        persistent: bool = False,
    ) -> Self:
        return self._register(ScalarValue(IP_MASK, value), name, usage, shorthand=shorthand, persistent=persistent)

    def with_ip_net_flag(
        self,
        name: str,
        value: IPNetwork | None = None,
        usage: str = "",
        *,
        shorthand: str | None = None,
        persistent: bool = False,
    ) -> Self:
        return self._register(ScalarValue(IP_NET, value), name, usage, shorthand=shorthand, persistent=persistent)

    # --- flag mutation -----------------------------------------------------

    def mark_flag_hidden(self, name: str) -> Self:
        """Hide local flag ``name`` from usage.

        Raises:
            FlagNotFoundError: If no local flag is called ``name``.
        """
        self._command.flags().mark_hidden(name)
        return self

    def mark_flag_deprecated(self, name: str, message: str) -> Self:
        """Deprecate local flag ``name``; using it prints ``message``.

        Raises:
            FlagNotFoundError: If no local flag is called ``name``.
        """
        self._command.flags().mark_deprecated(name, message)
        return self

    def mark_flag_shorthand_deprecated(self, name: str, message: str) -> Self:
        self._command.flags().mark_shorthand_deprecated(name, message)
        return self

    def mark_persistent_flag_hidden(self, name: str) -> Self:
        self._command.persistent_flags().mark_hidden(name)
        return self

    def mark_persistent_flag_deprecated(self, name: str, message: str) -> Self:
        self._command.persistent_flags().mark_deprecated(name, message)
        return self

    def mark_persistent_flag_shorthand_deprecated(self, name: str, message: str) -> Self:
        self._command.persistent_flags().mark_shorthand_deprecated(name, message)
        return self

    # --- conversion ------------------------------------------------------

    def to_boa_builder(self) -> BoaCommandBuilder:
        """Return a :class:`BoaCommandBuilder` around the same command."""
        return BoaCommandBuilder.from_command(self._command)

    def build_boa(self) -> BoaCommand:
        return self.to_boa_builder().build()

    def build(self) -> Command:
        """Return the command with its default ``--help``/``--version`` flags."""
        self._command.init_default_help_flag()
        self._command.init_default_version_flag()
        return self._command


class BoaCommandBuilder(CommandBuilder):
    """Builder for a :class:`BoaCommand`: a command plus options and profiles."""

    def __init__(self, use: str = "", *, command: Command | None = None) -> None:
        super().__init__(use, command=command)
        self._boa = BoaCommand(self._command)

    @classmethod
    def from_command(cls, command: Command) -> BoaCommandBuilder:
        """Wrap ``command`` with no options or profiles."""
        return cls(command=command)

    @classmethod
    def from_boa_command(cls, boa: BoaCommand) -> BoaCommandBuilder:
        """Keep building ``boa`` (its options and profiles are preserved)."""
        builder = cls(command=boa.command)
        builder._boa = boa
        return builder

    def with_options(self, *opts: Option) -> Self:
        """Append ``opts`` in display order.

        Raises:
            DuplicateOptionError: If an option's canonical alias is already declared.
        """
        declared = {option.name for option in self._boa.opts}
        for option in opts:
            if option.name in declared:
                raise DuplicateOptionError(option.name)
            declared.add(option.name)
        # ignore JUSTIFIED: declarations are read-only outside the builder
        self._boa._opts = (*self._boa.opts, *opts)  # noqa: SLF001
        return self

    def with_profiles(self, *profiles: Profile) -> Self:
        self._boa._profiles = (*self._boa.profiles, *profiles)  # noqa: SLF001
        return self

    def with_options_and_template(self, *opts: Option) -> Self:
        return self.with_options(*opts).with_options_template()

    def with_usage_template(self, template: str) -> Self:
        """Render usage from ``template`` with the options-aware renderer."""
        return self.with_usage_func(self._boa.usage_func(template))

    def with_help_template(self, template: str) -> Self:
        """Render help from ``template`` with the options-aware renderer."""
        return self.with_help_func(self._boa.help_func(template))

    def with_options_template(self) -> Self:
        """Show the ``Options`` and ``Profiles`` sections in usage and help."""
        template = self._boa.options_template()
        return self.with_usage_template(template).with_help_template(template)

    def with_valid_args_from_options(self) -> Self:
        """Accept every option alias as a valid positional (see ``only_valid_args``)."""
        for option in self._boa.opts:
            self._command.valid_args.extend(option.args)
        return self

    def to_command_builder(self) -> CommandBuilder:
        return CommandBuilder(command=self._command)

    def build_command(self) -> Command:
        return super().build()

    # ignore JUSTIFIED: the options-aware builder hands out the wrapper, which
    # forwards every Command attribute
    def build(self) -> BoaCommand:  # type: ignore[override]
        """Return the options-aware command.

        Profiles that reference undeclared options are logged as warnings;
        call :meth:`BoaCommand.validate_profiles` to fail instead.
        """
        super().build()
        for profile, option in self._boa.unresolved_profile_options():
            logger.warning(
                "Profile %s references undeclared option %s",
                profile,
                option,
                extra=structured_extra(component=LogComponent.BUILDER, command=self._command.name),
            )
        return self._boa


def _unwrap(command: Command | BoaCommand) -> Command:
    return command.command if isinstance(command, BoaCommand) else command


def new_command(use: str) -> BoaCommandBuilder:
    """Start an options-aware builder for a command called ``use``."""
    return BoaCommandBuilder(use)


def to_command_builder(command: Command | BoaCommand) -> CommandBuilder:
    """Return a plain builder that keeps modifying ``command``."""
    return CommandBuilder(command=_unwrap(command))


def to_boa_builder(command: Command | BoaCommand) -> BoaCommandBuilder:
    """Return an options-aware builder for ``command``."""
    if isinstance(command, BoaCommand):
        return BoaCommandBuilder.from_boa_command(command)
    return BoaCommandBuilder.from_command(command)


__all__ = [
    "BoaCommandBuilder",
    "CommandBuilder",
    "new_command",
    "to_boa_builder",
    "to_command_builder",
]
