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

"""Command tree, dispatch and lifecycle.

A :class:`Command` is one node of a command-line program: it owns its flags,
its children and the hooks that run when it is selected. ``execute`` resolves
the target node from the argument list, parses the merged flag set through
:mod:`argparse` (see :mod:`pyboa.flags`), validates positionals and runs the
hooks::

    root = Command(use="app")
    root.add_command(Command(use="serve", run=serve))
    raise SystemExit(run(root))
"""

from __future__ import annotations

import io
import logging
import sys
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Final, TextIO

from pyboa._internal.logging_utils import structured_extra
from pyboa.core.model_types import LogComponent
from pyboa.exceptions import BoaValidationError, CommandError, TemplateRenderError, UnknownCommandError
from pyboa.flags import FlagSet
from pyboa.template import render_template
from pyboa.templates import DEFAULT_HELP_TEMPLATE, DEFAULT_USAGE_TEMPLATE
from pyboa.values import BOOL, ScalarValue

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from pyboa.args import PositionalArgs
    from pyboa.flags import Flag

    Hook = Callable[["Command", list[str]], None]
    UsageFunc = Callable[["Command"], TemplateRenderError | None]
    HelpFunc = Callable[["Command", list[str]], None]

logger: logging.Logger = logging.getLogger("pyboa.command")

MIN_NAME_PADDING: Final[int] = 11
DEFAULT_SUGGESTIONS_MINIMUM_DISTANCE: Final[int] = 2


@dataclass(frozen=True, slots=True)
class Group:
    """Heading under which subcommands with a matching ``group_id`` are listed."""

    id: str
    title: str


class _HelpRequested(Exception):  # noqa: N818 - control-flow signal, not an error
    pass


@dataclass(eq=False)
class Command:
    """A node in a command tree.

    Attributes:
        use: One-line usage; its first word is the command name.
        aliases: Alternative names accepted in place of the name.
        suggest_for: Names for which this command is always suggested.
        short: Summary shown in parent listings.
        long: Description shown in this command's help.
        group_id: Group under which the parent lists this command.
        example: Example block shown in usage.
        valid_args: Accepted positionals for ``only_valid_args``; entries may
            carry a tab-separated description.
        args: Positional validator; ``None`` accepts anything.
        arg_aliases: Extra accepted positionals for ``only_valid_args``.
        deprecated: Deprecation notice printed on use; hides the command.
        annotations: Free-form key/value metadata.
        version: Enables ``--version`` when non-empty.
        hidden: Omit from parent listings.
        silence_errors: Do not print ``Error: ...`` on failure.
        silence_usage: Do not print usage on failure.
        disable_flag_parsing: Pass every token to the hooks as positionals.
        disable_flags_in_use_line: Do not append ``[flags]`` to the use line.
        disable_suggestions: Do not suggest close subcommand names.
        suggestions_minimum_distance: Maximum edit distance for suggestions.
        unknown_flags_whitelisted: Treat unknown flags as positionals.
    """

    use: str = ""
    aliases: list[str] = field(default_factory=list)
    suggest_for: list[str] = field(default_factory=list)
    short: str = ""
    long: str = ""
    group_id: str = ""
    example: str = ""
    valid_args: list[str] = field(default_factory=list)
    args: PositionalArgs | None = None
    arg_aliases: list[str] = field(default_factory=list)
    deprecated: str = ""
    annotations: dict[str, str] = field(default_factory=dict)
    version: str = ""
    persistent_pre_run: Hook | None = None
    pre_run: Hook | None = None
    run: Hook | None = None
    post_run: Hook | None = None
    persistent_post_run: Hook | None = None
    hidden: bool = False
    silence_errors: bool = False
    silence_usage: bool = False
    disable_flag_parsing: bool = False
    disable_flags_in_use_line: bool = False
    disable_suggestions: bool = False
    suggestions_minimum_distance: int = 0
    unknown_flags_whitelisted: bool = False
    usage_template: str | None = None
    help_template: str | None = None
    usage_func: UsageFunc | None = None
    help_func: HelpFunc | None = None

    parent: Command | None = field(default=None, init=False, repr=False)
    _commands: list[Command] = field(default_factory=list, init=False, repr=False)
    _groups: list[Group] = field(default_factory=list, init=False, repr=False)
    _flags: FlagSet = field(default_factory=FlagSet, init=False, repr=False)
    _pflags: FlagSet = field(default_factory=FlagSet, init=False, repr=False)
    _out: TextIO | None = field(default=None, init=False, repr=False)
    _err: TextIO | None = field(default=None, init=False, repr=False)
    _help_command: Command | None = field(default=None, init=False, repr=False)
    _max_name_len: int = field(default=0, init=False, repr=False)
    _max_path_len: int = field(default=0, init=False, repr=False)

    # ------------------------------------------------------------------
    # Tree
    # ------------------------------------------------------------------

    def add_command(self, *commands: Command) -> None:
        """Attach ``commands`` as children of this command.

        Raises:
            BoaValidationError: If a command is added to itself.
        """
        for command in commands:
            if command is self:
                msg = "command can't be a child of itself"
                raise BoaValidationError(msg)
            command.parent = self
            self._max_name_len = max(self._max_name_len, len(command.name))
            self._max_path_len = max(self._max_path_len, len(command.command_path))
            self._commands.append(command)

    def remove_command(self, *commands: Command) -> None:
        for command in commands:
            if command in self._commands:
                self._commands.remove(command)
                command.parent = None
        self._max_name_len = max((len(c.name) for c in self._commands), default=0)
        self._max_path_len = max((len(c.command_path) for c in self._commands), default=0)

    @property
    def commands(self) -> list[Command]:
        """Children sorted by name."""
        return sorted(self._commands, key=lambda command: command.name)

    @property
    def root(self) -> Command:
        node = self
        while node.parent is not None:
            node = node.parent
        return node

    @property
    def name(self) -> str:
        return self.use.split(" ", 1)[0] if self.use else ""

    @property
    def name_and_aliases(self) -> str:
        return ", ".join([self.name, *self.aliases])

    def has_alias(self, name: str) -> bool:
        return name in self.aliases

    @property
    def command_path(self) -> str:
        if self.parent is None:
            return self.name
        return f"{self.parent.command_path} {self.name}"

    @property
    def use_line(self) -> str:
        line = f"{self.parent.command_path} {self.use}" if self.parent is not None else self.use
        if self.disable_flags_in_use_line:
            return line
        if self.has_available_flags and "[flags]" not in line:
            line += " [flags]"
        return line

    @property
    def runnable(self) -> bool:
        return self.run is not None

    @property
    def has_sub_commands(self) -> bool:
        return bool(self._commands)

    @property
    def has_example(self) -> bool:
        return bool(self.example)

    @property
    def is_available_command(self) -> bool:
        if self.deprecated or self.hidden:
            return False
        if self.parent is not None and self.parent._help_command is self:
            return False
        return self.runnable or self.has_available_sub_commands

    @property
    def is_additional_help_topic_command(self) -> bool:
        """Whether this is a non-runnable topic whose children are topics too."""
        if self.runnable or self.deprecated or self.hidden:
            return False
        return all(
            not child.is_available_command and child.is_additional_help_topic_command for child in self._commands
        )

    @property
    def has_available_sub_commands(self) -> bool:
        return any(child.is_available_command for child in self._commands)

    @property
    def has_help_sub_commands(self) -> bool:
        return any(child.is_additional_help_topic_command for child in self._commands)

    @property
    def name_padding(self) -> int:
        if self.parent is None or self.parent._max_name_len < MIN_NAME_PADDING:
            return MIN_NAME_PADDING
        return self.parent._max_name_len

    @property
    def command_path_padding(self) -> int:
        if self.parent is None or self.parent._max_path_len < MIN_NAME_PADDING:
            return MIN_NAME_PADDING
        return self.parent._max_path_len

    # ------------------------------------------------------------------
    # Groups
    # ------------------------------------------------------------------

    @property
    def groups(self) -> list[Group]:
        return list(self._groups)

    def add_group(self, *groups: Group) -> None:
        self._groups.extend(groups)

    def contains_group(self, group_id: str) -> bool:
        return any(group.id == group_id for group in self._groups)

    @property
    def all_child_commands_have_group(self) -> bool:
        for child in self._commands:
            listed = child.is_available_command or child is self._help_command
            if listed and not child.group_id:
                return False
        return True

    def _check_command_groups(self) -> None:
        for child in self._commands:
            if child.group_id and not self.contains_group(child.group_id):
                msg = f"group id {child.group_id!r} is not defined for subcommand {child.command_path!r}"
                raise BoaValidationError(msg)
            child._check_command_groups()

    # ------------------------------------------------------------------
    # Flags
    # ------------------------------------------------------------------

    def flags(self) -> FlagSet:
        """Flags that apply to this command only."""
        if not self._flags.name:
            self._flags.name = self.name
        return self._flags

    def persistent_flags(self) -> FlagSet:
        """Flags that apply to this command and every descendant."""
        if not self._pflags.name:
            self._pflags.name = self.name
        return self._pflags

    def local_flags(self) -> FlagSet:
        """Local and persistent flags declared on this command."""
        local = FlagSet(self.name)
        local.add_flag_set(self._flags)
        local.add_flag_set(self._pflags)
        return local

    def inherited_flags(self) -> FlagSet:
        """Persistent flags of ancestors not shadowed by a local flag."""
        ancestors = FlagSet(self.name)
        node = self.parent
        while node is not None:
            ancestors.add_flag_set(node._pflags)
            node = node.parent
        local = self.local_flags()
        inherited = FlagSet(self.name)
        for flag in ancestors:
            if flag.name not in local:
                inherited.add_flag(flag)
        return inherited

    def all_flags(self) -> FlagSet:
        """Every flag accepted while parsing this command's arguments."""
        merged = self.local_flags()
        merged.add_flag_set(self.inherited_flags())
        return merged

    @property
    def has_available_flags(self) -> bool:
        return self.all_flags().has_available_flags()

    @property
    def has_available_local_flags(self) -> bool:
        return self.local_flags().has_available_flags()

    @property
    def has_available_inherited_flags(self) -> bool:
        return self.inherited_flags().has_available_flags()

    def lookup_flag(self, name: str) -> Flag | None:
        return self.all_flags().lookup(name)

    def init_default_help_flag(self) -> None:
        """Add ``-h/--help`` unless a ``help`` flag already exists."""
        merged = self.all_flags()
        if "help" in merged:
            return
        shorthand = "h" if merged.shorthand_lookup("h") is None else None
        self.flags().var(
            ScalarValue(BOOL, False),  # noqa: FBT003
            "help",
            f"help for {self.name}",
            shorthand=shorthand,
            no_opt_def_val="true",
        )

    def init_default_version_flag(self) -> None:
        """Add ``-v/--version`` when a version is set and the name is free."""
        if not self.version:
            return
        merged = self.all_flags()
        if "version" in merged:
            return
        shorthand = "v" if merged.shorthand_lookup("v") is None else None
        self.flags().var(
            ScalarValue(BOOL, False),  # noqa: FBT003
            "version",
            f"version for {self.name}",
            shorthand=shorthand,
            no_opt_def_val="true",
        )

    def init_default_help_cmd(self) -> None:
        """Add a ``help [command]`` child to commands that have children."""
        if not self.has_sub_commands or self._help_command is not None:
            return
        if any(child.name == "help" for child in self._commands):
            return
        help_command = Command(
            use="help [command]",
            short="Help about any command",
            long=(
                "Help provides help for any command in the application.\n"
                f"Simply type {self.name} help [path to command] for full details."
            ),
            run=_run_help_command,
        )
        self._help_command = help_command
        self.add_command(help_command)

    def parse_flags(self, arguments: Sequence[str]) -> list[str]:
        """Parse ``arguments`` against :meth:`all_flags` and return positionals.

        Raises:
            FlagError: If a flag is unknown or its value is invalid.
        """
        if self.disable_flag_parsing:
            return list(arguments)
        return self.all_flags().parse(
            arguments,
            ignore_unknown=self.unknown_flags_whitelisted,
            notify=self.print_errln,
        )

    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------

    def set_out(self, stream: TextIO | None) -> None:
        self._out = stream

    def set_err(self, stream: TextIO | None) -> None:
        self._err = stream

    def _resolve_out(self) -> TextIO | None:
        node: Command | None = self
        while node is not None:
            if node._out is not None:
                return node._out
            node = node.parent
        return None

    def _resolve_err(self) -> TextIO | None:
        node: Command | None = self
        while node is not None:
            if node._err is not None:
                return node._err
            node = node.parent
        return None

    def out_or_stdout(self) -> TextIO:
        return self._resolve_out() or sys.stdout

    def out_or_stderr(self) -> TextIO:
        return self._resolve_out() or sys.stderr

    def err_or_stderr(self) -> TextIO:
        return self._resolve_err() or sys.stderr

    def print(self, message: object = "") -> None:
        self.out_or_stderr().write(str(message))

    def println(self, message: object = "") -> None:
        self.print(f"{message}\n")

    def print_errln(self, message: object = "") -> None:
        self.err_or_stderr().write(f"{message}\n")

    # ------------------------------------------------------------------
    # Help and usage
    # ------------------------------------------------------------------

    def get_usage_template(self) -> str:
        node: Command | None = self
        while node is not None:
            if node.usage_template is not None:
                return node.usage_template
            node = node.parent
        return DEFAULT_USAGE_TEMPLATE

    def get_help_template(self) -> str:
        node: Command | None = self
        while node is not None:
            if node.help_template is not None:
                return node.help_template
            node = node.parent
        return DEFAULT_HELP_TEMPLATE

    def get_usage_func(self) -> UsageFunc:
        node: Command | None = self
        while node is not None:
            if node.usage_func is not None:
                return node.usage_func
            node = node.parent
        return _default_usage_func

    def get_help_func(self) -> HelpFunc:
        node: Command | None = self
        while node is not None:
            if node.help_func is not None:
                return node.help_func
            node = node.parent
        return _default_help_func

    def usage(self) -> TemplateRenderError | None:
        """Print usage through the nearest usage function.

        Returns:
            The rendering error reported by the usage function, if any.
        """
        return self.get_usage_func()(self)

    def help(self) -> None:
        """Print help through the nearest help function."""
        self.get_help_func()(self, [])

    def usage_string(self) -> str:
        """Return the usage text produced by :meth:`usage`."""
        previous_out, previous_err = self._out, self._err
        buffer = io.StringIO()
        self._out = self._err = buffer
        try:
            self.usage()
        finally:
            self._out, self._err = previous_out, previous_err
        return buffer.getvalue()

    # ------------------------------------------------------------------
    # Suggestions
    # ------------------------------------------------------------------

    def suggestions_for(self, typed_name: str) -> list[str]:
        """Return child names close to ``typed_name``."""
        distance = self.suggestions_minimum_distance
        if distance <= 0:
            distance = DEFAULT_SUGGESTIONS_MINIMUM_DISTANCE
        typed = typed_name.lower()
        suggestions: list[str] = []
        for child in self.commands:
            if not child.is_available_command:
                continue
            candidate = child.name.lower()
            close = _levenshtein(typed, candidate) <= distance or candidate.startswith(typed)
            if close and child.name not in suggestions:
                suggestions.append(child.name)
            for explicit in child.suggest_for:
                if explicit.lower() == typed and child.name not in suggestions:
                    suggestions.append(child.name)
        return suggestions

    def find_suggestions(self, arg: str) -> str:
        """Return the ``Did you mean this?`` block for ``arg`` or ``""``."""
        if self.disable_suggestions:
            return ""
        suggestions = self.suggestions_for(arg)
        if not suggestions:
            return ""
        return "\n\nDid you mean this?\n" + "".join(f"\t{suggestion}\n" for suggestion in suggestions)

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def find(self, args: Sequence[str]) -> tuple[Command, list[str]]:
        """Resolve the command addressed by ``args``.

        Flags are skipped while walking the tree; a flag written as
        ``--name value`` also skips its value unless the flag takes no
        argument.

        Returns:
            The target command and the arguments left for it to parse.

        Raises:
            UnknownCommandError: If a root command with children is given an
                unknown subcommand and has no positional validator.
        """
        command: Command = self
        remaining = list(args)
        while True:
            positionals = command._strip_flags(remaining)
            if not positionals:
                break
            child = command._find_next(positionals[0])
            if child is None:
                break
            remaining = command._args_minus_first(remaining, positionals[0])
            command = child
        if command.args is None:
            command._legacy_args(command._strip_flags(remaining))
        return command, remaining

    def _find_next(self, name: str) -> Command | None:
        for child in self._commands:
            if child.name == name or child.has_alias(name):
                return child
        return None

    def _takes_value(self, flags: FlagSet, token: str) -> bool:
        if "=" in token:
            return False
        if token.startswith("--"):
            flag = flags.lookup(token[2:])
        elif len(token) == 2:  # noqa: PLR2004 - "-x"
            flag = flags.shorthand_lookup(token[1:])
        else:
            return False
        return flag is None or flag.no_opt_def_val is None

    def _strip_flags(self, args: Sequence[str]) -> list[str]:
        flags = self.all_flags()
        commands: list[str] = []
        tokens = list(args)
        while tokens:
            token = tokens.pop(0)
            if token == "--":
                break
            if token.startswith("-") and self._takes_value(flags, token):
                if len(tokens) <= 1:
                    break
                tokens.pop(0)
                continue
            if token and not token.startswith("-"):
                commands.append(token)
        return commands

    def _args_minus_first(self, args: list[str], name: str) -> list[str]:
        flags = self.all_flags()
        position = 0
        while position < len(args):
            token = args[position]
            if token == "--":
                break
            if token.startswith("-") and self._takes_value(flags, token):
                position += 2
                continue
            if not token.startswith("-") and token == name:
                return args[:position] + args[position + 1 :]
            position += 1
        return args

    def _legacy_args(self, args: Sequence[str]) -> None:
        if not self.has_sub_commands:
            return
        if self.parent is None and args:
            suggestions = [] if self.disable_suggestions else self.suggestions_for(args[0])
            raise UnknownCommandError(args[0], self.command_path, suggestions)

    def execute(self, args: Sequence[str] | None = None) -> Command:
        """Run the command addressed by ``args`` (``sys.argv[1:]`` by default).

        Always dispatches from the root of the tree. Failures are reported on
        the error stream (unless silenced) and re-raised.

        Returns:
            The command that was executed.

        Raises:
            CommandError: If dispatch, flag parsing, argument validation or a
                hook fails.
        """
        if self.parent is not None:
            return self.root.execute(args)
        self._check_command_groups()
        self.init_default_help_cmd()
        arguments = list(sys.argv[1:] if args is None else args)

        try:
            command, remaining = self.find(arguments)
        except UnknownCommandError as exc:
            if not self.silence_errors:
                self.print_errln(f"Error: {exc}")
                self.print_errln(f"Run '{self.command_path} --help' for usage.")
            raise

        logger.debug(
            "Executing %s",
            command.command_path,
            extra=structured_extra(component=LogComponent.COMMAND, command=command.command_path),
        )
        try:
            command._execute(remaining)
        except _HelpRequested:
            command.get_help_func()(command, arguments)
        except CommandError as exc:
            logger.debug(
                "Command %s failed: %s",
                command.command_path,
                exc,
                extra=structured_extra(component=LogComponent.COMMAND, command=command.command_path),
            )
            if not command.silence_errors and not self.silence_errors:
                self.print_errln(f"Error: {exc}")
            if not command.silence_usage and not self.silence_usage:
                self.println(command.usage_string())
            raise
        return command

    def _execute(self, arguments: list[str]) -> None:
        if self.deprecated:
            self.println(f'Command "{self.name}" is deprecated, {self.deprecated}')
        self.init_default_help_flag()
        self.init_default_version_flag()

        positionals = self.parse_flags(arguments)
        if not self.disable_flag_parsing and self._flag_is_true("help"):
            raise _HelpRequested
        if self.version and self._flag_is_true("version"):
            self.out_or_stdout().write(f"{self.name} version {self.version}\n")
            return
        if not self.runnable:
            raise _HelpRequested
        if self.args is not None:
            self.args(self, positionals)

        for hook in self._hooks():
            hook(self, positionals)

    def _flag_is_true(self, name: str) -> bool:
        flag = self.lookup_flag(name)
        return flag is not None and flag.value.get() is True

    def _hooks(self) -> list[Hook]:
        hooks: list[Hook] = []
        pre = _nearest(self, "persistent_pre_run")
        if pre is not None:
            hooks.append(pre)
        hooks.extend(hook for hook in (self.pre_run, self.run, self.post_run) if hook is not None)
        post = _nearest(self, "persistent_post_run")
        if post is not None:
            hooks.append(post)
        return hooks


def _nearest(command: Command, attribute: str) -> Hook | None:
    node: Command | None = command
    while node is not None:
        hook: Hook | None = getattr(node, attribute)
        if hook is not None:
            return hook
        node = node.parent
    return None


def _default_usage_func(command: Command) -> TemplateRenderError | None:
    try:
        render_template(command.out_or_stderr(), command.get_usage_template(), command)
    except TemplateRenderError as exc:
        command.print_errln(exc)
        return exc
    return None


def _default_help_func(command: Command, args: list[str]) -> None:  # noqa: ARG001
    try:
        render_template(command.out_or_stdout(), command.get_help_template(), command)
    except TemplateRenderError as exc:
        command.print_errln(exc)


def _run_help_command(command: Command, args: list[str]) -> None:
    root = command.root
    try:
        target, _ = root.find(args)
    except UnknownCommandError:
        target = None
    if target is None:
        topic = " ".join(f"`{arg}`" for arg in args)
        command.println(f"Unknown help topic [{topic}]")
        root.usage()
        return
    target.init_default_help_flag()
    target.init_default_version_flag()
    target.help()


def _levenshtein(left: str, right: str) -> int:
    previous = list(range(len(right) + 1))
    for i, left_char in enumerate(left, start=1):
        current = [i]
        for j, right_char in enumerate(right, start=1):
            cost = 0 if left_char == right_char else 1
            current.append(min(previous[j] + 1, current[j - 1] + 1, previous[j - 1] + cost))
        previous = current
    return previous[-1]


def run(command: Command, args: Sequence[str] | None = None) -> int:
    """Execute ``command`` and return a process exit code.

    Returns:
        ``0`` on success, ``1`` when execution raised :class:`CommandError`.
    """
    try:
        command.execute(args)
    except CommandError as exc:
        logger.debug(
            "Exiting with status 1: %s",
            exc,
            extra=structured_extra(component=LogComponent.COMMAND, exit_code=1),
        )
        return 1
    return 0


__all__ = [
    "DEFAULT_SUGGESTIONS_MINIMUM_DISTANCE",
    "MIN_NAME_PADDING",
    "Command",
    "Group",
    "run",
]
