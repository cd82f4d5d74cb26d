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

"""Flag registry and parsing on top of :mod:`argparse`.

A :class:`FlagSet` owns :class:`Flag` records. Parsing builds a throwaway
``argparse`` parser whose actions write straight into each flag's value
object, so the same ``Flag`` can be shared between a command's local and
inherited views. Usage text follows the pflag layout::

      -n, --name string     who to greet (default "world")
          --timeout duration
"""

from __future__ import annotations

import argparse
import re
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Final, NoReturn

from pyboa.compat import override
from pyboa.exceptions import BoaValidationError, FlagError, FlagNotFoundError

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator, Sequence

    from pyboa.values import FlagValue

ZERO_DEFAULTS: Final[frozenset[str]] = frozenset({"", "0", "0s", "false", "[]", "<nil>"})
_NEGATIVE_NUMBER: Final[re.Pattern[str]] = re.compile(r"^-\d+$|^-\d*\.\d+$")
_USAGE_VARNAME: Final[re.Pattern[str]] = re.compile(r"`([^`]*)`")
_VARNAME_ALIASES: Final[dict[str, str]] = {
    "bool": "",
    "float64": "float",
    "int64": "int",
    "uint64": "uint",
    "stringSlice": "strings",
    "intSlice": "ints",
    "uintSlice": "uints",
    "boolSlice": "bools",
}


@dataclass(slots=True)
class Flag:
    """A single named flag and its parse state.

    Attributes:
        name: Long name, used as ``--name``.
        value: Value object receiving parsed tokens.
        usage: Help text.
        shorthand: Optional one-letter alias used as ``-s``.
        def_value: Default rendered in flag syntax at registration time.
        no_opt_def_val: Value applied when the flag appears without an
            argument (``"true"`` for booleans, ``"+1"`` for counters).
        hidden: Omit from usage output.
        deprecated: Deprecation message; non-empty implies ``hidden``.
        shorthand_deprecated: Deprecation message for the shorthand form.
        changed: Whether the flag appeared on the command line.
    """

    name: str
    value: FlagValue
    usage: str
    shorthand: str | None = None
    def_value: str = ""
    no_opt_def_val: str | None = None
    hidden: bool = False
    deprecated: str = ""
    shorthand_deprecated: str = ""
    changed: bool = False
    annotations: dict[str, list[str]] = field(default_factory=dict)

    def option_strings(self) -> list[str]:
        options = [f"--{self.name}"]
        if self.shorthand:
            options.append(f"-{self.shorthand}")
        return options

    def display_name(self) -> str:
        if self.shorthand:
            return f"-{self.shorthand}, --{self.name}"
        return f"--{self.name}"

    def apply(self, raw: str) -> None:
        """Set the value from ``raw`` and mark the flag as changed.

        Raises:
            FlagError: If the value object rejects ``raw``.
        """
        try:
            self.value.set(raw)
        except ValueError as exc:
            msg = f'invalid argument "{raw}" for "{self.display_name()}" flag: {exc}'
            raise FlagError(msg) from exc
        self.changed = True


def unquote_usage(flag: Flag) -> tuple[str, str]:
    """Return ``(varname, usage)`` for the usage line of ``flag``.

    A back-quoted word in the usage text names the argument
    (``"load `file`"`` renders as ``--config file   load file``); otherwise the
    value's type name is used, shortened for common types and dropped for
    booleans.
    """
    match = _USAGE_VARNAME.search(flag.usage)
    if match is not None:
        varname = match.group(1)
        usage = flag.usage[: match.start()] + varname + flag.usage[match.end() :]
        return varname, usage
    type_name = flag.value.type_name()
    return _VARNAME_ALIASES.get(type_name, type_name), flag.usage


class FlagSet:
    """Ordered collection of flags addressed by name and shorthand."""

    def __init__(self, name: str = "") -> None:
        self.name = name
        self._flags: dict[str, Flag] = {}
        self._shorthands: dict[str, Flag] = {}

    def __iter__(self) -> Iterator[Flag]:
        """Iterate flags sorted by name."""
        return iter(sorted(self._flags.values(), key=lambda flag: flag.name))

    def __len__(self) -> int:
        return len(self._flags)

    def __contains__(self, name: object) -> bool:
        return name in self._flags

    def add_flag(self, flag: Flag) -> Flag:
        """Register ``flag``.

        Raises:
            BoaValidationError: If the name or shorthand is already taken.
        """
        if flag.name in self._flags:
            msg = f"{self.name} flag redefined: {flag.name}"
            raise BoaValidationError(msg.strip())
        if flag.shorthand is not None:
            if len(flag.shorthand) != 1:
                msg = f'"{flag.shorthand}" shorthand is more than one ASCII character'
                raise BoaValidationError(msg)
            if flag.shorthand in self._shorthands:
                used = self._shorthands[flag.shorthand].name
                msg = f"unable to redefine {flag.shorthand!r} shorthand in {self.name!r} flagset: it's already used for {used!r} flag"
                raise BoaValidationError(msg)
            self._shorthands[flag.shorthand] = flag
        self._flags[flag.name] = flag
        return flag

    def var(
        self,
        value: FlagValue,
        name: str,
        usage: str,
        *,
        shorthand: str | None = None,
        no_opt_def_val: str | None = None,
    ) -> Flag:
        """Register a flag backed by ``value``; its current value becomes the default."""
        flag = Flag(
            name=name,
            value=value,
            usage=usage,
            shorthand=shorthand or None,
            def_value=str(value),
            no_opt_def_val=no_opt_def_val,
        )
        return self.add_flag(flag)

    def add_flag_set(self, other: FlagSet | None) -> None:
        """Copy flags from ``other``; names already present here are kept."""
        if other is None:
            return
        for flag in other._flags.values():
            if flag.name in self._flags:
                continue
            if flag.shorthand is not None and flag.shorthand in self._shorthands:
                continue
            self.add_flag(flag)

    def lookup(self, name: str) -> Flag | None:
        return self._flags.get(name)

    def shorthand_lookup(self, shorthand: str) -> Flag | None:
        return self._shorthands.get(shorthand)

    def require(self, name: str) -> Flag:
        flag = self._flags.get(name)
        if flag is None:
            raise FlagNotFoundError(name)
        return flag

    def get(self, name: str) -> object:
        """Return the parsed (or default) value of flag ``name``."""
        return self.require(name).value.get()

    def changed(self, name: str) -> bool:
        flag = self._flags.get(name)
        return flag is not None and flag.changed

    def mark_hidden(self, name: str) -> None:
        self.require(name).hidden = True

    def mark_deprecated(self, name: str, message: str) -> None:
        flag = self.require(name)
        if not message:
            msg = f"deprecated message for flag {name!r} must be set"
            raise BoaValidationError(msg)
        flag.deprecated = message
        flag.hidden = True

    def mark_shorthand_deprecated(self, name: str, message: str) -> None:
        flag = self.require(name)
        if not message:
            msg = f"deprecated message for flag {name!r} must be set"
            raise BoaValidationError(msg)
        flag.shorthand_deprecated = message

    def has_flags(self) -> bool:
        return bool(self._flags)

    def has_available_flags(self) -> bool:
        return any(not flag.hidden for flag in self._flags.values())

    def flag_usages(self) -> str:
        """Render the usage block for all visible flags, one line per flag."""
        rows: list[tuple[str, str]] = []
        for flag in self:
            if flag.hidden:
                continue
            if flag.shorthand and not flag.shorthand_deprecated:
                left = f"  -{flag.shorthand}, --{flag.name}"
            else:
                left = f"      --{flag.name}"
            varname, usage = unquote_usage(flag)
            if varname:
                left += f" {varname}"
            left += _no_opt_suffix(flag)
            if flag.def_value not in ZERO_DEFAULTS:
                if flag.value.type_name() == "string":
                    usage += f' (default "{flag.def_value}")'
                else:
                    usage += f" (default {flag.def_value})"
            if flag.deprecated:
                usage += f" (DEPRECATED: {flag.deprecated})"
            rows.append((left, usage))
        if not rows:
            return ""
        width = max(len(left) for left, _ in rows)
        return "".join(f"{left.ljust(width)}   {usage}\n" for left, usage in rows)

    def parse(
        self,
        arguments: Sequence[str],
        *,
        ignore_unknown: bool = False,
        notify: Callable[[str], None] | None = None,
    ) -> list[str]:
        """Parse ``arguments`` into this set's flags and return the positionals.

        Everything after a literal ``--`` is positional. ``--flag=value``
        spellings of no-argument flags are applied before ``argparse`` runs,
        since its zero-argument actions reject explicit values.

        Args:
            arguments: Raw command-line tokens (without the command path).
            ignore_unknown: Treat unknown flags as positionals instead of failing.
            notify: Receives deprecation notices for deprecated flags.

        Returns:
            Positional arguments in the order they appeared.

        Raises:
            FlagError: If a flag is unknown, lacks its argument or fails to parse.
        """
        tokens = list(arguments)
        trailing: list[str] = []
        if "--" in tokens:
            split_at = tokens.index("--")
            tokens, trailing = tokens[:split_at], tokens[split_at + 1 :]
        tokens = [token for token in tokens if not self._apply_inline_optional(token, notify)]

        parser = _FlagParser(prog=self.name or None, add_help=False, allow_abbrev=False)
        for index, flag in enumerate(self._flags.values()):
            parser.add_argument(
                *flag.option_strings(),
                action=_FlagAction,
                dest=f"flag_{index}",
                default=argparse.SUPPRESS,
                nargs=0 if flag.no_opt_def_val is not None else None,
                flag=flag,
                notify=notify,
            )
        _, extras = parser.parse_known_args(tokens)

        positionals: list[str] = []
        for token in extras:
            if _looks_like_flag(token) and not ignore_unknown:
                raise FlagError(_unknown_flag_message(token))
            positionals.append(token)
        return positionals + trailing

    def _apply_inline_optional(self, token: str, notify: Callable[[str], None] | None) -> bool:
        if not token.startswith("-") or "=" not in token:
            return False
        name, _, raw = token.partition("=")
        if name.startswith("--"):
            flag = self.lookup(name[2:])
        elif len(name) == 2:  # noqa: PLR2004 - "-x"
            flag = self.shorthand_lookup(name[1:])
        else:
            return False
        if flag is None or flag.no_opt_def_val is None:
            return False
        flag.apply(raw)
        _notify_deprecations(flag, name, notify)
        return True


class _FlagParser(argparse.ArgumentParser):
    @override
    def error(self, message: str) -> NoReturn:
        raise FlagError(message)


class _FlagAction(argparse.Action):
    def __init__(
        self,
        option_strings: Sequence[str],
        dest: str,
        *,
        flag: Flag,
        notify: Callable[[str], None] | None = None,
        **kwargs: Any,  # noqa: ANN401 - argparse passes arbitrary keyword options
    ) -> None:
        super().__init__(option_strings, dest, **kwargs)
        self.flag = flag
        self.notify = notify

    @override
    def __call__(
        self,
        parser: argparse.ArgumentParser,
        namespace: argparse.Namespace,
        values: str | Sequence[Any] | None,
        option_string: str | None = None,
    ) -> None:
        if self.nargs == 0:
            raw = self.flag.no_opt_def_val or ""
        else:
            raw = values if isinstance(values, str) else "".join(str(item) for item in values or ())
        self.flag.apply(raw)
        _notify_deprecations(self.flag, option_string or "", self.notify)


def _notify_deprecations(flag: Flag, option_string: str, notify: Callable[[str], None] | None) -> None:
    if notify is None:
        return
    if flag.deprecated:
        notify(f"Flag --{flag.name} has been deprecated, {flag.deprecated}")
    if flag.shorthand_deprecated and option_string == f"-{flag.shorthand}":
        notify(f"Flag shorthand -{flag.shorthand} has been deprecated, {flag.shorthand_deprecated}")


def _no_opt_suffix(flag: Flag) -> str:
    default = flag.no_opt_def_val
    if default is None:
        return ""
    type_name = flag.value.type_name()
    if (type_name == "bool" and default == "true") or (type_name == "count" and default == "+1"):
        return ""
    if type_name == "string":
        return f'[="{default}"]'
    return f"[={default}]"


def _looks_like_flag(token: str) -> bool:
    return token.startswith("-") and token != "-" and not _NEGATIVE_NUMBER.match(token)


def _unknown_flag_message(token: str) -> str:
    if token.startswith("--"):
        return f"unknown flag: {token.split('=', 1)[0]}"
    return f"unknown shorthand flag: {token[1]!r} in {token}"


__all__ = ["ZERO_DEFAULTS", "Flag", "FlagSet", "unquote_usage"]
