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

"""Fluent command builders."""

from __future__ import annotations

import io
import logging
from datetime import timedelta
from typing import TYPE_CHECKING

import pytest

from pyboa import (
    BoaCommand,
    BoaCommandBuilder,
    Command,
    CommandBuilder,
    DuplicateOptionError,
    FlagNotFoundError,
    FlagSet,
    Group,
    Option,
    match_all,
    maximum_n_args,
    new_command,
    only_valid_args,
    to_boa_builder,
    to_command_builder,
)
from pyboa.values import BOOL, ScalarValue

if TYPE_CHECKING:
    from _pytest.logging import LogCaptureFixture

pytestmark = pytest.mark.unit


def _noop(cmd: Command, args: list[str]) -> None:
    pass


def test_descriptive_setters_populate_the_command() -> None:
    out, err = io.StringIO(), io.StringIO()
    validator = match_all(maximum_n_args(1), only_valid_args)
    group = Group("core", "Core:")

    cmd = (
        CommandBuilder("app [arg]")
        .with_aliases("alias1", "alias2")
        .suggest_for("cmd1", "cmd2")
        .with_short_description("short desc")
        .with_long_description("long desc")
        .with_group_id("group ID")
        .with_groups(group)
        .with_example("example 1")
        .with_valid_args("arg1", "arg2")
        .with_args(validator)
        .with_arg_aliases("argAlias1", "argAlias2")
        .deprecated("cmd is deprecated")
        .with_annotations({"key": "value"})
        .with_version("0.1.0")
        .hidden()
        .silence_errors()
        .silence_usage()
        .disable_flag_parsing()
        .disable_flags_in_use_line()
        .disable_suggestions()
        .with_suggestions_minimum_distance(3)
        .with_unknown_flags_whitelisted()
        .with_usage_template("usage")
        .with_help_template("help")
        .with_out(out)
        .with_err(err)
        .with_run(_noop)
        .build()
    )

    assert cmd.use == "app [arg]"
    assert cmd.aliases == ["alias1", "alias2"]
    assert cmd.suggest_for == ["cmd1", "cmd2"]
    assert (cmd.short, cmd.long) == ("short desc", "long desc")
    assert cmd.group_id == "group ID"
    assert cmd.groups == [group]
    assert cmd.example == "example 1"
    assert cmd.valid_args == ["arg1", "arg2"]
    assert cmd.args is validator
    assert cmd.arg_aliases == ["argAlias1", "argAlias2"]
    assert cmd.deprecated == "cmd is deprecated"
    assert cmd.annotations == {"key": "value"}
    assert cmd.version == "0.1.0"
    assert cmd.hidden
    assert cmd.silence_errors
    assert cmd.silence_usage
    assert cmd.disable_flag_parsing
    assert cmd.disable_flags_in_use_line
    assert cmd.disable_suggestions
    assert cmd.suggestions_minimum_distance == 3
    assert cmd.unknown_flags_whitelisted
    assert (cmd.usage_template, cmd.help_template) == ("usage", "help")
    assert cmd.out_or_stdout() is out
    assert cmd.err_or_stderr() is err
    assert cmd.run is _noop


def test_build_adds_help_and_version_flags() -> None:
    cmd = CommandBuilder("app").with_version("1.0").build()

    assert cmd.flags().require("help").shorthand == "h"
    assert cmd.flags().require("version").shorthand == "v"


def test_hooks_are_assigned() -> None:
    def hook(cmd: Command, args: list[str]) -> None:
        pass

    cmd = (
        CommandBuilder("app")
        .with_persistent_pre_run(hook)
        .with_pre_run(hook)
        .with_run(hook)
        .with_post_run(hook)
        .with_persistent_post_run(hook)
        .build()
    )

    assert cmd.persistent_pre_run is hook
    assert cmd.pre_run is hook
    assert cmd.run is hook
    assert cmd.post_run is hook
    assert cmd.persistent_post_run is hook


def test_with_no_op_makes_command_runnable() -> None:
    assert CommandBuilder("app").with_no_op().build().runnable
    assert not CommandBuilder("app").build().runnable


@pytest.mark.parametrize(
    ("method", "type_name"),
    [
        ("with_bool_flag", "bool"),
        ("with_bool_slice_flag", "boolSlice"),
        ("with_bytes_base64_flag", "bytesBase64"),
        ("with_bytes_hex_flag", "bytesHex"),
        ("with_count_flag", "count"),
        ("with_duration_flag", "duration"),
        ("with_duration_slice_flag", "durationSlice"),
        ("with_float32_flag", "float32"),
        ("with_float32_slice_flag", "float32Slice"),
        ("with_float64_flag", "float64"),
        ("with_float64_slice_flag", "float64Slice"),
        ("with_int_flag", "int"),
        ("with_int_slice_flag", "intSlice"),
        ("with_int8_flag", "int8"),
        ("with_int16_flag", "int16"),
        ("with_int32_flag", "int32"),
        ("with_int32_slice_flag", "int32Slice"),
        ("with_int64_flag", "int64"),
        ("with_int64_slice_flag", "int64Slice"),
        ("with_uint_flag", "uint"),
        ("with_uint_slice_flag", "uintSlice"),
        ("with_uint8_flag", "uint8"),
        ("with_uint16_flag", "uint16"),
        ("with_uint32_flag", "uint32"),
        ("with_uint64_flag", "uint64"),
        ("with_string_flag", "string"),
        ("with_string_slice_flag", "stringSlice"),
        ("with_string_array_flag", "stringArray"),
        ("with_string_to_int_flag", "stringToInt"),
        ("with_string_to_int64_flag", "stringToInt64"),
        ("with_string_to_string_flag", "stringToString"),
        ("with_ip_flag", "ip"),
        ("with_ip_slice_flag", "ipSlice"),
        ("with_ip_mask_flag", "ipMask"),
        ("with_ip_net_flag", "ipNet"),
    ],
)
def test_typed_flag_registration(method: str, type_name: str) -> None:
    builder = CommandBuilder("app")

    getattr(builder, method)("flag", shorthand="f")
    getattr(builder, method)("pflag", shorthand="p", persistent=True)

    cmd = builder.build()
    assert cmd.flags().require("flag").value.type_name() == type_name
    assert cmd.flags().require("flag").shorthand == "f"
    assert cmd.persistent_flags().require("pflag").value.type_name() == type_name
    assert "pflag" not in cmd.flags()


def test_flag_defaults_are_applied_and_shown() -> None:
    cmd = (
        CommandBuilder("app")
        .with_int_flag("retries", 3, "retry count")
        .with_duration_flag("timeout", timedelta(seconds=90), "timeout")
        .with_string_slice_flag("tags", ["a", "b"], "tags")
        .build()
    )

    assert cmd.flags().get("retries") == 3
    assert cmd.flags().require("timeout").def_value == "1m30s"
    assert cmd.flags().require("tags").def_value == "[a,b]"


def test_bool_flag_takes_no_argument() -> None:
    cmd = CommandBuilder("app").with_bool_flag("dry-run", usage="preview only").with_no_op().build()

    cmd.execute(["--dry-run"])

    assert cmd.flags().get("dry-run") is True


def test_var_flag_accepts_caller_values() -> None:
    value = ScalarValue(BOOL, True)  # noqa: FBT003

    cmd = CommandBuilder("app").with_var_flag(value, "color", "colorize").build()

    assert cmd.flags().require("color").value is value
    assert cmd.flags().require("color").no_opt_def_val == "true"


def test_flag_sets_are_merged() -> None:
    local, persistent = FlagSet("local"), FlagSet("persistent")
    local.var(ScalarValue(BOOL, False), "a", "a")  # noqa: FBT003
    persistent.var(ScalarValue(BOOL, False), "b", "b")  # noqa: FBT003

    cmd = CommandBuilder("app").with_flag_set(local).with_persistent_flag_set(persistent).build()

    assert "a" in cmd.flags()
    assert "b" in cmd.persistent_flags()


def test_flag_marks_update_flags() -> None:
    cmd = (
        CommandBuilder("app")
        .with_string_flag("old", usage="old", shorthand="o")
        .with_string_flag("secret", usage="secret")
        .with_string_flag("global", usage="global", persistent=True)
        .mark_flag_deprecated("old", "use --new")
        .mark_flag_shorthand_deprecated("old", "use --old")
        .mark_flag_hidden("secret")
        .mark_persistent_flag_hidden("global")
        .build()
    )

    old = cmd.flags().require("old")
    assert (old.deprecated, old.hidden, old.shorthand_deprecated) == ("use --new", True, "use --old")
    assert cmd.flags().require("secret").hidden
    assert cmd.persistent_flags().require("global").hidden


@pytest.mark.parametrize(
    "mark",
    [
        lambda builder: builder.mark_flag_hidden("ghost"),
        lambda builder: builder.mark_flag_deprecated("ghost", "gone"),
        lambda builder: builder.mark_flag_shorthand_deprecated("ghost", "gone"),
        lambda builder: builder.mark_persistent_flag_hidden("ghost"),
        lambda builder: builder.mark_persistent_flag_deprecated("ghost", "gone"),
        lambda builder: builder.mark_persistent_flag_shorthand_deprecated("ghost", "gone"),
    ],
)
def test_marking_unknown_flags_fails_immediately(mark: object) -> None:
    with pytest.raises(FlagNotFoundError):
        mark(CommandBuilder("app"))  # type: ignore[operator]


def test_sub_commands_accept_boa_commands() -> None:
    boa = new_command("sync").with_options(Option("all")).build()
    plain = CommandBuilder("status").build()

    root = CommandBuilder("app").with_sub_commands(boa, plain).build()

    assert [child.name for child in root.commands] == ["status", "sync"]
    assert boa.parent is root


def test_new_command_returns_options_aware_builder() -> None:
    builder = new_command("app")

    assert isinstance(builder, BoaCommandBuilder)
    assert isinstance(builder.build(), BoaCommand)
    assert isinstance(builder.build_command(), Command)


def test_with_options_rejects_duplicate_canonical_alias() -> None:
    builder = new_command("app").with_options(Option(("one", "1")))

    with pytest.raises(DuplicateOptionError, match='option "one" is already declared'):
        builder.with_options(Option(("one", "uno")))


def test_with_options_and_template_installs_renderers() -> None:
    cmd = new_command("app").with_options_and_template(Option("x")).build()

    assert cmd.usage_func is not None
    assert cmd.help_func is not None
    assert [option.name for option in cmd.opts] == ["x"]


def test_with_valid_args_from_options_accepts_every_alias() -> None:
    cmd = (
        new_command("app")
        .with_options(Option(("option1", "opt1")), Option("option2"))
        .with_valid_args_from_options()
        .with_args(only_valid_args)
        .with_no_op()
        .build()
    )

    assert cmd.valid_args == ["option1", "opt1", "option2"]
    cmd.execute(["opt1", "option2"])


def test_converting_between_builders_keeps_the_command() -> None:
    boa = new_command("app").with_options(Option("x")).build()

    plain = to_command_builder(boa).with_short_description("converted").build()
    again = to_boa_builder(plain).build()
    kept = to_boa_builder(boa).build()

    assert plain is boa.command
    assert plain.short == "converted"
    assert again.command is plain
    assert again.opts == ()
    assert kept is boa
    assert isinstance(CommandBuilder("x").to_boa_builder(), BoaCommandBuilder)
    assert isinstance(new_command("y").to_command_builder(), CommandBuilder)
    assert isinstance(CommandBuilder("z").build_boa(), BoaCommand)


def test_flag_registration_is_logged(caplog: LogCaptureFixture) -> None:
    caplog.set_level(logging.DEBUG, logger="pyboa.builder")

    _ = CommandBuilder("app").with_string_flag("name").build()

    record = next(record for record in caplog.records if record.name == "pyboa.builder")
    assert record.getMessage() == "Registered flag --name (string)"
    assert record.flag == "name"
