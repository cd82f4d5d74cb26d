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

"""Command tree, dispatch, lifecycle and default help output."""

from __future__ import annotations

import io
from typing import TYPE_CHECKING

import pytest

from pyboa import (
    BoaValidationError,
    Command,
    CommandError,
    FlagError,
    Group,
    UnknownCommandError,
    run,
)
from pyboa.values import BOOL, STRING, ScalarValue

if TYPE_CHECKING:
    from collections.abc import Callable

pytestmark = [pytest.mark.unit, pytest.mark.cli]


def _noop(cmd: Command, args: list[str]) -> None:
    pass


def _recorder(calls: list[str], label: str) -> Callable[[Command, list[str]], None]:
    def hook(cmd: Command, args: list[str]) -> None:
        calls.append(f"{label}:{cmd.name}:{','.join(args)}")

    return hook


@pytest.fixture
def tree(out: io.StringIO, err: io.StringIO) -> Command:
    """``app`` with ``serve`` (alias ``s``) and ``serve web`` below it."""
    root = Command(use="app")
    root.persistent_flags().var(ScalarValue(STRING, ""), "config", "config `file`", shorthand="c")
    serve = Command(use="serve", aliases=["s"], short="Run server", run=_noop)
    web = Command(use="web [addr]", short="Serve the web UI", run=_noop)
    web.flags().var(ScalarValue(STRING, "8080"), "port", "listen port")
    serve.add_command(web)
    root.add_command(serve)
    root.set_out(out)
    root.set_err(err)
    return root


def test_find_walks_names_aliases_and_skips_flag_values(tree: Command) -> None:
    command, remaining = tree.find(["--config", "x", "s", "web", "--port", "1"])

    assert command.command_path == "app serve web"
    assert remaining == ["--config", "x", "--port", "1"]


def test_find_stops_at_first_positional_that_is_not_a_child(tree: Command) -> None:
    command, remaining = tree.find(["serve", "web", "extra"])

    assert command.name == "web"
    assert remaining == ["extra"]


def test_execute_parses_inherited_flags(tree: Command) -> None:
    command = tree.execute(["serve", "web", "-c", "app.yaml", "--port=9000"])

    assert command.name == "web"
    assert tree.persistent_flags().get("config") == "app.yaml"
    assert command.flags().get("port") == "9000"


def test_hooks_run_in_lifecycle_order() -> None:
    calls: list[str] = []
    root = Command(
        use="app",
        persistent_pre_run=_recorder(calls, "ppre"),
        persistent_post_run=_recorder(calls, "ppost"),
    )
    child = Command(
        use="child",
        pre_run=_recorder(calls, "pre"),
        run=_recorder(calls, "run"),
        post_run=_recorder(calls, "post"),
    )
    root.add_command(child)

    root.execute(["child", "a", "b"])

    assert calls == ["ppre:child:a,b", "pre:child:a,b", "run:child:a,b", "post:child:a,b", "ppost:child:a,b"]


def test_nearest_persistent_hook_wins() -> None:
    calls: list[str] = []
    root = Command(use="app", persistent_pre_run=_recorder(calls, "root"))
    child = Command(use="child", persistent_pre_run=_recorder(calls, "child"), run=_noop)
    root.add_command(child)

    root.execute(["child"])

    assert calls == ["child:child:"]


def test_execute_from_a_child_dispatches_from_the_root(tree: Command) -> None:
    serve = tree.commands[0]

    assert serve.name == "serve"
    assert serve.execute(["serve"]) is serve


def test_unknown_subcommand_suggests_close_names(tree: Command, err: io.StringIO) -> None:
    with pytest.raises(UnknownCommandError) as excinfo:
        tree.execute(["serv"])

    assert excinfo.value.suggestions == ("serve",)
    assert str(excinfo.value) == 'unknown command "serv" for "app"\n\nDid you mean this?\n\tserve\n'
    assert err.getvalue().startswith('Error: unknown command "serv" for "app"')
    assert err.getvalue().endswith("Run 'app --help' for usage.\n")


def test_suggestions_can_be_disabled(tree: Command) -> None:
    tree.disable_suggestions = True

    with pytest.raises(UnknownCommandError) as excinfo:
        tree.execute(["serv"])

    assert excinfo.value.suggestions == ()


def test_suggest_for_adds_explicit_suggestions() -> None:
    root = Command(use="app")
    root.add_command(Command(use="remove", suggest_for=["delete"], run=_noop))

    assert root.suggestions_for("delete") == ["remove"]
    assert root.suggestions_for("rem") == ["remove"]
    assert root.suggestions_for("zzz") == []


def test_command_without_run_prints_help(out: io.StringIO) -> None:
    root = Command(use="app")
    root.add_command(Command(use="serve", short="Run server", run=_noop))
    root.set_out(out)

    root.execute([])

    assert out.getvalue() == (
        "Usage:\n"
        "  app [command]\n"
        "\n"
        "Available Commands:\n"
        "  help        Help about any command\n"
        "  serve       Run server\n"
        "\n"
        "Flags:\n"
        "  -h, --help   help for app\n"
        "\n"
        'Use "app [command] --help" for more information about a command.\n'
    )


def test_help_command_prints_help_for_topic(tree: Command, out: io.StringIO) -> None:
    tree.execute(["help", "serve"])

    text = out.getvalue()
    assert text.startswith("Run server\n\nUsage:\n  app serve [flags]\n  app serve [command]\n")
    assert "Available Commands:\n  web         Serve the web UI\n" in text
    assert "Global Flags:\n  -c, --config file   config file\n" in text


def test_help_command_reports_unknown_topic(tree: Command, out: io.StringIO) -> None:
    tree.execute(["help", "nope"])

    assert out.getvalue().startswith("Unknown help topic [`nope`]\nUsage:\n")


def test_help_command_is_not_listed_as_available(tree: Command) -> None:
    tree.init_default_help_cmd()
    help_command = next(command for command in tree.commands if command.name == "help")

    assert not help_command.is_available_command
    assert help_command.runnable


def test_version_flag_prints_version_and_skips_run(out: io.StringIO) -> None:
    calls: list[str] = []
    cmd = Command(use="app", version="1.2.3", run=_recorder(calls, "run"))
    cmd.set_out(out)

    cmd.execute(["-v"])

    assert out.getvalue() == "app version 1.2.3\n"
    assert calls == []


def test_deprecated_command_prints_notice_and_is_hidden(out: io.StringIO) -> None:
    calls: list[str] = []
    root = Command(use="app")
    old = Command(use="old", deprecated="use new instead", run=_recorder(calls, "run"))
    root.add_command(old)
    root.set_out(out)

    root.execute(["old"])

    assert out.getvalue() == 'Command "old" is deprecated, use new instead\n'
    assert calls == ["run:old:"]
    assert not old.is_available_command


def test_hook_errors_are_printed_with_usage(out: io.StringIO, err: io.StringIO) -> None:
    def fail(cmd: Command, args: list[str]) -> None:
        msg = "boom"
        raise CommandError(msg)

    root = Command(use="app", run=fail)
    root.set_out(out)
    root.set_err(err)

    assert run(root, []) == 1
    assert err.getvalue() == "Error: boom\n"
    assert out.getvalue() == "Usage:\n  app [flags]\n\nFlags:\n  -h, --help   help for app\n\n"


def test_silenced_errors_print_nothing(out: io.StringIO, err: io.StringIO) -> None:
    def fail(cmd: Command, args: list[str]) -> None:
        msg = "boom"
        raise CommandError(msg)

    root = Command(use="app", run=fail, silence_errors=True, silence_usage=True)
    root.set_out(out)
    root.set_err(err)

    assert run(root, []) == 1
    assert out.getvalue() == ""
    assert err.getvalue() == ""


def test_unknown_flag_fails_execution(out: io.StringIO, err: io.StringIO) -> None:
    root = Command(use="app", run=_noop)
    root.set_out(out)
    root.set_err(err)

    with pytest.raises(FlagError, match="unknown flag: --nope"):
        root.execute(["--nope"])
    assert err.getvalue() == "Error: unknown flag: --nope\n"


def test_run_returns_zero_on_success() -> None:
    assert run(Command(use="app", run=_noop), []) == 0


def test_whitelisted_unknown_flags_become_positionals() -> None:
    calls: list[str] = []
    root = Command(use="app", unknown_flags_whitelisted=True, run=_recorder(calls, "run"))

    root.execute(["--extra", "value"])

    assert calls == ["run:app:--extra,value"]


def test_disabled_flag_parsing_passes_everything_through() -> None:
    calls: list[str] = []
    root = Command(use="app")
    root.add_command(Command(use="raw", disable_flag_parsing=True, run=_recorder(calls, "run")))

    root.execute(["raw", "--x", "-h"])

    assert calls == ["run:raw:--x,-h"]


def test_use_line_and_command_path(tree: Command) -> None:
    web = tree.commands[0].commands[0]

    assert web.command_path == "app serve web"
    assert web.use_line == "app serve web [addr] [flags]"
    web.disable_flags_in_use_line = True
    assert web.use_line == "app serve web [addr]"


def test_flag_views_separate_local_and_inherited(tree: Command) -> None:
    web = tree.commands[0].commands[0]

    assert [flag.name for flag in web.local_flags()] == ["port"]
    assert [flag.name for flag in web.inherited_flags()] == ["config"]
    assert web.lookup_flag("config") is tree.persistent_flags().lookup("config")
    assert web.has_available_inherited_flags


def test_help_flag_drops_taken_shorthand() -> None:
    cmd = Command(use="app")
    cmd.flags().var(ScalarValue(STRING, ""), "host", "host name", shorthand="h")

    cmd.init_default_help_flag()

    help_flag = cmd.flags().require("help")
    assert help_flag.shorthand is None
    assert isinstance(help_flag.value, ScalarValue)
    assert help_flag.value.type_name() == BOOL.type_name


def test_grouped_commands_are_listed_under_their_titles(out: io.StringIO) -> None:
    root = Command(use="app")
    root.add_group(Group("core", "Core Commands:"))
    root.add_command(
        Command(use="serve", short="Run server", group_id="core", run=_noop),
        Command(use="status", short="Show status", run=_noop),
    )
    root.set_out(out)

    root.execute([])

    text = out.getvalue()
    assert "Core Commands:\n  serve       Run server\n" in text
    assert "Additional Commands:\n  help        Help about any command\n  status      Show status\n" in text


def test_undefined_group_is_rejected() -> None:
    root = Command(use="app")
    root.add_command(Command(use="serve", group_id="missing", run=_noop))

    with pytest.raises(BoaValidationError, match="group id 'missing' is not defined"):
        root.execute(["serve"])


def test_command_cannot_be_its_own_child() -> None:
    cmd = Command(use="app")

    with pytest.raises(BoaValidationError):
        cmd.add_command(cmd)


def test_remove_command_detaches_child(tree: Command) -> None:
    serve = tree.commands[0]

    tree.remove_command(serve)

    assert serve.parent is None
    assert not tree.has_sub_commands


def test_output_streams_are_inherited(tree: Command, out: io.StringIO, err: io.StringIO) -> None:
    web = tree.commands[0].commands[0]

    assert web.out_or_stdout() is out
    assert web.err_or_stderr() is err
    web.println("hello")
    assert out.getvalue() == "hello\n"


def test_usage_string_does_not_touch_streams(tree: Command, out: io.StringIO) -> None:
    text = tree.usage_string()

    assert text.startswith("Usage:\n  app [command]\n")
    assert out.getvalue() == ""
    assert isinstance(tree.out_or_stdout(), io.StringIO)
