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

"""Usage and help rendering for options-aware commands."""

from __future__ import annotations

import io
import logging
from typing import TYPE_CHECKING

import pytest

from pyboa import (
    BoaCommand,
    BoaValidationError,
    Option,
    Profile,
    ProfileReferenceError,
    TemplateRenderError,
    new_command,
)
from pyboa.boa import HELP_TABS, USAGE_TABS
from pyboa.templates import OPTIONS_TEMPLATE

if TYPE_CHECKING:
    from _pytest.capture import CaptureFixture
    from _pytest.logging import LogCaptureFixture

pytestmark = [pytest.mark.unit, pytest.mark.cli]

EXPECTED_OPTIONS_OUTPUT = """\
Usage:
  options [flags] [options]

Options:
  option1, opt1   opt1 description
  option2         opt2 description

Flags:
  -h, --help   help for options
"""

EXPECTED_PROFILES_OUTPUT = """\
Usage:
  profiles [flags] [options]

Options:
  option1, opt1   opt1 description
  option2         opt2 description

Profiles:
  profile1, prof1   prof1 description
    ↳ Options:      opt1, option2
  profile2          prof2 description
    ↳ Options:      option1

Flags:
  -h, --help   help for profiles
"""


def _options_command(options: tuple[Option, ...]) -> BoaCommand:
    return new_command("options").with_options(*options).with_options_template().with_no_op().build()


def _profiles_command(options: tuple[Option, ...], profiles: tuple[Profile, ...]) -> BoaCommand:
    return (
        new_command("profiles")
        .with_options(*options)
        .with_profiles(*profiles)
        .with_options_template()
        .with_no_op()
        .build()
    )


def test_help_flag_renders_options_section(
    sample_options: tuple[Option, ...],
    capsys: CaptureFixture[str],
) -> None:
    cmd = _options_command(sample_options)

    cmd.execute(["-h"])

    assert capsys.readouterr().out == EXPECTED_OPTIONS_OUTPUT


def test_help_flag_renders_profiles_after_options(
    sample_options: tuple[Option, ...],
    sample_profiles: tuple[Profile, ...],
    capsys: CaptureFixture[str],
) -> None:
    cmd = _profiles_command(sample_options, sample_profiles)

    cmd.execute(["--help"])

    assert capsys.readouterr().out == EXPECTED_PROFILES_OUTPUT


def test_help_output_is_identical_across_invocations(
    sample_options: tuple[Option, ...],
    sample_profiles: tuple[Profile, ...],
    out: io.StringIO,
) -> None:
    cmd = _profiles_command(sample_options, sample_profiles)
    cmd.set_out(out)

    cmd.help()
    first = out.getvalue()
    cmd.help()

    assert first == EXPECTED_PROFILES_OUTPUT
    assert out.getvalue() == first * 2


def test_command_without_options_has_no_options_section(out: io.StringIO) -> None:
    cmd = new_command("plain").with_options_template().with_no_op().with_out(out).build()

    cmd.help()

    assert out.getvalue() == "Usage:\n  plain [flags]\n\nFlags:\n  -h, --help   help for plain\n"
    assert "[options]" not in out.getvalue()
    assert "Options:" not in out.getvalue()


def test_profiles_without_options_render_profiles_only(out: io.StringIO) -> None:
    cmd = (
        new_command("bundles")
        .with_profiles(Profile(("all",), ("x", "y"), "everything"))
        .with_options_template()
        .with_no_op()
        .with_out(out)
        .build()
    )

    cmd.help()

    text = out.getvalue()
    assert "[options]" not in text
    assert "Options:\n" not in text
    assert "Profiles:\n  all            everything\n    ↳ Options:   x, y\n" in text


def test_usage_uses_wide_column_padding(
    sample_options: tuple[Option, ...],
    out: io.StringIO,
) -> None:
    cmd = _options_command(sample_options)
    cmd.set_out(out)

    assert cmd.usage() is None

    lines = out.getvalue().splitlines()
    assert "  option1, opt1        opt1 description" in lines
    assert "  option2              opt2 description" in lines


def test_usage_string_captures_rendered_usage(sample_options: tuple[Option, ...], out: io.StringIO) -> None:
    cmd = _options_command(sample_options)
    cmd.set_out(out)

    text = cmd.usage_string()

    assert text.startswith("Usage:\n  options [flags] [options]\n\nOptions:\n")
    assert out.getvalue() == ""


def test_subcommand_use_line_includes_parent_path(out: io.StringIO) -> None:
    sync = (
        new_command("sync")
        .with_options(Option(("all",), "sync everything"))
        .with_options_template()
        .with_no_op()
        .build()
    )
    root = new_command("app").with_sub_commands(sync).with_out(out).build()

    root.execute(["sync", "-h"])

    assert out.getvalue() == (
        "Usage:\n"
        "  app sync [flags] [options]\n"
        "\n"
        "Options:\n"
        "  all   sync everything\n"
        "\n"
        "Flags:\n"
        "  -h, --help   help for sync\n"
    )


def test_inherited_help_renders_the_subcommand_itself(out: io.StringIO) -> None:
    sync = new_command("sync").with_no_op().build()
    root = (
        new_command("app")
        .with_options(Option(("all",), "everything"))
        .with_options_template()
        .with_sub_commands(sync)
        .with_out(out)
        .build()
    )

    root.execute(["sync", "-h"])

    assert out.getvalue() == "Usage:\n  app sync [flags]\n\nFlags:\n  -h, --help   help for sync\n"
    assert "Options:" not in sync.usage_string()
    assert "Options:\n  all" in root.usage_string()


def test_failing_usage_template_is_reported_and_returned(out: io.StringIO, err: io.StringIO) -> None:
    cmd = (
        new_command("broken")
        .with_usage_template("{{ cmd.no_such_field }}")
        .with_no_op()
        .with_out(out)
        .with_err(err)
        .build()
    )

    result = cmd.usage()

    assert isinstance(result, TemplateRenderError)
    assert out.getvalue() == ""
    assert err.getvalue().startswith("template: ")


def test_runtime_error_in_template_expression_is_reported(out: io.StringIO, err: io.StringIO) -> None:
    cmd = new_command("broken").with_usage_template("{{ 1 // 0 }}").with_no_op().with_out(out).with_err(err).build()

    result = cmd.usage()

    assert isinstance(result, TemplateRenderError)
    assert isinstance(result.error, ZeroDivisionError)
    assert out.getvalue() == ""
    assert err.getvalue().startswith("template: ")


def test_failing_help_template_is_reported_on_error_stream(out: io.StringIO, err: io.StringIO) -> None:
    cmd = new_command("broken").with_help_template("{% if %}").with_no_op().with_out(out).with_err(err).build()

    cmd.help()

    assert out.getvalue() == ""
    assert "template: " in err.getvalue()


def test_tab_geometry_and_options_template(sample_options: tuple[Option, ...]) -> None:
    assert tuple(USAGE_TABS) == (8, 8, 8)
    assert tuple(HELP_TABS) == (3, 3, 3)
    boa = BoaCommand(new_command("x").build_command(), sample_options)
    assert boa.options_template() == OPTIONS_TEMPLATE


def test_attributes_fall_through_to_wrapped_command(sample_options: tuple[Option, ...]) -> None:
    cmd = new_command("tool [path]").with_short_description("does things").with_options(*sample_options).build()

    assert cmd.name == "tool"
    assert cmd.short == "does things"
    assert cmd.has_options
    assert not cmd.has_profiles
    assert repr(cmd) == "BoaCommand(use='tool [path]', opts=2, profiles=0)"


def test_option_and_profile_accept_single_strings() -> None:
    option = Option("verbose", "chatty")
    profile = Profile("quiet", "verbose")

    assert option.args == ("verbose",)
    assert option.name == "verbose"
    assert profile.opts == ("verbose",)
    assert profile.name == "quiet"


@pytest.mark.parametrize("args", [(), ("",), ("ok", "")])
def test_option_rejects_empty_aliases(args: tuple[str, ...]) -> None:
    with pytest.raises(BoaValidationError, match="option aliases"):
        _ = Option(args)


def test_profile_rejects_empty_aliases() -> None:
    with pytest.raises(BoaValidationError, match="profile aliases"):
        _ = Profile(())


def test_profiles_resolve_against_any_option_alias(
    sample_options: tuple[Option, ...],
    sample_profiles: tuple[Profile, ...],
) -> None:
    boa = BoaCommand(new_command("x").build_command(), sample_options, sample_profiles)

    assert boa.option_aliases() == {"option1", "opt1", "option2"}
    assert boa.unresolved_profile_options() == []
    boa.validate_profiles()


def test_validate_profiles_lists_every_unresolved_reference(sample_options: tuple[Option, ...]) -> None:
    profiles = (
        Profile(("p1",), ("opt1", "missing")),
        Profile(("p2", "second"), ("ghost",)),
    )
    boa = BoaCommand(new_command("x").build_command(), sample_options, profiles)

    with pytest.raises(ProfileReferenceError) as excinfo:
        boa.validate_profiles()

    assert excinfo.value.unresolved == (("p1", "missing"), ("p2", "ghost"))
    assert "p1 -> missing" in str(excinfo.value)


def test_build_warns_about_unresolved_profile_references(
    sample_options: tuple[Option, ...],
    caplog: LogCaptureFixture,
) -> None:
    caplog.set_level(logging.WARNING, logger="pyboa.builder")

    boa = new_command("x").with_options(*sample_options).with_profiles(Profile(("p",), ("nope",))).build()

    assert boa.unresolved_profile_options() == [("p", "nope")]
    messages = [record.getMessage() for record in caplog.records if record.name == "pyboa.builder"]
    assert messages == ["Profile p references undeclared option nope"]
    assert caplog.records[-1].component == "builder"


def test_to_builder_keeps_options_and_profiles(
    sample_options: tuple[Option, ...],
    sample_profiles: tuple[Profile, ...],
) -> None:
    boa = new_command("x").with_options(*sample_options).with_profiles(*sample_profiles).build()

    rebuilt = boa.to_builder().with_options(Option(("option3",), "third")).build()

    assert rebuilt is boa
    assert [option.name for option in rebuilt.opts] == ["option1", "option2", "option3"]
    assert rebuilt.profiles == sample_profiles


def test_declarations_are_read_only_after_build(
    sample_options: tuple[Option, ...],
    sample_profiles: tuple[Profile, ...],
) -> None:
    boa = new_command("x").with_options(*sample_options).with_profiles(*sample_profiles).build()

    with pytest.raises(AttributeError):
        boa.opts = ()  # type: ignore[misc]
    with pytest.raises(AttributeError):
        boa.profiles = ()  # type: ignore[misc]
    assert boa.opts == sample_options
    assert boa.profiles == sample_profiles
