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

"""pyboa - fluent builders for command-line programs.

Provides chainable builders for command trees and layered configuration, and
a usage/help renderer that documents positional ``Options`` and ``Profiles``
alongside the usual flags.
"""

from __future__ import annotations

from pyboa.exceptions import (
    ArgsError,
    BoaError,
    BoaTypeError,
    BoaValidationError,
    CommandError,
    DuplicateOptionError,
    FlagError,
    FlagNotFoundError,
    ProfileReferenceError,
    TemplateRenderError,
    UnknownCommandError,
)

from .args import (
    arbitrary_args,
    exact_args,
    match_all,
    maximum_n_args,
    minimum_n_args,
    no_args,
    only_valid_args,
    range_args,
)
from .boa import BoaCommand, Option, Profile
from .builder import BoaCommandBuilder, CommandBuilder, new_command, to_boa_builder, to_command_builder
from .command import Command, Group, run
from .config import ConfigBuilder, ConfigStore, new_config, new_default_config, to_config_builder
from .flags import Flag, FlagSet
from .logging import configure_logging
from .tabwriter import TabWriter

__all__ = [
    "ArgsError",
    "BoaCommand",
    "BoaCommandBuilder",
    "BoaError",
    "BoaTypeError",
    "BoaValidationError",
    "Command",
    "CommandBuilder",
    "CommandError",
    "ConfigBuilder",
    "ConfigStore",
    "DuplicateOptionError",
    "Flag",
    "FlagError",
    "FlagNotFoundError",
    "FlagSet",
    "Group",
    "Option",
    "Profile",
    "ProfileReferenceError",
    "TabWriter",
    "TemplateRenderError",
    "UnknownCommandError",
    "__version__",
    "arbitrary_args",
    "configure_logging",
    "exact_args",
    "match_all",
    "maximum_n_args",
    "minimum_n_args",
    "new_command",
    "new_config",
    "new_default_config",
    "no_args",
    "only_valid_args",
    "range_args",
    "run",
    "to_boa_builder",
    "to_command_builder",
    "to_config_builder",
]

__version__ = "0.1.0"
