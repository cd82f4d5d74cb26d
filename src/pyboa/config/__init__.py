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

"""Layered configuration: a key/value store and its fluent builder."""

from __future__ import annotations

from .builder import (
    DEFAULT_ENV_KEY_REPLACER,
    ConfigBuilder,
    new_config,
    new_default_config,
    to_config_builder,
    xdg_config_home,
)
from .errors import (
    ConfigError,
    ConfigFileNotFoundError,
    ConfigParseError,
    ConfigUnmarshalError,
    ConfigValueError,
    UnsupportedConfigError,
)
from .store import KEY_DELIMITER, ConfigStore, decode

__all__ = [
    "DEFAULT_ENV_KEY_REPLACER",
    "KEY_DELIMITER",
    "ConfigBuilder",
    "ConfigError",
    "ConfigFileNotFoundError",
    "ConfigParseError",
    "ConfigStore",
    "ConfigUnmarshalError",
    "ConfigValueError",
    "UnsupportedConfigError",
    "decode",
    "new_config",
    "new_default_config",
    "to_config_builder",
    "xdg_config_home",
]
