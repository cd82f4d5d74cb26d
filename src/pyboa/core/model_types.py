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

"""Enumerations shared across the command, config and logging layers."""

from __future__ import annotations

from pyboa.compat import StrEnum


class LogFormat(StrEnum):
    """Enumeration of log output formats.

    Attributes:
        TEXT: Human-readable text format.
        JSON: Machine-readable JSON format.
    """

    TEXT = "text"
    JSON = "json"

    @classmethod
    def from_str(cls, raw: str) -> LogFormat:
        """Create a LogFormat enum from a string value.

        Args:
            raw: String representation of the log format.

        Returns:
            LogFormat enum value.

        Raises:
            ValueError: If the string does not match any LogFormat value.
        """
        value = raw.strip().lower()
        try:
            return cls(value)
        except ValueError as exc:
            msg = f"Unknown log format '{raw}'"
            raise ValueError(msg) from exc


class LogComponent(StrEnum):
    """Logical source of a log record, emitted as the ``component`` field."""

    BUILDER = "builder"
    COMMAND = "command"
    CONFIG = "config"
    RENDER = "render"


class ConfigFormat(StrEnum):
    """Configuration file formats understood by the config store.

    The enum order is the extension search order used during discovery.
    """

    JSON = "json"
    TOML = "toml"
    YAML = "yaml"
    YML = "yml"

    @classmethod
    def from_str(cls, raw: str) -> ConfigFormat:
        """Resolve a format from an extension or type name (``".toml"`` or ``"toml"``).

        Raises:
            ValueError: If the name is not a supported format.
        """
        value = raw.strip().lower().lstrip(".")
        try:
            return cls(value)
        except ValueError as exc:
            msg = f"Unsupported config type '{raw}'"
            raise ValueError(msg) from exc


__all__ = ["ConfigFormat", "LogComponent", "LogFormat"]
