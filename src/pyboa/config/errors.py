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

"""Errors raised while locating, reading or unmarshalling configuration."""

from __future__ import annotations

from typing import TYPE_CHECKING

from pyboa._internal.exceptions import BoaError

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path


class ConfigError(BoaError):
    """Base class for configuration failures."""


class ConfigFileNotFoundError(ConfigError):
    """Raised when no config file matches the configured name and paths."""

    def __init__(self, name: str, locations: Sequence[Path]) -> None:
        """Record what was searched.

        Args:
            name: Config name without extension.
            locations: Directories that were searched, in order.
        """
        self.name = name
        self.locations = tuple(locations)
        searched = ", ".join(str(location) for location in self.locations)
        super().__init__(f'Config File "{name}" Not Found in [{searched}]')


class UnsupportedConfigError(ConfigError):
    """Raised when a config type is missing or not one of json/toml/yaml/yml."""

    def __init__(self, config_type: str) -> None:
        """Record the rejected type.

        Args:
            config_type: Type name or extension that was rejected.
        """
        self.config_type = config_type
        super().__init__(f'Unsupported Config Type "{config_type}"')


class ConfigParseError(ConfigError):
    """Raised when a config file or stream cannot be decoded."""

    def __init__(self, source: Path | str, error: Exception) -> None:
        """Wrap the decoder error.

        Args:
            source: File path, or a description of the stream.
            error: Exception raised by the decoder.
        """
        self.source = source
        self.error = error
        super().__init__(f"While parsing config {source}: {error}")


class ConfigUnmarshalError(ConfigError):
    """Raised when settings do not validate against the requested schema."""

    def __init__(self, schema: type, error: Exception) -> None:
        """Wrap the validation error.

        Args:
            schema: Model the settings were validated against.
            error: Validation error raised by pydantic.
        """
        self.schema = schema
        self.error = error
        super().__init__(f"Unable to unmarshal config into {schema.__name__}: {error}")


class ConfigValueError(ConfigError, TypeError):
    """Raised when a typed getter cannot convert a stored value."""

    def __init__(self, key: str, value: object, expected: str) -> None:
        """Record the failed conversion.

        Args:
            key: Requested key.
            value: Stored value.
            expected: Name of the requested type.
        """
        self.key = key
        self.value = value
        self.expected = expected
        super().__init__(f"config key {key!r} holds {value!r}, which is not a valid {expected}")


__all__ = [
    "ConfigError",
    "ConfigFileNotFoundError",
    "ConfigParseError",
    "ConfigUnmarshalError",
    "ConfigValueError",
    "UnsupportedConfigError",
]
