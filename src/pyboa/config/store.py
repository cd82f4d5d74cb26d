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

"""Layered key/value configuration store.

Values are looked up by case-insensitive dotted keys (``"server.port"``) in
this order, first hit wins:

1. values assigned with :meth:`ConfigStore.set`
2. environment variables (bound keys, or every key under ``automatic_env``)
3. the config file read by ``read_in_config``/``read_config``
4. defaults from :meth:`ConfigStore.set_default`

Config files may be JSON, TOML or YAML; :meth:`ConfigStore.unmarshal`
validates the merged settings against a pydantic model.
"""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Mapping
from pathlib import Path
from typing import IO, TYPE_CHECKING, TypeVar, cast

import yaml
from pydantic import BaseModel, ValidationError

from pyboa._internal.logging_utils import structured_extra
from pyboa.compat import tomllib
from pyboa.core.model_types import ConfigFormat, LogComponent
from pyboa.values import parse_bool

from .errors import (
    ConfigFileNotFoundError,
    ConfigParseError,
    ConfigUnmarshalError,
    ConfigValueError,
    UnsupportedConfigError,
)

if TYPE_CHECKING:
    from collections.abc import Iterable

ModelT = TypeVar("ModelT", bound=BaseModel)

logger: logging.Logger = logging.getLogger("pyboa.config")

KEY_DELIMITER = "."


def _lower_keys(mapping: Mapping[str, object]) -> dict[str, object]:
    result: dict[str, object] = {}
    for key, value in mapping.items():
        if isinstance(value, Mapping):
            result[str(key).lower()] = _lower_keys(cast("Mapping[str, object]", value))
        else:
            result[str(key).lower()] = value
    return result


def _search(mapping: Mapping[str, object], path: list[str]) -> tuple[bool, object]:
    node: object = mapping
    for part in path:
        if not isinstance(node, Mapping) or part not in node:
            return False, None
        node = cast("Mapping[str, object]", node)[part]
    return True, node


def _assign(mapping: dict[str, object], path: list[str], value: object) -> None:
    node = mapping
    for part in path[:-1]:
        child = node.get(part)
        if not isinstance(child, dict):
            child = {}
            node[part] = child
        node = cast("dict[str, object]", child)
    node[path[-1]] = _lower_keys(value) if isinstance(value, Mapping) else value


def _flatten(mapping: Mapping[str, object], prefix: str = "") -> Iterable[str]:
    for key, value in mapping.items():
        full = f"{prefix}{key}"
        if isinstance(value, Mapping) and value:
            yield from _flatten(cast("Mapping[str, object]", value), f"{full}{KEY_DELIMITER}")
        else:
            yield full


def decode(text: str | bytes, config_format: ConfigFormat) -> dict[str, object]:
    """Decode config ``text`` written in ``config_format``.

    Returns:
        The decoded mapping with lower-cased keys (empty documents give ``{}``).

    Raises:
        ValueError: If the payload is malformed or its top level is not a mapping.
    """
    raw_text = text.decode("utf-8") if isinstance(text, bytes) else text
    data: object
    if config_format is ConfigFormat.JSON:
        data = json.loads(raw_text) if raw_text.strip() else {}
    elif config_format is ConfigFormat.TOML:
        data = tomllib.loads(raw_text)
    else:
        try:
            data = yaml.safe_load(raw_text)
        except yaml.YAMLError as exc:
            raise ValueError(str(exc)) from exc
    if data is None:
        return {}
    if not isinstance(data, Mapping):
        msg = f"top-level {config_format} value must be a mapping, got {type(data).__name__}"
        raise ValueError(msg)
    return _lower_keys(cast("Mapping[str, object]", data))


class ConfigStore:
    """Configuration values merged from overrides, environment, file and defaults."""

    def __init__(self) -> None:
        self._config_paths: list[Path] = []
        self._config_name = "config"
        self._config_type: str = ""
        self._config_file: Path | None = None
        self._env_prefix = ""
        self._automatic_env = False
        self._env_key_replacer: dict[str, str] = {}
        self._env_bindings: dict[str, list[str]] = {}
        self._override: dict[str, object] = {}
        self._config: dict[str, object] = {}
        self._defaults: dict[str, object] = {}

    # --- file location ---------------------------------------------------

    def set_config_file(self, path: str | os.PathLike[str]) -> None:
        """Use ``path`` instead of searching by name and paths."""
        self._config_file = Path(path)

    def add_config_path(self, path: str | os.PathLike[str]) -> None:
        """Append a directory to the config search path (duplicates are ignored)."""
        candidate = Path(path)
        if candidate not in self._config_paths:
            self._config_paths.append(candidate)

    def set_config_name(self, name: str) -> None:
        """Set the file name (without extension) searched for in the config paths."""
        self._config_name = name
        self._config_file = None

    def set_config_type(self, config_type: str) -> None:
        """Force the format used to decode config files and streams."""
        self._config_type = config_type

    @property
    def config_paths(self) -> list[Path]:
        return list(self._config_paths)

    def config_file_used(self) -> Path | None:
        """Return the explicit or discovered config file, if any."""
        return self._config_file

    def _resolve_format(self, path: Path | None = None) -> ConfigFormat:
        raw = self._config_type or (path.suffix if path is not None else "")
        if not raw:
            raise UnsupportedConfigError(raw)
        try:
            return ConfigFormat.from_str(raw)
        except ValueError as exc:
            raise UnsupportedConfigError(raw) from exc

    def _find_config_file(self) -> Path:
        if self._config_file is not None:
            return self._config_file
        for directory in self._config_paths:
            for config_format in ConfigFormat:
                candidate = directory / f"{self._config_name}.{config_format.value}"
                if candidate.is_file():
                    return candidate
            if self._config_type:
                candidate = directory / self._config_name
                if candidate.is_file():
                    return candidate
        raise ConfigFileNotFoundError(self._config_name, self._config_paths)

    def read_in_config(self) -> None:
        """Discover, read and decode the config file, replacing earlier file values.

        Raises:
            ConfigFileNotFoundError: If no candidate file exists.
            UnsupportedConfigError: If the file's type is not supported.
            ConfigParseError: If the file cannot be read or decoded.
        """
        path = self._find_config_file()
        config_format = self._resolve_format(path)
        try:
            text = path.read_bytes()
        except OSError as exc:
            if not path.exists():
                raise ConfigFileNotFoundError(path.name, [path.parent]) from exc
            raise ConfigParseError(path, exc) from exc
        try:
            self._config = decode(text, config_format)
        except (ValueError, UnicodeDecodeError) as exc:
            raise ConfigParseError(path, exc) from exc
        self._config_file = path
        logger.debug(
            "Loaded config file %s",
            path,
            extra=structured_extra(component=LogComponent.CONFIG, path=path, config_type=config_format),
        )

    def read_config(self, stream: IO[str] | IO[bytes]) -> None:
        """Decode config from ``stream`` using the configured type.

        Raises:
            UnsupportedConfigError: If no supported config type is set.
            ConfigParseError: If the payload cannot be decoded.
        """
        config_format = self._resolve_format()
        try:
            self._config = decode(stream.read(), config_format)
        except (ValueError, UnicodeDecodeError) as exc:
            raise ConfigParseError("<stream>", exc) from exc
        logger.debug(
            "Loaded config from stream",
            extra=structured_extra(component=LogComponent.CONFIG, config_type=config_format),
        )

    # --- environment -----------------------------------------------------

    def set_env_prefix(self, prefix: str) -> None:
        """Prefix generated env names with ``PREFIX_``."""
        self._env_prefix = prefix

    def automatic_env(self) -> None:
        """Check the environment for every key looked up."""
        self._automatic_env = True

    def set_env_key_replacer(self, replacements: Mapping[str, str]) -> None:
        """Rewrite substrings of generated env names (``{".": "_"}``)."""
        self._env_key_replacer = dict(replacements)

    def bind_env(self, key: str, *env_names: str) -> None:
        """Bind ``key`` to environment variables.

        Without ``env_names`` the variable is derived from the key and the
        prefix (``server.port`` with prefix ``app`` reads ``APP_SERVER.PORT``,
        or ``APP_SERVER_PORT`` with a ``"." -> "_"`` replacer). Explicit names
        are tried in order; the key replacer applies to them too
        (``MY.TOKEN`` reads ``MY_TOKEN`` with a ``"." -> "_"`` replacer).
        """
        lowered = key.lower()
        self._env_bindings[lowered] = list(env_names) if env_names else [self._merge_with_env_prefix(lowered)]

    def _merge_with_env_prefix(self, key: str) -> str:
        if self._env_prefix:
            return f"{self._env_prefix}_{key}".upper()
        return key.upper()

    def _env_name(self, name: str) -> str:
        for old, new in self._env_key_replacer.items():
            name = name.replace(old, new)
        return name

    def _lookup_env(self, key: str) -> tuple[bool, object]:
        names = self._env_bindings.get(key)
        if names is not None:
            for name in names:
                value = os.environ.get(self._env_name(name))
                if value is not None:
                    return True, value
            return False, None
        if self._automatic_env:
            value = os.environ.get(self._env_name(self._merge_with_env_prefix(key)))
            if value is not None:
                return True, value
        return False, None

    # --- values ----------------------------------------------------------

    def set_default(self, key: str, value: object) -> None:
        _assign(self._defaults, key.lower().split(KEY_DELIMITER), value)

    def set(self, key: str, value: object) -> None:
        """Override ``key`` above every other source."""
        _assign(self._override, key.lower().split(KEY_DELIMITER), value)

    def _find(self, key: str) -> tuple[bool, object]:
        lowered = key.lower()
        path = lowered.split(KEY_DELIMITER)
        found, value = _search(self._override, path)
        if found:
            return found, value
        found, value = self._lookup_env(lowered)
        if found:
            return found, value
        found, value = _search(self._config, path)
        if found:
            return found, value
        return _search(self._defaults, path)

    def get(self, key: str, default: object = None) -> object:
        """Return the value for ``key`` from the highest-precedence source."""
        found, value = self._find(key)
        return value if found else default

    def is_set(self, key: str) -> bool:
        return self._find(key)[0]

    def get_string(self, key: str) -> str:
        value = self.get(key)
        if value is None:
            return ""
        if isinstance(value, bool):
            return str(value).lower()
        return str(value)

    def get_int(self, key: str) -> int:
        """Return ``key`` as an ``int`` (``0`` when unset).

        Raises:
            ConfigValueError: If the stored value is not integral.
        """
        value = self.get(key)
        if value is None:
            return 0
        try:
            if isinstance(value, str):
                return int(value.strip(), 0)
            return int(cast("int", value))
        except (TypeError, ValueError) as exc:
            raise ConfigValueError(key, value, "int") from exc

    def get_float(self, key: str) -> float:
        value = self.get(key)
        if value is None:
            return 0.0
        try:
            return float(cast("float", value))
        except (TypeError, ValueError) as exc:
            raise ConfigValueError(key, value, "float") from exc

    def get_bool(self, key: str) -> bool:
        value = self.get(key)
        if value is None:
            return False
        if isinstance(value, bool):
            return value
        if isinstance(value, int):
            return value != 0
        try:
            return parse_bool(str(value).strip())
        except ValueError as exc:
            raise ConfigValueError(key, value, "bool") from exc

    def get_string_list(self, key: str) -> list[str]:
        """Return ``key`` as a list; strings are split on whitespace."""
        value = self.get(key)
        if value is None:
            return []
        if isinstance(value, str):
            return value.split()
        if isinstance(value, (list, tuple, set)):
            return [str(item) for item in value]
        raise ConfigValueError(key, value, "list of strings")

    def all_keys(self) -> list[str]:
        """Return every known dotted key, sorted."""
        keys: set[str] = set()
        for source in (self._defaults, self._config, self._override):
            keys.update(_flatten(source))
        keys.update(self._env_bindings)
        return sorted(keys)

    def all_settings(self) -> dict[str, object]:
        """Return the merged settings as a nested mapping."""
        settings: dict[str, object] = {}
        for key in self.all_keys():
            found, value = self._find(key)
            if found:
                _assign(settings, key.split(KEY_DELIMITER), value)
        return settings

    def unmarshal(self, schema: type[ModelT]) -> ModelT:
        """Validate :meth:`all_settings` into ``schema``.

        Raises:
            ConfigUnmarshalError: If pydantic rejects the settings.
        """
        try:
            return schema.model_validate(self.all_settings())
        except ValidationError as exc:
            raise ConfigUnmarshalError(schema, exc) from exc

    def unmarshal_key(self, key: str, schema: type[ModelT]) -> ModelT:
        """Validate the subtree at ``key`` into ``schema``.

        Raises:
            ConfigUnmarshalError: If pydantic rejects the subtree.
        """
        prefix = f"{key.lower()}{KEY_DELIMITER}"
        subtree: dict[str, object] = {}
        for full in self.all_keys():
            if full.startswith(prefix):
                found, value = self._find(full)
                if found:
                    _assign(subtree, full[len(prefix) :].split(KEY_DELIMITER), value)
        if not subtree:
            value = self.get(key)
            if isinstance(value, Mapping):
                subtree = _lower_keys(cast("Mapping[str, object]", value))
        try:
            return schema.model_validate(subtree)
        except ValidationError as exc:
            raise ConfigUnmarshalError(schema, exc) from exc


__all__ = ["KEY_DELIMITER", "ConfigStore", "decode"]
