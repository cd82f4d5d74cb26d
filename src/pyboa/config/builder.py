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

"""Fluent builder for :class:`~pyboa.config.store.ConfigStore`.

The ``read_*`` steps treat a failed read as fatal: the error is logged at
critical level on the ``pyboa.config`` logger and the process exits with
status 1. Call the same methods on the store returned by :meth:`build` to
handle :class:`~pyboa.config.errors.ConfigError` yourself.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import IO, TYPE_CHECKING, NoReturn

from pyboa._internal.logging_utils import structured_extra
from pyboa.compat import Self
from pyboa.core.model_types import LogComponent

from .errors import ConfigError
from .store import ConfigStore

if TYPE_CHECKING:
    from collections.abc import Mapping

logger: logging.Logger = logging.getLogger("pyboa.config")

DEFAULT_ENV_KEY_REPLACER: dict[str, str] = {".": "_"}


def _fatal(message: str, exc: ConfigError) -> NoReturn:
    logger.critical(
        "%s: %s",
        message,
        exc,
        extra=structured_extra(component=LogComponent.CONFIG, exit_code=1),
    )
    raise SystemExit(1) from exc


def xdg_config_home() -> Path:
    """Return ``$XDG_CONFIG_HOME``, falling back to ``~/.config``."""
    configured = os.environ.get("XDG_CONFIG_HOME")
    if configured:
        return Path(configured)
    return Path.home() / ".config"


class ConfigBuilder:
    """Builder that configures a :class:`ConfigStore` step by step."""

    def __init__(self, store: ConfigStore | None = None) -> None:
        self._store = store if store is not None else ConfigStore()

    def with_config_files(self, *files: str | os.PathLike[str]) -> Self:
        """Use the first of ``files`` that exists; earlier files take precedence."""
        for candidate in files:
            if Path(candidate).exists():
                self._store.set_config_file(candidate)
                break
        return self

    def with_config_paths(self, *paths: str | os.PathLike[str]) -> Self:
        """Add each existing directory in ``paths`` to the search path."""
        for candidate in paths:
            if Path(candidate).exists():
                self._store.add_config_path(candidate)
        return self

    def with_config_name(self, name: str) -> Self:
        self._store.set_config_name(name)
        return self

    def with_config_type(self, config_type: str) -> Self:
        """Set the config format, e.g. ``"json"``."""
        self._store.set_config_type(config_type)
        return self

    def with_env_prefix(self, prefix: str) -> Self:
        self._store.set_env_prefix(prefix)
        return self

    def with_bound_env(self, key: str, *env_names: str) -> Self:
        """Bind ``key`` to ``env_names`` (or to its derived variable name)."""
        self._store.bind_env(key, *env_names)
        return self

    def with_automatic_env(self) -> Self:
        self._store.automatic_env()
        return self

    def with_env_key_replacer(self, replacements: Mapping[str, str]) -> Self:
        self._store.set_env_key_replacer(replacements)
        return self

    def with_default_env_key_replacer(self) -> Self:
        """Map ``command.name`` to ``COMMAND_NAME`` when reading the environment."""
        return self.with_env_key_replacer(DEFAULT_ENV_KEY_REPLACER)

    def with_default(self, key: str, value: object) -> Self:
        self._store.set_default(key, value)
        return self

    def read_config(self, stream: IO[str] | IO[bytes]) -> Self:
        """Read config from ``stream``; exit with status 1 on failure."""
        try:
            self._store.read_config(stream)
        except ConfigError as exc:
            _fatal("Error reading config", exc)
        return self

    def read_in_config(self) -> Self:
        """Discover and read the config file; exit with status 1 on failure."""
        try:
            self._store.read_in_config()
        except ConfigError as exc:
            _fatal("Error reading in config", exc)
        return self

    def build(self) -> ConfigStore:
        return self._store

    def read_in_config_and_build(self) -> ConfigStore:
        return self.read_in_config().build()


def new_config() -> ConfigBuilder:
    """Start a builder around an empty store."""
    return ConfigBuilder()


def new_default_config(name: str) -> ConfigBuilder:
    """Start a builder that looks for ``name.<ext>`` in the usual places.

    The current directory and ``$XDG_CONFIG_HOME/<name>`` are searched in that
    order. A file is read right away when one is found; a missing or unreadable
    file is not an error at this point.
    """
    store = ConfigStore()
    store.add_config_path(Path.cwd())
    store.add_config_path(xdg_config_home() / name)
    store.set_config_name(name)
    try:
        store.read_in_config()
    except ConfigError as exc:
        logger.debug(
            "No default config loaded for %s: %s",
            name,
            exc,
            extra=structured_extra(component=LogComponent.CONFIG),
        )
    return ConfigBuilder(store)


def to_config_builder(store: ConfigStore) -> ConfigBuilder:
    """Return a builder that keeps modifying ``store``."""
    return ConfigBuilder(store)


__all__ = [
    "DEFAULT_ENV_KEY_REPLACER",
    "ConfigBuilder",
    "new_config",
    "new_default_config",
    "to_config_builder",
    "xdg_config_home",
]
