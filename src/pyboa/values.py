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

"""Typed flag values.

Every flag owns a value object implementing :class:`FlagValue`. The parser
hands each raw token to ``set()``; help rendering uses ``type_name()`` and
``str()``. Type names and textual forms follow the conventions of Go's pflag
package so that help output looks familiar to users of Cobra-based tools
(``--timeout duration``, ``(default 1m30s)``, ``[a,b]``).
"""

from __future__ import annotations

import base64
import binascii
import csv
import ipaddress
import re
from dataclasses import dataclass
from datetime import timedelta
from decimal import Decimal, InvalidOperation
from typing import TYPE_CHECKING, Final, Generic, Protocol, TypeAlias, TypeVar, runtime_checkable

from pyboa.compat import override

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Sequence

T = TypeVar("T")

IPAddress: TypeAlias = "ipaddress.IPv4Address | ipaddress.IPv6Address"
IPNetwork: TypeAlias = "ipaddress.IPv4Network | ipaddress.IPv6Network"


@runtime_checkable
class FlagValue(Protocol):
    """Interface every flag value implements.

    Caller-defined values passed to ``with_var_flag`` only need these four
    methods.
    """

    def set(self, raw: str, /) -> None:
        """Parse ``raw`` and store it, raising ``ValueError`` when invalid."""
        ...  # pragma: no cover

    def type_name(self) -> str:
        """Return the type name shown in usage text."""
        ...  # pragma: no cover

    def get(self) -> object:
        """Return the current Python value."""
        ...  # pragma: no cover

    def __str__(self) -> str:
        """Return the current value in flag syntax."""
        ...  # pragma: no cover


# --- scalar codecs -------------------------------------------------------

_TRUE_WORDS: Final[frozenset[str]] = frozenset({"1", "t", "T", "TRUE", "true", "True"})
_FALSE_WORDS: Final[frozenset[str]] = frozenset({"0", "f", "F", "FALSE", "false", "False"})


def parse_bool(raw: str) -> bool:
    """Parse the boolean spellings accepted on the command line."""
    if raw in _TRUE_WORDS:
        return True
    if raw in _FALSE_WORDS:
        return False
    msg = f'parsing "{raw}": invalid syntax'
    raise ValueError(msg)


def format_bool(value: bool) -> str:  # noqa: FBT001
    return "true" if value else "false"


def _int_parser(bits: int, *, signed: bool) -> Callable[[str], int]:
    if signed:
        low, high = -(1 << (bits - 1)), (1 << (bits - 1)) - 1
    else:
        low, high = 0, (1 << bits) - 1

    def parse(raw: str) -> int:
        try:
            value = int(raw.strip(), 0)
        except ValueError as exc:
            msg = f'parsing "{raw}": invalid syntax'
            raise ValueError(msg) from exc
        if not low <= value <= high:
            msg = f'parsing "{raw}": value out of range'
            raise ValueError(msg)
        return value

    return parse


_FLOAT32_MAX: Final[float] = 3.4028234663852886e38


def _float_parser(*, single: bool) -> Callable[[str], float]:
    def parse(raw: str) -> float:
        try:
            value = float(raw.strip())
        except ValueError as exc:
            msg = f'parsing "{raw}": invalid syntax'
            raise ValueError(msg) from exc
        if single and abs(value) > _FLOAT32_MAX and value != float("inf") and value != float("-inf"):
            msg = f'parsing "{raw}": value out of range'
            raise ValueError(msg)
        return value

    return parse


def format_float(value: float) -> str:
    """Render floats the shortest way (``3`` rather than ``3.0``)."""
    if value.is_integer() and abs(value) < 1e21:
        return str(int(value))
    return repr(value)


_DURATION_UNITS: Final[dict[str, int]] = {
    "ns": 1,
    "us": 1_000,
    "µs": 1_000,  # U+00B5 micro sign
    "μs": 1_000,  # U+03BC greek mu
    "ms": 1_000_000,
    "s": 1_000_000_000,
    "m": 60 * 1_000_000_000,
    "h": 3600 * 1_000_000_000,
}
_DURATION_PART: Final[re.Pattern[str]] = re.compile(r"(\d*\.?\d*)(ns|us|µs|μs|ms|s|m|h)")


def parse_duration(raw: str) -> timedelta:
    """Parse a duration such as ``"1h30m"``, ``"250ms"`` or ``"-1.5h"``.

    Raises:
        ValueError: If ``raw`` is not a sequence of decimal numbers with units.
    """
    text = raw.strip()
    sign = 1
    if text[:1] in {"+", "-"}:
        sign = -1 if text[0] == "-" else 1
        text = text[1:]
    if text == "0":
        return timedelta(0)
    if not text:
        msg = f'time: invalid duration "{raw}"'
        raise ValueError(msg)
    total = Decimal(0)
    position = 0
    while position < len(text):
        match = _DURATION_PART.match(text, position)
        if match is None or match.group(1) in {"", "."}:
            msg = f'time: invalid duration "{raw}"'
            raise ValueError(msg)
        try:
            total += Decimal(match.group(1)) * _DURATION_UNITS[match.group(2)]
        except InvalidOperation as exc:
            msg = f'time: invalid duration "{raw}"'
            raise ValueError(msg) from exc
        position = match.end()
    return timedelta(microseconds=sign * int(total) / 1_000)


def _trim_fraction(whole: int, fraction: int, digits: int) -> str:
    if not fraction:
        return str(whole)
    return f"{whole}.{fraction:0{digits}d}".rstrip("0")


def format_duration(value: timedelta) -> str:
    """Render a duration the way Go prints ``time.Duration`` (``1h2m3.5s``)."""
    nanos = (value.days * 86_400 + value.seconds) * 1_000_000_000 + value.microseconds * 1_000
    if nanos == 0:
        return "0s"
    sign = "-" if nanos < 0 else ""
    nanos = abs(nanos)
    if nanos < 1_000:
        return f"{sign}{nanos}ns"
    if nanos < 1_000_000:
        return f"{sign}{_trim_fraction(nanos // 1_000, nanos % 1_000, 3)}µs"
    if nanos < 1_000_000_000:
        return f"{sign}{_trim_fraction(nanos // 1_000_000, nanos % 1_000_000, 6)}ms"
    total_seconds, fraction = divmod(nanos, 1_000_000_000)
    hours, remainder = divmod(total_seconds, 3600)
    minutes, seconds = divmod(remainder, 60)
    text = f"{_trim_fraction(seconds, fraction, 9)}s"
    if hours or minutes:
        text = f"{minutes}m{text}"
    if hours:
        text = f"{hours}h{text}"
    return f"{sign}{text}"


def parse_ip(raw: str) -> IPAddress:
    try:
        return ipaddress.ip_address(raw.strip())
    except ValueError as exc:
        msg = f"failed to parse IP: {raw!r}"
        raise ValueError(msg) from exc


def parse_ip_mask(raw: str) -> IPAddress:
    """Parse a mask written dotted (``255.255.255.0``) or as hex (``ffffff00``)."""
    text = raw.strip()
    if re.fullmatch(r"[0-9a-fA-F]{8}", text):
        return ipaddress.IPv4Address(int(text, 16))
    mask = parse_ip(text)
    bits = int(mask)
    width = mask.max_prefixlen
    inverted = ~bits & ((1 << width) - 1)
    if inverted & (inverted + 1):
        msg = f"failed to parse IP mask: {raw!r}"
        raise ValueError(msg)
    return mask


def parse_ip_net(raw: str) -> IPNetwork:
    try:
        return ipaddress.ip_network(raw.strip(), strict=False)
    except ValueError as exc:
        msg = f"failed to parse IPNet: {raw!r}"
        raise ValueError(msg) from exc


def parse_bytes_hex(raw: str) -> bytes:
    try:
        return bytes.fromhex(raw.strip())
    except ValueError as exc:
        msg = f"invalid hex string: {raw!r}"
        raise ValueError(msg) from exc


def parse_bytes_base64(raw: str) -> bytes:
    try:
        return base64.b64decode(raw.strip(), validate=True)
    except binascii.Error as exc:
        msg = f"invalid base64 string: {raw!r}"
        raise ValueError(msg) from exc


def _split_csv(raw: str) -> list[str]:
    if raw == "":
        return []
    return next(csv.reader([raw]))


def _split_plain(raw: str) -> list[str]:
    if raw == "":
        return []
    return raw.split(",")


@dataclass(frozen=True, slots=True)
class Codec(Generic[T]):
    """Parse/format pair for one element type."""

    type_name: str
    parse: Callable[[str], T]
    format: Callable[[T], str]


BOOL: Final[Codec[bool]] = Codec("bool", parse_bool, format_bool)
STRING: Final[Codec[str]] = Codec("string", str, str)
FLOAT32: Final[Codec[float]] = Codec("float32", _float_parser(single=True), format_float)
FLOAT64: Final[Codec[float]] = Codec("float64", _float_parser(single=False), format_float)
INT: Final[Codec[int]] = Codec("int", _int_parser(64, signed=True), str)
INT8: Final[Codec[int]] = Codec("int8", _int_parser(8, signed=True), str)
INT16: Final[Codec[int]] = Codec("int16", _int_parser(16, signed=True), str)
INT32: Final[Codec[int]] = Codec("int32", _int_parser(32, signed=True), str)
INT64: Final[Codec[int]] = Codec("int64", _int_parser(64, signed=True), str)
UINT: Final[Codec[int]] = Codec("uint", _int_parser(64, signed=False), str)
UINT8: Final[Codec[int]] = Codec("uint8", _int_parser(8, signed=False), str)
UINT16: Final[Codec[int]] = Codec("uint16", _int_parser(16, signed=False), str)
UINT32: Final[Codec[int]] = Codec("uint32", _int_parser(32, signed=False), str)
UINT64: Final[Codec[int]] = Codec("uint64", _int_parser(64, signed=False), str)
DURATION: Final[Codec[timedelta]] = Codec("duration", parse_duration, format_duration)
IP: Final[Codec[IPAddress]] = Codec("ip", parse_ip, str)
IP_MASK: Final[Codec[IPAddress]] = Codec("ipMask", parse_ip_mask, str)
IP_NET: Final[Codec[IPNetwork]] = Codec("ipNet", parse_ip_net, str)
BYTES_HEX: Final[Codec[bytes]] = Codec("bytesHex", parse_bytes_hex, lambda value: value.hex().upper())
BYTES_BASE64: Final[Codec[bytes]] = Codec(
    "bytesBase64",
    parse_bytes_base64,
    lambda value: base64.b64encode(value).decode("ascii"),
)


# --- value containers ----------------------------------------------------


class ScalarValue(Generic[T]):
    """Single value replaced on every ``set``."""

    def __init__(self, codec: Codec[T], default: T) -> None:
        self._codec = codec
        self._value = default

    def set(self, raw: str, /) -> None:
        self._value = self._codec.parse(raw)

    def type_name(self) -> str:
        return self._codec.type_name

    def get(self) -> T:
        return self._value

    @override
    def __str__(self) -> str:
        return "" if self._value is None else self._codec.format(self._value)


class CountValue:
    """Counter incremented by each bare occurrence (``-vvv`` gives 3)."""

    def __init__(self, default: int = 0) -> None:
        self._value = default

    def set(self, raw: str, /) -> None:
        if raw == "+1":
            self._value += 1
            return
        self._value = INT.parse(raw)

    def type_name(self) -> str:
        return "count"

    def get(self) -> int:
        return self._value

    @override
    def __str__(self) -> str:
        return str(self._value)


class SliceValue(Generic[T]):
    """List value; the first ``set`` replaces the default, later ones append.

    Slice flags split each token on commas, array flags keep tokens whole.
    """

    def __init__(
        self,
        codec: Codec[T],
        default: Iterable[T] = (),
        *,
        type_name: str,
        split: Callable[[str], list[str]] | None = _split_plain,
    ) -> None:
        self._codec = codec
        self._value = list(default)
        self._type_name = type_name
        self._split = split
        self._changed = False

    def set(self, raw: str, /) -> None:
        tokens = [raw] if self._split is None else self._split(raw)
        parsed = [self._codec.parse(token) for token in tokens]
        if self._changed:
            self._value.extend(parsed)
        else:
            self._value = parsed
            self._changed = True

    def type_name(self) -> str:
        return self._type_name

    def get(self) -> list[T]:
        return list(self._value)

    @override
    def __str__(self) -> str:
        return "[" + ",".join(self._codec.format(item) for item in self._value) + "]"


class MapValue(Generic[T]):
    """``key=value`` mapping; the first ``set`` replaces the default, later ones merge."""

    def __init__(
        self,
        codec: Codec[T],
        default: dict[str, T] | None = None,
        *,
        type_name: str,
        split: Callable[[str], list[str]] = _split_plain,
    ) -> None:
        self._codec = codec
        self._value: dict[str, T] = dict(default or {})
        self._type_name = type_name
        self._split = split
        self._changed = False

    def set(self, raw: str, /) -> None:
        parsed: dict[str, T] = {}
        for pair in self._split(raw):
            key, sep, value = pair.partition("=")
            if not sep:
                msg = f"{pair} must be formatted as key=value"
                raise ValueError(msg)
            parsed[key] = self._codec.parse(value)
        if self._changed:
            self._value.update(parsed)
        else:
            self._value = parsed
            self._changed = True

    def type_name(self) -> str:
        return self._type_name

    def get(self) -> dict[str, T]:
        return dict(self._value)

    @override
    def __str__(self) -> str:
        return "[" + ",".join(f"{key}={self._codec.format(value)}" for key, value in self._value.items()) + "]"


def slice_value(codec: Codec[T], default: Sequence[T] | None, type_name: str) -> SliceValue[T]:
    """Build a comma-splitting slice value (strings are split CSV-style)."""
    split = _split_csv if codec is STRING else _split_plain
    return SliceValue(codec, default or (), type_name=type_name, split=split)


def array_value(default: Sequence[str] | None) -> SliceValue[str]:
    """Build a string array value that never splits tokens."""
    return SliceValue(STRING, default or (), type_name="stringArray", split=None)


def map_value(codec: Codec[T], default: dict[str, T] | None, type_name: str) -> MapValue[T]:
    split = _split_csv if codec is STRING else _split_plain
    return MapValue(codec, default, type_name=type_name, split=split)


__all__ = [
    "BOOL",
    "BYTES_BASE64",
    "BYTES_HEX",
    "DURATION",
    "FLOAT32",
    "FLOAT64",
    "INT",
    "INT8",
    "INT16",
    "INT32",
    "INT64",
    "IP",
    "IP_MASK",
    "IP_NET",
    "STRING",
    "UINT",
    "UINT8",
    "UINT16",
    "UINT32",
    "UINT64",
    "Codec",
    "CountValue",
    "FlagValue",
    "IPAddress",
    "IPNetwork",
    "MapValue",
    "ScalarValue",
    "SliceValue",
    "array_value",
    "format_bool",
    "format_duration",
    "format_float",
    "map_value",
    "parse_bool",
    "parse_duration",
    "slice_value",
]
