"""Typed parameter maps built from JSON scene descriptions."""

from __future__ import annotations

import json
import logging
from typing import Any, Iterator, Mapping

import numpy as np

from lumenrdr.vecmath import to_string as _format_numeric

logger = logging.getLogger(__name__)

_MISSING = object()
_VECTOR_SIZES = (2, 3, 16)


class RenderError(RuntimeError):
    """Raised when the renderer meets an invalid configuration or state."""


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _convert_array(items: list) -> Any:
    if all(_is_number(x) for x in items):
        if len(items) not in _VECTOR_SIZES:
            raise RenderError("json array size not matched")
        if len(items) == 16:
            return np.asarray(items, dtype=np.float64).reshape(4, 4)
        if any(isinstance(x, float) for x in items):
            return np.asarray(items, dtype=np.float64)
        return np.asarray(items, dtype=np.int64)
    if all(isinstance(x, Mapping) for x in items):
        return [Properties.from_json(x) for x in items]
    raise RenderError("JSON array type not supported")


def _convert(value: Any) -> Any:
    if isinstance(value, Properties):
        return value
    if isinstance(value, Mapping):
        return Properties.from_json(value)
    if isinstance(value, (bool, int, float, str)):
        return value
    if isinstance(value, np.ndarray):
        return value.copy()
    if isinstance(value, (list, tuple)):
        return _convert_array(list(value))
    raise RenderError("JSON type not matched")


def _values_equal(a: Any, b: Any) -> bool:
    if isinstance(a, np.ndarray) or isinstance(b, np.ndarray):
        return (
            isinstance(a, np.ndarray)
            and isinstance(b, np.ndarray)
            and a.dtype.kind == b.dtype.kind
            and a.shape == b.shape
            and bool(np.array_equal(a, b))
        )
    if type(a) is not type(b):
        return False
    if isinstance(a, list):
        return len(a) == len(b) and all(x == y for x, y in zip(a, b))
    return a == b


def _format_float(value: float) -> str:
    text = str(np.float32(value))
    return text[:-2] if text.endswith(".0") else text


def _format_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return _format_float(value)
    return _format_numeric(value)


class Properties:
    """An ordered-by-name map of configuration values.

    Values are bools, ints, floats, strings, numpy vectors (2 or 3
    components, int or float), 4x4 float matrices, nested ``Properties``
    and lists of ``Properties``.
    """

    def __init__(self, values: Mapping[str, Any] | None = None) -> None:
        self._map: dict[str, Any] = {}
        for name, value in (values or {}).items():
            self._map[name] = _convert(value)

    @classmethod
    def from_json(cls, data: Any) -> "Properties":
        """Build from a JSON object, given as a mapping or as JSON text."""
        if isinstance(data, (str, bytes, bytearray)):
            data = json.loads(data)
        if not isinstance(data, Mapping):
            raise RenderError("JSON type not matched")
        result = cls()
        for name, value in data.items():
            result._map[name] = _convert(value)
        return result

    def has(self, name: str) -> bool:
        """Whether a property with this name exists."""
        return name in self._map

    def _lookup(self, name: str, default: Any) -> Any:
        if name in self._map:
            return self._map[name]
        if default is _MISSING:
            raise RenderError(f"Cannot find property with the name [ {name} ]")
        logger.warning("Property [ %s ] not found, use the default value", name)
        return default

    def get(self, name: str, default: Any = _MISSING) -> Any:
        """Value stored under ``name``, or ``default`` when it is absent."""
        return self._lookup(name, default)

    def get_float(self, name: str, default: Any = _MISSING) -> float:
        """Float value; an int is widened."""
        if name not in self._map:
            value = self._lookup(name, default)
            return float(value)
        value = self._map[name]
        if _is_number(value):
            return float(value)
        raise RenderError(
            f"The type of the acquired property [ {name} ] is not matched."
        )

    def get_vec(self, name: str, default: Any = _MISSING) -> np.ndarray:
        """Float vector; an integer vector is widened."""
        if name not in self._map:
            value = self._lookup(name, default)
            return np.asarray(value, dtype=np.float64)
        value = self._map[name]
        if isinstance(value, np.ndarray) and value.ndim == 1:
            return value.astype(np.float64)
        raise RenderError(
            f"The type of the acquired property [ {name} ] is not matched."
        )

    def set(self, name: str, value: Any) -> None:
        """Store ``value`` under ``name``, warning when it replaces a value."""
        if name in self._map:
            logger.warning("Property [ %s ] was specified for multiple times", name)
        self._map[name] = _convert(value)

    def clear(self) -> None:
        """Drop every property."""
        self._map.clear()

    def __getitem__(self, name: str) -> Any:
        return self._map[name]

    def __setitem__(self, name: str, value: Any) -> None:
        self._map[name] = _convert(value)

    def __contains__(self, name: object) -> bool:
        return name in self._map

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self._map))

    def __len__(self) -> int:
        return len(self._map)

    def items(self) -> list[tuple[str, Any]]:
        return [(name, self._map[name]) for name in sorted(self._map)]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Properties):
            return NotImplemented
        if self._map.keys() != other._map.keys():
            return False
        return all(_values_equal(v, other._map[k]) for k, v in self._map.items())

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Properties({self.to_string()})"

    def to_string(self) -> str:
        """Render in an approximately JSON layout."""
        return self._render(0, False, False, False)

    def _render(
        self, offset: int, first_indent: bool, tail_comma: bool, tail_newline: bool
    ) -> str:
        indent = " " * offset
        inner = " " * (offset + 2)
        parts = [f"{indent if first_indent else ''}{{\n"]
        entries = self.items()
        for position, (name, value) in enumerate(entries):
            is_tail = position == len(entries) - 1
            comma = "" if is_tail else ","
            parts.append(f'{inner}"{name}": ')
            if isinstance(value, Properties):
                parts.append(value._render(offset + 2, False, not is_tail, True))
            elif isinstance(value, list):
                parts.append("[\n")
                for index, item in enumerate(value):
                    parts.append(
                        item._render(offset + 4, True, index != len(value) - 1, True)
                    )
                parts.append(f"{inner}]{comma}\n")
            elif isinstance(value, str):
                parts.append(f'"{value}"{comma}\n')
            else:
                parts.append(f"{_format_value(value)}{comma}\n")
        parts.append(
            f"{indent}}}{',' if tail_comma else ''}{chr(10) if tail_newline else ''}"
        )
        return "".join(parts)