"""Key case conversions between wire attribute names and model field names."""

from __future__ import annotations

from collections.abc import Callable
from typing import Literal

from pydantic.alias_generators import to_camel, to_pascal, to_snake

KeyCase = Literal[
    "camelCase",
    "CamelCase",
    "snake_case",
    "underscore_case",
    "dash-case",
    "kebab-case",
    "lisp-case",
    "spinal-case",
]


def to_dash(name: str) -> str:
    """``first_name`` / ``firstName`` / ``first-name`` -> ``first-name``."""
    return to_snake(name.replace("-", "_")).replace("_", "-")


def _from_wire(converter: Callable[[str], str]) -> Callable[[str], str]:
    def convert(name: str) -> str:
        return converter(name.replace("-", "_"))

    return convert


_CONVERTERS: dict[str, Callable[[str], str]] = {
    "camelCase": _from_wire(to_camel),
    "CamelCase": _from_wire(to_pascal),
    "snake_case": _from_wire(to_snake),
    "underscore_case": _from_wire(to_snake),
    "dash-case": to_dash,
    "kebab-case": to_dash,
    "lisp-case": to_dash,
    "spinal-case": to_dash,
}


def convert_key(name: str, case: KeyCase) -> str:
    """Convert a wire key to ``case``."""
    return _CONVERTERS[case](name)
