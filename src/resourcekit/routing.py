"""URL template substitution and query string building."""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any
from urllib.parse import quote

from resourcekit.errors import RoutingError

_PLACEHOLDER_PATTERN = re.compile(r":(\w+)")

# Characters encodeURIComponent leaves alone besides alphanumerics and "-_."
_QUERY_SAFE = "!~*'()"


def url_params(template: str) -> list[str]:
    """Placeholder names in ``template``, in order of appearance."""
    return _PLACEHOLDER_PATTERN.findall(template)


def construct_url(template: str, route_args: Mapping[str, Any] | None = None) -> str:
    """Substitute ``:name`` placeholders in ``template`` with ``route_args``.

    Raises:
        RoutingError: If any placeholder has no (non-``None``) value.
    """
    route_args = route_args or {}
    missing = [
        name for name in url_params(template) if route_args.get(name) is None
    ]
    if missing:
        msg = "Missing url params: " + ", ".join(missing)
        raise RoutingError(msg, missing)

    return _PLACEHOLDER_PATTERN.sub(
        lambda match: quote(str(route_args[match.group(1)]), safe=""), template
    )


def _encode(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        value = "true" if value else "false"
    return quote(str(value), safe=_QUERY_SAFE)


def to_query_string(params: Mapping[str, Any] | list[Any] | None, prefix: str = "") -> str:
    """Encode ``params`` as a query string.

    Lists become repeated ``key[]=value`` pairs, mappings become
    ``key[nested]=value`` recursively. Key order follows insertion order.

        >>> to_query_string({"foo": "bar", "arr": [1, 2]})
        'foo=bar&arr[]=1&arr[]=2'
    """
    if not params:
        return ""

    if isinstance(params, Mapping):
        items = [
            (f"{prefix}[{key}]" if prefix else str(key), value)
            for key, value in params.items()
        ]
    else:
        items = [(f"{prefix}[]", value) for value in params]

    parts: list[str] = []
    for key, value in items:
        if isinstance(value, (Mapping, list, tuple)):
            nested = to_query_string(
                list(value) if isinstance(value, tuple) else value, key
            )
            if nested:
                parts.append(nested)
        else:
            parts.append(f"{key}={_encode(value)}")
    return "&".join(parts)
