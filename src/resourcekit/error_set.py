"""Normalized JSON:API error collection owned by a model instance.

Raw error objects are projected onto the recognized JSON:API members
(unknown members and empty values are dropped) and can be grouped by the
field they refer to via ``extract()``.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from typing import Any

from resourcekit.schemas.jsonapi import JSONAPIError

logger = logging.getLogger(__name__)

BASE_KEY = "base"
ROOT_POINTER = "/data"
ATTRIBUTES_POINTER_PREFIX = "/data/attributes/"

_SCALAR_MEMBERS = ("id", "status", "code", "title", "detail")


def _is_scalar(value: Any) -> bool:
    return isinstance(value, (str, int)) and not isinstance(value, bool)


def _project(raw: Any) -> JSONAPIError:
    """Keep only the recognized, non-empty members of a raw error object.

    Members of the wrong shape are dropped like unknown ones, so a
    malformed server error still yields one record.
    """
    if isinstance(raw, JSONAPIError):
        return raw.model_copy(deep=True)
    if not isinstance(raw, dict):
        return JSONAPIError()

    projected: dict[str, Any] = {
        key: raw[key]
        for key in _SCALAR_MEMBERS
        if _is_scalar(raw.get(key)) and raw[key]
    }
    if isinstance(raw.get("meta"), dict) and raw["meta"]:
        projected["meta"] = raw["meta"]

    links = raw.get("links")
    if isinstance(links, dict):
        about = links.get("about")
        if isinstance(about, (str, dict)) and about:
            projected["links"] = {"about": about}

    source = raw.get("source")
    if isinstance(source, dict):
        projected["source"] = {
            key: source[key]
            for key in ("pointer", "parameter")
            if isinstance(source.get(key), str) and source[key]
        }

    return JSONAPIError.model_validate(projected)


def parse_pointer(pointer: str) -> str | None:
    """Map a JSON pointer to an error key, or ``None`` if unclassifiable."""
    if pointer == ROOT_POINTER:
        return BASE_KEY
    if pointer.startswith(ATTRIBUTES_POINTER_PREFIX):
        return pointer[len(ATTRIBUTES_POINTER_PREFIX):] or None
    return None


def field_key(error: JSONAPIError) -> str | None:
    """Return the key an error is grouped under in ``ErrorSet.extract()``."""
    if error.source is None:
        return None
    if error.source.parameter:
        return error.source.parameter
    if error.source.pointer:
        return parse_pointer(error.source.pointer)
    return None


class ErrorSet:
    """Ordered list of normalized JSON:API errors.

    Args:
        document: A JSON:API error document (``{"errors": [...]}``). Anything
            else, including ``None``, produces an empty set.
    """

    def __init__(self, document: dict[str, Any] | None = None) -> None:
        raw_errors = document.get("errors") if isinstance(document, dict) else None
        if not isinstance(raw_errors, list):
            raw_errors = []
        self.errors: list[JSONAPIError] = [_project(raw) for raw in raw_errors]

    def add(self, error: dict[str, Any] | JSONAPIError) -> None:
        """Append an error unless one with the same field and code is stored.

        Errors without a ``code`` are always appended.
        """
        record = _project(error)
        key = field_key(record)
        if key is not None and record.code is not None:
            for existing in self.errors:
                if field_key(existing) == key and existing.code == record.code:
                    logger.debug("Skipping duplicate error %s/%s", key, record.code)
                    return
        self.errors.append(record)

    def clear(self) -> None:
        self.errors = []

    def count(self) -> int:
        return len(self.errors)

    def extract(self) -> dict[str, list[JSONAPIError]]:
        """Group errors by parameter, ``"base"``, or attribute name.

        Errors whose source cannot be tied to a field are left out.
        """
        grouped: dict[str, list[JSONAPIError]] = {}
        for error in self.errors:
            key = field_key(error)
            if key is not None:
                grouped.setdefault(key, []).append(error)
        return grouped

    def full_messages(self) -> list[str]:
        """Human-readable ``"<field> <message>"`` lines for grouped errors."""
        messages: list[str] = []
        for key, errors in self.extract().items():
            for error in errors:
                text = error.detail or error.title or error.code or ""
                messages.append(f"{key} {text}".strip())
        return messages

    def to_document(self) -> dict[str, Any]:
        return {"errors": [e.model_dump(exclude_none=True) for e in self.errors]}

    def __len__(self) -> int:
        return len(self.errors)

    def __iter__(self) -> Iterator[JSONAPIError]:
        return iter(self.errors)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ErrorSet):
            return NotImplemented
        return self.errors == other.errors

    def __repr__(self) -> str:
        return f"ErrorSet({self.errors!r})"
