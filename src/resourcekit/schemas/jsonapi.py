"""JSON:API wire models using Pydantic v2.

Describes the subset of the JSON:API document structure the codec reads
and writes: resource identifiers, resource objects, top-level documents,
and error objects.

Reference: https://jsonapi.org/format/
"""

from typing import Any

from pydantic import BaseModel, ConfigDict

# ---------------------------------------------------------------------------
# Resources
# ---------------------------------------------------------------------------


class JSONAPIResourceIdentifier(BaseModel):
    """A ``{type, id}`` linkage object."""

    model_config = ConfigDict(coerce_numbers_to_str=True)

    type: str
    id: str


class JSONAPIRelationship(BaseModel):
    """A relationship object; ``data`` is absent, null, one, or many."""

    data: JSONAPIResourceIdentifier | list[JSONAPIResourceIdentifier] | None = None
    links: dict[str, Any] | None = None
    meta: dict[str, Any] | None = None


class JSONAPIResource(BaseModel):
    """A single JSON:API resource object."""

    model_config = ConfigDict(coerce_numbers_to_str=True)

    type: str
    id: str | None = None
    attributes: dict[str, Any] | None = None
    relationships: dict[str, JSONAPIRelationship] | None = None
    links: dict[str, Any] | None = None
    meta: dict[str, Any] | None = None


class JSONAPIDocument(BaseModel):
    """Top-level document holding one resource, a list, or nothing."""

    data: JSONAPIResource | list[JSONAPIResource] | None = None
    included: list[JSONAPIResource] | None = None
    links: dict[str, Any] | None = None
    meta: dict[str, Any] | None = None


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


class JSONAPIErrorSource(BaseModel):
    """Where an error originated: a JSON pointer or a query parameter."""

    pointer: str | None = None
    parameter: str | None = None


class JSONAPIErrorLinks(BaseModel):
    """Links attached to an error; only ``about`` is recognized."""

    about: str | dict[str, Any] | None = None


class JSONAPIError(BaseModel):
    """A single JSON:API error object. Every member is optional."""

    model_config = ConfigDict(coerce_numbers_to_str=True)

    id: str | None = None
    status: str | None = None
    code: str | None = None
    title: str | None = None
    detail: str | None = None
    meta: dict[str, Any] | None = None
    source: JSONAPIErrorSource | None = None
    links: JSONAPIErrorLinks | None = None
