"""Serializer and deserializer options derived from a model type."""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import BaseModel, Field

from resourcekit.casing import KeyCase
from resourcekit.fields import (
    attribute_field_names,
    relationship_field_names,
    relationship_for,
)

if TYPE_CHECKING:
    from resourcekit.model import Model


class RelationshipOptions(BaseModel):
    """How a related resource is written: referenced by ``ref`` with an
    embedded subset of its attributes."""

    ref: str = "id"
    attributes: list[str] = Field(default_factory=list)


class SerializerOptions(BaseModel):
    """Flat attribute list plus per-relationship options.

    ``attributes`` lists attribute fields followed by relationship fields;
    the payload shape of a relationship comes from ``relationships``.
    """

    attributes: list[str]
    relationships: dict[str, RelationshipOptions] = Field(default_factory=dict)


class DeserializerOptions(BaseModel):
    """Type-level options applied when reading a wire document."""

    key_for_attribute: KeyCase = "camelCase"


def serializer_options(model: Model | type[Model]) -> SerializerOptions:
    """Build the serializer options for a model instance or type.

    Only one level of nesting is expanded: a related model contributes its
    attribute names, never its own relationships.
    """
    model_cls = model if isinstance(model, type) else type(model)
    attributes = attribute_field_names(model_cls)
    relationships = relationship_field_names(model_cls)

    options = SerializerOptions(attributes=[*attributes, *relationships])
    for name in relationships:
        related = relationship_for(model_cls, name).model
        options.relationships[name] = RelationshipOptions(
            ref="id", attributes=attribute_field_names(related)
        )
    return options
