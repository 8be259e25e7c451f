"""Attribute / relationship classification for model fields.

Relationships are declared on the model type with ``typing.Annotated``
markers, so classification is a lookup in the type's declared schema and
never touches instance values::

    class Person(Model):
        resource_type = "people"

        first_name: str | None = None
        addresses: Annotated[list[Address], has_many(Address)] = []
        drivers_license: Annotated[DriversLicense | None, has_one(DriversLicense)] = None

Every declared field other than ``id`` is exactly one of attribute or
relationship.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Literal

if TYPE_CHECKING:
    from resourcekit.model import Model

ID_FIELD = "id"

RelationshipKind = Literal["has_one", "belongs_to", "has_many"]


@dataclass(frozen=True)
class Relationship:
    """Type-level marker describing a relationship field.

    ``target`` is either the related model class or a zero-argument callable
    returning it, for references that cannot be resolved at class creation
    time (e.g. a model relating to itself).
    """

    target: type[Model] | Callable[[], type[Model]]
    kind: RelationshipKind

    @property
    def model(self) -> type[Model]:
        if isinstance(self.target, type):
            return self.target
        return self.target()

    @property
    def many(self) -> bool:
        return self.kind == "has_many"


def has_many(target: type[Model] | Callable[[], type[Model]]) -> Relationship:
    return Relationship(target, "has_many")


def has_one(target: type[Model] | Callable[[], type[Model]]) -> Relationship:
    return Relationship(target, "has_one")


def belongs_to(target: type[Model] | Callable[[], type[Model]]) -> Relationship:
    return Relationship(target, "belongs_to")


def relationship_for(model_cls: type[Model], name: str) -> Relationship | None:
    """Return the relationship marker declared on ``name``, if any."""
    field = model_cls.model_fields.get(name)
    if field is None:
        return None
    for item in field.metadata:
        if isinstance(item, Relationship):
            return item
    return None


def is_relationship(instance: Any, name: str) -> bool:
    return name in type(instance).model_fields and (
        relationship_for(type(instance), name) is not None
    )


def is_attribute(instance: Any, name: str) -> bool:
    return (
        name in type(instance).model_fields
        and name != ID_FIELD
        and relationship_for(type(instance), name) is None
    )


def attribute_field_names(model_cls: type[Model]) -> list[str]:
    """Declared attribute fields, in declaration order."""
    return [
        name
        for name in model_cls.model_fields
        if name != ID_FIELD and relationship_for(model_cls, name) is None
    ]


def relationship_field_names(model_cls: type[Model]) -> list[str]:
    """Declared relationship fields, in declaration order."""
    return [
        name
        for name in model_cls.model_fields
        if relationship_for(model_cls, name) is not None
    ]
