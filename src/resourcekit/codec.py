"""Model <-> JSON:API document conversion.

``serialize`` writes one model as a resource document using the options
from ``serializer_options``. ``deserialize`` reads a single-resource or
collection document back into model instances, resolving relationship
linkage against ``included`` resources.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from pydantic import ValidationError as PydanticValidationError

from resourcekit.casing import KeyCase, convert_key, to_dash
from resourcekit.errors import ConfigurationError, DocumentError
from resourcekit.fields import relationship_for
from resourcekit.schemas.jsonapi import (
    JSONAPIDocument,
    JSONAPIResource,
    JSONAPIResourceIdentifier,
)
from resourcekit.serializer import RelationshipOptions, serializer_options

if TYPE_CHECKING:
    from resourcekit.model import Model

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound="Model")

ResourceKey = tuple[str, "str | None"]


class Collection(list, Generic[ModelT]):
    """A list of models carrying the document's ``links`` and ``meta``."""

    def __init__(
        self,
        items: Iterable[ModelT] = (),
        links: dict[str, Any] | None = None,
        meta: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(items)
        self.links = links
        self.meta = meta


# ---------------------------------------------------------------------------
# Serialization
# ---------------------------------------------------------------------------


def _dump_attributes(instance: Model, names: list[str]) -> dict[str, Any]:
    if not names:
        return {}
    dumped = instance.model_dump(mode="json", include=set(names))
    return {to_dash(name): dumped.get(name) for name in names}


def _resource_type(instance: Model, fallback: str) -> str:
    return type(instance).resource_type or fallback


def _link(
    related: Model,
    fallback_type: str,
    options: RelationshipOptions,
    included: list[dict[str, Any]],
    seen: set[tuple[str, str]],
) -> dict[str, Any]:
    """Resource linkage for one related model; records it in ``included`` once."""
    related_type = _resource_type(related, fallback_type)
    key = (related_type, related.id)
    if key not in seen:
        seen.add(key)
        included.append(
            {
                "type": related_type,
                "id": related.id,
                "attributes": _dump_attributes(related, options.attributes),
            }
        )
    return {"type": related_type, options.ref: getattr(related, options.ref)}


def serialize(instance: Model) -> dict[str, Any]:
    """Build a JSON:API document for ``instance``.

    Raises:
        ConfigurationError: If the model type has no ``resource_type``.
    """
    model_cls = type(instance)
    if not model_cls.resource_type:
        msg = (
            "Resource object missing JSON:API type. "
            f"Set resource_type on {model_cls.__name__}."
        )
        raise ConfigurationError(msg)

    options = serializer_options(model_cls)
    attribute_names = [
        name for name in options.attributes if name not in options.relationships
    ]

    resource: dict[str, Any] = {"type": model_cls.resource_type}
    if instance.persisted:
        resource["id"] = instance.id
    resource["attributes"] = _dump_attributes(instance, attribute_names)

    relationships: dict[str, Any] = {}
    included: list[dict[str, Any]] = []
    seen: set[tuple[str, str]] = set()

    for name, rel_options in options.relationships.items():
        related_cls = relationship_for(model_cls, name).model
        fallback_type = related_cls.resource_type or to_dash(name)

        value = getattr(instance, name)
        if value is None:
            linkage: Any = None
        elif isinstance(value, list):
            linkage = [
                _link(item, fallback_type, rel_options, included, seen)
                for item in value
            ]
        else:
            linkage = _link(value, fallback_type, rel_options, included, seen)
        relationships[to_dash(name)] = {"data": linkage}

    if relationships:
        resource["relationships"] = relationships

    document: dict[str, Any] = {"data": resource}
    if included:
        document["included"] = included
    return document


# ---------------------------------------------------------------------------
# Deserialization
# ---------------------------------------------------------------------------


class _RecordBuilder:
    """Flattens resource objects into constructor input for models."""

    def __init__(self, included: list[JSONAPIResource], case: KeyCase) -> None:
        self.case = case
        self.included: dict[ResourceKey, JSONAPIResource] = {
            (resource.type, resource.id): resource
            for resource in included
            if resource.id is not None
        }
        self._lookups: dict[type, dict[str, str]] = {}

    def _field_name(self, model_cls: type[Model] | None, key: str) -> str:
        """Field of ``model_cls`` a wire key belongs to; the converted key if none."""
        converted = convert_key(key, self.case)
        if model_cls is None:
            return converted
        lookup = self._lookups.get(model_cls)
        if lookup is None:
            lookup = {}
            for name, field in model_cls.model_fields.items():
                lookup[convert_key(name, self.case)] = name
                if field.alias:
                    lookup[field.alias] = name
                lookup[name] = name
            self._lookups[model_cls] = lookup
        return lookup.get(converted, converted)

    def build(
        self,
        resource: JSONAPIResource,
        model_cls: type[Model] | None,
        path: tuple[ResourceKey, ...] = (),
    ) -> dict[str, Any]:
        record: dict[str, Any] = {}
        if resource.id is not None:
            record["id"] = resource.id
        for key, value in (resource.attributes or {}).items():
            record[self._field_name(model_cls, key)] = value
        if resource.links:
            record["links"] = resource.links
        if resource.meta:
            record["meta"] = resource.meta

        path = (*path, (resource.type, resource.id))
        for key, relationship in (resource.relationships or {}).items():
            if "data" not in relationship.model_fields_set:
                continue
            name = self._field_name(model_cls, key)
            related = relationship_for(model_cls, name) if model_cls else None
            related_cls = related.model if related else None
            linkage = relationship.data
            if linkage is None:
                value: Any = None
            elif isinstance(linkage, list):
                value = [
                    self._resolve(identifier, related_cls, path) for identifier in linkage
                ]
            else:
                value = self._resolve(linkage, related_cls, path)
            record[name] = value
        return record

    def _resolve(
        self,
        identifier: JSONAPIResourceIdentifier,
        model_cls: type[Model] | None,
        path: tuple[ResourceKey, ...],
    ) -> dict[str, Any]:
        key = (identifier.type, identifier.id)
        resource = self.included.get(key)
        if resource is None or key in path:
            return {"id": identifier.id}
        return self.build(resource, model_cls, path)


def _instantiate(model_cls: type[ModelT], record: dict[str, Any]) -> ModelT:
    try:
        return model_cls(**record)
    except PydanticValidationError as exc:
        msg = f"Resource cannot be read as {model_cls.__name__}: {exc}"
        raise DocumentError(msg) from exc


def deserialize(
    model_cls: type[ModelT], document: Any
) -> ModelT | Collection[ModelT] | None:
    """Read a JSON:API document into ``model_cls`` instance(s).

    Returns ``None`` for an absent document or absent/null primary data.

    Raises:
        DocumentError: If the document structure is not valid JSON:API or a
            resource does not fit ``model_cls``.
    """
    if document is None:
        return None
    if not isinstance(document, dict):
        msg = f"Expected a JSON:API document object, got {type(document).__name__}"
        raise DocumentError(msg)

    try:
        parsed = JSONAPIDocument.model_validate(document)
    except PydanticValidationError as exc:
        raise DocumentError(f"Malformed JSON:API document: {exc}") from exc

    if parsed.data is None:
        return None

    builder = _RecordBuilder(
        parsed.included or [], model_cls.deserializer_options.key_for_attribute
    )

    if isinstance(parsed.data, list):
        collection: Collection[ModelT] = Collection(
            _instantiate(model_cls, builder.build(resource, model_cls))
            for resource in parsed.data
        )
        if parsed.links:
            collection.links = parsed.links
        if parsed.meta:
            collection.meta = parsed.meta
        logger.debug(
            "Deserialized %d %s resources", len(collection), model_cls.__name__
        )
        return collection

    return _instantiate(model_cls, builder.build(parsed.data, model_cls))
