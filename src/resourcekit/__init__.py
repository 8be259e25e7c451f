"""resourcekit: typed models over a JSON:API HTTP backend."""

from resourcekit.codec import Collection, deserialize, serialize
from resourcekit.config import AdapterSettings, get_settings
from resourcekit.error_set import ErrorSet
from resourcekit.errors import (
    ConfigurationError,
    DocumentError,
    ParseError,
    ResourceKitError,
    RoutingError,
    TransportError,
    ValidationError,
)
from resourcekit.fields import (
    Relationship,
    attribute_field_names,
    belongs_to,
    has_many,
    has_one,
    is_attribute,
    is_relationship,
    relationship_field_names,
)
from resourcekit.model import Model
from resourcekit.serializer import (
    DeserializerOptions,
    RelationshipOptions,
    SerializerOptions,
    serializer_options,
)
from resourcekit.transport import HttpAdapter, ResponsePayload, TransportAdapter

__all__ = [
    "AdapterSettings",
    "Collection",
    "ConfigurationError",
    "DeserializerOptions",
    "DocumentError",
    "ErrorSet",
    "HttpAdapter",
    "Model",
    "ParseError",
    "Relationship",
    "RelationshipOptions",
    "ResourceKitError",
    "ResponsePayload",
    "RoutingError",
    "SerializerOptions",
    "TransportAdapter",
    "TransportError",
    "ValidationError",
    "attribute_field_names",
    "belongs_to",
    "deserialize",
    "get_settings",
    "has_many",
    "has_one",
    "is_attribute",
    "is_relationship",
    "relationship_field_names",
    "serialize",
    "serializer_options",
]
