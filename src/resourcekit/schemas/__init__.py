"""Pydantic schemas for JSON:API wire documents."""

from resourcekit.schemas.jsonapi import (
    JSONAPIDocument,
    JSONAPIError,
    JSONAPIErrorLinks,
    JSONAPIErrorSource,
    JSONAPIRelationship,
    JSONAPIResource,
    JSONAPIResourceIdentifier,
)

__all__ = [
    "JSONAPIDocument",
    "JSONAPIError",
    "JSONAPIErrorLinks",
    "JSONAPIErrorSource",
    "JSONAPIRelationship",
    "JSONAPIResource",
    "JSONAPIResourceIdentifier",
]
