"""Model base class: declared fields, validation, and the persistence lifecycle.

A model type declares its JSON:API resource type, a URL template, and its
fields. Attributes are plain pydantic fields; relationships are marked with
``has_one`` / ``belongs_to`` / ``has_many`` (see ``resourcekit.fields``)::

    class Comment(Model):
        resource_type = "comments"
        base_url = "/posts/:post_id/comments"

        body: str | None = None
        post_id: str | None = None
        author: Annotated[User | None, belongs_to(User)] = None

        def route_args(self) -> dict[str, Any]:
            return {"post_id": self.post_id}

        def check(self) -> None:
            if not self.body:
                self.errors.add(
                    {"code": "blank", "source": {"pointer": "/data/attributes/body"}}
                )

    Comment.configure_adapter(host="https://api.example.com", namespace="/v1")
    comments = await Comment.fetch_all({"post_id": 101})

Instances built from input with a truthy ``id`` are persisted; anything else
gets a placeholder id and is created on ``save()``.
"""

from __future__ import annotations

import logging
import types
from collections.abc import Callable
from typing import Any, ClassVar
from uuid import uuid4

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ModelWrapValidatorHandler,
    PrivateAttr,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel

from resourcekit import codec
from resourcekit.codec import Collection
from resourcekit.config import get_settings
from resourcekit.error_set import ErrorSet
from resourcekit.errors import (
    ConfigurationError,
    RoutingError,
    TransportError,
    ValidationError,
)
from resourcekit.fields import attribute_field_names
from resourcekit.routing import construct_url, to_query_string
from resourcekit.serializer import DeserializerOptions, SerializerOptions, serializer_options
from resourcekit.transport import HttpAdapter, ResponsePayload, TransportAdapter

logger = logging.getLogger(__name__)

UNPROCESSABLE_ENTITY = 422


def generate_id() -> str:
    """Opaque placeholder id for instances not yet known to the backend."""
    return uuid4().hex[:13]


def _with_query(url: str, params: dict[str, Any] | None) -> str:
    query = to_query_string(params)
    return f"{url}?{query}" if query else url


class hybridmethod:
    """Method bound to the instance when called on one, else to the class."""

    def __init__(self, func: Callable[..., Any]) -> None:
        self.func = func
        self.__doc__ = func.__doc__

    def __get__(self, instance: Any, owner: type) -> Callable[..., Any]:
        return types.MethodType(self.func, owner if instance is None else instance)


class Model(BaseModel):
    """Base class for JSON:API backed models.

    Class attributes:
        resource_type: JSON:API ``type`` of the resource. Required to serialize.
        base_url: Collection path, optionally with ``:name`` placeholders.
        deserializer_options: How wire attribute keys map to field names.
        adapter: Transport used by lifecycle operations; set it with
            ``configure_adapter()``.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        ignored_types=(hybridmethod,),
    )

    resource_type: ClassVar[str] = ""
    base_url: ClassVar[str] = ""
    deserializer_options: ClassVar[DeserializerOptions] = DeserializerOptions()
    adapter: ClassVar[TransportAdapter | None] = None

    id: str = Field(default_factory=generate_id)

    _errors: ErrorSet = PrivateAttr(default_factory=ErrorSet)
    _persisted: bool = PrivateAttr(default=False)
    _links: dict[str, Any] = PrivateAttr(default_factory=dict)
    _meta: dict[str, Any] = PrivateAttr(default_factory=dict)

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: Any) -> Any:
        return str(value) if value is not None else value

    @model_validator(mode="wrap")
    @classmethod
    def _split_envelope(
        cls, data: Any, handler: ModelWrapValidatorHandler[Model]
    ) -> Model:
        """Pull ``links``/``meta`` out of the input and record persisted state."""
        if not isinstance(data, dict):
            return handler(data)

        data = dict(data)
        links = data.pop("links", None) or {}
        meta = data.pop("meta", None) or {}
        persisted = bool(data.get("id"))
        if not persisted:
            data.pop("id", None)

        instance = handler(data)
        instance._persisted = persisted
        instance._links = links
        instance._meta = meta
        return instance

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def errors(self) -> ErrorSet:
        return self._errors

    @errors.setter
    def errors(self, errors: ErrorSet) -> None:
        self._errors = errors

    @property
    def persisted(self) -> bool:
        return self._persisted

    @persisted.setter
    def persisted(self, persisted: bool) -> None:
        self._persisted = persisted

    @property
    def links(self) -> dict[str, Any]:
        return self._links

    @links.setter
    def links(self, links: dict[str, Any]) -> None:
        self._links = links

    @property
    def meta(self) -> dict[str, Any]:
        return self._meta

    @meta.setter
    def meta(self, meta: dict[str, Any]) -> None:
        self._meta = meta

    @classmethod
    def new(cls, **data: Any) -> Model:
        return cls(**data)

    def attributes(self) -> dict[str, Any]:
        """Current values of the attribute fields, keyed by field name."""
        return {name: getattr(self, name) for name in attribute_field_names(type(self))}

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def check(self) -> None:
        """Hook for model validations; add failures to ``self.errors``."""

    @property
    def valid(self) -> bool:
        self.errors.clear()
        self.check()
        return self.errors.count() == 0

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def serializer_options(self) -> SerializerOptions:
        return serializer_options(self)

    def serialize(self) -> dict[str, Any]:
        return codec.serialize(self)

    @classmethod
    def deserialize(cls, document: Any) -> Any:
        """Model, ``Collection`` of models, or ``None`` for empty data."""
        return codec.deserialize(cls, document)

    # ------------------------------------------------------------------
    # Routing
    # ------------------------------------------------------------------

    @classmethod
    def construct_base_url(cls, route_args: dict[str, Any] | None = None) -> str:
        return construct_url(cls.base_url, route_args)

    def route_args(self) -> dict[str, Any]:
        """Values for ``base_url`` placeholders when acting on this instance."""
        return {}

    def resource_base_url(self) -> str:
        try:
            return type(self).construct_base_url(self.route_args())
        except RoutingError as exc:
            msg = f"{exc}. Override route_args() of {type(self).__name__}."
            raise RoutingError(msg, exc.missing) from exc

    # ------------------------------------------------------------------
    # Adapter
    # ------------------------------------------------------------------

    @classmethod
    def configure_adapter(
        cls, adapter: TransportAdapter | None = None, **options: Any
    ) -> TransportAdapter:
        """Set the transport for this model type and its subclasses.

        Without an explicit ``adapter`` an ``HttpAdapter`` is built from
        ``AdapterSettings`` with ``options`` (host, namespace, headers,
        timeout, ...) taking precedence.
        """
        if adapter is None:
            adapter = HttpAdapter.from_settings(get_settings(), **options)
        cls.adapter = adapter
        return adapter

    @classmethod
    def _get_adapter(cls) -> TransportAdapter:
        if cls.adapter is None:
            msg = (
                f"No adapter configured for {cls.__name__}. "
                f"Call {cls.__name__}.configure_adapter() first."
            )
            raise ConfigurationError(msg)
        return cls.adapter

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @classmethod
    async def fetch(
        cls,
        id: str | int,
        route_args: dict[str, Any] | None = None,
        query: dict[str, Any] | None = None,
    ) -> Any:
        url = _with_query(f"{cls.construct_base_url(route_args)}/{id}", query)
        response = await cls._get_adapter().get(url)
        return cls.deserialize(response.data)

    @classmethod
    async def fetch_all(cls, route_args: dict[str, Any] | None = None) -> Any:
        response = await cls._get_adapter().get(cls.construct_base_url(route_args))
        return cls.deserialize(response.data)

    @classmethod
    async def query(
        cls, params: dict[str, Any], route_args: dict[str, Any] | None = None
    ) -> Any:
        url = _with_query(cls.construct_base_url(route_args), params)
        response = await cls._get_adapter().get(url)
        return cls.deserialize(response.data)

    async def save(self) -> Any:
        """Create or update this resource.

        Returns a new instance built from the server's copy; ``self`` is not
        modified on success.

        Raises:
            ValidationError: If ``check()`` recorded errors. Nothing is sent.
            TransportError: The server's failure, unchanged. On 422 the
                error document replaces ``self.errors`` first.
        """
        if not self.valid:
            raise ValidationError(self.errors)
        if self.persisted:
            return await self._update()
        return await self._create()

    async def _create(self) -> Any:
        url = self.resource_base_url()
        document = self.serialize()
        try:
            response = await type(self)._get_adapter().post(url, document)
        except TransportError as exc:
            self._process_error_response(exc)
            raise
        return type(self).deserialize(response.data)

    async def _update(self) -> Any:
        url = f"{self.resource_base_url()}/{self.id}"
        document = self.serialize()
        try:
            response = await type(self)._get_adapter().patch(url, document)
        except TransportError as exc:
            self._process_error_response(exc)
            raise
        return type(self).deserialize(response.data)

    def _process_error_response(self, exc: TransportError) -> None:
        if exc.status == UNPROCESSABLE_ENTITY:
            self.errors = ErrorSet(exc.data)
            logger.info(
                "%s %s rejected with %d error(s)",
                type(self).__name__,
                self.id,
                self.errors.count(),
            )

    @hybridmethod
    async def destroy(
        self_or_cls: Any,
        id: str | int | None = None,
        route_args: dict[str, Any] | None = None,
    ) -> ResponsePayload:
        """Delete a resource.

        ``Model.destroy(id, route_args)`` deletes by id; ``instance.destroy()``
        deletes the instance's resource. The instance should not be reused.
        """
        if isinstance(self_or_cls, type):
            if id is None:
                raise TypeError(f"{self_or_cls.__name__}.destroy() requires an id")
            url = f"{self_or_cls.construct_base_url(route_args)}/{id}"
            adapter = self_or_cls._get_adapter()
        else:
            url = f"{self_or_cls.resource_base_url()}/{self_or_cls.id}"
            adapter = type(self_or_cls)._get_adapter()
        return await adapter.delete(url)


__all__ = ["Collection", "Model", "generate_id"]
