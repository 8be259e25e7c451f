"""Exception hierarchy for resourcekit.

Callers can tell server failures (``TransportError``, which carries the
normalized response) from local failures (``ValidationError``,
``ConfigurationError``) by type.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from resourcekit.error_set import ErrorSet
    from resourcekit.transport import ResponsePayload


class ResourceKitError(Exception):
    """Base class for every error raised by resourcekit."""


class TransportError(ResourceKitError):
    """A non-2xx response or a failed HTTP call.

    Args:
        response: The normalized response. For network failures ``status``
            is ``0`` and ``data`` is ``None``.
    """

    def __init__(self, response: ResponsePayload) -> None:
        super().__init__(f"{response.status} {response.status_text}".strip())
        self.response = response

    @property
    def status(self) -> int:
        return self.response.status

    @property
    def status_text(self) -> str:
        return self.response.status_text

    @property
    def headers(self) -> dict[str, str]:
        return self.response.headers

    @property
    def data(self) -> Any:
        return self.response.data


class ValidationError(ResourceKitError):
    """Raised by ``Model.save()`` when local validations fail."""

    def __init__(self, errors: ErrorSet | None = None) -> None:
        super().__init__("Unprocessable Entity")
        self.errors = errors


class ConfigurationError(ResourceKitError):
    """Required static configuration is missing at the point of use."""


class RoutingError(ConfigurationError):
    """A URL template placeholder has no matching route argument."""

    def __init__(self, message: str, missing: list[str]) -> None:
        super().__init__(message)
        self.missing = missing


class ParseError(ResourceKitError):
    """A response body could not be read as the expected document."""


class DocumentError(ParseError):
    """A JSON:API document has an invalid structure."""
