# src/api/errors.py

"""Typed failures raised by the catalog API client."""


class CatalogApiError(Exception):
    """Any failure talking to the product catalog service.

    Carries a human readable message and, when the service answered,
    the HTTP status code.
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class TransportError(CatalogApiError):
    """The request never produced a response (DNS, timeout, TLS...)."""


class RemoteStatusError(CatalogApiError):
    """The service answered with a non-success status."""


class NotFoundError(RemoteStatusError):
    """The requested resource does not exist (HTTP 404)."""


class ResponseFormatError(CatalogApiError):
    """The response body could not be mapped to the domain model."""
