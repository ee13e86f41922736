"""Error taxonomy shared by connectors, services, and the HTTP layer.

Every failure surfaced to a caller is exactly one of these kinds; the
``status_code`` lets the API map it without inspecting messages.
"""

from __future__ import annotations


class CatalogError(Exception):
    """Base class for catalog failures that reach a caller."""

    kind = "catalog_error"
    status_code = 500

    def __init__(self, message: str, *, source: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.source = source


class NotFoundError(CatalogError):
    """A provider has no match for the title, or a record id does not exist."""

    kind = "not_found"
    status_code = 404


class AuthError(CatalogError):
    """A provider rejected (or we lack) the configured credential."""

    kind = "auth_error"
    status_code = 502


class ProviderError(CatalogError):
    """Any other provider failure: non-success response or transport fault."""

    kind = "provider_error"
    status_code = 502


class DuplicateError(CatalogError):
    """The title is already cataloged."""

    kind = "duplicate"
    status_code = 409


class ValidationError(CatalogError):
    """A required field is missing or an external id is malformed."""

    kind = "validation_error"
    status_code = 422


class PersistenceError(CatalogError):
    """Write or read-back failure at the storage boundary."""

    kind = "persistence_error"
    status_code = 500
