"""Exception hierarchy shared by the API client, the aggregator and the CLI."""

from __future__ import annotations

from typing import Optional


class DexLookupError(Exception):
    """Base class for every error the CLI reports to the user."""


class ApiRequestError(DexLookupError):
    """Transport, HTTP or JSON decoding failure for a single URL."""

    def __init__(self, url: str, message: str) -> None:
        super().__init__(message)
        self.url = url


class ResourceNotFoundError(ApiRequestError):
    """The API answered 404 for the requested resource."""

    def __init__(self, url: str) -> None:
        super().__init__(url, f"resource not found: {url}")


class CatalogFetchError(DexLookupError):
    """The list of elemental types could not be enumerated."""


class ResolutionError(DexLookupError):
    """A named record of a given kind could not be fetched."""

    def __init__(self, kind: str, text: str, cause: Optional[BaseException] = None) -> None:
        self.kind = kind
        self.text = text
        self.cause = cause
        super().__init__(f"failed to resolve {kind} '{text}' - {cause}")


class TypeResolutionError(ResolutionError):
    def __init__(self, text: str, cause: Optional[BaseException] = None) -> None:
        super().__init__("type", text, cause)


class LocalizationError(DexLookupError):
    """A localized entry list was empty."""


class OutputError(DexLookupError):
    """Writing the report to the output sink failed."""


class ConfigError(DexLookupError):
    """Unknown key or invalid value in the stored configuration."""
