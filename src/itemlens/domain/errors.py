"""Error kinds raised or recorded by a fetch cycle.

Only ``ContextUnavailableError`` (and its ``NoIdentifiersError`` subclass)
aborts a cycle. The other kinds are recovered where they occur: they degrade
the result and are reported as ``CycleIssue`` entries instead of escaping.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .model import Source


class ItemInformationError(RuntimeError):
    """Base class for item information pipeline errors."""


class ContextUnavailableError(ItemInformationError):
    """Raised when the host page context cannot be read."""


class NoIdentifiersError(ContextUnavailableError):
    """Raised when neither the caller nor the page context yields an item id."""

    def __init__(self, message: str = "No item IDs found in current context") -> None:
        super().__init__(message)


class ContextIdUnresolvedError(ItemInformationError):
    """Raised when no tenant context id can be derived from the application context."""


class SourceQueryFailedError(ItemInformationError):
    """Marks one source's batched query as failed for the rest of the cycle."""

    def __init__(self, source: Source, message: str) -> None:
        super().__init__(f"{source} query failed: {message}")
        self.source = source


class GraphQLResponseError(ItemInformationError):
    """Raised by adapters when a GraphQL response carries no usable data object."""

    def __init__(self, message: str, *, errors: tuple[str, ...] = ()) -> None:
        super().__init__(message)
        self.errors = errors
