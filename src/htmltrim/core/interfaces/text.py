from __future__ import annotations
"""Page transformer protocol definitions."""

from typing import Protocol, runtime_checkable


@runtime_checkable
class PageTransformerProtocol(Protocol):
    """Protocol for byte-level page rewriters.

    Implementations are expected to be pure: the same input and rule set
    always yield the same output, and `transform` never raises for
    malformed markup.

    Methods:
        transform: Return a rewritten copy of `page`.
    """

    def transform(self, page: bytes) -> bytes:
        ...
