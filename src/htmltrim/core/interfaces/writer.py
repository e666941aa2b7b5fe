from __future__ import annotations
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class WriteCallableProtocol(Protocol):
    """The "write bytes to the client" capability.

    Matches the WSGI `write` callable returned by `start_response` as well as
    bound methods such as `BaseHTTPRequestHandler.wfile.write`.
    """

    def __call__(self, data: bytes) -> Any:
        ...


@runtime_checkable
class SwitchProtocol(Protocol):
    """Read side of the enable flag, consulted on every write."""

    def is_enabled(self) -> bool:
        ...
