from __future__ import annotations

"""Logger seams used by the trimmer, the WSGI middleware and the CLI.

Any `logging.Logger` satisfies `LoggerLikeProtocol`; tests may pass a
`Mock` or any object exposing the same methods.
"""

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class LoggerLikeProtocol(Protocol):
    """Logging calls htmltrim components make on an injected logger."""

    def debug(self, msg: str, *args: Any, **kwargs: Any) -> None: ...

    def info(self, msg: str, *args: Any, **kwargs: Any) -> None: ...

    def warning(self, msg: str, *args: Any, **kwargs: Any) -> None: ...

    def error(self, msg: str, *args: Any, **kwargs: Any) -> None: ...


@runtime_checkable
class LoggerFactoryProtocol(Protocol):
    """Hands out loggers under the 'htmltrim' namespace."""

    def get_logger(self, name: str) -> LoggerLikeProtocol: ...
