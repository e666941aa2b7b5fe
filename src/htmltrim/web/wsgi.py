from __future__ import annotations

"""WSGI output interceptor.

`TrimWriter` wraps a "write bytes to the client" callable and trims every
buffer passing through it. `TrimMiddleware` installs a TrimWriter around a
WSGI application: both the `write` callable handed out by `start_response`
and each chunk of the returned body iterable go through it.

Chunks are trimmed independently, the same way separate write calls are.
"""

from typing import Any, Callable, Iterable, Iterator, List, Optional, Sequence, Tuple

from htmltrim.constants import HTML_CONTENT_TYPES
from htmltrim.core.interfaces.logging import LoggerLikeProtocol
from htmltrim.core.interfaces.text import PageTransformerProtocol
from htmltrim.core.interfaces.writer import SwitchProtocol, WriteCallableProtocol
from htmltrim.logging.helpers import get_logger
from htmltrim.processing.trimmer import get_default_trimmer
from htmltrim.runtime.config import TrimConfig, get_default_switch

Headers = List[Tuple[str, str]]
WSGIApp = Callable[[dict, Callable[..., Any]], Iterable[bytes]]


class TrimWriter:
    """Write-capability decorator that trims HTML before delegating."""

    def __init__(
        self,
        write: WriteCallableProtocol,
        *,
        switch: Optional[SwitchProtocol] = None,
        trimmer: Optional[PageTransformerProtocol] = None,
    ) -> None:
        self._write = write
        self._switch = switch if switch is not None else get_default_switch()
        self._trimmer = trimmer if trimmer is not None else get_default_trimmer()

    def filter(self, data: bytes) -> bytes:
        """Return the buffer that `write` would forward for `data`."""
        if not data or not self._switch.is_enabled():
            return data
        txt = self._trimmer.transform(data)
        # An empty result means there was nothing worth sending in trimmed form.
        return txt if txt else data

    def write(self, data: bytes) -> Any:
        """Trim `data` and hand it to the wrapped writer, returning its result."""
        if not data:
            return 0
        return self._write(self.filter(data))

    __call__ = write


class _ResponseState:
    __slots__ = ('writer',)

    def __init__(self) -> None:
        self.writer: Optional[TrimWriter] = None


class _TrimmedBody:
    """Body iterable that trims each chunk and forwards `close()`."""

    def __init__(self, body: Iterable[bytes], state: _ResponseState) -> None:
        self._body = body
        self._state = state

    def __iter__(self) -> Iterator[bytes]:
        for chunk in self._body:
            # start_response may only run on the first iteration.
            writer = self._state.writer
            yield writer.filter(chunk) if writer is not None else chunk

    def close(self) -> None:
        close = getattr(self._body, 'close', None)
        if close is not None:
            close()


class TrimMiddleware:
    """WSGI middleware that strips comments and redundant whitespace from HTML responses.

    Args:
        app: The wrapped WSGI application.
        switch: Enable flag read per response; the process default when omitted.
        trimmer: Page transformer; the shared default trimmer when omitted.
        content_types: Media types to trim. Responses without a Content-Type
            are trimmed too.
    """

    def __init__(
        self,
        app: WSGIApp,
        *,
        switch: Optional[SwitchProtocol] = None,
        trimmer: Optional[PageTransformerProtocol] = None,
        content_types: Sequence[str] = HTML_CONTENT_TYPES,
        logger: Optional[LoggerLikeProtocol] = None,
    ) -> None:
        self.app = app
        self._switch = switch if switch is not None else get_default_switch()
        self._trimmer = trimmer if trimmer is not None else get_default_trimmer()
        self._content_types = tuple(ct.lower() for ct in content_types)
        self._log = logger or get_logger('web.wsgi')

    @classmethod
    def from_config(
        cls,
        app: WSGIApp,
        config: TrimConfig,
        *,
        switch: Optional[SwitchProtocol] = None,
        trimmer: Optional[PageTransformerProtocol] = None,
        logger: Optional[LoggerLikeProtocol] = None,
    ) -> TrimMiddleware:
        """Build a middleware whose switch and media types come from `config`."""
        return cls(
            app,
            switch=switch if switch is not None else config.make_switch(),
            trimmer=trimmer,
            content_types=config.content_types,
            logger=logger,
        )

    def should_trim(self, headers: Sequence[Tuple[str, str]]) -> bool:
        content_type: Optional[str] = None
        for name, value in headers:
            key = name.lower()
            if key == 'content-encoding' and value.strip().lower() not in ('', 'identity'):
                return False
            if key == 'content-type':
                content_type = value
        if content_type is None:
            return True
        media = content_type.split(';', 1)[0].strip().lower()
        return media in self._content_types

    def __call__(self, environ: dict, start_response: Callable[..., Any]) -> Iterable[bytes]:
        state = _ResponseState()

        def trimmed_start_response(status: str, headers: Headers, exc_info: Any = None) -> Any:
            if not (self._switch.is_enabled() and self.should_trim(headers)):
                state.writer = None
                return start_response(status, headers, exc_info)
            # The body length changes, so a precomputed length would be wrong.
            headers = [(k, v) for k, v in headers if k.lower() != 'content-length']
            write = start_response(status, headers, exc_info)
            state.writer = TrimWriter(write, switch=self._switch, trimmer=self._trimmer)
            self._log.debug('trimming response %s for %s', status, environ.get('PATH_INFO', ''))
            return state.writer

        return _TrimmedBody(self.app(environ, trimmed_start_response), state)


def wrap(app: WSGIApp, *, config: Optional[TrimConfig] = None, **kwargs: Any) -> TrimMiddleware:
    """Return `app` wrapped so that its HTML output is trimmed.

    With `config`, the switch and media types are taken from it (see
    `TrimMiddleware.from_config`). Other keyword arguments are passed on to
    `TrimMiddleware`.
    """
    if config is not None:
        return TrimMiddleware.from_config(app, config, **kwargs)
    return TrimMiddleware(app, **kwargs)
