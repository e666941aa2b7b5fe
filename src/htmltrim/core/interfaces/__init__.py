from .logging import LoggerFactoryProtocol, LoggerLikeProtocol
from .text import PageTransformerProtocol
from .writer import SwitchProtocol, WriteCallableProtocol

__all__ = [
    'LoggerFactoryProtocol',
    'LoggerLikeProtocol',
    'PageTransformerProtocol',
    'SwitchProtocol',
    'WriteCallableProtocol',
]
