from htmltrim.web.wsgi import TrimMiddleware, TrimWriter, wrap

__all__ = ['TrimMiddleware', 'TrimWriter', 'wrap']
