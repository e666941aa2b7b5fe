from __future__ import annotations

"""Project-wide constants used across modules.

Environment variable names live here so that configuration, logging and the
CLI read the same keys.
"""

# Environment switches (value "1" enables the flag).
ENV_DISABLE: str = 'HTMLTRIM_DISABLE'
ENV_JSON_LOGS: str = 'HTMLTRIM_JSON_LOGS'
ENV_LOG_LEVEL: str = 'HTMLTRIM_LOG_LEVEL'
ENV_TRACE_IO: str = 'HTMLTRIM_TRACE_IO'
ENV_VERSION: str = 'HTMLTRIM_VERSION'

# Placeholder for shielded <pre> blocks; NUL never appears in HTML text.
PLACEHOLDER_FMT: bytes = b'\x00HTPRE%d\x00'

# Replacement content for empty table cells.
NBSP_ENTITY: bytes = b'&#160;'

# Content types the WSGI middleware trims by default.
HTML_CONTENT_TYPES: tuple[str, ...] = ('text/html', 'application/xhtml+xml')
