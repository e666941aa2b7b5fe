from __future__ import annotations

from htmltrim.cli import HtmlTrim
from htmltrim.core.models import RewriteRule, TrimStats
from htmltrim.processing.rules import DEFAULT_RULES, PRE_BLOCK_RE
from htmltrim.processing.trimmer import WhitespaceTrimmer, remove
from htmltrim.runtime.config import TrimConfig, TrimSwitch, get_default_switch, set_default_switch
from htmltrim.web.wsgi import TrimMiddleware, TrimWriter, wrap

__version__ = '1.0.0'

__all__ = [
    'DEFAULT_RULES',
    'PRE_BLOCK_RE',
    'HtmlTrim',
    'RewriteRule',
    'TrimConfig',
    'TrimMiddleware',
    'TrimStats',
    'TrimSwitch',
    'TrimWriter',
    'WhitespaceTrimmer',
    'get_default_switch',
    'remove',
    'set_default_switch',
    'wrap',
]
