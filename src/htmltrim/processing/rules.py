"""
rules – Ordered whitespace/comment rewrite rules for htmltrim.

This module exposes DEFAULT_RULES as the single source of truth for the
rewrite pipeline, plus PRE_BLOCK_RE which finds the <pre> regions that must
survive untouched.

Order is significant: every rule runs on the output of the previous one.
The table is compiled at import time, so a broken pattern fails on import
instead of on the first request.
"""

import re
from typing import Iterable, Tuple

from htmltrim.constants import NBSP_ENTITY
from htmltrim.core.models import RewriteRule

_I = re.IGNORECASE
_IS = re.IGNORECASE | re.DOTALL

# Tag-name alternations; each is followed by \b so that e.g. <p> does not
# also catch <param> or <picture>.
_DOCUMENT_TAGS = rb'body|!doctype|head|html|link|meta|script|style|title'
_BLOCK_TAGS = rb'article|blockquote|div|footer|h[1-6]|header|nav|p|section'
_LIST_TAGS = rb'[dou]l|li|d[dt]'
_TABLE_TAGS = rb'col(?:group)?|t(?:able|body|foot|head|[dhr])'
_FORM_TAGS = rb'form|fieldset|legend|opt(?:group|ion)'

# Leading whitespace is only matched from the first byte of a run, so each
# rule stays linear in the run length.
WS_RUN = rb'(?<!\s)\s+'
WS_LEAD = rb'(?:' + WS_RUN + rb')?'


def _tag(names: bytes) -> bytes:
    return rb'(</?(?:' + names + rb')\b[^>]*>)'


def build_rule(name: str, pattern: bytes, replacement: bytes, flags: int = 0) -> RewriteRule:
    """Compile a single rule; raises re.error on a malformed pattern."""
    return RewriteRule(name=name, pattern=re.compile(pattern, flags), replacement=replacement)


def adjacent_rules(prefix: str, names: bytes) -> Tuple[RewriteRule, RewriteRule]:
    """Return the (before, after) pair collapsing whitespace around `names` tags."""
    tag = _tag(names)
    return (
        build_rule(f'{prefix}-before', WS_RUN + tag, rb'\1', _IS),
        build_rule(f'{prefix}-after', tag + rb'\s+', rb'\1', _IS),
    )


def build_rule_set(rules: Iterable[RewriteRule]) -> Tuple[RewriteRule, ...]:
    rule_set = tuple(rules)
    for rule in rule_set:
        if not isinstance(rule, RewriteRule):
            raise TypeError(f'not a RewriteRule: {rule!r}')
    return rule_set


DEFAULT_RULES: Tuple[RewriteRule, ...] = build_rule_set((
    build_rule('comments', rb'<!--.*?-->', b'', re.DOTALL),
    build_rule('document', WS_LEAD + _tag(_DOCUMENT_TAGS) + rb'\s*', rb'\1', _IS),
    *adjacent_rules('block', _BLOCK_TAGS),
    *adjacent_rules('list', _LIST_TAGS),
    *adjacent_rules('table', _TABLE_TAGS),
    *adjacent_rules('form', _FORM_TAGS),
    build_rule('break', WS_LEAD + rb'(<[bh]r\b[^>]*>)\s*', rb'\1', _I),
    build_rule('anchor', rb'(<a\s[^>]*>)\s+', rb'\1', _IS),
    # The table rules above have already emptied whitespace-only cells.
    build_rule('empty-cell', rb'(<td(?:\s[^>]*)?>)\s*(</td>)', rb'\1' + NBSP_ENTITY + rb'\2', _I),
    build_rule('empty-paragraph', rb'<p(?:\s[^>]*)?>\s*</p>', b'', _I),
    build_rule('tag-close', WS_RUN + rb'>', b'>'),
))

PRE_BLOCK_RE: re.Pattern[bytes] = re.compile(WS_LEAD + rb'<pre\b[^>]*>.*?</pre>\s*', _IS)
