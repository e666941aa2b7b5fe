from __future__ import annotations

"""Whitespace and comment removal for HTML pages.

`WhitespaceTrimmer.transform` runs the ordered rule set over a page while
keeping every <pre> block byte-identical:

    1. find all <pre> blocks (with their surrounding whitespace);
    2. swap each block for an index-derived placeholder token;
    3. apply every rule once, in order, to the whole page;
    4. swap the tokens back for the (outer-trimmed) original blocks.

Pages without <pre> blocks skip steps 2 and 4.
"""

import re
from typing import List, Optional, Sequence

from htmltrim.constants import PLACEHOLDER_FMT
from htmltrim.core.interfaces.logging import LoggerLikeProtocol
from htmltrim.core.interfaces.writer import SwitchProtocol
from htmltrim.core.models import RewriteRule, Shield, TrimStats
from htmltrim.logging.helpers import get_logger, trace_io
from htmltrim.processing.rules import DEFAULT_RULES, PRE_BLOCK_RE, WS_LEAD, build_rule_set
from htmltrim.runtime.config import get_default_switch

_WS_TAIL = rb'\s*'


def placeholder_token(index: int) -> bytes:
    """Return the placeholder standing in for the `index`-th <pre> block."""
    return PLACEHOLDER_FMT % index


def build_shield(block: bytes, index: int) -> Shield:
    """Build the literal matcher for `block` and its unique token.

    The matcher covers the block with any whitespace padding around it.

    Raises:
        re.error: If the escaped block cannot be compiled.
    """
    matcher = re.compile(WS_LEAD + re.escape(block.strip()) + _WS_TAIL)
    return Shield(index=index, block=block, matcher=matcher, token=placeholder_token(index))


class WhitespaceTrimmer:
    """Regex-driven HTML whitespace/comment remover with <pre> protection."""

    def __init__(
        self,
        rules: Sequence[RewriteRule] = DEFAULT_RULES,
        *,
        pre_pattern: re.Pattern[bytes] = PRE_BLOCK_RE,
        logger: Optional[LoggerLikeProtocol] = None,
    ) -> None:
        self._rules = build_rule_set(rules)
        self._pre = pre_pattern
        self._log = logger or get_logger('processing.trimmer')

    @property
    def rules(self) -> tuple[RewriteRule, ...]:
        return self._rules

    def _apply_rules(self, page: bytes) -> bytes:
        for rule in self._rules:
            page = rule.apply(page)
        return page

    def _shield(self, page: bytes, blocks: Sequence[bytes]) -> tuple[bytes, List[Shield]]:
        shields: List[Shield] = []
        for idx, block in enumerate(blocks):
            try:
                shield = build_shield(block, idx)
            except re.error as exc:
                self._log.warning('⚠  <pre> block %d left unprotected: %s', idx, exc)
                continue
            page = shield.matcher.sub(shield.token, page, count=1)
            shields.append(shield)
        return page, shields

    def _restore(self, page: bytes, shields: Sequence[Shield]) -> bytes:
        for shield in shields:
            restore_rx = re.compile(WS_LEAD + re.escape(shield.token) + _WS_TAIL)
            original = shield.block.strip()
            # Callable replacement keeps backslashes in the block literal.
            page = restore_rx.sub(lambda _m: original, page, count=1)
        return page

    def transform_with_stats(self, page: bytes) -> tuple[bytes, TrimStats]:
        """Like `transform`, also reporting sizes and the <pre> block count."""
        if not isinstance(page, bytes):
            page = bytes(page)
        if not page:
            return page, TrimStats(size_in=0, size_out=0)

        blocks = self._pre.findall(page)
        if not blocks:
            result = self._apply_rules(page)
        else:
            shielded, shields = self._shield(page, blocks)
            result = self._restore(self._apply_rules(shielded), shields)

        stats = TrimStats(size_in=len(page), size_out=len(result), blocks=len(blocks))
        trace_io(self._log, 'page trimmed', size_in=stats.size_in, size_out=stats.size_out, blocks=stats.blocks)
        return result, stats

    def transform(self, page: bytes) -> bytes:
        """Return `page` with comments and redundant whitespace removed."""
        return self.transform_with_stats(page)[0]


_DEFAULT_TRIMMER: Optional[WhitespaceTrimmer] = None


def get_default_trimmer() -> WhitespaceTrimmer:
    global _DEFAULT_TRIMMER
    if _DEFAULT_TRIMMER is None:
        _DEFAULT_TRIMMER = WhitespaceTrimmer()
    return _DEFAULT_TRIMMER


def remove(
    page: bytes,
    *,
    switch: Optional[SwitchProtocol] = None,
    trimmer: Optional[WhitespaceTrimmer] = None,
) -> bytes:
    """Return `page` with HTML comments and unnecessary whitespace removed.

    When the enable switch is off the page is returned unchanged.

    Args:
        page: The web page's HTML markup.
        switch: Enable flag; the process-wide default when omitted.
        trimmer: Engine to use; the shared default when omitted.
    """
    if switch is None:
        switch = get_default_switch()
    if not switch.is_enabled():
        return page
    return (trimmer or get_default_trimmer()).transform(page)
