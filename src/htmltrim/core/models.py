from __future__ import annotations

import re
from dataclasses import dataclass


@dataclass(frozen=True)
class RewriteRule:
    """A single ordered (pattern, replacement) step of the rule set."""
    name: str
    pattern: re.Pattern[bytes]
    replacement: bytes

    def apply(self, page: bytes) -> bytes:
        return self.pattern.sub(self.replacement, page)


@dataclass(frozen=True)
class Shield:
    """Literal matcher for one <pre> block plus the token standing in for it."""
    index: int
    block: bytes
    matcher: re.Pattern[bytes]
    token: bytes


@dataclass(frozen=True)
class TrimStats:
    size_in: int
    size_out: int
    blocks: int = 0

    @property
    def saved(self) -> int:
        return self.size_in - self.size_out
