"""Public API surface for htmltrim.processing."""
__all__ = [
    "rules",
    "trimmer",
]
