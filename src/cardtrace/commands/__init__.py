"""
cardtrace.commands - CLI command implementations
"""

__all__ = [
    "convert",
    "links",
    "validate",
]
