"""
specatlas.commands - CLI command implementations
"""

__all__ = [
    "analyze",
    "deps",
    "search",
    "validate",
]
