"""
SonicMind

Intelligent analysis core for decoded audio: ten analyzers over one
sample buffer, joined into a single immutable result, plus rule-based
remix suggestions.
"""

__version__ = "1.0.0"
__author__ = "Audio Analysis Team"

__all__ = ["analyze", "suggest", "__version__"]


def __getattr__(name: str):
    """Lazy load the engine so importing the package stays cheap."""
    if name in ("analyze", "suggest"):
        from sonicmind.core import engine
        return getattr(engine, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
