"""Terminal progress drawing: draw targets, multi-line layouts, iterable and stream wrappers, and formatting."""

__version__ = "0.1.0"

__all__ = ["draw_target", "format", "iter", "multi", "multi_state", "term"]