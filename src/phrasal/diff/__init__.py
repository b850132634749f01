from .render import DiffOptions, DiffRenderer, generate_diff, render_unified_diff, should_generate_diff
from .synthesize import NO_DIFF, DiffValues, coerce_to_type, deep_clone, extract_diff_values


__all__ = [
    "NO_DIFF",
    "DiffOptions",
    "DiffRenderer",
    "DiffValues",
    "coerce_to_type",
    "deep_clone",
    "extract_diff_values",
    "generate_diff",
    "render_unified_diff",
    "should_generate_diff",
]
