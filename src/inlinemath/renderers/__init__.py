"""inlinemath renderers.

Renderers convert expression trees into display strings.

Available Renderers:
- TypesetRenderer / to_typeset: LaTeX markup for a math-typesetting library
- InlineRenderer / to_inline_text: compact Unicode text for inline display

Thread Safety:
All renderers are pure functions of the tree.
Safe for concurrent use from multiple threads.

"""

from inlinemath.renderers.inline import (
    InlineRenderer,
    inline_fraction,
    mapping_inline,
    power_inline,
    stacked_fraction,
    summation_inline,
    to_inline_text,
    to_superscript_digits,
)
from inlinemath.renderers.typeset import (
    TypesetRenderer,
    escape_typeset,
    fraction_typeset,
    mapping_typeset,
    power_typeset,
    summation_typeset,
    to_typeset,
)

__all__ = [
    "InlineRenderer",
    "TypesetRenderer",
    "escape_typeset",
    "fraction_typeset",
    "inline_fraction",
    "mapping_inline",
    "mapping_typeset",
    "power_inline",
    "power_typeset",
    "stacked_fraction",
    "summation_inline",
    "summation_typeset",
    "to_inline_text",
    "to_superscript_digits",
    "to_typeset",
]
