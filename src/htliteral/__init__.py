from .attributes import attribute_pair, attributes, normalize_attribute_name
from .errors import (
    AmbiguousUnquotedAttributeError,
    BooleanInQuotedContextError,
    HypertextError,
    InvalidAttributeNameError,
    InvalidInterpolationPositionError,
    LexicalError,
    RawTextContentViolation,
    UnrenderableValueError,
    UnsupportedConstructError,
)
from .escape import EscapeProxy, unescape
from .hooks import attribute_hook, content_hook, rawtext
from .parser import format_html, htl, interpolate
from .result import Result
from .tokenizer import Tokenizer, TokenizerOpts, TokenizerState
from .tokens import RawMarkup, Rendered, ValueSlot

# Imported after the submodules so the ``escape`` submodule does not shadow
# markupsafe's ``escape`` function.
from markupsafe import Markup, escape  # noqa: E402

__all__ = [
    "AmbiguousUnquotedAttributeError",
    "BooleanInQuotedContextError",
    "EscapeProxy",
    "HypertextError",
    "InvalidAttributeNameError",
    "InvalidInterpolationPositionError",
    "LexicalError",
    "Markup",
    "RawMarkup",
    "RawTextContentViolation",
    "Rendered",
    "Result",
    "Tokenizer",
    "TokenizerOpts",
    "TokenizerState",
    "UnrenderableValueError",
    "UnsupportedConstructError",
    "ValueSlot",
    "attribute_hook",
    "attribute_pair",
    "attributes",
    "content_hook",
    "escape",
    "format_html",
    "htl",
    "interpolate",
    "normalize_attribute_name",
    "rawtext",
    "unescape",
]
