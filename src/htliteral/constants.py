"""Fixed vocabulary shared by the tokenizer and the renderers."""

# Elements whose body is scanned as RAWTEXT once their start tag closes.
RAWTEXT_ELEMENTS = frozenset({
    "style", "xmp", "iframe", "noembed", "noframes", "noscript", "script",
})

# HTML whitespace after newline normalization ("\r" never reaches the tokenizer).
WHITESPACE = frozenset({"\t", "\n", "\f", " "})

# A literal following an unquoted attribute value or a spread must start with one of these.
DELIMITERS = WHITESPACE | {"/", ">"}

# Attribute names are emitted unquoted and without & escaping.
ATTRIBUTE_NAME_FORBIDDEN = frozenset("/>='\"<&%\\\t\n\f\r \x00")

UNQUOTED_VALUE_FORBIDDEN = frozenset({'"', "'", "<", "=", "`"})
