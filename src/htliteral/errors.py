"""Exceptions raised while classifying or rendering an interpolation."""


def nearby(text, index=0, width=9):
    """Return a short excerpt of ``text`` starting at ``index`` for messages."""
    if index < 0:
        index = 0
    if len(text) - index > width + 1:
        return text[index : index + width] + "…"
    return text[index:]


class HypertextError(ValueError):
    """Base class for every failure surfaced by htliteral.

    ``code`` is a stable identifier, ``message`` a human readable cause and
    ``fragment`` the offending text (already shortened).
    """

    code = "hypertext-error"

    def __init__(self, message, fragment=None, *, code=None):
        self.message = message
        self.fragment = fragment
        if code is not None:
            self.code = code
        super().__init__(message)

    def __str__(self):
        if self.fragment is not None:
            return f"{self.code} - {self.message}: {self.fragment!r}"
        return f"{self.code} - {self.message}"

    def __repr__(self):
        return f"{type(self).__name__}({self.code!r}, fragment={self.fragment!r})"


class LexicalError(HypertextError):
    code = "lexical-error"


class UnsupportedConstructError(HypertextError):
    code = "unsupported-construct"


class InvalidInterpolationPositionError(HypertextError):
    code = "invalid-interpolation-position"

    def __init__(self, message, fragment=None, *, state=None, code=None):
        self.state = state
        super().__init__(message, fragment, code=code)


class AmbiguousUnquotedAttributeError(HypertextError):
    code = "ambiguous-unquoted-attribute"


class RawTextContentViolation(HypertextError):
    code = "rawtext-content-violation"


class InvalidAttributeNameError(HypertextError):
    code = "invalid-attribute-name"


class BooleanInQuotedContextError(HypertextError, TypeError):
    code = "boolean-in-quoted-attribute"


class UnrenderableValueError(HypertextError, TypeError):
    code = "unrenderable-value"
