"""Tests for the error taxonomy."""

import unittest

from htliteral import (
    AmbiguousUnquotedAttributeError,
    BooleanInQuotedContextError,
    HypertextError,
    InvalidAttributeNameError,
    InvalidInterpolationPositionError,
    LexicalError,
    RawTextContentViolation,
    TokenizerState,
    UnrenderableValueError,
    UnsupportedConstructError,
    format_html,
)
from htliteral.errors import nearby


class TestNearby(unittest.TestCase):
    def test_short_text_is_kept(self):
        """Short text is returned unchanged."""
        assert nearby("short") == "short"

    def test_long_text_is_truncated(self):
        """Long text is cut and marked with an ellipsis."""
        assert nearby("abcdefghijklmnop") == "abcdefghi…"

    def test_offset(self):
        """The excerpt starts at the given index."""
        assert nearby("0123456789", 7) == "789"

    def test_negative_offset_starts_at_beginning(self):
        """Negative indexes clamp to zero."""
        assert nearby("abc", -3) == "abc"


class TestErrorClasses(unittest.TestCase):
    """Every error is a HypertextError with a stable code."""

    def test_codes(self):
        """Each error class has its own code."""
        codes = {
            LexicalError: "lexical-error",
            UnsupportedConstructError: "unsupported-construct",
            InvalidInterpolationPositionError: "invalid-interpolation-position",
            AmbiguousUnquotedAttributeError: "ambiguous-unquoted-attribute",
            RawTextContentViolation: "rawtext-content-violation",
            InvalidAttributeNameError: "invalid-attribute-name",
            BooleanInQuotedContextError: "boolean-in-quoted-attribute",
            UnrenderableValueError: "unrenderable-value",
        }
        for cls, code in codes.items():
            assert issubclass(cls, HypertextError)
            assert issubclass(cls, ValueError)
            assert cls("x").code == code

    def test_value_type_errors_are_type_errors(self):
        """Value misuse errors can be caught as TypeError."""
        assert issubclass(BooleanInQuotedContextError, TypeError)
        assert issubclass(UnrenderableValueError, TypeError)
        assert not issubclass(LexicalError, TypeError)

    def test_str_with_fragment(self):
        """str() shows code, message and fragment."""
        error = LexicalError("invalid first character of tag name", "< b")
        assert str(error) == "lexical-error - invalid first character of tag name: '< b'"

    def test_str_without_fragment(self):
        """The fragment is left out when there is none."""
        assert str(LexicalError("oops")) == "lexical-error - oops"

    def test_code_override(self):
        """The code can be overridden per instance."""
        assert HypertextError("x", code="custom").code == "custom"

    def test_repr(self):
        """repr() shows the class, code and fragment."""
        error = RawTextContentViolation("bad body", "</script>")
        assert repr(error) == "RawTextContentViolation('rawtext-content-violation', fragment='</script>')"

    def test_position_error_records_state(self):
        """Position errors keep the tokenizer state."""
        error = InvalidInterpolationPositionError("bad", "x", state=TokenizerState.COMMENT)
        assert error.state == TokenizerState.COMMENT
        assert error.message == "bad"
        assert error.fragment == "x"


class TestErrorsFromTemplates(unittest.TestCase):
    def test_base_class_catches_all(self):
        """HypertextError catches classification and render failures alike."""
        templates = ["<!DOCTYPE html>", "<!-- {} -->", "<a href={}x>", "<p title={} {}>"]
        for template in templates:
            with self.assertRaises(HypertextError):
                str(format_html(template, "x", {"bad name": 1}))

    def test_render_errors_surface_with_fragment(self):
        """Render time errors carry the offending text."""
        result = format_html("<style>{}</style>", "</style><b>")
        with self.assertRaises(RawTextContentViolation) as ctx:
            str(result)
        assert ctx.exception.fragment == "</style><…"


if __name__ == "__main__":
    unittest.main()
