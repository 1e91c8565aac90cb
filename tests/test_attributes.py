"""Tests for attribute names, pairs and spreads."""

import unittest
from io import StringIO

from htliteral import (
    BooleanInQuotedContextError,
    EscapeProxy,
    InvalidAttributeNameError,
    UnrenderableValueError,
    attribute_pair,
    attributes,
    normalize_attribute_name,
)
from htliteral.attributes import validate_attribute_name


def render_pair(name, value):
    buffer = StringIO()
    attribute_pair(name, value, EscapeProxy(buffer))
    return buffer.getvalue()


def render_spread(value):
    buffer = StringIO()
    attributes(value, EscapeProxy(buffer))
    return buffer.getvalue()


class TestAttributeNames(unittest.TestCase):
    def test_plain_names_pass_through(self):
        """Names that are not identifiers with underscores are returned as given."""
        for name in ("class", "href", "aria-label", "data-id", "on:click", "x.y", "@click"):
            assert normalize_attribute_name(name) == name

    def test_identifiers_become_kebab_case(self):
        """Snake case identifiers turn into kebab case."""
        assert normalize_attribute_name("data_user_id") == "data-user-id"
        assert normalize_attribute_name("aria_label") == "aria-label"

    def test_leading_underscore_is_dropped(self):
        """One leading underscore lets keywords like class and for be used."""
        assert normalize_attribute_name("_class") == "class"
        assert normalize_attribute_name("_for") == "for"
        assert normalize_attribute_name("_data_x") == "data-x"

    def test_non_identifiers_keep_underscores(self):
        """Only identifiers are rewritten."""
        assert normalize_attribute_name("data_x-y") == "data_x-y"

    def test_empty_name(self):
        """An empty name is rejected."""
        with self.assertRaises(InvalidAttributeNameError):
            normalize_attribute_name("")

    def test_forbidden_characters(self):
        """Characters that would end or break the name are rejected."""
        for name in ("a b", "a=b", "a>b", "a/b", "a'b", 'a"b', "a<b", "a&b", "a%b", "a\\b", "a\x00b", "a\tb"):
            with self.assertRaises(InvalidAttributeNameError):
                normalize_attribute_name(name)

    def test_control_characters(self):
        """C0 and C1 control characters are rejected."""
        for name in ("a\x01", "a\x7f", "a\x85"):
            with self.assertRaises(InvalidAttributeNameError):
                normalize_attribute_name(name)

    def test_non_string_name(self):
        """Names must be strings."""
        with self.assertRaises(InvalidAttributeNameError):
            normalize_attribute_name(5)

    def test_error_reports_character(self):
        """The error names the bad character and shows a short excerpt."""
        with self.assertRaises(InvalidAttributeNameError) as ctx:
            normalize_attribute_name("onclick=alert(1)")
        assert "'='" in ctx.exception.message
        assert ctx.exception.fragment == "onclick=a…"

    def test_validate_does_not_rewrite(self):
        """Literal template names are validated but kept verbatim."""
        assert validate_attribute_name("data_x") == "data_x"


class TestAttributePair(unittest.TestCase):
    def test_string_value(self):
        """The value is escaped and single-quoted."""
        assert render_pair("title", "Strunk & White") == " title='Strunk &amp; White'"

    def test_quote_in_value(self):
        """A single quote cannot close the value."""
        assert render_pair("title", "it's") == " title='it&#39;s'"

    def test_true_is_bare(self):
        """True writes the empty-valued form."""
        assert render_pair("checked", True) == " checked=''"

    def test_false_and_none_are_omitted(self):
        """False and None drop the attribute."""
        assert render_pair("checked", False) == ""
        assert render_pair("checked", None) == ""

    def test_number_value(self):
        """Zero is a value, not an omission."""
        assert render_pair("tabindex", 0) == " tabindex='0'"

    def test_mapping_value(self):
        """Mappings become declarations."""
        assert render_pair("style", {"color": "red"}) == " style='color: red;'"

    def test_list_value(self):
        """Lists are space separated."""
        assert render_pair("class", ["a", "b"]) == " class='a b'"

    def test_empty_string_keeps_attribute(self):
        """An empty string still writes the attribute."""
        assert render_pair("alt", "") == " alt=''"

    def test_boolean_inside_list(self):
        """Booleans are only meaningful for the whole attribute."""
        with self.assertRaises(BooleanInQuotedContextError):
            render_pair("class", ["a", True])


class TestAttributeSpread(unittest.TestCase):
    def test_mapping(self):
        """Spread of a mapping writes one pair per key."""
        assert render_spread({"disabled": True, "value": "x"}) == " disabled='' value='x'"

    def test_mapping_order_is_kept(self):
        """Insertion order is kept."""
        assert render_spread({"b": 1, "a": 2}) == " b='1' a='2'"

    def test_omitted_values(self):
        """Omitted values leave no trace."""
        assert render_spread({"hidden": False, "title": None, "id": "x"}) == " id='x'"

    def test_names_are_normalized(self):
        """Spread keys go through name normalization."""
        assert render_spread({"data_user_id": 7, "_class": "btn"}) == " data-user-id='7' class='btn'"

    def test_list_of_pairs(self):
        """Lists of pairs work like mappings."""
        assert render_spread([("a", "1"), ["b", "2"]]) == " a='1' b='2'"

    def test_single_pair(self):
        """A lone (name, value) tuple is one attribute."""
        assert render_spread(("title", "x")) == " title='x'"

    def test_generator_of_pairs(self):
        """Lazy iterables of pairs are accepted."""
        assert render_spread((name, True) for name in ("a", "b")) == " a='' b=''"

    def test_empty_mapping(self):
        """An empty spread writes nothing."""
        assert render_spread({}) == ""

    def test_string_is_rejected(self):
        """A bare string is not a spread."""
        with self.assertRaises(UnrenderableValueError):
            render_spread("disabled")

    def test_scalar_is_rejected(self):
        """Non-iterables are not spreads."""
        with self.assertRaises(UnrenderableValueError):
            render_spread(5)

    def test_malformed_items_are_rejected(self):
        """Items must be two-element pairs."""
        with self.assertRaises(UnrenderableValueError):
            render_spread([("a",)])
        with self.assertRaises(UnrenderableValueError):
            render_spread(["a", "b"])

    def test_invalid_name_is_rejected(self):
        """Invalid keys are rejected before anything is written."""
        with self.assertRaises(InvalidAttributeNameError):
            render_spread({"onclick=alert(1) x": 1})


if __name__ == "__main__":
    unittest.main()
