"""Attribute names, attribute pairs and attribute spreads."""

from __future__ import annotations

from collections.abc import Iterator, Mapping, Sequence, Set
from typing import Any

from markupsafe import Markup

from .constants import ATTRIBUTE_NAME_FORBIDDEN
from .errors import InvalidAttributeNameError, UnrenderableValueError, nearby
from .escape import EscapeProxy
from .hooks import attribute_hook


def _is_control(ch):
    code = ord(ch)
    return code < 0x20 or 0x7F <= code <= 0x9F


def normalize_attribute_name(name: Any) -> str:
    """Validate ``name`` as an attribute name.

    Python identifiers are treated as symbolic names so that keyword
    arguments read naturally: one leading underscore is dropped (``_class``
    becomes ``class``) and the remaining underscores become hyphens
    (``data_user_id`` becomes ``data-user-id``). Other strings pass through
    untouched once validated.
    """
    if not isinstance(name, str):
        raise InvalidAttributeNameError("attribute names must be strings", repr(name))
    if "_" in name and name.isidentifier():
        if name[0] == "_":
            name = name[1:]
        name = name.replace("_", "-")
    return validate_attribute_name(name)


def validate_attribute_name(name: str) -> str:
    """Check ``name`` against the attribute name production and return it."""
    if not name:
        raise InvalidAttributeNameError("attribute name must not be empty", name)
    for ch in name:
        if ch in ATTRIBUTE_NAME_FORBIDDEN or _is_control(ch):
            raise InvalidAttributeNameError(
                f"invalid character ({ch!r}) found within an attribute name", nearby(name)
            )
    return name


def _is_pair(item):
    return isinstance(item, tuple) and len(item) == 2


def _declarations(items, out: EscapeProxy) -> None:
    prior = False
    for key, value in items:
        name = normalize_attribute_name(key)
        if prior:
            out.write_trusted(" ")
        out.write(name)
        out.write_trusted(": ")
        attribute_hook(value, out)
        out.write_trusted(";")
        prior = True


@attribute_hook.register
def _(value: Mapping, out: EscapeProxy) -> None:
    _declarations(value.items(), out)


def _sequence(values, out: EscapeProxy) -> None:
    values = list(values)
    if values and all(_is_pair(item) for item in values):
        _declarations(values, out)
        return
    prior = False
    for item in values:
        if item is None:
            continue
        if prior:
            out.write_trusted(" ")
        attribute_hook(item, out)
        prior = True


@attribute_hook.register(Sequence)
@attribute_hook.register(Set)
@attribute_hook.register(Iterator)
def _(values, out: EscapeProxy) -> None:
    _sequence(values, out)


@attribute_hook.register
def _(value: tuple, out: EscapeProxy) -> None:
    # A (str, value) tuple is a single declaration, like a spread pair.
    if _is_pair(value) and isinstance(value[0], str):
        _declarations((value,), out)
        return
    _sequence(value, out)


def attribute_pair(name: str, value: Any, out: EscapeProxy) -> None:
    """Write `` name='value'`` for an already normalized ``name``.

    ``False`` and ``None`` omit the attribute entirely; ``True`` writes the
    bare form `` name=''``.
    """
    if value is None or value is False:
        return
    out.write_trusted(" ")
    out.write(name)
    if value is True:
        out.write_trusted("=''")
        return
    out.write_trusted("='")
    attribute_hook(value, out)
    out.write_trusted("'")


def _spread_items(value):
    if isinstance(value, Mapping):
        return value.items()
    if isinstance(value, tuple) and len(value) == 2 and isinstance(value[0], str):
        return (value,)
    if isinstance(value, (str, bytes, Markup)) or not hasattr(value, "__iter__"):
        raise UnrenderableValueError(
            "an attribute spread expects a mapping or (name, value) pairs",
            nearby(repr(value)),
        )
    items = []
    for item in value:
        if not (isinstance(item, (tuple, list)) and len(item) == 2):
            raise UnrenderableValueError(
                "an attribute spread expects a mapping or (name, value) pairs",
                nearby(repr(item)),
            )
        items.append(item)
    return items


def attributes(value: Any, out: EscapeProxy) -> None:
    """Write every ``(name, value)`` of a spread with :func:`attribute_pair`."""
    for key, item in _spread_items(value):
        attribute_pair(normalize_attribute_name(key), item, out)
