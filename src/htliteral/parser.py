"""Front ends turning Python templates into classified results."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from string import Formatter
from typing import Any, Protocol, runtime_checkable

from .result import Result
from .tokenizer import Tokenizer, TokenizerOpts
from .tokens import ValueSlot

logger = logging.getLogger(__name__)


@runtime_checkable
class TemplateProtocol(Protocol):
    strings: tuple[str, ...]
    interpolations: tuple[Any, ...]


def _convert(value, conversion, format_spec):
    if conversion == "r":
        value = repr(value)
    elif conversion == "s":
        value = str(value)
    elif conversion == "a":
        value = ascii(value)
    elif conversion:
        raise ValueError(f"unknown conversion specifier {conversion!r}")
    if format_spec:
        value = format(value, format_spec)
    return value


def _field(expression, conversion, format_spec):
    text = expression
    if conversion:
        text += "!" + conversion
    if format_spec:
        text += ":" + format_spec
    return text


def _describe(parts):
    pieces = []
    for position, part in enumerate(parts):
        if isinstance(part, str):
            pieces.append(part.replace("{", "{{").replace("}", "}}"))
        elif isinstance(part, ValueSlot) and part.expression:
            pieces.append("{" + part.expression + "}")
        else:
            index = part.index if isinstance(part, ValueSlot) and part.index is not None else position
            pieces.append("{#" + str(index) + "}")
    return "".join(pieces)


def _classify(parts, source, opts):
    steps = Tokenizer(opts).run(parts)
    logger.debug("classified %d parts into %d render steps", len(parts), len(steps))
    return Result(steps, source)


def interpolate(parts: Sequence[Any], opts: TokenizerOpts | None = None) -> Result:
    """Classify a sequence of literal ``str`` chunks and :class:`ValueSlot` values.

    Objects that are neither ``str`` nor ``ValueSlot`` are treated as values.
    """
    parts = list(parts)
    return _classify(parts, f"interpolate({_describe(parts)!r})", opts)


def htl(template: TemplateProtocol, opts: TokenizerOpts | None = None) -> Result:
    """Render a PEP 750 template string with context-aware escaping.

    Example:
        >>> book = "Strunk & White"
        >>> str(htl(t"<div>{book}</div>"))
        '<div>Strunk &amp; White</div>'

    Any object with ``strings`` and ``interpolations`` attributes is
    accepted, so this works before Python 3.14 with hand-built templates.
    """
    if not isinstance(template, TemplateProtocol):
        raise TypeError("htl() expects a string.templatelib.Template or compatible object")
    strings = template.strings
    interpolations = template.interpolations
    parts = []
    for index, text in enumerate(strings):
        parts.append(text)
        if index >= len(interpolations):
            continue
        interpolation = interpolations[index]
        conversion = getattr(interpolation, "conversion", None)
        format_spec = getattr(interpolation, "format_spec", "") or ""
        expression = getattr(interpolation, "expression", "") or f"#{index}"
        value = _convert(interpolation.value, conversion, format_spec)
        parts.append(ValueSlot(value, len(parts), _field(expression, conversion, format_spec)))
    return _classify(parts, f"htl(t{_describe(parts)!r})", opts)


def format_html(fmt: str, /, *args: Any, opts: TokenizerOpts | None = None, **kwargs: Any) -> Result:
    """Like :meth:`str.format`, but each replacement field is escaped for its position.

    Example:
        >>> str(format_html("<a href={url}>{label}</a>", url="/?a=1&b=2", label="<home>"))
        "<a href='/?a=1&amp;b=2'>&lt;home&gt;</a>"
    """
    formatter = Formatter()
    parts = []
    auto_index = 0
    manual = False
    for literal, field_name, format_spec, conversion in formatter.parse(fmt):
        parts.append(literal)
        if field_name is None:
            continue
        if field_name == "" or field_name[0] in ".[":
            if manual:
                raise ValueError("cannot switch from manual field specification to automatic field numbering")
            field_name = str(auto_index) + field_name
            auto_index += 1
        elif field_name.split(".", 1)[0].split("[", 1)[0].isdigit():
            if auto_index:
                raise ValueError("cannot switch from automatic field numbering to manual field specification")
            manual = True
        obj, _ = formatter.get_field(field_name, args, kwargs)
        if format_spec and "{" in format_spec:
            format_spec = formatter.vformat(format_spec, args, kwargs)
        value = _convert(obj, conversion, format_spec)
        parts.append(ValueSlot(value, len(parts), _field(field_name, conversion, format_spec)))
    return _classify(parts, f"format_html({fmt!r})", opts)
