"""Type-directed rendering of interpolated values.

``content_hook`` renders values found in element content and raw-text
bodies; ``attribute_hook`` renders values found inside attribute values.
Both are :func:`functools.singledispatch` functions taking the value and an
:class:`~htliteral.escape.EscapeProxy`, so a project can teach them about
its own types::

    @content_hook.register
    def _(value: Money, out):
        out.write(f"{value.amount:.2f} {value.currency}")

Objects that implement ``__html__`` are trusted and need no registration.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Sequence, Set
from enum import Enum
from functools import singledispatch
from io import StringIO
from numbers import Number
from typing import Any

from markupsafe import Markup

from .errors import BooleanInQuotedContextError, RawTextContentViolation, UnrenderableValueError, nearby
from .escape import EscapeProxy, PassthroughProxy

logger = logging.getLogger(__name__)


@singledispatch
def content_hook(value: Any, out: EscapeProxy) -> None:
    html = getattr(value, "__html__", None)
    if html is None:
        raise UnrenderableValueError(
            f"no content rendering for {type(value).__name__}; "
            "register one with content_hook.register or implement __html__",
            nearby(repr(value)),
        )
    out.write(Markup(html()))


@content_hook.register
def _(value: str, out: EscapeProxy) -> None:
    out.write(value)


@content_hook.register
def _(value: Number, out: EscapeProxy) -> None:
    out.write(str(value))


@content_hook.register
def _(value: Enum, out: EscapeProxy) -> None:
    content_hook(value.value, out)


@content_hook.register(type(None))
def _(value, out: EscapeProxy) -> None:
    return


@content_hook.register(bytes)
def _(value, out: EscapeProxy) -> None:
    raise UnrenderableValueError(
        "no content rendering for bytes; decode them to str first",
        nearby(repr(value)),
    )


@content_hook.register(Sequence)
@content_hook.register(Set)
@content_hook.register(Iterator)
def _(values, out: EscapeProxy) -> None:
    for item in values:
        content_hook(item, out)


def rawtext(element: str, value: Any, out: EscapeProxy) -> None:
    """Write ``value`` unescaped inside the body of a raw-text ``element``.

    The value is first rendered with :func:`content_hook` into a buffer, then
    rejected if it could end the element early.
    """
    buffer = StringIO()
    content_hook(value, PassthroughProxy(buffer))
    text = buffer.getvalue()
    lowered = text.lower()
    end_tag = f"</{element}>"
    if end_tag in lowered:
        logger.debug("rejected <%s> body containing its end tag", element)
        raise RawTextContentViolation(
            f"content of <{element}> cannot contain the end tag ({end_tag})",
            nearby(text, lowered.index(end_tag)),
        )
    if element == "script" and "<!--" in text:
        logger.debug("rejected <script> body containing a comment opener")
        raise RawTextContentViolation(
            "content of <script> should not contain a comment block (<!--)",
            nearby(text, text.index("<!--")),
        )
    out.write_trusted(text)


@singledispatch
def attribute_hook(value: Any, out: EscapeProxy) -> None:
    # EscapeProxy trusts __html__ and escapes the str() of anything else.
    out.write(value)


# Strings are sequences, but render whole.
@attribute_hook.register(str)
@attribute_hook.register(bytes)
def _(value, out: EscapeProxy) -> None:
    out.write(value)


@attribute_hook.register
def _(value: bool, out: EscapeProxy) -> None:
    raise BooleanInQuotedContextError(
        "boolean used within an attribute value; "
        "interpolate the whole attribute (name={value}) or a spread to get bare/omitted semantics",
        repr(value),
    )


@attribute_hook.register(type(None))
def _(value, out: EscapeProxy) -> None:
    return


@attribute_hook.register
def _(value: Enum, out: EscapeProxy) -> None:
    attribute_hook(value.value, out)
