"""The renderable artifact produced by classifying a template."""

from __future__ import annotations

from collections.abc import Sequence
from io import StringIO

from markupsafe import Markup

from .attributes import attribute_pair, attributes
from .escape import EscapeProxy, TextSink
from .hooks import attribute_hook, content_hook, rawtext
from .tokens import RawMarkup, Rendered


class Result:
    """An immutable list of render steps plus a description of its source.

    ``str(result)`` and ``result.__html__()`` give the rendered markup;
    ``repr(result)`` echoes the template the result was built from, with
    interpolations shown unevaluated.
    """

    __slots__ = ("source", "steps")

    def __init__(self, steps: Sequence[RawMarkup | Rendered], source: str = "") -> None:
        object.__setattr__(self, "steps", tuple(steps))
        object.__setattr__(self, "source", source)

    def __setattr__(self, name, value):
        raise AttributeError(f"{type(self).__name__} is immutable")

    def render(self, sink: TextSink) -> None:
        """Write the markup to ``sink`` step by step.

        Output is written as it is produced; when a value fails to render,
        everything before it has already reached ``sink``.
        """
        out = EscapeProxy(sink)
        for step in self.steps:
            if isinstance(step, RawMarkup):
                out.write_trusted(step.text)
                continue
            kind = step.kind
            value = step.slot.value
            if kind == Rendered.CONTENT:
                content_hook(value, out)
            elif kind == Rendered.RAWTEXT:
                rawtext(step.element, value, out)
            elif kind == Rendered.ATTR_VALUE_QUOTED:
                attribute_hook(value, out)
            elif kind == Rendered.ATTR_VALUE_UNQUOTED:
                attribute_pair(step.attr_name, value, out)
            elif kind == Rendered.ATTR_SPREAD:
                attributes(value, out)
            else:
                raise AssertionError(f"unknown render step kind {kind!r}")

    def __str__(self) -> str:
        buffer = StringIO()
        self.render(buffer)
        return buffer.getvalue()

    def __html__(self) -> Markup:
        return Markup(str(self))

    def __repr__(self) -> str:
        return self.source or f"Result({list(self.steps)!r})"
