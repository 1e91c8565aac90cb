"""The escape boundary: every byte of rendered output passes through a proxy.

Anything implementing ``__html__`` (``markupsafe.Markup``, a nested
``Result``, user types) is trusted and written as-is. Everything else is
converted with ``str()`` and entity-escaped.
"""

from __future__ import annotations

from typing import Any, Protocol

from markupsafe import Markup, escape


class TextSink(Protocol):
    def write(self, text: str, /) -> Any: ...


class EscapeProxy:
    __slots__ = ("sink",)

    def __init__(self, sink: TextSink) -> None:
        self.sink = sink

    def write(self, value: Any) -> None:
        text = str(escape(value))
        if text:
            self.sink.write(text)

    def write_trusted(self, text: str) -> None:
        if text:
            self.sink.write(str(text))


class PassthroughProxy(EscapeProxy):
    """Collects output verbatim; used for raw-text bodies before they are checked."""

    __slots__ = ()

    def write(self, value: Any) -> None:
        if hasattr(value, "__html__"):
            value = value.__html__()
        text = str(value)
        if text:
            self.sink.write(text)


def unescape(text: str) -> str:
    """Inverse of the escaping applied by :class:`EscapeProxy`."""
    return Markup(text).unescape()
