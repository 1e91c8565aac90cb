class ValueSlot:
    __slots__ = ("expression", "index", "value")

    def __init__(self, value, index=None, expression=None):
        object.__setattr__(self, "value", value)
        object.__setattr__(self, "index", index)
        object.__setattr__(self, "expression", expression)

    def __setattr__(self, name, value):
        raise AttributeError("ValueSlot is immutable")

    def __repr__(self):
        if self.expression:
            return f"ValueSlot({self.index}, {self.expression})"
        return f"ValueSlot({self.index}, {self.value!r})"


class RawMarkup:
    """Template text that passed the tokenizer; written without escaping."""

    __slots__ = ("text",)

    def __init__(self, text):
        self.text = text

    def __repr__(self):
        return f"RawMarkup({self.text!r})"

    def __eq__(self, other):
        if not isinstance(other, RawMarkup):
            return NotImplemented
        return self.text == other.text

    __hash__ = None


class Rendered:
    __slots__ = ("attr_name", "element", "kind", "slot")

    CONTENT = 0
    RAWTEXT = 1
    ATTR_VALUE_QUOTED = 2
    ATTR_VALUE_UNQUOTED = 3
    ATTR_SPREAD = 4

    KIND_NAMES = {
        CONTENT: "content",
        RAWTEXT: "rawtext",
        ATTR_VALUE_QUOTED: "attr-value-quoted",
        ATTR_VALUE_UNQUOTED: "attr-value-unquoted",
        ATTR_SPREAD: "attr-spread",
    }

    def __init__(self, kind, slot, element=None, attr_name=None):
        self.kind = kind
        self.slot = slot
        self.element = element
        self.attr_name = attr_name

    @property
    def value(self):
        return self.slot.value

    def __repr__(self):
        kind_str = self.KIND_NAMES.get(self.kind, str(self.kind))
        if self.kind == self.RAWTEXT:
            kind_str = f"{kind_str}:{self.element}"
        elif self.kind == self.ATTR_VALUE_UNQUOTED:
            kind_str = f"{kind_str}:{self.attr_name}"
        return f"<{kind_str} {self.slot!r}>"
