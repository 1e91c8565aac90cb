"""Context classification of interpolated values.

The tokenizer walks the literal chunks of a template through a reduced
version of the WHATWG HTML tokenizer [1]. It never builds tokens; it only
tracks enough state to know, at every value slot, whether the value lands
in element content, in a raw-text element body, inside a quoted or unquoted
attribute value, or in the attribute list of a tag. Any other position is
rejected, as are constructs the state machine does not model (DOCTYPE,
CDATA, script data escapes).

[1] https://html.spec.whatwg.org/multipage/parsing.html#tokenization
"""

import logging
from enum import IntEnum

from .attributes import validate_attribute_name
from .constants import DELIMITERS, RAWTEXT_ELEMENTS, UNQUOTED_VALUE_FORBIDDEN, WHITESPACE
from .errors import (
    AmbiguousUnquotedAttributeError,
    InvalidInterpolationPositionError,
    LexicalError,
    UnsupportedConstructError,
    nearby,
)
from .tokens import RawMarkup, Rendered, ValueSlot

logger = logging.getLogger(__name__)


class TokenizerState(IntEnum):
    DATA = 0
    TAG_OPEN = 1
    END_TAG_OPEN = 2
    TAG_NAME = 3
    BEFORE_ATTRIBUTE_NAME = 4
    AFTER_ATTRIBUTE_NAME = 5
    ATTRIBUTE_NAME = 6
    BEFORE_ATTRIBUTE_VALUE = 7
    ATTRIBUTE_VALUE_DOUBLE_QUOTED = 8
    ATTRIBUTE_VALUE_SINGLE_QUOTED = 9
    ATTRIBUTE_VALUE_UNQUOTED = 10
    AFTER_ATTRIBUTE_VALUE_QUOTED = 11
    SELF_CLOSING_START_TAG = 12
    COMMENT_START = 13
    COMMENT_START_DASH = 14
    COMMENT = 15
    COMMENT_LESS_THAN_SIGN = 16
    COMMENT_LESS_THAN_SIGN_BANG = 17
    COMMENT_LESS_THAN_SIGN_BANG_DASH = 18
    COMMENT_LESS_THAN_SIGN_BANG_DASH_DASH = 19
    COMMENT_END_DASH = 20
    COMMENT_END = 21
    COMMENT_END_BANG = 22
    MARKUP_DECLARATION_OPEN = 23
    RAWTEXT = 24
    RAWTEXT_LESS_THAN_SIGN = 25
    RAWTEXT_END_TAG_OPEN = 26
    RAWTEXT_END_TAG_NAME = 27


def normalize_newlines(text):
    return text.replace("\r\n", "\n").replace("\r", "\n")


def _is_alpha(c):
    return ("a" <= c <= "z") or ("A" <= c <= "Z")


def _starts_with_delimiter(text):
    return bool(text) and text[0] in DELIMITERS


class TokenizerOpts:
    __slots__ = ("initial_rawtext_tag", "initial_state")

    def __init__(self, initial_state=None, initial_rawtext_tag=None):
        if initial_state is None:
            initial_state = TokenizerState.RAWTEXT if initial_rawtext_tag else TokenizerState.DATA
        initial_state = TokenizerState(initial_state)
        if initial_state == TokenizerState.RAWTEXT:
            if initial_rawtext_tag is None or initial_rawtext_tag.lower() not in RAWTEXT_ELEMENTS:
                raise ValueError(f"initial_rawtext_tag must be one of {sorted(RAWTEXT_ELEMENTS)}")
            initial_rawtext_tag = initial_rawtext_tag.lower()
        elif initial_state != TokenizerState.DATA:
            raise ValueError("initial_state must be DATA or RAWTEXT")
        elif initial_rawtext_tag is not None:
            raise ValueError("initial_rawtext_tag requires the RAWTEXT initial state")
        self.initial_state = initial_state
        self.initial_rawtext_tag = initial_rawtext_tag

    def __repr__(self):
        if self.initial_rawtext_tag:
            return f"TokenizerOpts({self.initial_state.name}, {self.initial_rawtext_tag!r})"
        return f"TokenizerOpts({self.initial_state.name})"


class Tokenizer:
    __slots__ = (
        "attr_end",
        "attr_start",
        "buffer",
        "element_tag",
        "handlers",
        "length",
        "opts",
        "parts",
        "pos",
        "rawtext_tag",
        "state",
        "tag_is_open",
        "tag_name",
        "temp_buffer",
    )

    def __init__(self, opts=None):
        self.opts = opts or TokenizerOpts()
        S = TokenizerState
        self.handlers = {
            S.DATA: self._state_data,
            S.TAG_OPEN: self._state_tag_open,
            S.END_TAG_OPEN: self._state_end_tag_open,
            S.TAG_NAME: self._state_tag_name,
            S.BEFORE_ATTRIBUTE_NAME: self._state_before_attribute_name,
            S.AFTER_ATTRIBUTE_NAME: self._state_after_attribute_name,
            S.ATTRIBUTE_NAME: self._state_attribute_name,
            S.BEFORE_ATTRIBUTE_VALUE: self._state_before_attribute_value,
            S.ATTRIBUTE_VALUE_DOUBLE_QUOTED: self._state_attribute_value_double,
            S.ATTRIBUTE_VALUE_SINGLE_QUOTED: self._state_attribute_value_single,
            S.ATTRIBUTE_VALUE_UNQUOTED: self._state_attribute_value_unquoted,
            S.AFTER_ATTRIBUTE_VALUE_QUOTED: self._state_after_attribute_value_quoted,
            S.SELF_CLOSING_START_TAG: self._state_self_closing_start_tag,
            S.COMMENT_START: self._state_comment_start,
            S.COMMENT_START_DASH: self._state_comment_start_dash,
            S.COMMENT: self._state_comment,
            S.COMMENT_LESS_THAN_SIGN: self._state_comment_less_than_sign,
            S.COMMENT_LESS_THAN_SIGN_BANG: self._state_comment_less_than_sign_bang,
            S.COMMENT_LESS_THAN_SIGN_BANG_DASH: self._state_comment_less_than_sign_bang_dash,
            S.COMMENT_LESS_THAN_SIGN_BANG_DASH_DASH: self._state_comment_less_than_sign_bang_dash_dash,
            S.COMMENT_END_DASH: self._state_comment_end_dash,
            S.COMMENT_END: self._state_comment_end,
            S.COMMENT_END_BANG: self._state_comment_end_bang,
            S.MARKUP_DECLARATION_OPEN: self._state_markup_declaration_open,
            S.RAWTEXT: self._state_rawtext,
            S.RAWTEXT_LESS_THAN_SIGN: self._state_rawtext_less_than_sign,
            S.RAWTEXT_END_TAG_OPEN: self._state_rawtext_end_tag_open,
            S.RAWTEXT_END_TAG_NAME: self._state_rawtext_end_tag_name,
        }
        self._reset()

    def _reset(self):
        self.state = self.opts.initial_state
        self.rawtext_tag = self.opts.initial_rawtext_tag
        self.element_tag = self.rawtext_tag
        self.tag_is_open = False
        self.tag_name = []
        self.temp_buffer = []
        self.attr_start = self.attr_end = 0
        self.buffer = ""
        self.length = 0
        self.pos = 0
        self.parts = []

    def run(self, parts):
        """Classify ``parts`` and return the list of render steps.

        ``parts`` is a sequence of literal ``str`` chunks and
        :class:`ValueSlot` instances (other objects are wrapped in a slot).
        """
        self._reset()
        parts = _prepare(parts)
        count = len(parts)
        for index in range(count):
            part = parts[index]
            if isinstance(part, str):
                self._scan(part)
                self.parts.append(part)
            else:
                following = parts[index + 1] if index + 1 < count else None
                replacement = self._classify(part, following)
                if replacement is not None:
                    parts[index + 1] = replacement
        return _merge(self.parts)

    # ---------------------
    # Value slots
    # ---------------------

    def _classify(self, slot, following):
        """Append the render step for ``slot``; may return a rewritten next literal."""
        S = TokenizerState
        state = self.state
        replacement = None
        if state == S.DATA:
            step = Rendered(Rendered.CONTENT, slot)
        elif state == S.RAWTEXT:
            step = Rendered(Rendered.RAWTEXT, slot, element=self.rawtext_tag)
        elif state == S.BEFORE_ATTRIBUTE_VALUE:
            prior = self.parts[-1]
            name = prior[self.attr_start : self.attr_end]
            # Drop " name=" (and any spaces after "="); attribute_pair writes its own.
            self.parts[-1] = prior[: max(self.attr_start - 1, 0)]
            attr_name = validate_attribute_name(name)
            logger.debug("unquoted attribute %r at slot %s", attr_name, slot.index)
            if isinstance(following, str) and not _starts_with_delimiter(following):
                logger.debug("rejected unquoted attribute %r followed by %r", attr_name, following[:10])
                raise AmbiguousUnquotedAttributeError(
                    "unquoted attribute interpolation is limited to a single component",
                    f"{name}={nearby(following)}",
                )
            self.state = S.ATTRIBUTE_VALUE_UNQUOTED
            step = Rendered(Rendered.ATTR_VALUE_UNQUOTED, slot, attr_name=attr_name)
        elif state == S.ATTRIBUTE_VALUE_UNQUOTED:
            raise AmbiguousUnquotedAttributeError(
                "unquoted attribute interpolation is limited to a single component",
                slot.expression or nearby(repr(slot.value)),
            )
        elif state in (S.ATTRIBUTE_VALUE_SINGLE_QUOTED, S.ATTRIBUTE_VALUE_DOUBLE_QUOTED):
            step = Rendered(Rendered.ATTR_VALUE_QUOTED, slot)
        elif state == S.BEFORE_ATTRIBUTE_NAME:
            if self.parts and isinstance(self.parts[-1], str) and self.parts[-1].endswith(" "):
                self.parts[-1] = self.parts[-1][:-1]
            if isinstance(following, str) and not _starts_with_delimiter(following):
                replacement = " " + following
            step = Rendered(Rendered.ATTR_SPREAD, slot)
        else:
            logger.debug("rejected slot %s in state %s", slot.index, state.name)
            raise InvalidInterpolationPositionError(
                f"invalid interpolation position ({state.name.lower().replace('_', ' ')})",
                self._context(),
                state=state,
            )
        logger.debug("slot %s in state %s classified as %r", slot.index, state.name, step)
        self.parts.append(step)
        return replacement

    def _context(self):
        for part in reversed(self.parts):
            if isinstance(part, str):
                return part[-10:]
        return ""

    # ---------------------
    # Literal chunks
    # ---------------------

    def _scan(self, text):
        self.buffer = text
        self.length = len(text)
        self.pos = 0
        handlers = self.handlers
        while self.pos < self.length:
            # Each handler is the transition function for its state: it sets the
            # next state and returns whether the character was consumed.
            if handlers[self.state](self.buffer[self.pos]):
                self.pos += 1

    def _error(self, message):
        logger.debug("lexical error in state %s: %s", self.state.name, message)
        return LexicalError(message, nearby(self.buffer, self.pos - 1))

    def _consume_if(self, literal):
        end = self.pos + len(literal)
        if end > self.length:
            return False
        if self.buffer[self.pos : end] != literal:
            return False
        self.pos = end
        return True

    def _consume_case_insensitive(self, literal):
        end = self.pos + len(literal)
        if end > self.length:
            return False
        if self.buffer[self.pos : end].lower() != literal.lower():
            return False
        self.pos = end
        return True

    def _close_tag(self):
        if self.tag_is_open and self.element_tag in RAWTEXT_ELEMENTS:
            self.state = TokenizerState.RAWTEXT
            self.rawtext_tag = self.element_tag
        else:
            self.state = TokenizerState.DATA
            self.rawtext_tag = None
        self.tag_is_open = False

    def _start_attribute(self):
        self.attr_start = self.attr_end = self.pos
        self.state = TokenizerState.ATTRIBUTE_NAME

    # ---------------------
    # State handlers
    # ---------------------

    def _state_data(self, c):
        if c == "<":
            self.state = TokenizerState.TAG_OPEN
        return True

    def _state_tag_open(self, c):
        if c == "!":
            self.state = TokenizerState.MARKUP_DECLARATION_OPEN
            return True
        if c == "/":
            self.state = TokenizerState.END_TAG_OPEN
            return True
        if _is_alpha(c):
            self.tag_is_open = True
            self.tag_name.clear()
            self.state = TokenizerState.TAG_NAME
            return False
        if c == "?":
            # XML processing instruction; the "bogus comment" recovery is not modeled.
            raise self._error("unexpected question mark instead of tag name")
        raise self._error("invalid first character of tag name")

    def _state_end_tag_open(self, c):
        if _is_alpha(c):
            self.tag_is_open = False
            self.tag_name.clear()
            self.state = TokenizerState.TAG_NAME
            return False
        if c == ">":
            self.state = TokenizerState.DATA
            return True
        raise self._error("invalid first character of tag name")

    def _state_tag_name(self, c):
        if c in WHITESPACE or c == "/" or c == ">":
            if self.tag_is_open:
                self.element_tag = "".join(self.tag_name)
            if c == ">":
                self._close_tag()
            elif c == "/":
                self.state = TokenizerState.SELF_CLOSING_START_TAG
            else:
                self.state = TokenizerState.BEFORE_ATTRIBUTE_NAME
            return True
        if self.tag_is_open:
            self.tag_name.append(c.lower())
        return True

    def _state_before_attribute_name(self, c):
        if c in WHITESPACE:
            return True
        if c == "/" or c == ">":
            self.state = TokenizerState.AFTER_ATTRIBUTE_NAME
            return False
        if c == "=":
            raise self._error("unexpected equals sign before attribute name")
        self._start_attribute()
        return False

    def _state_attribute_name(self, c):
        if c in WHITESPACE or c == "/" or c == ">":
            self.state = TokenizerState.AFTER_ATTRIBUTE_NAME
            return False
        if c == "=":
            self.state = TokenizerState.BEFORE_ATTRIBUTE_VALUE
            return True
        if c in ('"', "'", "<"):
            raise self._error("unexpected character in attribute name")
        self.attr_end = self.pos + 1
        return True

    def _state_after_attribute_name(self, c):
        if c in WHITESPACE:
            return True
        if c == "/":
            self.state = TokenizerState.SELF_CLOSING_START_TAG
            return True
        if c == "=":
            self.state = TokenizerState.BEFORE_ATTRIBUTE_VALUE
            return True
        if c == ">":
            self._close_tag()
            return True
        self._start_attribute()
        return False

    def _state_before_attribute_value(self, c):
        if c in WHITESPACE:
            return True
        if c == '"':
            self.state = TokenizerState.ATTRIBUTE_VALUE_DOUBLE_QUOTED
            return True
        if c == "'":
            self.state = TokenizerState.ATTRIBUTE_VALUE_SINGLE_QUOTED
            return True
        if c == ">":
            raise self._error("missing attribute value")
        self.state = TokenizerState.ATTRIBUTE_VALUE_UNQUOTED
        return False

    def _state_attribute_value_double(self, c):
        if c == '"':
            self.state = TokenizerState.AFTER_ATTRIBUTE_VALUE_QUOTED
        return True

    def _state_attribute_value_single(self, c):
        if c == "'":
            self.state = TokenizerState.AFTER_ATTRIBUTE_VALUE_QUOTED
        return True

    def _state_attribute_value_unquoted(self, c):
        if c in WHITESPACE:
            self.state = TokenizerState.BEFORE_ATTRIBUTE_NAME
            return True
        if c == ">":
            self._close_tag()
            return True
        if c in UNQUOTED_VALUE_FORBIDDEN:
            raise self._error("unexpected character in unquoted attribute value")
        return True

    def _state_after_attribute_value_quoted(self, c):
        if c in WHITESPACE:
            self.state = TokenizerState.BEFORE_ATTRIBUTE_NAME
            return True
        if c == "/":
            self.state = TokenizerState.SELF_CLOSING_START_TAG
            return True
        if c == ">":
            self._close_tag()
            return True
        raise self._error("missing whitespace between attributes")

    def _state_self_closing_start_tag(self, c):
        if c == ">":
            # Browsers ignore the solidus here, so <script/> still opens a raw-text body.
            self._close_tag()
            return True
        raise self._error("unexpected solidus in tag")

    def _state_markup_declaration_open(self, c):
        if self._consume_if("--"):
            self.state = TokenizerState.COMMENT_START
            return False
        if self._consume_case_insensitive("DOCTYPE"):
            raise UnsupportedConstructError("DOCTYPE is not supported", nearby(self.buffer, self.pos - 9))
        if self._consume_if("[CDATA["):
            raise UnsupportedConstructError("CDATA is not supported", nearby(self.buffer, self.pos - 9))
        raise self._error("incorrectly opened comment")

    def _state_comment_start(self, c):
        if c == "-":
            self.state = TokenizerState.COMMENT_START_DASH
            return True
        if c == ">":
            raise self._error("abrupt closing of empty comment")
        self.state = TokenizerState.COMMENT
        return False

    def _state_comment_start_dash(self, c):
        if c == "-":
            self.state = TokenizerState.COMMENT_END
            return True
        if c == ">":
            raise self._error("abrupt closing of empty comment")
        self.state = TokenizerState.COMMENT
        return False

    def _state_comment(self, c):
        if c == "<":
            self.state = TokenizerState.COMMENT_LESS_THAN_SIGN
        elif c == "-":
            self.state = TokenizerState.COMMENT_END_DASH
        return True

    def _state_comment_less_than_sign(self, c):
        if c == "!":
            self.state = TokenizerState.COMMENT_LESS_THAN_SIGN_BANG
            return True
        if c == "<":
            return True
        self.state = TokenizerState.COMMENT
        return False

    def _state_comment_less_than_sign_bang(self, c):
        if c == "-":
            self.state = TokenizerState.COMMENT_LESS_THAN_SIGN_BANG_DASH
            return True
        self.state = TokenizerState.COMMENT
        return False

    def _state_comment_less_than_sign_bang_dash(self, c):
        if c == "-":
            self.state = TokenizerState.COMMENT_LESS_THAN_SIGN_BANG_DASH_DASH
            return True
        self.state = TokenizerState.COMMENT_END_DASH
        return False

    def _state_comment_less_than_sign_bang_dash_dash(self, c):
        if c == ">":
            self.state = TokenizerState.COMMENT_END
            return False
        raise self._error("nested comment")

    def _state_comment_end_dash(self, c):
        if c == "-":
            self.state = TokenizerState.COMMENT_END
            return True
        self.state = TokenizerState.COMMENT
        return False

    def _state_comment_end(self, c):
        if c == ">":
            self.state = TokenizerState.DATA
            return True
        if c == "!":
            self.state = TokenizerState.COMMENT_END_BANG
            return True
        if c == "-":
            return True
        self.state = TokenizerState.COMMENT
        return False

    def _state_comment_end_bang(self, c):
        if c == "-":
            self.state = TokenizerState.COMMENT_END_DASH
            return True
        if c == ">":
            raise self._error("incorrectly closed comment")
        self.state = TokenizerState.COMMENT
        return False

    def _state_rawtext(self, c):
        if c == "<":
            self.state = TokenizerState.RAWTEXT_LESS_THAN_SIGN
        return True

    def _state_rawtext_less_than_sign(self, c):
        if c == "/":
            self.temp_buffer.clear()
            self.state = TokenizerState.RAWTEXT_END_TAG_OPEN
            return True
        if c == "!" and self.rawtext_tag == "script":
            raise UnsupportedConstructError(
                "script data escape (<!) is not supported", nearby(self.buffer, self.pos - 1)
            )
        self.state = TokenizerState.RAWTEXT
        return False

    def _state_rawtext_end_tag_open(self, c):
        self.state = TokenizerState.RAWTEXT_END_TAG_NAME if _is_alpha(c) else TokenizerState.RAWTEXT
        return False

    def _state_rawtext_end_tag_name(self, c):
        if _is_alpha(c):
            self.temp_buffer.append(c.lower())
            return True
        if (c in WHITESPACE or c == "/" or c == ">") and "".join(self.temp_buffer) == self.rawtext_tag:
            # Appropriate end tag: the rest of the tag is tokenized as a closing tag.
            self.tag_is_open = False
            if c == ">":
                self._close_tag()
            elif c == "/":
                self.state = TokenizerState.SELF_CLOSING_START_TAG
            else:
                self.state = TokenizerState.BEFORE_ATTRIBUTE_NAME
            return True
        self.state = TokenizerState.RAWTEXT
        return False


def _prepare(parts):
    prepared = []
    for index, part in enumerate(parts):
        if isinstance(part, str):
            if not part:
                continue
            if prepared and isinstance(prepared[-1], str):
                prepared[-1] += part
            else:
                prepared.append(part)
            continue
        if not isinstance(part, ValueSlot):
            part = ValueSlot(part, index)
        elif part.index is None:
            part = ValueSlot(part.value, index, part.expression)
        prepared.append(part)
    return [normalize_newlines(part) if isinstance(part, str) else part for part in prepared]


def _merge(parts):
    steps = []
    for part in parts:
        if isinstance(part, str):
            if not part:
                continue
            if steps and isinstance(steps[-1], RawMarkup):
                steps[-1] = RawMarkup(steps[-1].text + part)
            else:
                steps.append(RawMarkup(part))
        else:
            steps.append(part)
    return steps
