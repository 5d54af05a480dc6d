"""Message parser: validates wire text and exposes raw field values.

Each object level becomes one node holding a flat ``name -> raw text`` map.
Object-valued fields keep their exact braced substring in ``data`` and are
parsed again into a child node, so a message like::

    {"ParentKey":{"ChildKey1":1234,"ChildKey2":2345}}

gives::

    root.data        == {"ParentKey": '{"ChildKey1":1234,"ChildKey2":2345}'}
    root.child.data  == {"ChildKey1": "1234", "ChildKey2": "2345"}

Validation happens once, during construction. Any structural error anywhere
in the tree fails the whole parse and is reported through ``succeeded()``.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Iterator, TypeVar

from .scalars import (
    UInt,
    parse_bool,
    parse_double,
    parse_int,
    parse_string,
    parse_unsigned,
    unquote,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

MAX_DEPTH = 3  # object levels: root, child, grandchild
WHITESPACE = " \t\r\n"

_CONVERTERS: dict[type, Callable[[str], Any]] = {
    str: parse_string,
    bool: parse_bool,
    UInt: parse_unsigned,
    int: parse_int,
    float: parse_double,
}


class MessageParseError(ValueError):
    """Structural error in wire text."""

    def __init__(self, message: str, offset: int) -> None:
        super().__init__(f"{message} at offset {offset}")
        self.offset = offset


def _skip_whitespace(text: str, pos: int) -> int:
    while pos < len(text) and text[pos] in WHITESPACE:
        pos += 1
    return pos


def _expect(text: str, pos: int, char: str) -> int:
    if pos >= len(text):
        raise MessageParseError(f"Expected {char!r}, got end of input", pos)
    if text[pos] != char:
        raise MessageParseError(f"Expected {char!r}, got {text[pos]!r}", pos)
    return pos + 1


def _scan_string(text: str, pos: int) -> int:
    """Return the index just past the closing quote of the string at ``pos``."""
    end = text.find('"', pos + 1)
    if end < 0:
        raise MessageParseError("Unterminated string", pos)
    return end + 1


def _scan_object(text: str, pos: int) -> int:
    """Return the index just past the brace matching the ``{`` at ``pos``."""
    depth = 0
    i = pos
    while i < len(text):
        char = text[i]
        if char == '"':
            i = _scan_string(text, i)
            continue
        if char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return i + 1
        i += 1
    raise MessageParseError("Unbalanced braces", pos)


def _scan_token(text: str, pos: int) -> int:
    """Return the end of an unquoted scalar token such as ``1234`` or ``true``."""
    i = pos
    while i < len(text) and text[i] not in ",}" and text[i] not in WHITESPACE:
        if text[i] in '{":':
            raise MessageParseError(f"Unexpected {text[i]!r} in value", i)
        i += 1
    if i == pos:
        raise MessageParseError("Missing value", pos)
    return i


class MessageParser:
    """One parsed object level plus its nested child nodes.

    Attributes:
        data: Field name to raw value text for this level. Strings keep their
            quotes, objects keep their braces.
        children: Child node per object-valued field, in field order.
    """

    def __init__(self, text: str, *, _depth: int = 0) -> None:
        self.data: dict[str, str] = {}
        self.children: dict[str, MessageParser] = {}
        self._depth = _depth
        self._succeeded = False
        self._error: MessageParseError | None = None

        try:
            end = self._parse_object(text, 0)
        except MessageParseError as e:
            if _depth == 0:
                logger.debug("Rejected message %r: %s", text, e)
            self.data = {}
            self.children = {}
            self._error = e
            return

        self._succeeded = True
        if _depth == 0:
            if text[end:].strip():
                logger.debug("Ignoring trailing text %r", text[end:])
            if logger.isEnabledFor(logging.DEBUG):
                logger.debug("Parsed message:\n%s", self.format_tree())

    # ─── STRUCTURE ────────────────────────────────────────────────────

    def _parse_object(self, text: str, pos: int) -> int:
        if self._depth >= MAX_DEPTH:
            raise MessageParseError(
                f"Nesting deeper than {MAX_DEPTH} levels", pos
            )

        pos = _expect(text, _skip_whitespace(text, pos), "{")
        pos = _skip_whitespace(text, pos)
        if pos < len(text) and text[pos] == "}":
            return pos + 1

        while True:
            pos = _expect(text, _skip_whitespace(text, pos), '"')
            key_end = _scan_string(text, pos - 1)
            key = text[pos : key_end - 1]

            pos = _expect(text, _skip_whitespace(text, key_end), ":")
            pos = self._parse_value(text, _skip_whitespace(text, pos), key)

            pos = _skip_whitespace(text, pos)
            if pos >= len(text):
                raise MessageParseError("Unbalanced braces", pos)
            if text[pos] == ",":
                pos += 1
                continue
            if text[pos] == "}":
                return pos + 1
            raise MessageParseError(f"Expected ',' or '}}', got {text[pos]!r}", pos)

    def _parse_value(self, text: str, pos: int, key: str) -> int:
        if pos >= len(text):
            raise MessageParseError("Missing value", pos)

        char = text[pos]
        if char == "{":
            end = _scan_object(text, pos)
            raw = text[pos:end]
            child = MessageParser(raw, _depth=self._depth + 1)
            if not child.succeeded():
                raise MessageParseError(
                    f"Invalid object for key {key!r}: {child._error}",
                    pos + child._error.offset,
                )
            self.children[key] = child
        elif char == '"':
            end = _scan_string(text, pos)
            raw = text[pos:end]
            self.children.pop(key, None)
        else:
            end = _scan_token(text, pos)
            raw = text[pos:end]
            self.children.pop(key, None)

        self.data[key] = raw
        return end

    # ─── ACCESS ───────────────────────────────────────────────────────

    def succeeded(self) -> bool:
        return self._succeeded

    @property
    def depth(self) -> int:
        return self._depth

    @property
    def child(self) -> MessageParser | None:
        """The first object-valued field's node, or None."""
        return next(iter(self.children.values()), None)

    def find(self, name: str) -> str | None:
        """Raw text for ``name`` in this node or, failing that, its children.

        Children are searched depth-first in field order.
        """
        if name in self.data:
            return self.data[name]
        for node in self.children.values():
            raw = node.find(name)
            if raw is not None:
                return raw
        return None

    def lookup(self, name: str, type_: type[T] = str) -> T | None:
        """Convert the raw value of ``name`` to ``type_``.

        Args:
            name: Field name, searched as in :meth:`find`.
            type_: One of ``str``, ``int``, ``UInt``, ``bool``, ``float``.
                ``str`` returns the raw token verbatim.

        Returns:
            The converted value, or ``None`` if the field is absent or its
            text is not a valid literal for ``type_``.

        Raises:
            TypeError: If ``type_`` is not a supported type.
        """
        converter = _CONVERTERS.get(type_)
        if converter is None:
            raise TypeError(f"Unsupported lookup type: {type_!r}")

        raw = self.find(name)
        if raw is None:
            return None
        try:
            return converter(raw)
        except ValueError as e:
            logger.debug("Lookup of %r as %s failed: %s", name, type_.__name__, e)
            return None

    def lookup_text(self, name: str) -> str | None:
        """Like ``lookup(name, str)`` but with a quoted value's quotes removed."""
        raw = self.find(name)
        return None if raw is None else unquote(raw)

    def __contains__(self, name: str) -> bool:
        return self.find(name) is not None

    # ─── DEBUG VIEWS ──────────────────────────────────────────────────

    def to_dict(self) -> dict[str, Any]:
        """Nested dict: raw text for scalars, sub-dicts for objects."""
        return {
            key: self.children[key].to_dict() if key in self.children else raw
            for key, raw in self.data.items()
        }

    def format_tree(self, indent: str = "  ") -> str:
        return "\n".join(self._tree_lines(indent, 0))

    def _tree_lines(self, indent: str, level: int) -> Iterator[str]:
        for key, raw in self.data.items():
            if key in self.children:
                yield f"{indent * level}{key}:"
                yield from self.children[key]._tree_lines(indent, level + 1)
            else:
                yield f"{indent * level}{key}: {raw}"

    def __repr__(self) -> str:
        return (
            f"MessageParser(succeeded={self._succeeded}, "
            f"keys={list(self.data)}, children={list(self.children)})"
        )


def parse_message(text: str) -> MessageParser | None:
    """Parse wire text, returning ``None`` if it is not a valid message."""
    parser = MessageParser(text)
    if not parser.succeeded():
        return None
    return parser
