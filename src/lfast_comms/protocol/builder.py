"""Message builder: an ordered, labeled field list rendered to wire text.

Wire layout::

    {"<Label>":<Body>}

    Body := ""                                   (no fields)
          | {"<name1>":<val1>,"<name2>":<val2>}  (insertion order, no spaces)

A nested builder is rendered in place of a scalar value. A labeled nested
builder contributes its own full ``{"Label":<Body>}`` form; an unlabeled one
contributes only its body.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from .scalars import Scalar, format_scalar

FieldValue = Union[Scalar, "MessageBuilder"]


@dataclass(frozen=True)
class Field:
    """A single named field of a message."""

    name: str
    value: FieldValue

    def render(self) -> str:
        if isinstance(self.value, MessageBuilder):
            return self.value.render_nested()
        return format_scalar(self.value)

    def __str__(self) -> str:
        return f'"{self.name}":{self.render()}'


class MessageBuilder:
    """Accumulates named fields under one label and serializes them.

    Usage::

        msg = MessageBuilder("MountMessage")
        msg.add_argument("ParkCommand", 1.234)
        msg.add_argument("NoDisconnect", True)
        msg.get_message_str()
        # '{"MountMessage":{"ParkCommand":1.234,"NoDisconnect":true}}'
    """

    def __init__(self, label: str = "") -> None:
        self._label = label
        self._fields: list[Field] = []

    @property
    def label(self) -> str:
        return self._label

    @property
    def fields(self) -> tuple[Field, ...]:
        """Snapshot of the fields; nested builders are returned as copies."""
        return tuple(
            Field(name=f.name, value=f.value.copy())
            if isinstance(f.value, MessageBuilder)
            else f
            for f in self._fields
        )

    def add_argument(self, name: str, value: FieldValue) -> None:
        """Append a field.

        Duplicate names are appended, not merged; both are rendered.

        Args:
            name: Non-empty field name.
            value: ``int``, ``UInt``, ``bool``, ``float``, ``str`` or a nested
                ``MessageBuilder``. Nested builders are copied, so changes
                made to them afterwards do not reach this message.

        Raises:
            ValueError: If ``name`` is empty or a double is not finite.
            TypeError: If ``value`` is of an unsupported type.
        """
        if not name:
            raise ValueError("Field name must be non-empty")
        if isinstance(value, MessageBuilder):
            value = value.copy()
        else:
            # Validate now rather than at render time.
            format_scalar(value)
        self._fields.append(Field(name=name, value=value))

    def num_args(self) -> int:
        return len(self._fields)

    def get_arg_key(self, index: int) -> str:
        """Return the name of the field at ``index`` (insertion order).

        Raises:
            IndexError: If ``index`` is outside ``0 .. num_args() - 1``.
        """
        if not 0 <= index < len(self._fields):
            raise IndexError(
                f"Argument index {index} out of range for {len(self._fields)} argument(s)"
            )
        return self._fields[index].name

    def copy(self) -> MessageBuilder:
        clone = MessageBuilder(self._label)
        clone._fields = list(self.fields)
        return clone

    def render_body(self) -> str:
        if not self._fields:
            return '""'
        return "{" + ",".join(str(f) for f in self._fields) + "}"

    def render_nested(self) -> str:
        """Rendering used when this builder is the value of a parent field."""
        if not self._label:
            return self.render_body()
        return self.get_message_str()

    def get_message_str(self) -> str:
        return f'{{"{self._label}":{self.render_body()}}}'

    def __len__(self) -> int:
        return len(self._fields)

    def __str__(self) -> str:
        return self.get_message_str()

    def __repr__(self) -> str:
        return f"MessageBuilder(label={self._label!r}, num_args={len(self._fields)})"
