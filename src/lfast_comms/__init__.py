"""Command and telemetry message codec for the LFAST mount controller."""

from .protocol import (
    MAX_DEPTH,
    MessageBuilder,
    MessageParseError,
    MessageParser,
    UInt,
    parse_message,
)

__version__ = "0.1.0"
