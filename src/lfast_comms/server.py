"""MCP server exposing the mount message codec.

Lets peer tooling encode command messages and inspect telemetry messages
through the Model Context Protocol using the official Python MCP SDK with
stdio transport. No transport to the mount itself lives here.
"""

from __future__ import annotations

import logging
from typing import Any

from mcp.server.fastmcp import FastMCP

from .protocol.builder import MessageBuilder
from .protocol.commands import (
    OK_RESPONSE,
    MessageLabel,
    build_handshake,
    parse_handshake,
    unacknowledged_keys,
)
from .protocol.parser import MAX_DEPTH, MessageParser
from .protocol.responses import parse_altaz_response
from .protocol.scalars import UInt

logger = logging.getLogger(__name__)

mcp = FastMCP(
    "lfast-mount-comms",
    instructions="Encode and decode LFAST mount controller messages",
)

LOOKUP_TYPES: dict[str, type] = {
    "str": str,
    "int": int,
    "uint": UInt,
    "bool": bool,
    "float": float,
}


def _builder_from_fields(label: str, fields: dict[str, Any]) -> MessageBuilder:
    """Build a message from JSON fields; nested objects become unlabeled builders."""
    msg = MessageBuilder(label)
    for name, value in fields.items():
        if isinstance(value, dict):
            value = _builder_from_fields("", value)
        msg.add_argument(name, value)
    return msg


def _json_value(value: Any) -> Any:
    # UInt is an int subclass; hand back a plain int.
    if isinstance(value, UInt):
        return int(value)
    return value


# ─── ENCODING TOOLS ──────────────────────────────────────────────────

@mcp.tool()
def encode_message(
    label: str = MessageLabel.MOUNT_MESSAGE.value,
    fields: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Encode a labeled message to wire text.

    Args:
        label: Top-level message label (default "MountMessage").
        fields: Field name to value. Values may be numbers, booleans,
            strings, or nested objects (encoded as nested messages).
    """
    try:
        msg = _builder_from_fields(label, fields or {})
    except (TypeError, ValueError) as e:
        logger.warning("Cannot encode %s message: %s", label, e)
        return {"error": str(e)}
    return {"message": msg.get_message_str(), "num_args": msg.num_args()}


@mcp.tool()
def encode_handshake() -> dict[str, Any]:
    """Encode the handshake command sent when the link comes up."""
    return {"message": build_handshake().get_message_str()}


# ─── DECODING TOOLS ──────────────────────────────────────────────────

@mcp.tool()
def parse_message(text: str) -> dict[str, Any]:
    """Parse wire text and return its field tree.

    Args:
        text: One complete message, e.g. '{"KarbonMessage":{"Handshake":48879}}'.
    """
    parser = MessageParser(text)
    if not parser.succeeded():
        return {
            "succeeded": False,
            "error": f"Malformed message (max nesting depth {MAX_DEPTH})",
        }
    return {
        "succeeded": True,
        "data": dict(parser.data),
        "tree": parser.to_dict(),
    }


@mcp.tool()
def lookup_field(text: str, name: str, value_type: str = "str") -> dict[str, Any]:
    """Look up one field of a message and convert it.

    Args:
        text: Wire text of the message.
        name: Field name; nested levels are searched too.
        value_type: One of str, text, int, uint, bool, float. "str" returns the raw
            token, "text" strips the quotes of a quoted string.
    """
    if value_type != "text" and value_type not in LOOKUP_TYPES:
        return {"error": f"Unknown type '{value_type}'. Valid: {['text', *LOOKUP_TYPES]}"}

    parser = MessageParser(text)
    if not parser.succeeded():
        return {"error": "Malformed message"}

    if value_type == "text":
        value = parser.lookup_text(name)
    else:
        value = parser.lookup(name, LOOKUP_TYPES[value_type])
    return {"found": value is not None, "value": _json_value(value)}


@mcp.tool()
def check_ok(command_keys: list[str], response_text: str) -> dict[str, Any]:
    """Check that a response acknowledges each command key with "$OK^".

    Args:
        command_keys: Field names of the command that was sent.
        response_text: Wire text of the peer's response.
    """
    parser = MessageParser(response_text)
    if not parser.succeeded():
        return {"ok": False, "error": "Malformed response"}
    missing = unacknowledged_keys(command_keys, parser)
    return {"ok": not missing, "unacknowledged": missing, "token": OK_RESPONSE}


@mcp.tool()
def decode_telemetry(text: str) -> dict[str, Any]:
    """Decode handshake and azimuth/elevation fields from a peer message."""
    parser = MessageParser(text)
    if not parser.succeeded():
        return {"error": "Malformed message"}

    result: dict[str, Any] = {"handshake_ok": parse_handshake(parser)}
    altaz = parse_altaz_response(parser)
    if altaz:
        result["az_position"] = altaz.az_position
        result["el_position"] = altaz.el_position
    return result


# ─── ENTRY POINT ─────────────────────────────────────────────────────

def main():
    """Run the MCP server with stdio transport."""
    logging.basicConfig(level=logging.INFO)
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
