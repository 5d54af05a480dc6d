"""Message labels, acknowledgement token, and mount command builders.

The controller sends ``MountMessage`` messages; the peer answers with a
``KarbonMessage`` that echoes every command field with ``"$OK^"``::

    -> {"MountMessage":{"ParkCommand":1.234,"NoDisconnect":true}}
    <- {"KarbonMessage":{"ParkCommand":"$OK^","NoDisconnect":"$OK^"}}
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Iterable

from .builder import FieldValue, MessageBuilder
from .parser import MessageParser
from .scalars import UInt

logger = logging.getLogger(__name__)

OK_RESPONSE = "$OK^"
HANDSHAKE_VALUE = 0xBEEF


class MessageLabel(str, Enum):
    """Top-level labels used on the mount link."""

    MOUNT_MESSAGE = "MountMessage"
    KARBON_MESSAGE = "KarbonMessage"


def build_mount_command(**fields: FieldValue) -> MessageBuilder:
    """Build a ``MountMessage`` with ``fields`` in keyword order."""
    msg = MessageBuilder(MessageLabel.MOUNT_MESSAGE.value)
    for name, value in fields.items():
        msg.add_argument(name, value)
    return msg


def build_handshake() -> MessageBuilder:
    return build_mount_command(Handshake=UInt(HANDSHAKE_VALUE))


def build_guide_command(d_ra: float, d_dec: float) -> MessageBuilder:
    """Build a guide correction.

    Args:
        d_ra: Right ascension offset.
        d_dec: Declination offset.
    """
    return build_mount_command(dRA=float(d_ra), dDEC=float(d_dec))


def build_park_command(
    position: float = 0.0, no_disconnect: bool = True
) -> MessageBuilder:
    return build_mount_command(
        ParkCommand=float(position), NoDisconnect=no_disconnect
    )


def build_altaz_request() -> MessageBuilder:
    return build_mount_command(RequestAltAz=True)


def unacknowledged_keys(keys: Iterable[str], response: MessageParser) -> list[str]:
    """Return the keys that ``response`` does not map to ``"$OK^"``."""
    missing = []
    for key in keys:
        ack = response.lookup_text(key)
        if ack != OK_RESPONSE:
            logger.error("Command %r not acknowledged: %r", key, ack)
            missing.append(key)
    return missing


def check_ok_response(command: MessageBuilder, response: MessageParser) -> bool:
    """Check that ``response`` acknowledges every field of ``command``."""
    if not response.succeeded():
        logger.error("Response to %s did not parse", command.label)
        return False
    keys = [command.get_arg_key(i) for i in range(command.num_args())]
    return not unacknowledged_keys(keys, response)


def parse_handshake(response: MessageParser) -> bool:
    """True if ``response`` carries the expected handshake value."""
    if not response.succeeded():
        return False
    value = response.lookup("Handshake", UInt)
    if value != HANDSHAKE_VALUE:
        logger.debug("Unexpected handshake value: %r", value)
        return False
    return True
