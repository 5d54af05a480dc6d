"""Protocol layer: scalar codec, message builder, message parser, commands."""

from .scalars import UInt, is_numeric, is_object
from .builder import Field, MessageBuilder
from .parser import MAX_DEPTH, MessageParseError, MessageParser, parse_message
from .commands import OK_RESPONSE, MessageLabel, check_ok_response
