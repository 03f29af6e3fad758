"""Minecraft Server List Ping: packet codec and the status exchange."""

from .connector import MCSocket, ExchangeState, parse_address, ping, ping_sync
from .errors import (
    ConfigurationError,
    InvalidLength,
    MalformedBody,
    MalformedHeader,
    PingConnectionError,
    PingError,
    ShortRead,
    TruncatedVarint,
)
from .packet import (
    MAX_PACKET_LENGTH,
    PROTOCOL_VERSION,
    decode_varint,
    encode_varint,
    frame,
    unframe,
)
from .status import Players, StatusResponse, Version, decode_status
