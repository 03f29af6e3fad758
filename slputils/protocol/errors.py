"""Exceptions raised while pinging a server.

Every error derives from ``PingError`` so a caller can catch the whole family
with one clause, and from the builtin that best describes it so older
``except ValueError`` / ``except EOFError`` handlers keep working.
"""


class PingError(Exception):
    """Base class for every Server List Ping failure."""


class PingConnectionError(PingError, ConnectionError):
    """The server could not be reached, or the socket failed or timed out."""


class ShortRead(PingError, EOFError):
    """The stream closed before a full packet was received."""


class TruncatedVarint(PingError, ValueError):
    """A VarInt ran off the end of its buffer or past 10 bytes."""


class InvalidLength(PingError, ValueError):
    """A packet length header declared an implausible size."""


class MalformedHeader(PingError, ValueError):
    """The packet id or string length of a response could not be decoded."""


class MalformedBody(PingError, ValueError):
    """The response JSON is invalid or does not have the expected shape."""


class ConfigurationError(PingError, ValueError):
    """The caller supplied an unusable host, port or protocol version."""
