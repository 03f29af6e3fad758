import asyncio
import struct

from .errors import InvalidLength, ShortRead, TruncatedVarint

# 47 is the 1.8 protocol; every server since 1.7 answers a status ping for it
PROTOCOL_VERSION = 0x2F

MAX_VARINT_BYTES = 10
# largest length a 3 byte VarInt header can declare
MAX_PACKET_LENGTH = 2**21 - 1


class States:
    HANDSHAKE = 0
    STATUS = 1
    LOGIN = 2


class NextState:
    # value of the "next state" field of the handshake
    STATUS = 0x01
    LOGIN = 0x02


class PacketIds:
    HANDSHAKE = 0x00
    STATUS_REQUEST = 0x00
    STATUS_RESPONSE = 0x00


class DataTypes:
    VARINT = "VarInt"
    STRING = "String"
    USHORT = "Unsigned Short"


def encode_varint(value: int) -> bytes:
    """Encode ``value`` as an unsigned VarInt.

    :param value: The maximum is ``2 ** 64-1`` the minimum is ``0``.
    :raises ValueError: If value is out of range.
    """
    if value < 0 or value > 2**64 - 1:
        raise ValueError(f'The value "{value}" is out of range for a varint')

    out = bytearray()
    while value & -0x80:  # value & ~0x7F != 0
        out.append(value & 0x7F | 0x80)
        value >>= 7
    out.append(value)
    return bytes(out)


def decode_varint(data: bytes, offset: int = 0) -> tuple[int, int]:
    """Decode an unsigned VarInt starting at ``data[offset]``.

    Returns:
        tuple[int, int]: the value and the number of bytes it took up

    Raises:
        TruncatedVarint: If the continuation bits run past the end of the
        buffer, past 10 bytes, or the value overflows 64 bits.
    """
    result = 0
    for i in range(MAX_VARINT_BYTES):
        if offset + i >= len(data):
            raise TruncatedVarint(
                f"VarInt runs past the end of the buffer after {i} bytes"
            )

        part = data[offset + i]
        if i == MAX_VARINT_BYTES - 1 and part > 1:
            raise TruncatedVarint("VarInt overflows 64 bits")

        result |= (part & 0x7F) << 7 * i
        if not part & 0x80:
            return result, i + 1
    raise TruncatedVarint(f"VarInt is longer than {MAX_VARINT_BYTES} bytes")


def frame(payload: bytes) -> bytes:
    """Prefix ``payload`` with its length as a VarInt."""
    return encode_varint(len(payload)) + bytes(payload)


async def read_varint(reader: asyncio.StreamReader) -> int:
    """Read one VarInt from a stream, a byte at a time."""
    header = b""
    while len(header) < MAX_VARINT_BYTES:
        try:
            header += await reader.readexactly(1)
        except asyncio.IncompleteReadError as err:
            raise ShortRead(
                f"Connection closed after {len(header)} bytes of a VarInt"
            ) from err

        if not header[-1] & 0x80:
            return decode_varint(header)[0]
    raise TruncatedVarint(f"VarInt is longer than {MAX_VARINT_BYTES} bytes")


async def unframe(
    reader: asyncio.StreamReader, max_length: int = MAX_PACKET_LENGTH
) -> bytes:
    """Read one length-prefixed packet from ``reader`` and return its payload.

    Raises:
        ShortRead: If the stream closes before the declared length arrives.
        TruncatedVarint: If the length header never terminates.
        InvalidLength: If the declared length is larger than ``max_length``.
    """
    length = await read_varint(reader)
    if length > max_length:
        raise InvalidLength(
            f"Packet length {length} is larger than the maximum of {max_length}"
        )

    try:
        return await reader.readexactly(length)
    except asyncio.IncompleteReadError as err:
        raise ShortRead(
            f"Connection closed with {length - len(err.partial)} bytes remaining"
        ) from err


# https://wiki.vg/Protocol#Packet_format
class Packet:
    def __init__(self, data: bytes = b""):
        self.__data = bytes(data)

    def __bytes__(self):
        return self.__data

    def __len__(self):
        return len(self.__data)

    def write(self, data: bytes):
        self.__data += data

    def read(self, length: int) -> bytes:
        if length > len(self.__data):
            raise ShortRead(
                f"Tried to read {length} bytes with only {len(self.__data)} left"
            )
        result = self.__data[:length]
        self.__data = self.__data[length:]
        return result

    @staticmethod
    def encode_varint(value: int) -> bytes:
        return encode_varint(value)

    @staticmethod
    def encode_string(string: str) -> bytes:
        """Encode a utf-8 string prefixed by its byte length.

        :param string: The string to write.
        """
        data = string.encode("utf-8")
        return encode_varint(len(data)) + data

    @staticmethod
    def encode_ushort(value: int) -> bytes:
        """Encode an unsigned short.

        :param value: The Maximum is ``2 ** 16-1`` the minimum is 0.
        :raises ValueError: If value is out of range.
        """
        if value < 0 or value > 2**16 - 1:
            raise ValueError(f"The value {value} is out of range for an unsigned short")
        return struct.pack("!H", value)

    def read_varint(self) -> int:
        value, size = decode_varint(self.__data)
        self.__data = self.__data[size:]
        return value

    def read_string(self) -> str:
        length = self.read_varint()
        return self.read(length).decode("utf-8")

    def read_ushort(self) -> int:
        return struct.unpack("!H", self.read(2))[0]


class OutboundPacket(Packet):
    """A packet sent by the client.

    Subclasses describe themselves through ``_info`` (name, id and state) and
    ``_dataTypes`` (field name -> ``DataTypes`` entry, in wire order). The
    field values are passed to the constructor as keyword arguments.
    """

    def __init__(self, **kwargs):
        super().__init__(b"")
        info = self._info()
        self.name = info["name"]
        self.id = info["id"]
        self.state = info["state"]
        self.fields = kwargs

    def _info(self):
        raise NotImplementedError

    def _dataTypes(self):
        return {}

    def __str__(self):
        return f"{self.name}({', '.join(f'{k}={v}' for k, v in self.fields.items())})"

    def toDict(self):
        return {
            "id": self.id,
            "name": self.name,
            "data": self.fields,
        }

    def payload(self) -> bytes:
        b = self.encode_varint(self.id)

        for k, v in self._dataTypes().items():
            match v:
                case DataTypes.VARINT:
                    b += self.encode_varint(self.fields[k])
                case DataTypes.STRING:
                    b += self.encode_string(self.fields[k])
                case DataTypes.USHORT:
                    b += self.encode_ushort(self.fields[k])
                case _:
                    raise ValueError(f"Unknown data type: {v}")
        return b

    def toBytes(self) -> bytes:
        return frame(self.payload())


class InboundPacket(Packet):
    """A packet received from the server, buffered whole before it is parsed."""

    def __init__(self, data: bytes = b""):
        super().__init__(data)
        info = self._info()
        self.name = info["name"]
        self.id = info["id"]
        self.state = info["state"]

    def _info(self):
        raise NotImplementedError

    def _dataTypes(self):
        return {}

    @classmethod
    async def read_from(
        cls, reader: asyncio.StreamReader, max_length: int = MAX_PACKET_LENGTH
    ):
        return cls(await unframe(reader, max_length))
