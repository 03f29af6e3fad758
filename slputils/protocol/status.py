"""Decoding of the Status Response payload.

The payload is ``[VarInt packet id][VarInt string length][JSON]``. The two
header fields are skipped and everything after them is parsed as JSON::

    {"version": {"name": str, "protocol": int},
     "players": {"max": int, "online": int, "sample": [{"name": str, "id": str}]},
     "description": str | dict,
     "favicon": "data:image/png;base64,..."}

Unknown fields are kept in ``StatusResponse.raw`` and otherwise ignored.
"""

from __future__ import annotations

import base64
import binascii
import copy
import json
import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping

from .errors import MalformedBody, MalformedHeader, TruncatedVarint
from .packet import Packet, PacketIds

logger = logging.getLogger(__name__)


def _object(doc: dict, key: str) -> dict:
    value = doc.get(key)
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise MalformedBody(
            f'"{key}" should be an object, got {type(value).__name__}'
        )
    return value


def _int(obj: dict, key: str, where: str) -> int:
    value = obj.get(key)
    if value is None:
        return 0
    # bool is an int subclass, but true is not a player count
    if isinstance(value, bool) or not isinstance(value, int):
        raise MalformedBody(
            f'"{where}.{key}" should be an integer, got {type(value).__name__}'
        )
    return value


def _str(obj: dict, key: str, where: str) -> str:
    value = obj.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise MalformedBody(
            f'"{where}.{key}" should be a string, got {type(value).__name__}'
        )
    return value


@dataclass(frozen=True)
class Version:
    name: str = ""
    protocol: int = 0


@dataclass(frozen=True)
class Players:
    max: int = 0
    online: int = 0
    # read-only copies of the sample entries, usually {"name": ..., "id": ...}
    sample: tuple = ()

    @property
    def names(self) -> list[str]:
        return [str(player.get("name", "")) for player in self.sample]


@dataclass(frozen=True)
class StatusResponse:
    """A server's answer to a status ping."""

    version: Version = field(default_factory=Version)
    players: Players = field(default_factory=Players)
    description: Any = ""
    favicon: str = ""
    # the whole document as received, read-only at the top level
    raw: Mapping = field(
        default_factory=lambda: MappingProxyType({}), compare=False, repr=False
    )

    @classmethod
    def from_dict(cls, doc: dict) -> StatusResponse:
        """Build a response from a decoded JSON document.

        Raises:
            MalformedBody: If a known field has the wrong type, or the document
            is nested too deeply to copy.
        """
        if not isinstance(doc, dict):
            raise MalformedBody(
                f"Status response should be a JSON object, got {type(doc).__name__}"
            )
        # later changes to doc must not reach the response
        try:
            doc = copy.deepcopy(doc)
        except RecursionError as err:
            raise MalformedBody("Status response is nested too deeply") from err

        version = _object(doc, "version")
        players = _object(doc, "players")

        sample = players.get("sample")
        if sample is None:
            sample = []
        if not isinstance(sample, list) or not all(
            isinstance(player, dict) for player in sample
        ):
            raise MalformedBody('"players.sample" should be a list of objects')

        description = doc.get("description")
        favicon = _str(doc, "favicon", "status")

        return cls(
            version=Version(
                name=_str(version, "name", "version"),
                protocol=_int(version, "protocol", "version"),
            ),
            players=Players(
                max=_int(players, "max", "players"),
                online=_int(players, "online", "players"),
                sample=tuple(MappingProxyType(player) for player in sample),
            ),
            description="" if description is None else description,
            favicon=favicon,
            raw=MappingProxyType(doc),
        )

    def favicon_png(self) -> bytes | None:
        """Returns the decoded server icon, or None if the server sent none

        Raises:
            MalformedBody: If the favicon is not valid base64.
        """
        if not self.favicon:
            return None

        bits = self.favicon.split(",", 1)[1] if "," in self.favicon else self.favicon
        try:
            return base64.b64decode(bits, validate=True)
        except binascii.Error as err:
            raise MalformedBody(f"Favicon is not valid base64: {err}") from err

    def to_dict(self) -> dict:
        return {
            "version": {"name": self.version.name, "protocol": self.version.protocol},
            "players": {
                "max": self.players.max,
                "online": self.players.online,
                "sample": [dict(player) for player in self.players.sample],
            },
            "description": self.description,
            "favicon": self.favicon,
        }


def decode_status(payload: bytes, strict: bool = False) -> StatusResponse:
    """Decode the payload of a Status Response packet.

    Args:
        payload (bytes): The packet payload, without its length header
        strict (bool, optional): Also require packet id 0x00 and a string
        length that matches the bytes that follow it. Defaults to False.

    Returns:
        StatusResponse: The decoded response

    Raises:
        MalformedHeader: If the packet id or string length cannot be decoded.
        MalformedBody: If the rest is not a JSON object of the expected shape.
    """
    packet = Packet(payload)
    try:
        packet_id = packet.read_varint()
    except TruncatedVarint as err:
        raise MalformedHeader(f"Could not read packet id: {err}") from err
    try:
        declared = packet.read_varint()
    except TruncatedVarint as err:
        raise MalformedHeader(f"Could not read string length: {err}") from err

    body = packet.read(len(packet))

    if strict:
        if packet_id != PacketIds.STATUS_RESPONSE:
            raise MalformedHeader(
                f"Expected status response (0x00), got {hex(packet_id)}"
            )
        if declared != len(body):
            raise MalformedHeader(
                f"String length {declared} does not match the {len(body)} bytes received"
            )
    elif declared != len(body):
        logger.debug(
            f"String length {declared} does not match the {len(body)} bytes received"
        )

    try:
        doc = json.loads(body)
    except (ValueError, RecursionError) as err:
        # JSONDecodeError, UnicodeDecodeError, or nesting deeper than the stack
        raise MalformedBody(f"Failed to decode JSON: {err}") from err

    return StatusResponse.from_dict(doc)
