from ..packet import DataTypes, OutboundPacket, States


class C2S_0x00(OutboundPacket):
    """
    Handshake packet (0x00) sent by the client to the server.

    Data:
        - Protocol Version | VarInt | The protocol the client speaks, see ``PROTOCOL_VERSION``.
        - Server Address | String (255) | Hostname or IP that was used to connect, without the port.
        - Server Port | Unsigned Short | Default is 25565. Sent big-endian, so the bytes match a signed short cast.
        - Next State | VarInt Enum | 1 for Status, 2 for Login.
    """

    def _info(self):
        return {
            "name": "Handshake (0x00)",
            "id": 0x00,
            "state": States.HANDSHAKE,
        }

    def _dataTypes(self):
        return {
            "protocol_version": DataTypes.VARINT,
            "server_address": DataTypes.STRING,
            "server_port": DataTypes.USHORT,
            "next_state": DataTypes.VARINT,
        }
