import os.path
import struct
import traceback

import pytest

import slputils.protocol
from slputils.protocol import Handshake, Status
from slputils.protocol.packet import Packet, encode_varint, frame

packetDir = os.path.dirname(slputils.protocol.__file__)

BASES = {"C2S": "OutboundPacket", "S2C": "InboundPacket"}


def get_files(directory):
    return os.listdir(directory)


def check_foo_packets(name: str):
    directory = os.path.join(packetDir, name)
    files = get_files(directory)

    for file in files:
        file = os.path.join(directory, file)

        if file.endswith("__init__.py") or file.endswith("__pycache__"):
            continue

        with open(file, "r") as f:
            content = f.read()
            expected_name = os.path.splitext(os.path.basename(file))[0]
            expected_id = expected_name[-4:]
            expected_base = BASES[expected_name[:3]]

            assert (
                f"class {expected_name}({expected_base}):" in content
            ), f"Expected class {expected_name} to be in {file}"

            assert (
                f'"id": {expected_id},' in content
            ), f"Expected id to be {expected_id} in {file}"

            assert (
                "def _info(self):" in content
            ), f"Expected _info method to be in {file}"

            assert (
                "def _dataTypes(self):" in content
            ), f"Expected _dataTypes method to be in {file}"

    return 1


def test_Status_packets():
    try:
        assert check_foo_packets("Status")
    except AssertionError as err:
        print("Status packets failed:", traceback.format_exc())
        raise err


def test_Handshake_packets():
    try:
        assert check_foo_packets("Handshake")
    except AssertionError as err:
        print("Handshake packets failed:", traceback.format_exc())
        raise err


def handshake(host="localhost", port=25565, version=47):
    return Handshake.C2S_0x00(
        protocol_version=version,
        server_address=host,
        server_port=port,
        next_state=1,
    )


def test_handshake_wire_layout():
    p = handshake()

    payload = b"\x00" + b"\x2f" + b"\x09localhost" + b"\x63\xdd" + b"\x01"
    assert p.toBytes() == frame(payload)
    assert p.toBytes()[0] == len(payload)


def test_handshake_reads_back():
    p = Packet(handshake("mc.example.org", 25566, 763).payload())

    assert p.read_varint() == 0x00
    assert p.read_varint() == 763
    assert p.read_string() == "mc.example.org"
    assert p.read_ushort() == 25566
    assert p.read_varint() == 1
    assert len(p) == 0


def test_handshake_high_port_matches_signed_short():
    # ports above 32767 go out with the same bits as a wrapped int16
    p = handshake(port=40000)
    assert p.payload()[-3:-1] == struct.pack("!h", 40000 - 2**16)


def test_handshake_host_length_counts_bytes():
    host = "exämple.org"
    p = Packet(handshake(host).payload())
    p.read_varint()
    p.read_varint()

    assert p.read_varint() == len(host.encode("utf-8"))


def test_handshake_missing_field():
    p = Handshake.C2S_0x00(protocol_version=47)
    with pytest.raises(KeyError):
        p.toBytes()


def test_handshake_info():
    p = handshake()

    assert p.id == 0x00
    assert p.state == 0
    assert p.toDict()["name"] == "Handshake (0x00)"
    assert "server_address=localhost" in str(p)


def test_status_request_wire_layout():
    p = Status.C2S_0x00()

    assert p.toBytes() == b"\x01\x00"
    assert p.name == "Status Request"


def test_status_response_decodes_buffer():
    body = b'{"version": {"name": "1.20", "protocol": 763}}'
    p = Status.S2C_0x00(encode_varint(0) + encode_varint(len(body)) + body)

    status = p.decode()
    assert status.version.name == "1.20"
    assert len(p) == 0
