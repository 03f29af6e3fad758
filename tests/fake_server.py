"""A scripted Minecraft server for the connector tests."""

import asyncio
import json
import socket

from aiohttp import web

from slputils.protocol.packet import encode_varint, frame, unframe

STATUS = {
    "version": {"name": "1.20", "protocol": 763},
    "players": {"max": 20, "online": 3, "sample": []},
    "description": "A Server",
    "favicon": "",
}


def free_port() -> int:
    """A port nothing is listening on"""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(("127.0.0.1", 0))
        return s.getsockname()[1]


def status_payload(doc=None, body: bytes = None) -> bytes:
    """Payload of a Status Response: packet id, string length, JSON"""
    if body is None:
        body = json.dumps(STATUS if doc is None else doc).encode("utf-8")
    return encode_varint(0x00) + encode_varint(len(body)) + body


class FakeServer:
    """Reads the handshake and status request, then writes ``response`` and hangs up

    Usage::

        async with FakeServer() as server:
            await ping("127.0.0.1", server.port)
    """

    def __init__(self, response: bytes = None, hang: bool = False):
        self.response = frame(status_payload()) if response is None else response
        self.hang = hang
        self.received = []
        self.connections = 0
        self.server = None
        self.port = None
        self.release = None

    async def handle(self, reader, writer):
        self.connections += 1
        try:
            self.received.append(await unframe(reader))  # handshake
            self.received.append(await unframe(reader))  # status request
            if self.hang:
                await self.release.wait()
            writer.write(self.response)
            await writer.drain()
        except (ConnectionError, EOFError):
            pass
        finally:
            writer.close()

    async def __aenter__(self):
        self.release = asyncio.Event()
        self.server = await asyncio.start_server(self.handle, "127.0.0.1", 0)
        self.port = self.server.sockets[0].getsockname()[1]
        return self

    async def __aexit__(self, *exc):
        self.release.set()
        self.server.close()
        await self.server.wait_closed()


class FakeWebhook:
    """A discord webhook on 127.0.0.1 that records the messages posted to it"""

    def __init__(self, status: int = 204):
        self.status = status
        self.messages = []
        self.runner = None
        self.url = None

    async def handle(self, request):
        self.messages.append(await request.json())
        return web.Response(status=self.status)

    async def __aenter__(self):
        app = web.Application()
        app.router.add_post("/webhook", self.handle)
        self.runner = web.AppRunner(app)
        await self.runner.setup()
        await web.TCPSite(self.runner, "127.0.0.1", 0).start()
        port = self.runner.addresses[0][1]
        self.url = f"http://127.0.0.1:{port}/webhook"
        return self

    async def __aexit__(self, *exc):
        await self.runner.cleanup()
