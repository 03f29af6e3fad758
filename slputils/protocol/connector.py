import asyncio
import inspect
import ipaddress
import logging
import time

from sentry_sdk import add_breadcrumb, trace

from . import Handshake, Status
from .errors import ConfigurationError, PingConnectionError
from .packet import MAX_PACKET_LENGTH, PROTOCOL_VERSION, NextState, OutboundPacket
from .status import StatusResponse

DEFAULT_PORT = 25565
CONNECT_TIMEOUT = 3.0


class ExchangeState:
    DISCONNECTED = "disconnected"
    CONNECTED = "connected"
    HANDSHAKE_SENT = "handshake sent"
    STATUS_REQUESTED = "status requested"
    RESPONSE_RECEIVED = "response received"
    FAILED = "failed"


def parse_address(host: str, port: int = None) -> tuple[str, int]:
    """Split and validate a server address.

    Args:
        host (str): The hostname or ip, or ``host:port`` when ``port`` is None
        port (int, optional): The port. Defaults to 25565 when ``host`` has none.

    Returns:
        tuple[str, int]: The host (without IPv6 brackets) and the port

    Raises:
        ConfigurationError: If the host or port is invalid, or a port is given
        both in ``host`` and as ``port``.
    """
    if not isinstance(host, str) or not host.strip():
        raise ConfigurationError(f"Invalid host: {host!r}")
    host = host.strip()

    if port is None:
        if host.startswith("["):
            # [::1]:25565
            end = host.find("]")
            if end == -1:
                raise ConfigurationError(f"Missing ']' in address {host!r}")
            rest = host[end + 1 :]
            host = host[1:end]
            if rest:
                if not rest.startswith(":"):
                    raise ConfigurationError(f"Invalid address {host!r}")
                port = rest[1:]
        elif host.count(":") == 1:
            host, port = host.split(":")
        # more than one colon is a bare IPv6 address

        if port is None:
            port = DEFAULT_PORT
    elif host.startswith("[") and host.endswith("]"):
        host = host[1:-1]
    elif host.count(":") == 1:
        raise ConfigurationError(
            f"Address {host!r} already has a port, and port {port!r} was also given"
        )

    try:
        port = int(port)
    except (TypeError, ValueError) as err:
        raise ConfigurationError(f"Invalid port: {port!r}") from err
    if port < 0 or port > 2**16 - 1:
        raise ConfigurationError(f"Port {port} is out of range")

    if not host:
        raise ConfigurationError("Missing host")
    if len(host.encode("utf-8")) > 255:
        raise ConfigurationError("Host is longer than 255 bytes")

    try:
        ipaddress.ip_address(host)
    except ValueError:
        # hostnames are resolved through the idna codec, which rejects empty
        # or oversized labels
        try:
            host.encode("idna")
        except UnicodeError as err:
            raise ConfigurationError(f"Invalid host {host!r}: {err}") from err

    return host, port


class AsyncObj:
    def __init__(self, *args, **kwargs):
        """
        Standard constructor used for arguments pass
        Do not override. Use __ainit__ instead
        """
        self.__storedargs = args, kwargs
        self.async_initialized = False

    async def __ainit__(self, *args, **kwargs):
        """Async constructor, you should implement this"""

    async def __initobj(self):
        """Crutch used for __await__ after spawning"""
        assert not self.async_initialized
        self.async_initialized = True
        await self.__ainit__(
            *self.__storedargs[0], **self.__storedargs[1]
        )  # pass the parameters to __ainit__ that passed to __init__
        return self

    def __await__(self):
        return self.__initobj().__await__()

    def __init_subclass__(cls, **kwargs):
        assert inspect.iscoroutinefunction(cls.__ainit__)  # __ainit__ must be async

    @property
    def async_state(self):
        if not self.async_initialized:
            return "[initialization pending]"
        return "[initialization done and successful]"


class MCSocket(AsyncObj):
    """
    Helper class to ease the connection to a Minecraft server.

    **NB:** This class is an async class, you should await the initialization of the object.

    Example:

    ```python
    from slputils.protocol.connector import MCSocket
    import asyncio

    async def main():
        async with await MCSocket("localhost", 25565) as mc:
            await mc.handshake_status()
            print(await mc.status_request())

    asyncio.run(main())
    ```
    """

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.reader = None
        self.writer = None
        self.state = ExchangeState.DISCONNECTED
        self.closed = False

    async def __ainit__(
        self,
        host,
        port: int = None,
        timeout: float = CONNECT_TIMEOUT,
        read_timeout: float = None,
        max_length: int = MAX_PACKET_LENGTH,
        logger=logging.getLogger("slputils.protocol.connector"),
    ):
        """
        Connect to a Minecraft server.
        """
        self.logger = logger
        self.addr = parse_address(host, port)
        self.timeout = timeout
        self.read_timeout = timeout if read_timeout is None else read_timeout
        self.max_length = max_length

        try:
            self.reader, self.writer = await asyncio.wait_for(
                asyncio.open_connection(*self.addr), timeout=timeout
            )
        except asyncio.TimeoutError as err:
            self.set_state(ExchangeState.FAILED)
            raise PingConnectionError(
                f"Timed out connecting to {self.address} after {timeout}s"
            ) from err
        except OSError as err:
            self.set_state(ExchangeState.FAILED)
            raise PingConnectionError(
                f"Could not connect to {self.address}: {err}"
            ) from err

        self.set_state(ExchangeState.CONNECTED)

    @property
    def address(self) -> str:
        host, port = self.addr
        return f"[{host}]:{port}" if ":" in host else f"{host}:{port}"

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        if exc_type is not None:
            self.set_state(ExchangeState.FAILED)
        await self.close()

    async def send(self, data: bytes) -> None:
        try:
            self.writer.write(data)
            await self.writer.drain()
        except OSError as err:
            raise PingConnectionError(
                f"Could not write to {self.address}: {err}"
            ) from err

    async def close(self):
        if self.closed or self.writer is None:
            return
        self.closed = True

        self.writer.close()
        try:
            await self.writer.wait_closed()
        except OSError as err:
            # the server may already have reset the connection
            self.logger.debug(f"Error while closing {self.address}: {err}")

    async def send_packet(self, p: OutboundPacket):
        tStart = time.perf_counter()

        assert isinstance(p, OutboundPacket)
        await self.send(p.toBytes())

        tEnd = time.perf_counter()
        self.logger.debug(f"Sent packet: {p} in {tEnd - tStart:.2f} seconds")

    async def recv_packet(self) -> "Status.S2C_0x00":
        tStart = time.perf_counter()
        try:
            p = await asyncio.wait_for(
                Status.S2C_0x00.read_from(self.reader, self.max_length),
                timeout=self.read_timeout,
            )
        except asyncio.TimeoutError as err:
            raise PingConnectionError(
                f"Timed out waiting {self.read_timeout}s for a response from {self.address}"
            ) from err
        except OSError as err:
            raise PingConnectionError(
                f"Could not read from {self.address}: {err}"
            ) from err

        tEnd = time.perf_counter()
        self.logger.debug(
            f"Received packet: {p.name} ({len(p)} bytes) in {tEnd - tStart:.2f} seconds"
        )
        return p

    def set_state(self, state):
        self.logger.debug(f"{self.address}: {self.state} -> {state}")
        add_breadcrumb(category="slp", message=f"{self.address}: {state}")
        self.state = state

    def get_state(self):
        return self.state

    # Connection methods

    async def handshake_status(self, version_id: int = PROTOCOL_VERSION):
        """
        Send a handshake packet to the server

        Args:
            version_id (int, optional): The version of the protocol. Defaults to 47.
        """

        p = Handshake.C2S_0x00(
            protocol_version=version_id,
            server_address=self.addr[0],
            server_port=self.addr[1],
            next_state=NextState.STATUS,
        )
        await self.send_packet(p)
        self.set_state(ExchangeState.HANDSHAKE_SENT)

    async def status_request(self, strict: bool = False) -> StatusResponse:
        """
        Send a status request to the server and read its response

        Args:
            strict (bool, optional): Validate the packet id and string length
            of the response. Defaults to False.

        Returns:
            StatusResponse: The decoded response
        """

        await self.send_packet(Status.C2S_0x00())
        self.set_state(ExchangeState.STATUS_REQUESTED)

        response = await self.recv_packet()
        status = response.decode(strict=strict)
        self.set_state(ExchangeState.RESPONSE_RECEIVED)
        return status


@trace
async def ping(
    host: str,
    port: int = None,
    timeout: float = CONNECT_TIMEOUT,
    read_timeout: float = None,
    version_id: int = PROTOCOL_VERSION,
    strict: bool = False,
    max_length: int = MAX_PACKET_LENGTH,
) -> StatusResponse:
    """Ping a server and return its status.

    Args:
        host (str): The host to connect to, or ``host:port``
        port (int, optional): The port to connect to. Default to 25565.
        timeout (float, optional): Seconds allowed for the connect. Default to 3.
        read_timeout (float, optional): Seconds allowed for the response.
        Default to ``timeout``.
        version_id (int, optional): Protocol version sent in the handshake.
        strict (bool, optional): Validate the response header. Default to False.
        max_length (int, optional): Largest response packet accepted.

    Returns:
        StatusResponse: The decoded status

    Raises:
        PingError: The first failure encountered, the connection is closed first.
    """
    addr = parse_address(host, port)
    if not isinstance(version_id, int) or version_id < 0:
        raise ConfigurationError(f"Invalid protocol version: {version_id!r}")

    async with await MCSocket(
        *addr, timeout=timeout, read_timeout=read_timeout, max_length=max_length
    ) as mc:
        await mc.handshake_status(version_id)
        return await mc.status_request(strict=strict)


def ping_sync(host: str, port: int = None, **kwargs) -> StatusResponse:
    """Blocking wrapper around ``ping`` for callers without an event loop"""
    return asyncio.run(ping(host, port, **kwargs))
