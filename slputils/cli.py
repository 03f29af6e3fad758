"""Command line pinger: ``slping example.org`` or ``slping example.org:25566``"""

import argparse
import asyncio
import json
import sys

from . import Utils, config
from .protocol import (
    ConfigurationError,
    MalformedBody,
    PingConnectionError,
    PingError,
    StatusResponse,
    ping,
)

EXIT_OK = 0
EXIT_RESPONSE_ERROR = 1
EXIT_CONFIG_ERROR = 2
EXIT_CONNECTION_ERROR = 3


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="slping",
        description="Query a Minecraft server with a Server List Ping.",
    )
    parser.add_argument("host", help="Hostname or ip, optionally host:port")
    parser.add_argument(
        "port", nargs="?", type=int, default=None, help="Port (default: 25565)"
    )
    parser.add_argument(
        "-t",
        "--timeout",
        type=float,
        default=config.CONNECT_TIMEOUT,
        help="Connect timeout in seconds (default: %(default)s)",
    )
    parser.add_argument(
        "--read-timeout",
        type=float,
        default=config.READ_TIMEOUT,
        help="Seconds to wait for the response (default: %(default)s)",
    )
    parser.add_argument(
        "--protocol",
        type=int,
        default=config.PROTOCOL_VERSION,
        help="Protocol version sent in the handshake (default: %(default)s)",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Reject responses with a wrong packet id or string length",
    )
    parser.add_argument(
        "--json", action="store_true", help="Print the raw JSON response"
    )
    parser.add_argument(
        "--favicon", metavar="PATH", help="Save the server icon as a png"
    )
    parser.add_argument("--no-color", action="store_true", help="Strip MOTD colors")
    parser.add_argument(
        "--debug", action="store_true", default=config.DEBUG, help="Debug logging"
    )
    return parser


def format_status(utils: Utils, status: StatusResponse, color: bool = True) -> str:
    motd = utils.text.motd_parse(status.description)
    motd = utils.text.color_ansi(motd) if color else utils.text.c_filter(motd)
    motd = motd.replace("\n", "\n" + " " * 10)

    lines = [
        f"Version:  {utils.text.c_filter(status.version.name) or 'Unknown'}"
        f" (protocol {status.version.protocol})",
        f"Players:  {status.players.online}/{status.players.max}",
    ]
    if status.players.sample:
        lines.append(" " * 10 + ", ".join(status.players.names))
    lines.append(f"MOTD:     {motd}")
    lines.append(f"Favicon:  {'yes' if status.favicon else 'none'}")
    return "\n".join(lines)


async def run(args, utils: Utils) -> int:
    logger = utils.logger
    try:
        status, took = await logger.async_timer(
            ping,
            args.host,
            args.port,
            timeout=args.timeout,
            read_timeout=args.read_timeout,
            version_id=args.protocol,
            strict=args.strict,
            max_length=config.MAX_PACKET_LENGTH,
        )
    except ConfigurationError as err:
        logger.error(f"Invalid address: {err}")
        return EXIT_CONFIG_ERROR
    except PingConnectionError as err:
        logger.error(f"Connection error: {err}")
        return EXIT_CONNECTION_ERROR
    except PingError as err:
        # the server answered with something unusable, report it
        logger.exception(f"Bad response ({err.__class__.__name__}): {err}")
        if logger.sentry_sdk is not None:
            logger.sentry_sdk.capture_exception(err)
        await logger.wait_hooks()
        return EXIT_RESPONSE_ERROR

    if args.json:
        logger.print(json.dumps(dict(status.raw), indent=2, ensure_ascii=False))
    else:
        logger.print(format_status(utils, status, color=not args.no_color))
        logger.print(f"Time:     {logger.auto_range_time(took)}")

    if args.favicon:
        try:
            png = status.favicon_png()
        except MalformedBody as err:
            logger.error(f"Bad favicon: {err}")
            return EXIT_RESPONSE_ERROR

        if png is None:
            logger.warning("Server has no favicon")
        else:
            with open(args.favicon, "wb") as f:
                f.write(png)
            logger.debug(f"Saved favicon to {args.favicon}")

    return EXIT_OK


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    utils = Utils(
        debug=args.debug,
        level=config.LOG_LEVEL,
        log_file=config.LOG_FILE,
        discord_webhook=config.DISCORD_WEBHOOK
        if config.is_set(config.DISCORD_WEBHOOK)
        else None,
        sentry_dsn=config.SENTRY_URI if config.is_set(config.SENTRY_URI) else None,
    )

    try:
        return asyncio.run(run(args, utils))
    except KeyboardInterrupt:
        utils.logger.print("Keyboard interrupt, stopping")
        return 130


if __name__ == "__main__":
    sys.exit(main())
