"""Settings for the pinger.

Defaults live here; any of them can be overridden by a ``privVars.py`` on the
import path (usually the working directory), e.g.::

    # Path: privVars.py
    # any variable with a default value is optional, "..." means unset
    CONNECT_TIMEOUT = 5.0
    SENTRY_URI = "https://key@example.ingest.sentry.io/1"
    DISCORD_WEBHOOK = "..."
"""

import logging

from .protocol.connector import CONNECT_TIMEOUT, DEFAULT_PORT
from .protocol.packet import MAX_PACKET_LENGTH, PROTOCOL_VERSION

READ_TIMEOUT = CONNECT_TIMEOUT

DEBUG = False
LOG_LEVEL = logging.INFO
LOG_FILE = "log.log"

DISCORD_WEBHOOK = "..."
SENTRY_URI = "..."

try:
    from privVars import *  # noqa: F401,F403
except ImportError:
    pass


def is_set(value) -> bool:
    """Whether a secret from privVars.py has been filled in"""
    return value not in (None, "", "...")
