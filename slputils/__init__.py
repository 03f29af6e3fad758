import sentry_sdk

from .logger import Logger
from .protocol import StatusResponse, ping, ping_sync
from .text import Text


class Utils:
    """A class to hold all the slputils classes"""

    def __init__(
        self,
        log: Logger = None,
        debug: bool = False,
        level: int = 20,
        log_file: str = "log.log",
        discord_webhook: str = None,
        sentry_dsn: str = None,
        ssdk: "sentry_sdk" = None,
    ):
        """Initializes the slputils class

        Args:
            log (Logger, optional): The logger to use. Default to None
            debug (bool, optional): Whether to use debug mode. Default to False
            level (int, optional): The logging level to use. Default to 20
            log_file (str, optional): The file to log to. Default to "log.log"
            discord_webhook (str, optional): The discord webhook to use. Default to None
            sentry_dsn (str, optional): The sentry dsn to use. Default to None
            ssdk (sentry_sdk, optional): The sentry_sdk to use. Default to None
        """
        self.logLevel = level
        if log is None:
            self.logger = Logger(
                debug=debug,
                level=self.logLevel,
                log_file=log_file,
                discord_webhook=discord_webhook,
                sentry_dsn=sentry_dsn,
                ssdk=ssdk,
            )
        else:
            self.logger = log

        self.text = Text(logger=self.logger)
