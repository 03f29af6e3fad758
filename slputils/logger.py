import asyncio
import inspect
import logging
import sys

import aiohttp
import sentry_sdk


class Logger:
    def __init__(
        self,
        debug=False,
        level: int = logging.INFO,
        log_file: str = "log.log",
        discord_webhook: str = None,
        sentry_dsn: str = None,
        ssdk: sentry_sdk = None,
    ):
        """Initializes the logger class

        Args:
            debug (bool, optional): Show debugging. Defaults to False.
            level (int, optional): The logging level. Defaults to logging.INFO.
            log_file (str, optional): The file to log to. Defaults to "log.log".
            discord_webhook (str, optional): Webhook that receives critical messages.
            sentry_dsn (str, optional): The sentry dsn to report errors to.
            ssdk (sentry_sdk, optional): An already initialized sentry_sdk.
        """
        self.__last_print = None
        self.__hooks = set()
        self.DEBUG = debug
        self.logging = logging
        self.webhook = discord_webhook
        self.log_file = log_file

        self.clear()
        logging.basicConfig(
            level=level if not self.DEBUG else logging.DEBUG,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
            datefmt="%d-%b %H:%M:%S",
            handlers=[
                logging.FileHandler(log_file, mode="a", encoding="utf-8", delay=False),
            ],
        )

        if self.DEBUG:
            self.logging.info("Debugging enabled")

        if sentry_dsn is not None and ssdk is None:
            sentry_sdk.init(
                dsn=sentry_dsn,
                traces_sample_rate=1.0,
            )
            self.sentry_sdk = sentry_sdk
        elif ssdk is not None:
            self.sentry_sdk = ssdk
        else:
            self.sentry_sdk = None

    @staticmethod
    def stack_trace(stack):
        """Returns ``module.function`` of the caller"""
        return (
            stack[1].filename.replace("\\", "/").split("/")[-1].split(".")[0]
            + "."
            + f"{stack[1].function}"
        )

    def info(self, message):
        """Same level as print but no console output"""
        message = f"[{self.stack_trace(inspect.stack())}] {message}"
        self.logging.info(message)

    def error(self, *message, **kwargs):
        message = " ".join([str(arg) for arg in message])
        message = f"[{self.stack_trace(inspect.stack())}] {message}"
        self.logging.error(message, **kwargs)
        self.print(message, log=False, file=sys.stderr)

    def critical(self, *message):
        message = " ".join([str(arg) for arg in message])
        message = f"[{self.stack_trace(inspect.stack())}] {message}"
        self.logging.critical(message)
        self.hook(message)
        self.print(message, log=False, file=sys.stderr)

    def debug(self, *args, **kwargs):
        msg = " ".join([str(arg) for arg in args])
        msg = f"[{self.stack_trace(inspect.stack())}] {msg}"
        self.logging.debug(msg)
        if self.DEBUG:
            self.print(*args, **kwargs, log=False)

    def warning(self, message):
        message = f"[{self.stack_trace(inspect.stack())}] {message}"
        self.print(message, log=False, file=sys.stderr)
        self.logging.warning(message)

    def exception(self, message):
        message = f"[{self.stack_trace(inspect.stack())}] {message}"
        self.logging.exception(message)
        self.hook(message)
        self.print(message, log=False, file=sys.stderr)

    def print(self, *args, log=True, **kwargs):
        msg = " ".join([str(arg) for arg in args])

        # prevent duplicate messages and spamming the console
        if self.__last_print != msg:
            self.__last_print = msg
            print(msg, **kwargs)

        if log:
            self.logging.info(msg)

    def hook(self, message: str):
        if not self.webhook or self.webhook == "...":
            return
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            # no loop running, send it synchronously
            asyncio.run(self.async_hook(message))
        else:
            task = asyncio.ensure_future(self.async_hook(message))
            self.__hooks.add(task)
            task.add_done_callback(self.__hooks.discard)

    async def wait_hooks(self):
        """Wait for webhook messages sent from inside the running loop"""
        if self.__hooks:
            await asyncio.gather(*self.__hooks)

    async def async_hook(self, message: str) -> bool:
        """Post ``message`` to the discord webhook

        Returns:
            bool: Whether the webhook accepted the message
        """
        try:
            async with aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=10)
            ) as session, session.post(
                self.webhook,
                json={
                    "content": message,
                },
            ) as resp:
                if resp.status != 204:
                    self.logging.error(
                        f"Webhook answered {resp.status} for message: {message}"
                    )
                    return False
        except (aiohttp.ClientError, asyncio.TimeoutError) as err:
            self.logging.error(f"Failed to send message to webhook: {err}")
            return False
        self.logging.info(f"Sent message to webhook: {message}")
        return True

    def clear(self):
        with open(self.log_file, "w") as f:
            f.write("")

    async def async_timer(self, func: callable, *args, **kwargs):
        """Await ``func`` and return its result with the time it took in seconds"""
        if not inspect.iscoroutinefunction(func):
            raise TypeError(f"{func.__name__} is not a coroutine function")

        loop = asyncio.get_running_loop()
        start = loop.time()
        res = await func(*args, **kwargs)
        end = loop.time()

        self.debug(
            f"(ASYNC) Function {func.__name__} took {self.auto_range_time(end - start)}"
        )

        if self.sentry_sdk is not None:
            self.sentry_sdk.set_context("timing", {"duration": end - start})
        return res, end - start

    @staticmethod
    def auto_range_time(seconds: float) -> str:
        """
        Returns a time string for a given number of seconds

        Args:
            seconds (float): The number of seconds

        Returns:
            str: The time string
        """

        units = {
            "hr": str(int(seconds // 3600)),
            "min": str(int(seconds // 60)),
            "s": str(int(seconds)),
            "ms": str(int(seconds * 1000)),
            "us": str(int(seconds * 1000000)),
            "ns": str(int(seconds * 1000000000)),
        }

        best = ("ns", units["ns"])
        units = sorted(units.items(), key=lambda x: len(x[1]))
        for unit in units:
            if unit[1] != "0":
                best = unit
                break

        return f"{best[1]} {best[0]}"
