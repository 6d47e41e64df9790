#!/usr/bin/env python3
"""
Chipsie - a Twitch chat bot with user-defined commands
"""

import asyncio
import logging
import random
import signal
import sys
import time
from typing import List, Optional

from core.config import BotConfig, ConfigError, get_config
from core.logging_config import setup_logging
from core.database import BotDatabase
from core.dispatcher import CommandDispatcher
from core.exceptions import ConnectionError
from core.paths import ensure_directories, log_path_configuration
from core.plugin_system import CommandRegistry
from core.processor import ChatProcessor, privmsg
from core.store import CommandStore

MAX_LINE_LENGTH = 2048

class RateLimiter:
    """Token bucket rate limiter for controlling message flow."""

    def __init__(self, rate: int, per: int) -> None:
        self.rate: int = rate
        self.per: int = per
        self.allowance: float = float(rate)
        self.last_check: float = time.time()

    def allowed(self) -> bool:
        now = time.time()
        self.allowance += (now - self.last_check) * (self.rate / self.per)
        self.last_check = now

        if self.allowance > self.rate:
            self.allowance = self.rate

        if self.allowance < 1.0:
            return False

        self.allowance -= 1.0
        return True

def backoff_delay(attempt: int, base: float, maximum: float, rng=random) -> float:
    """Exponential reconnect delay with up to one second of jitter"""
    return min(maximum, base * (2 ** attempt)) + rng.uniform(0, 1)

class LineBuffer:
    """Frames CRLF-terminated lines out of a byte stream"""

    def __init__(self, max_length: int = MAX_LINE_LENGTH):
        self.max_length = max_length
        self.buffer = b""

    def feed(self, data: bytes) -> List[str]:
        """Add received bytes, returning the complete non-empty lines.

        Lines are only decoded once complete, so a character split across
        two reads survives. Raises ConnectionError when a line grows past
        max_length.
        """
        self.buffer += data
        lines = []
        while b"\r\n" in self.buffer:
            line, self.buffer = self.buffer.split(b"\r\n", 1)
            if len(line) >= self.max_length:
                raise ConnectionError("Server violated line buffer length")
            if line:
                lines.append(line.decode("utf-8", errors="replace"))
        if len(self.buffer) >= self.max_length:
            raise ConnectionError("Server violated line buffer length")
        return lines

    def clear(self):
        self.buffer = b""

class Chipsie:
    """Async chat connection feeding received lines to the command processor."""

    def __init__(self, config: BotConfig, store: Optional[CommandStore] = None,
                 registry: Optional[CommandRegistry] = None) -> None:
        self.config = config
        self.logger: logging.Logger = logging.getLogger(f"bot.{config.CHANNEL}")

        # Connection state
        self.reader: Optional[asyncio.StreamReader] = None
        self.writer: Optional[asyncio.StreamWriter] = None
        self.connected: bool = False
        self.running: bool = False
        self.line_buffer = LineBuffer()

        # Core components
        self.store: CommandStore = store or BotDatabase(config.DATABASE_PATH)
        if registry is None:
            registry = CommandRegistry(config.COMMAND_PREFIX)
            registry.load_plugins()
        self.registry = registry
        self.dispatcher = CommandDispatcher(self.registry, self.store)
        self.processor = ChatProcessor(self.dispatcher, config.COMMAND_PREFIX, nick=config.NICK)

        self.rate_limiter: RateLimiter = RateLimiter(
            config.RATE_LIMIT_MESSAGES,
            config.RATE_LIMIT_PERIOD
        )
        self.message_queue: asyncio.Queue = asyncio.Queue()
        self.last_motd_time: float = time.time()
        self.reconnect_attempts: int = 0

    async def connect(self):
        """Connect to the chat server and join the channel"""
        self.logger.info(f"Attempting connection to {self.config.HOST}:{self.config.PORT}")
        try:
            self.reader, self.writer = await asyncio.open_connection(
                self.config.HOST, self.config.PORT
            )
        except OSError as e:
            raise ConnectionError(f"Failed to connect: {e}")

        self.line_buffer.clear()
        self.message_queue = asyncio.Queue()
        self.connected = True

        await self.send_raw(f"PASS {self.config.oauth_password}", secret=True)
        await self.send_raw(f"NICK {self.config.NICK}")
        await self.send_raw("CAP REQ :twitch.tv/commands")
        await self.send_raw(f"JOIN #{self.config.CHANNEL}")
        self.logger.info(f"Connected, joining #{self.config.CHANNEL}")

    async def send_raw(self, line: str, secret: bool = False):
        """Send one protocol line"""
        if not self.writer:
            return
        if len(line.encode("utf-8")) >= MAX_LINE_LENGTH - 2:
            self.logger.warning(f"Dropped message that exceeded max length: {line[:50]}...")
            return
        self.logger.debug("< PASS ****" if secret else f"< {line}")
        self.writer.write(f"{line}\r\n".encode("utf-8"))
        await self.writer.drain()

    async def queue_lines(self, lines: List[str]):
        for line in lines:
            # Keepalive replies skip the rate limited queue
            if line.startswith("PONG"):
                await self.send_raw(line)
            else:
                await self.message_queue.put(line)

    async def process_message_queue(self):
        """Send queued lines with rate limiting"""
        while self.connected:
            try:
                line = await asyncio.wait_for(self.message_queue.get(), timeout=1.0)
            except asyncio.TimeoutError:
                continue

            while not self.rate_limiter.allowed():
                await asyncio.sleep(0.1)

            try:
                await self.send_raw(line)
            except OSError as e:
                self.logger.error(f"Failed to send message: {e}")
                self.connected = False

    async def motd_loop(self):
        """Post the message of the day while it is enabled"""
        while self.connected:
            await asyncio.sleep(30)
            motd = self.store.get_motd()
            if not motd['enabled'] or not motd['motd']:
                continue
            if time.time() - self.last_motd_time >= motd['rate'] * 60:
                self.last_motd_time = time.time()
                await self.message_queue.put(privmsg(self.config.CHANNEL, motd['motd']))

    async def bot_loop(self):
        """Read lines until the connection drops"""
        while self.connected and self.running:
            try:
                data = await asyncio.wait_for(self.reader.read(4096), timeout=1.0)
            except asyncio.TimeoutError:
                continue

            if not data:
                self.logger.warning("Server disconnected socket...")
                break

            for line in self.line_buffer.feed(data):
                self.logger.debug(f"> {line}")
                await self.queue_lines(self.processor.process_line(line))

    async def close(self):
        self.connected = False
        if self.writer:
            self.writer.close()
            try:
                await self.writer.wait_closed()
            except OSError:
                pass
            self.writer = None

    async def run_session(self):
        """One connection lifetime"""
        await self.connect()
        self.reconnect_attempts = 0
        tasks = [
            asyncio.create_task(self.process_message_queue()),
            asyncio.create_task(self.motd_loop()),
        ]
        try:
            await self.bot_loop()
        finally:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            await self.close()

    async def run(self):
        """Connect, and keep reconnecting with backoff until stopped"""
        self.running = True
        self.reconnect_attempts = 0
        self.logger.info("Chipsie the Twitch Chat Bot Starting Up...")

        while self.running:
            try:
                await self.run_session()
            except (ConnectionError, OSError) as e:
                self.logger.warning(f"Connection problem: {e}")

            if not self.running:
                break

            delay = backoff_delay(self.reconnect_attempts, self.config.RECONNECT_DELAY,
                                  self.config.MAX_RECONNECT_DELAY)
            self.reconnect_attempts += 1
            self.logger.info(f"Reconnecting in {delay:.1f}s")
            await asyncio.sleep(delay)

        self.logger.info("Chipsie the Twitch Chat Bot Shutting Down...Bye Bye!")

    def stop(self):
        self.running = False
        self.connected = False

async def main():
    """Main entry point"""
    auth_file = sys.argv[1] if len(sys.argv) > 1 else None
    db_file = sys.argv[2] if len(sys.argv) > 2 else None

    ensure_directories()

    try:
        config = get_config(auth_file, db_file)
        config.validate()
    except ConfigError as e:
        print(f"Configuration error: {e}")
        sys.exit(1)

    setup_logging(config.CHANNEL, config.LOG_LEVEL)
    logger = logging.getLogger(f"main.{config.CHANNEL}")
    log_path_configuration()

    bot = Chipsie(config)

    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, bot.stop)
        except NotImplementedError:
            # Windows event loops have no signal handlers
            pass

    try:
        await bot.run()
    except Exception as e:
        logger.exception(f"Fatal error: {e}")
        sys.exit(1)

def run():
    asyncio.run(main())

if __name__ == "__main__":
    run()
