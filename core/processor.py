"""Turns one received protocol line into the lines to send back"""

import logging
from dataclasses import replace
from typing import List, Optional

from .command_parser import parse_command, DEFAULT_TRIGGER
from .dispatcher import CommandDispatcher
from .exceptions import MalformedLineError
from .irc import ProtocolMessage, ChatInvocation, tokenize, extract_invocation

logger = logging.getLogger(__name__)

# Verbs the server sends that need no handling
IGNORED_COMMANDS = frozenset({
    "WHISPER", "JOIN", "PART", "USERSTATE", "ROOMSTATE", "GLOBALUSERSTATE",
    "CAP", "NOTICE", "CLEARCHAT", "CLEARMSG", "USERNOTICE", "HOSTTARGET",
    "001", "002", "003", "004", "353", "366", "372", "375", "376",
})

def privmsg(channel: str, text: str) -> str:
    return f"PRIVMSG #{channel} :{text}"

class ChatProcessor:
    """Entry point for the transport: process_line(raw) -> outbound lines"""

    def __init__(self, dispatcher: CommandDispatcher, trigger: str = DEFAULT_TRIGGER,
                 nick: Optional[str] = None):
        self.dispatcher = dispatcher
        self.trigger = trigger
        self.nick = nick.lower() if nick else None

    def process_line(self, raw_line: str) -> List[str]:
        try:
            msg = tokenize(raw_line)
        except MalformedLineError as e:
            logger.warning(f"Dropping malformed line ({e.reason}): {raw_line!r}")
            return []

        if msg.command == "PING":
            return [f"PONG {msg.parameters}"]

        if msg.command == "PRIVMSG":
            return self.handle_privmsg(msg)

        if msg.command == "RECONNECT":
            logger.warning("Server asked us to reconnect")
        elif msg.command not in IGNORED_COMMANDS:
            logger.info(f"Unknown command {msg.command}")
        return []

    def parse_chat(self, msg: ProtocolMessage) -> Optional[ChatInvocation]:
        try:
            chat = extract_invocation(msg)
        except MalformedLineError as e:
            logger.warning(f"Dropping malformed PRIVMSG ({e.reason}): {msg.parameters!r}")
            return None

        invocation = parse_command(chat.body, self.trigger)
        if invocation is None:
            return chat
        return replace(chat, command_name=invocation.name, arg_string=invocation.arg_string)

    def handle_privmsg(self, msg: ProtocolMessage) -> List[str]:
        chat = self.parse_chat(msg)
        if chat is None:
            return []

        logger.info(f"[#{chat.channel}] <{chat.sender}> {chat.body}")
        if not chat.is_command:
            return []

        if self.nick and chat.sender.lower() == self.nick:
            return []

        logger.debug(f"Got cmd {chat.command_name} from {chat.sender}")
        replies = self.dispatcher.dispatch(chat.channel, chat.sender, chat.command_name, chat.arg_string)
        return [privmsg(chat.channel, text) for text in replies]
