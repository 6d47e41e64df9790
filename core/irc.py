"""Protocol line tokenizer and PRIVMSG channel/sender extraction"""

import logging
from dataclasses import dataclass
from typing import Optional
from .exceptions import ParseError, ExtractError

logger = logging.getLogger(__name__)

WHITESPACE = " \t\r\n\v\f"

@dataclass(frozen=True)
class ProtocolMessage:
    """One parsed protocol line"""
    command: str
    parameters: str = ""
    tags: Optional[str] = None
    source: Optional[str] = None

@dataclass(frozen=True)
class ChatInvocation:
    """A channel chat message, optionally carrying a bot command"""
    channel: str
    sender: str
    body: str
    command_name: Optional[str] = None
    arg_string: Optional[str] = None

    @property
    def is_command(self) -> bool:
        return self.command_name is not None

class Cursor:
    """Read position over an immutable piece of text"""

    def __init__(self, text: str, pos: int = 0):
        self.text = text
        self.pos = pos

    @property
    def exhausted(self) -> bool:
        return self.pos >= len(self.text)

    def peek(self) -> str:
        """Character under the cursor, or empty string at the end"""
        return "" if self.exhausted else self.text[self.pos]

    def advance(self, count: int = 1):
        self.pos = min(self.pos + count, len(self.text))

    def skip_whitespace(self) -> "Cursor":
        while not self.exhausted and self.text[self.pos] in WHITESPACE:
            self.pos += 1
        return self

    def read_until(self, delimiter: str) -> str:
        """Consume up to (not including) delimiter, or to the end of text"""
        end = self.text.find(delimiter, self.pos)
        if end == -1:
            end = len(self.text)
        token = self.text[self.pos:end]
        self.pos = end
        return token

    def read_while_not_space(self) -> str:
        start = self.pos
        while not self.exhausted and self.text[self.pos] not in WHITESPACE:
            self.pos += 1
        return self.text[start:self.pos]

    def find(self, char: str) -> Optional[int]:
        index = self.text.find(char, self.pos)
        return None if index == -1 else index

    def rest(self) -> str:
        return self.text[self.pos:]

def tokenize(line: str) -> ProtocolMessage:
    """Split a raw line into tags, source, command and parameters.

    Raises ParseError when the line is blank or ends before a command.
    """
    cursor = Cursor(line).skip_whitespace()
    if cursor.exhausted:
        raise ParseError(ParseError.EMPTY_LINE, line)

    tags = None
    if cursor.peek() == "@":
        cursor.advance()
        tags = cursor.read_until(" ")
        if cursor.skip_whitespace().exhausted:
            raise ParseError(ParseError.TRUNCATED_AFTER_TAGS, line)

    source = None
    if cursor.peek() == ":":
        cursor.advance()
        source = cursor.read_until(" ")
        if cursor.skip_whitespace().exhausted:
            raise ParseError(ParseError.TRUNCATED_AFTER_SOURCE, line)

    command = cursor.read_until(" ")
    parameters = cursor.skip_whitespace().rest()
    return ProtocolMessage(command=command, parameters=parameters, tags=tags, source=source)

def extract_sender(source: Optional[str]) -> str:
    """Nick portion of a nick!user@host source, empty when there is none"""
    if source and "!" in source:
        return source.split("!", 1)[0]
    logger.warning(f"Could not determine sender from source {source!r}")
    return ""

def extract_invocation(msg: ProtocolMessage) -> ChatInvocation:
    """Pull channel, sender and body out of a PRIVMSG.

    Raises ExtractError when the target is not a channel or the body is missing.
    """
    cursor = Cursor(msg.parameters).skip_whitespace()
    if cursor.peek() != "#":
        raise ExtractError(ExtractError.NOT_CHANNEL_MESSAGE, msg.parameters)

    cursor.advance()
    channel = cursor.read_until(" ")

    colon = cursor.find(":")
    if colon is None:
        raise ExtractError(ExtractError.NO_MESSAGE_BODY, msg.parameters)

    body = msg.parameters[colon + 1:]
    return ChatInvocation(channel=channel, sender=extract_sender(msg.source), body=body)
