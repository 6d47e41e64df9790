"""Custom exceptions for the chat bot"""

class BotError(Exception):
    """Base exception for bot-related errors"""
    pass

class ConfigurationError(BotError):
    """Raised when configuration is invalid"""
    pass

class ConnectionError(BotError):
    """Raised when the chat server connection fails"""
    pass

class CommandError(BotError):
    """Raised when command execution fails"""
    pass

class DatabaseError(BotError):
    """Raised when database operations fail"""
    pass

class MalformedLineError(BotError):
    """Raised when a protocol line is missing an expected delimiter"""
    def __init__(self, reason: str, line: str = ""):
        super().__init__(f"{reason}: {line!r}")
        self.reason = reason
        self.line = line

class ParseError(MalformedLineError):
    """Raised when a raw line cannot be split into a protocol message"""
    EMPTY_LINE = "EmptyLine"
    TRUNCATED_AFTER_TAGS = "TruncatedAfterTags"
    TRUNCATED_AFTER_SOURCE = "TruncatedAfterSource"

class ExtractError(MalformedLineError):
    """Raised when a PRIVMSG does not carry a channel and a body"""
    NOT_CHANNEL_MESSAGE = "NotChannelMessage"
    NO_MESSAGE_BODY = "NoMessageBody"
