"""Placeholder expansion for user-defined command responses.

Templates contain ``[name]`` placeholders resolved left to right in a
single pass; substituted text is never scanned again.

    [username]  the sender
    [channel]   the channel name
    [item]      a random flavor item, picked per occurrence
    [param]     the next argument given to the command

A ``[param]`` with no arguments left replaces the whole response with
a formatting hint for the sender.
"""

import logging
import random
from collections import deque
from typing import Iterable, Optional

logger = logging.getLogger(__name__)

ITEMS = (
    "a magical sword",
    "a strange smelling potion",
    "a gold dubloon",
    "a tattered scroll",
    "an ancient artifact",
)

UNKNOWN_PLACEHOLDER = "ERROR"

class TemplateArgumentShortfall(Exception):
    """A [param] placeholder found the argument queue empty"""
    pass

class ArgumentQueue:
    """FIFO of whitespace-separated arguments for one invocation"""

    def __init__(self, args: Iterable[str] = ()):
        self._items = deque(args)

    @classmethod
    def from_string(cls, arg_string: str) -> "ArgumentQueue":
        return cls(arg_string.split())

    def pop(self) -> str:
        if not self._items:
            raise TemplateArgumentShortfall()
        return self._items.popleft()

    def __len__(self):
        return len(self._items)

def format_error_message(sender: str) -> str:
    return f"Hey @{sender}, you didn't format that command right! :("

class TemplateExpander:
    """Resolves placeholders in dynamic command templates"""

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()

    def resolve(self, name: str, channel: str, sender: str, args: ArgumentQueue) -> str:
        if name == "username":
            return sender
        if name == "channel":
            return channel
        if name == "item":
            return self.rng.choice(ITEMS)
        if name == "param":
            return args.pop()
        logger.debug(f"Unknown template placeholder [{name}]")
        return UNKNOWN_PLACEHOLDER

    def expand(self, template: str, channel: str, sender: str, args: ArgumentQueue) -> str:
        pieces = []
        pos = 0
        while True:
            start = template.find("[", pos)
            if start == -1:
                break
            end = template.find("]", start + 1)
            if end == -1:
                break
            pieces.append(template[pos:start])
            try:
                pieces.append(self.resolve(template[start + 1:end], channel, sender, args))
            except TemplateArgumentShortfall:
                logger.info(f"Not enough arguments from {sender} for template {template!r}")
                return format_error_message(sender)
            pos = end + 1
        pieces.append(template[pos:])
        return "".join(pieces)

_default_expander = TemplateExpander()

def expand(template: str, channel: str, sender: str, args: ArgumentQueue) -> str:
    """Expand a template with the module-level expander"""
    return _default_expander.expand(template, channel, sender, args)
