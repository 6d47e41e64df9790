"""Detects bot command invocations in chat text"""

from dataclasses import dataclass
from typing import Optional
from .irc import Cursor

DEFAULT_TRIGGER = "!"

@dataclass(frozen=True)
class CommandInvocation:
    name: str
    arg_string: str = ""

def parse_command(body: str, trigger: str = DEFAULT_TRIGGER) -> Optional[CommandInvocation]:
    """Split '!name args...' into a command name and raw argument string.

    Returns None for ordinary chat. The argument string is everything after
    the first whitespace character following the name, untrimmed.
    """
    cursor = Cursor(body).skip_whitespace()
    if cursor.peek() != trigger:
        return None

    cursor.advance()
    name = cursor.read_while_not_space()
    if cursor.exhausted:
        return CommandInvocation(name=name)

    # Skip exactly the one separator character
    cursor.advance()
    return CommandInvocation(name=name, arg_string=cursor.rest())

def split_args(arg_string: str):
    """Whitespace-separated argument tokens"""
    return arg_string.split()

def first_token(arg_string: str) -> str:
    """First space-delimited token after leading spaces, empty if none"""
    cursor = Cursor(arg_string)
    while cursor.peek() == " ":
        cursor.advance()
    return cursor.read_until(" ")

def remainder_after_first(arg_string: str) -> str:
    """Text after the first token with the separating spaces skipped"""
    cursor = Cursor(arg_string)
    while cursor.peek() == " ":
        cursor.advance()
    cursor.read_until(" ")
    while cursor.peek() == " ":
        cursor.advance()
    return cursor.rest()
