"""Resolves chat commands against built-ins and the dynamic command store"""

import os
import time
import logging
from dataclasses import dataclass
from typing import List, Optional, Union

import psutil

from .plugin_system import CommandRegistry, CommandInfo, OWNER, ADMIN
from .store import CommandStore
from .templates import ArgumentQueue, TemplateExpander

logger = logging.getLogger(__name__)

Reply = Union[None, str, List[str]]

@dataclass
class CommandContext:
    """Everything a built-in handler gets to see about one invocation"""
    channel: str
    sender: str
    command_name: str
    arg_string: str
    store: CommandStore
    registry: CommandRegistry

def is_privileged(user: str, channel: str, store: CommandStore) -> bool:
    """Channel owner or global admin. Ownership of other channels never counts."""
    if not user:
        return False
    if user == channel:
        return True
    return store.is_admin(user)

def unauthorized_message(sender: str) -> str:
    return f"Hey @{sender}, you aren't allowed to use that command! >("

def _memory_mb(process) -> float:
    try:
        return process.memory_info().rss / 1024 / 1024
    except psutil.Error:
        return 0.0

class CommandDispatcher:
    """Two-tier command lookup: built-in registry first, then stored templates"""

    def __init__(self, registry: CommandRegistry, store: CommandStore,
                 expander: Optional[TemplateExpander] = None):
        self.registry = registry
        self.store = store
        self.expander = expander or TemplateExpander()
        self.process = psutil.Process(os.getpid())

    def is_allowed(self, cmd_info: CommandInfo, sender: str, channel: str) -> bool:
        if cmd_info.privilege == OWNER:
            return bool(sender) and sender == channel
        if cmd_info.privilege == ADMIN:
            return is_privileged(sender, channel, self.store)
        return True

    def dispatch(self, channel: str, sender: str, command_name: str, arg_string: str = "") -> List[str]:
        """Run one command and return the reply texts for the channel"""
        if not command_name:
            return []

        cmd_info = self.registry.find_command(command_name)
        if cmd_info is None:
            return self.run_dynamic(channel, sender, command_name, arg_string)

        if not self.is_allowed(cmd_info, sender, channel):
            logger.warning(f"Unauthorized attempted use of {command_name} by {sender} in #{channel}")
            return [unauthorized_message(sender)]

        ctx = CommandContext(
            channel=channel,
            sender=sender,
            command_name=command_name,
            arg_string=arg_string,
            store=self.store,
            registry=self.registry
        )
        return self._run_builtin(cmd_info, ctx)

    def _run_builtin(self, cmd_info: CommandInfo, ctx: CommandContext) -> List[str]:
        start_time = time.time()
        start_memory = _memory_mb(self.process)

        try:
            response = cmd_info.handler(ctx)
        except Exception as e:
            logger.error(f"Command {cmd_info.name} failed: {e}")
            self._record(cmd_info.name, ctx.sender, ctx.channel, start_time, start_memory,
                         success=False, error=str(e))
            return []

        self._record(cmd_info.name, ctx.sender, ctx.channel, start_time, start_memory)
        return _as_list(response)

    def run_dynamic(self, channel: str, sender: str, command_name: str, arg_string: str) -> List[str]:
        template = self.store.get_cmd_resp(command_name)
        if template is None:
            logger.debug(f"Ignoring unknown command {command_name} from {sender}")
            return []

        start_time = time.time()
        start_memory = _memory_mb(self.process)
        args = ArgumentQueue.from_string(arg_string)
        reply = self.expander.expand(template, channel, sender, args)
        self._record(command_name, sender, channel, start_time, start_memory)
        return [reply]

    def _record(self, name: str, sender: str, channel: str, start_time: float, start_memory: float,
                success: bool = True, error: str = None):
        execution_time = int((time.time() - start_time) * 1000)
        memory_usage = _memory_mb(self.process) - start_memory
        self.store.log_command_usage(
            name, sender, channel, success=success, error=error,
            execution_time_ms=execution_time, memory_usage_mb=memory_usage
        )

def _as_list(response: Reply) -> List[str]:
    if not response:
        return []
    if isinstance(response, str):
        return [response]
    return [str(r) for r in response if r]
