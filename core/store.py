"""Command store interface shared by the SQLite database and tests"""

import abc
from typing import Any, Dict, List, Optional

DEFAULT_MOTD_RATE = 20

class CommandStore(abc.ABC):
    """Persistence for admins, dynamic commands and the message of the day."""

    @abc.abstractmethod
    def is_admin(self, name: str) -> bool:
        """Whether name is in the global admin set"""

    @abc.abstractmethod
    def add_admin(self, name: str):
        """Add name to the admin set; re-adding is a no-op"""

    @abc.abstractmethod
    def rem_admin(self, name: str):
        """Remove name from the admin set; removing a non-member is a no-op"""

    @abc.abstractmethod
    def cmd_exists(self, name: str) -> bool:
        """Whether a dynamic command called name exists"""

    @abc.abstractmethod
    def add_cmd(self, name: str, template: str):
        """Create or replace a dynamic command"""

    @abc.abstractmethod
    def rem_cmd(self, name: str):
        """Delete a dynamic command if present"""

    @abc.abstractmethod
    def get_cmd_resp(self, name: str) -> Optional[str]:
        """Template for a dynamic command, None when unknown"""

    @abc.abstractmethod
    def get_motd(self) -> Dict[str, Any]:
        """Message of the day as {'motd': str, 'rate': int, 'enabled': bool}"""

    @abc.abstractmethod
    def set_motd(self, text: str):
        pass

    @abc.abstractmethod
    def set_motd_enabled(self, enabled: bool):
        pass

    @abc.abstractmethod
    def set_motd_rate(self, minutes: int):
        pass

    def log_command_usage(self, command: str, user: str, channel: str, success: bool = True,
                          error: str = None, execution_time_ms: int = 0,
                          memory_usage_mb: float = 0.0):
        """Record one command execution. Stores without usage tracking ignore it."""
        pass

class MemoryCommandStore(CommandStore):
    """In-process store, used by tests and dry runs"""

    def __init__(self, admins=None, commands=None):
        self.admins = set(admins or [])
        self.commands: Dict[str, str] = dict(commands or {})
        self.motd: Dict[str, Any] = {'motd': '', 'rate': DEFAULT_MOTD_RATE, 'enabled': False}
        self.usage: List[Dict[str, Any]] = []

    def is_admin(self, name: str) -> bool:
        return name in self.admins

    def add_admin(self, name: str):
        self.admins.add(name)

    def rem_admin(self, name: str):
        self.admins.discard(name)

    def cmd_exists(self, name: str) -> bool:
        return name in self.commands

    def add_cmd(self, name: str, template: str):
        self.commands[name] = template

    def rem_cmd(self, name: str):
        self.commands.pop(name, None)

    def get_cmd_resp(self, name: str) -> Optional[str]:
        return self.commands.get(name)

    def get_motd(self) -> Dict[str, Any]:
        return dict(self.motd)

    def set_motd(self, text: str):
        self.motd['motd'] = text

    def set_motd_enabled(self, enabled: bool):
        self.motd['enabled'] = bool(enabled)

    def set_motd_rate(self, minutes: int):
        self.motd['rate'] = int(minutes)

    def log_command_usage(self, command: str, user: str, channel: str, success: bool = True,
                          error: str = None, execution_time_ms: int = 0,
                          memory_usage_mb: float = 0.0):
        self.usage.append({
            'command': command,
            'user': user,
            'channel': channel,
            'success': success,
            'error': error,
            'execution_time_ms': execution_time_ms,
            'memory_usage_mb': memory_usage_mb,
        })
