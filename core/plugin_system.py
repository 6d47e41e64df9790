"""Plugin system for built-in chat commands"""

import logging
import inspect
import importlib
import pkgutil
from typing import Dict, Callable, Optional
from dataclasses import dataclass

logger = logging.getLogger(__name__)

# Privilege levels
OWNER = "owner"   # channel owner only
ADMIN = "admin"   # channel owner or a global admin

@dataclass
class CommandInfo:
    """Information about a registered command"""
    name: str
    handler: Callable
    description: str
    usage: str
    category: str = "general"
    privilege: Optional[str] = None

class CommandRegistry:
    """Built-in commands keyed by exact, case-sensitive name"""

    def __init__(self, command_prefix: str = "!"):
        self.command_prefix = command_prefix
        self.commands: Dict[str, CommandInfo] = {}

    def register_command(self,
                         handler: Callable,
                         name: str = None,
                         description: str = "No description available",
                         usage: str = None,
                         category: str = "general",
                         privilege: Optional[str] = None):
        """Register a command handler under name"""

        if name is None:
            name = handler.__name__

        if usage is None:
            usage = f"{self.command_prefix}{name}"

        if privilege not in (None, OWNER, ADMIN):
            raise ValueError(f"Unknown privilege level for '{name}': {privilege}")

        if name in self.commands:
            logger.warning(f"Command '{name}' registered twice, replacing previous handler")

        self.commands[name] = CommandInfo(
            name=name,
            handler=handler,
            description=description,
            usage=usage,
            category=category,
            privilege=privilege
        )
        logger.debug(f"Registered command '{name}'")

    def find_command(self, name: str) -> Optional[CommandInfo]:
        return self.commands.get(name)

    def __contains__(self, name: str) -> bool:
        return name in self.commands

    def load_plugins(self, package_name: str = "plugins") -> int:
        """Import every module in package_name and run its setup_plugin"""
        plugins_loaded = 0
        package = importlib.import_module(package_name)

        for _, name, _ in pkgutil.iter_modules(package.__path__, package.__name__ + "."):
            try:
                module = importlib.import_module(name)
            except ImportError as e:
                logger.error(f"Failed to load plugin {name}: {e}")
                continue
            if hasattr(module, 'setup_plugin'):
                module.setup_plugin(self)
                plugins_loaded += 1
                logger.debug(f"Loaded plugin: {name}")
            else:
                logger.warning(f"Plugin {name} has no setup_plugin function")

        logger.info(f"Loaded {plugins_loaded} plugin(s), {len(self.commands)} command(s) registered")
        return plugins_loaded

# Decorators for easy command registration
def command(name: str = None,
            description: str = "No description available",
            usage: str = None,
            category: str = "general",
            privilege: Optional[str] = None):
    """Decorator to mark a function as a command"""
    def decorator(func):
        func._command_name = name or func.__name__
        func._command_description = description
        func._command_usage = usage
        func._command_category = category
        func._command_privilege = privilege
        return func
    return decorator

def admin_command(name: str = None, **kwargs):
    """Decorator for commands open to the channel owner and admins"""
    kwargs['privilege'] = ADMIN
    return command(name, **kwargs)

def owner_command(name: str = None, **kwargs):
    """Decorator for commands open to the channel owner only"""
    kwargs['privilege'] = OWNER
    return command(name, **kwargs)

def auto_register_commands(registry: CommandRegistry, module):
    """Register all decorated commands in a module"""
    for _, obj in inspect.getmembers(module):
        if inspect.isfunction(obj) and hasattr(obj, '_command_name'):
            registry.register_command(
                handler=obj,
                name=obj._command_name,
                description=obj._command_description,
                usage=obj._command_usage,
                category=obj._command_category,
                privilege=obj._command_privilege
            )
