"""Admin management and user-defined command maintenance"""

import logging
import sys
from core.command_parser import first_token, remainder_after_first
from core.plugin_system import admin_command, owner_command, auto_register_commands

logger = logging.getLogger(__name__)

@owner_command(
    name="addadmin",
    description="Give a user admin rights for Chipsie",
    usage="!addadmin <name>",
    category="admin"
)
def add_admin(ctx):
    admin_name = first_token(ctx.arg_string)
    if not admin_name:
        return None

    if ctx.store.is_admin(admin_name):
        return None

    ctx.store.add_admin(admin_name)
    logger.info(f"{ctx.sender} added {admin_name} to admins")
    return f"{admin_name} is now a Chipsie admin. Be nice to me! ;)"

@owner_command(
    name="remadmin",
    description="Take admin rights away from a user",
    usage="!remadmin <name>",
    category="admin"
)
def remove_admin(ctx):
    admin_name = first_token(ctx.arg_string)
    if not admin_name or not ctx.store.is_admin(admin_name):
        return None

    ctx.store.rem_admin(admin_name)
    logger.info(f"{ctx.sender} removed admin {admin_name}")
    return f"OK {ctx.sender}, I removed {admin_name} as a Chipsie admin! :D"

@admin_command(
    name="addcmd",
    description="Create or replace a custom command",
    usage="!addcmd <name> <response with [username] [channel] [item] [param]>",
    category="commands"
)
def add_command(ctx):
    name = first_token(ctx.arg_string)
    template = remainder_after_first(ctx.arg_string)
    if not name or not template:
        return None

    if name in ctx.registry:
        logger.warning(f"{ctx.sender} tried to shadow built-in command {name}")
        return f"Sorry {ctx.sender}, !{name} is one of my built-in commands"

    existed = ctx.store.cmd_exists(name)
    ctx.store.add_cmd(name, template)
    logger.info(f"{ctx.sender} {'updated' if existed else 'added'} command {name}")
    if existed:
        return f"OK {ctx.sender}, I updated the !{name} command"
    return f"OK {ctx.sender}, !{name} is ready to go!"

@admin_command(
    name="rmcmd",
    description="Delete a custom command",
    usage="!rmcmd <name>",
    category="commands"
)
def remove_command(ctx):
    name = first_token(ctx.arg_string)
    if not name:
        return None

    if not ctx.store.cmd_exists(name):
        return f"Sorry {ctx.sender}, I couldn't find a !{name} command"

    ctx.store.rem_cmd(name)
    logger.info(f"{ctx.sender} removed command {name}")
    return f"OK {ctx.sender}, I removed the !{name} command"

def setup_plugin(registry):
    """Setup function called by plugin loader"""
    auto_register_commands(registry, sys.modules[__name__])
