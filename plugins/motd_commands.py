"""Message of the day commands"""

import logging
import sys
from core.plugin_system import admin_command, auto_register_commands

logger = logging.getLogger(__name__)

@admin_command(
    name="setmotd",
    description="Set the message of the day",
    usage="!setmotd <message>",
    category="motd"
)
def set_motd(ctx):
    text = ctx.arg_string.strip()
    if not text:
        return "Usage: !setmotd <message>"

    ctx.store.set_motd(text)
    logger.info(f"{ctx.sender} set the motd")
    return f"OK {ctx.sender}, the message of the day is set!"

@admin_command(
    name="motdon",
    description="Start posting the message of the day",
    category="motd"
)
def motd_on(ctx):
    motd = ctx.store.get_motd()
    if not motd['motd']:
        return f"Sorry {ctx.sender}, there is no message of the day yet. Use !setmotd first"

    ctx.store.set_motd_enabled(True)
    return f"OK {ctx.sender}, I'll post the message of the day every {motd['rate']} minutes"

@admin_command(
    name="motdoff",
    description="Stop posting the message of the day",
    category="motd"
)
def motd_off(ctx):
    ctx.store.set_motd_enabled(False)
    return f"OK {ctx.sender}, no more message of the day"

@admin_command(
    name="motdrate",
    description="Set how often the message of the day is posted",
    usage="!motdrate <minutes>",
    category="motd"
)
def motd_rate(ctx):
    value = ctx.arg_string.strip()
    try:
        minutes = int(value)
    except ValueError:
        minutes = 0
    if minutes <= 0:
        return "Usage: !motdrate <minutes>"

    ctx.store.set_motd_rate(minutes)
    return f"OK {ctx.sender}, the message of the day will be posted every {minutes} minutes"

def setup_plugin(registry):
    """Setup function called by plugin loader"""
    auto_register_commands(registry, sys.modules[__name__])
