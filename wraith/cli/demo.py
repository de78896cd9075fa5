"""Commands loaded by `wraith run`."""

import random

from wraith.commands.command import command
from wraith.commands.responses import Embed


@command("echo", "say", parameters=["message+ : Text to repeat"], description="Repeat a message")
def echo(ctx):
    return ctx.args["message"]


@command(
    "roll",
    "r",
    parameters=[
        "(int) sides = 6 : Number of sides per die",
        "(int) count = 1 : Number of dice",
    ],
    description="Roll dice",
)
def roll(ctx):
    sides, count = ctx.args["sides"], ctx.args["count"]
    if sides < 1 or count < 1:
        return ["Nice try.", "I need at least one die with at least one side."]
    rolls = [random.randint(1, sides) for _ in range(count)]
    if count == 1:
        return f"🎲 {rolls[0]}"
    return f"🎲 {' + '.join(map(str, rolls))} = {sum(rolls)}"


@command("help", "h", parameters=["-command : Command to describe"], description="Show help")
def help_command(ctx):
    name = ctx.args["command"]
    if name:
        return ctx.commands.get_help(name)

    embed = Embed(title="Commands", footer=f"{len(ctx.commands)} commands loaded")
    for cmd in ctx.commands:
        embed.add_field(cmd.usage(), cmd.description or "")
    return embed


DEMO_COMMANDS = [echo, roll, help_command]
