"""
Command execution for the ni editor.

Handles what was typed in command (':') mode once Enter is pressed. Each
directive is a single character; a directive fires if its character appears
anywhere in the command line.
"""
from ni import logger


def _quit(context):
    context.log_command("q: quit")
    context.graceful_exit()


# TODO: add a 'w' directive once Buffer can write itself back to disk
DIRECTIVES = (
    ("q", _quit),
)


def process_command(context, command: str):
    """Execute a command-line (':' mode) string."""
    logger.log(f"command: ':{command}'")
    for flag, action in DIRECTIVES:
        if flag in command:
            action(context)
