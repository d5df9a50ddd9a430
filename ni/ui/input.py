"""
Input handling for the ni editor.

Processes key codes for each mode (normal, insert, command) and updates the
context accordingly.
"""
import string

from ni import commands, keys, terminal

PAGE_UP_KEYS = (keys.PAGE_UP, keys.ctrl_key('u'))
PAGE_DOWN_KEYS = (keys.PAGE_DOWN, keys.ctrl_key('d'))
MOTION_KEYS = (
    ord('h'), ord('j'), ord('k'), ord('l'),
    ord('w'), ord('W'), ord('e'), ord('E'),
) + keys.ARROW_KEYS
COMMAND_DELETE_KEYS = (keys.BACKSPACE, keys.CTRL_H, keys.DEL_KEY)


def _is_punct(ch: str) -> bool:
    return ch in string.punctuation


def _skip_word(chars: str, cx: int, stop_at_punct: bool) -> int:
    """
    Scan forward over a word starting at cx.

    The character that ends the scan (a space) is consumed as well. With
    stop_at_punct the scan also ends when the next character is punctuation;
    past the end of the row there is no next character.
    """
    size = len(chars)
    while cx < size:
        ch = chars[cx]
        cx += 1
        if ch in string.whitespace:
            break
        if stop_at_punct and cx < size and _is_punct(chars[cx]):
            break
    return cx


def _move_word(context, key: int):
    row = context.current_row()
    if row is None:
        return
    chars = row.chars
    cx = _skip_word(chars, context.cx, stop_at_punct=key in (ord('w'), ord('e')))
    if key in (ord('w'), ord('W')):
        while cx < row.size and chars[cx] == ' ':
            cx += 1
    context.cx = cx
    if context.cx >= row.size:
        context.cy += 1
        context.cx = 0


def move_cursor(context, key: int):
    """Move the cursor for a motion key, then snap it to the row's length."""
    row = context.current_row()

    if key in (ord('k'), keys.ARROW_UP):
        if context.cy != 0:
            context.cy -= 1
    elif key in (ord('j'), keys.ARROW_DOWN):
        if context.cy < context.numrows:
            context.cy += 1
    elif key in (ord('h'), keys.ARROW_LEFT):
        if context.cx != 0:
            context.cx -= 1
        elif context.cy > 0:
            context.cy -= 1
            context.cx = context.current_row().size
    elif key in (ord('l'), keys.ARROW_RIGHT):
        if row is not None and context.cx < row.size:
            context.cx += 1
        elif row is not None and context.cx == row.size:
            context.cy += 1
            context.cx = 0
    elif key in (ord('w'), ord('W'), ord('e'), ord('E')):
        _move_word(context, key)

    row = context.current_row()
    rowlen = row.size if row is not None else 0
    if context.cx > rowlen:
        context.cx = rowlen


def _page(context, key: int):
    if key in PAGE_UP_KEYS:
        context.cy = context.rowoff
        direction = keys.ARROW_UP
    else:
        context.cy = min(context.rowoff + context.screenrows - 1, context.numrows)
        direction = keys.ARROW_DOWN
    for _ in range(context.screenrows):
        move_cursor(context, direction)


def _is_count_digit(context, key: int) -> bool:
    # 0 only extends a count; on its own it means start of line
    if context.cmdrep != 0:
        return ord('0') <= key <= ord('9')
    return ord('1') <= key <= ord('9')


def handle_normal_mode(context, key: int):
    """Handle a key press in normal mode."""
    if _is_count_digit(context, key):
        context.cmdrep = context.cmdrep * 10 + (key - ord('0'))
        return

    if key == ord('i'):
        context.mode = "insert"
    elif key == ord(':'):
        context.mode = "command"
        context.set_status_message(":")
    elif key == keys.ctrl_key('q'):
        context.log_command("^Q: quit")
        context.graceful_exit()
    elif key in (ord('0'), keys.HOME_KEY):
        context.cx = 0
    elif key in (ord('$'), keys.END_KEY):
        row = context.current_row()
        if row is not None:
            context.cx = row.size
    elif key in PAGE_UP_KEYS or key in PAGE_DOWN_KEYS:
        _page(context, key)
    elif key in MOTION_KEYS:
        move_cursor(context, key)

    context.cmdrep = 0


def handle_insert_mode(context, key: int):
    """Handle a key press in insert mode. Text is never modified here."""
    if key == keys.ESC:
        context.mode = "normal"
    elif key in keys.ARROW_KEYS:
        move_cursor(context, key)


def _leave_command_mode(context):
    context.command_buffer = ""
    context.set_status_message("")
    context.mode = "normal"


def handle_command_mode(context, key: int):
    """Handle a key press in command (:) mode."""
    if key == keys.ENTER:
        commands.process_command(context, context.command_buffer)
        _leave_command_mode(context)
    elif key == keys.ESC:
        _leave_command_mode(context)
    elif key in COMMAND_DELETE_KEYS:
        if context.command_buffer:
            context.command_buffer = context.command_buffer[:-1]
            context.set_status_message(f":{context.command_buffer}")
    elif 32 <= key <= 126:
        context.command_buffer += chr(key)
        context.set_status_message(f":{context.command_buffer}")


MODE_HANDLERS = {
    "normal": handle_normal_mode,
    "insert": handle_insert_mode,
    "command": handle_command_mode,
}


def process_keypress(context, key: int):
    """Route one key code to the handler for the active mode."""
    handler = MODE_HANDLERS.get(context.mode)
    if handler is None:
        terminal.die(f"mode not recognised: {context.mode!r}")
    handler(context, key)
