"""
ni/ui/screen.py

Scrolling and screen composition for the ni editor. Every refresh builds one
complete frame (text rows, status bar, message bar, cursor placement) and sends
it to the terminal in a single write so the user never sees a half-drawn screen.
"""
from wcwidth import wcwidth

from ni import terminal

VERSION = "0.0.1"
WELCOME_BANNER = f"Ni editor -- version {VERSION}"
NO_NAME = "[No name]"

HIDE_CURSOR = "\x1b[?25l"
SHOW_CURSOR = "\x1b[?25h"
CURSOR_HOME = "\x1b[H"
CLEAR_LINE = "\x1b[K"
INVERT_ON = "\x1b[7m"
INVERT_OFF = "\x1b[m"
NEWLINE = "\r\n"


def fit_width(text: str, width: int) -> str:
    """Trim text so its visual width does not exceed `width`."""
    used = 0
    for i, ch in enumerate(text):
        cells = max(wcwidth(ch), 0)
        if used + cells > width:
            return text[:i]
        used += cells
    return text


def text_width(text: str) -> int:
    return sum(max(wcwidth(ch), 0) for ch in text)


def align_right(used: int, right: str, width: int) -> str:
    """
    Return the filler that follows `used` cells of left text: spaces, then
    `right` only if it lands exactly at the end of the line.
    """
    gap = width - used
    if gap <= 0:
        return ""
    if gap >= len(right):
        return " " * (gap - len(right)) + right
    return " " * gap


def scroll(context):
    """Recompute rx and move the viewport so the cursor stays visible."""
    context.rx = 0
    row = context.current_row()
    if row is not None:
        context.rx = row.cx_to_rx(context.cx)

    if context.cy < context.rowoff:
        context.rowoff = context.cy
    if context.cy >= context.rowoff + context.screenrows:
        context.rowoff = context.cy - context.screenrows + 1
    if context.rx < context.coloff:
        context.coloff = context.rx
    if context.rx >= context.coloff + context.screencols:
        context.coloff = context.rx - context.screencols + 1


def draw_welcome(context, out: list):
    welcome = WELCOME_BANNER[:context.screencols]
    padding = (context.screencols - len(welcome)) // 2
    if padding:
        out.append("~")
        padding -= 1
    out.append(" " * padding)
    out.append(welcome)


def draw_rows(context, out: list):
    """Append the visible slice of the buffer, one screen line per row."""
    buf = context.current_buffer
    for y in range(context.screenrows):
        filerow = y + context.rowoff
        if filerow < buf.numrows:
            render = buf.rows[filerow].render
            out.append(render[context.coloff:context.coloff + context.screencols])
        elif buf.numrows == 0 and y == context.screenrows // 3:
            draw_welcome(context, out)
        else:
            out.append("~")
        out.append(CLEAR_LINE)
        out.append(NEWLINE)


def draw_status_bar(context, out: list):
    """Reverse-video line with mode, filename, line count and cursor position."""
    mode = context.mode.upper()[:20]
    fname = (context.current_buffer.filename or NO_NAME)[:20]
    status = fit_width(f" {mode} | {fname} | {context.numrows} lines", context.screencols)
    rstatus = f"{context.cy + 1}:{context.cx + 1} "

    out.append(INVERT_ON)
    out.append(status)
    out.append(align_right(text_width(status), rstatus, context.screencols))
    out.append(INVERT_OFF)
    out.append(NEWLINE)


def draw_message_bar(context, out: list):
    out.append(CLEAR_LINE)
    msg = fit_width(context.status_message, context.screencols)
    out.append(msg)
    if context.cmdrep != 0:
        out.append(align_right(text_width(msg), f"{context.cmdrep} ", context.screencols))


def compose_frame(context) -> bytes:
    """Build the full output for one refresh. Assumes scroll() already ran."""
    out = [HIDE_CURSOR, CURSOR_HOME]
    draw_rows(context, out)
    draw_status_bar(context, out)
    draw_message_bar(context, out)
    out.append(f"\x1b[{context.cy - context.rowoff + 1};{context.rx - context.coloff + 1}H")
    out.append(SHOW_CURSOR)
    return "".join(out).encode("utf-8", errors="surrogateescape")


def display(context):
    """Refresh the whole screen with a single terminal write."""
    scroll(context)
    terminal.write_frame(context.stdout_fd, compose_frame(context))
