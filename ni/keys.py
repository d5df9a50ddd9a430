"""
Key decoding for the ni editor.

Reads raw bytes from the terminal and turns escape sequences into key codes.
Ordinary bytes are returned as their integer value; special keys get codes
above the byte range so they can never collide with typed input.
"""
import errno
import os

from ni import terminal

ESC = 27
ENTER = 13
CTRL_H = 8
BACKSPACE = 127

ARROW_LEFT = 1000
ARROW_RIGHT = 1001
ARROW_UP = 1002
ARROW_DOWN = 1003
DEL_KEY = 1004
HOME_KEY = 1005
END_KEY = 1006
PAGE_UP = 1007
PAGE_DOWN = 1008

ARROW_KEYS = (ARROW_LEFT, ARROW_RIGHT, ARROW_UP, ARROW_DOWN)

# ESC [ <letter>
CSI_SIMPLE_MAP = {
    ord("A"): ARROW_UP,
    ord("B"): ARROW_DOWN,
    ord("C"): ARROW_RIGHT,
    ord("D"): ARROW_LEFT,
    ord("H"): HOME_KEY,
    ord("F"): END_KEY,
}
# ESC [ <digit> ~
CSI_TILDE_MAP = {
    ord("1"): HOME_KEY,
    ord("3"): DEL_KEY,
    ord("4"): END_KEY,
    ord("5"): PAGE_UP,
    ord("6"): PAGE_DOWN,
    ord("7"): HOME_KEY,
    ord("8"): END_KEY,
}

_RETRY_ERRNOS = (errno.EAGAIN, errno.EINTR)


def ctrl_key(ch: str) -> int:
    """Key code produced by holding Ctrl with `ch`."""
    return ord(ch) & 0x1f


def _read_byte(fd: int, read):
    """Read one byte; returns b"" when the terminal read timed out."""
    try:
        return read(fd, 1)
    except OSError as e:
        if e.errno in _RETRY_ERRNOS:
            return b""
        terminal.die("read", e.strerror)


def read_key(fd: int, read=os.read) -> int:
    """
    Wait for a key press and return its key code.

    The terminal read times out every 100ms, so this loops until a byte
    arrives. An incomplete or unknown escape sequence decodes to a bare ESC.
    """
    while True:
        c = _read_byte(fd, read)
        if c:
            break

    ch = c[0]
    if ch != ESC:
        return ch

    seq0 = _read_byte(fd, read)
    if not seq0:
        return ESC
    seq1 = _read_byte(fd, read)
    if not seq1:
        return ESC
    a, b = seq0[0], seq1[0]

    if a != ord("["):
        return ESC
    if ord("0") <= b <= ord("9"):
        seq2 = _read_byte(fd, read)
        if not seq2 or seq2[0] != ord("~"):
            return ESC
        return CSI_TILDE_MAP.get(b, ESC)
    return CSI_SIMPLE_MAP.get(b, ESC)
