"""
Terminal control for the ni editor.

Puts the controlling terminal into raw mode for the lifetime of the editor and
restores it on every exit path, queries the window geometry, and performs the
low-level writes. Any failing terminal syscall is fatal: the terminal may be in
a half-configured state, so the editor reports the failing operation and stops.
"""
import errno
import os
import re
import signal
import termios

CLEAR_SCREEN = b"\x1b[2J"
CURSOR_HOME = b"\x1b[H"
CURSOR_FAR_CORNER = b"\x1b[999C\x1b[999B"
CURSOR_POSITION_QUERY = b"\x1b[6n"

# Reply to ESC[6n has the form ESC [ rows ; cols R (the R is stripped by the reader)
_CURSOR_REPORT = re.compile(rb"\x1b\[(\d+);(\d+)")
_CURSOR_REPORT_MAX = 31

# Signals that would otherwise kill the process with the terminal still raw
_EXIT_SIGNALS = tuple(
    getattr(signal, name) for name in ("SIGTERM", "SIGHUP") if hasattr(signal, name)
)


class FatalError(Exception):
    """An unrecoverable terminal or I/O failure."""
    def __init__(self, operation: str, reason: str = None):
        message = operation if reason is None else f"{operation}: {reason}"
        super().__init__(message)
        self.operation = operation
        self.reason = reason


def die(operation: str, reason: str = None):
    """Abort the editor, naming the operation that failed."""
    raise FatalError(operation, reason)


def _reason(error) -> str:
    # termios.error carries (errno, message); OSError has strerror
    if isinstance(error, OSError) and error.strerror:
        return error.strerror
    if error.args:
        return str(error.args[-1])
    return str(error)


def _raise_exit(signum, frame):
    raise SystemExit(128 + signum)


class RawMode:
    """
    Context manager holding the terminal in raw mode.

    On entry the current attributes are saved and replaced with a configuration
    that disables line buffering, echo, signal keys, flow control and output
    processing; reads return after at most 100ms with whatever is available.
    On exit, whatever the reason, the saved attributes are put back.
    """
    def __init__(self, fd: int):
        self.fd = fd
        self.orig = None
        self._saved_handlers = {}

    def __enter__(self) -> "RawMode":
        try:
            self.orig = termios.tcgetattr(self.fd)
        except termios.error as e:
            die("tcgetattr", _reason(e))

        raw = [list(attr) if isinstance(attr, list) else attr for attr in self.orig]
        raw[0] &= ~(termios.BRKINT | termios.ICRNL | termios.INPCK | termios.ISTRIP | termios.IXON)
        raw[1] &= ~termios.OPOST
        raw[2] |= termios.CS8
        raw[3] &= ~(termios.ECHO | termios.ICANON | termios.IEXTEN | termios.ISIG)
        raw[6][termios.VMIN] = 0
        raw[6][termios.VTIME] = 1

        self._install_signal_handlers()
        try:
            termios.tcsetattr(self.fd, termios.TCSAFLUSH, raw)
        except termios.error as e:
            self.restore()
            die("tcsetattr", _reason(e))
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.restore()

    def restore(self) -> None:
        """Put back the attributes captured on entry. Safe to call twice."""
        self._restore_signal_handlers()
        if self.orig is None:
            return
        orig, self.orig = self.orig, None
        try:
            termios.tcsetattr(self.fd, termios.TCSAFLUSH, orig)
        except termios.error as e:
            die("tcsetattr", _reason(e))

    def _install_signal_handlers(self) -> None:
        for signum in _EXIT_SIGNALS:
            self._saved_handlers[signum] = signal.signal(signum, _raise_exit)

    def _restore_signal_handlers(self) -> None:
        while self._saved_handlers:
            signum, handler = self._saved_handlers.popitem()
            signal.signal(signum, handler)


def parse_cursor_report(data: bytes):
    """Parse a cursor position report into (rows, cols), or None if malformed."""
    match = _CURSOR_REPORT.match(data)
    if not match:
        return None
    return int(match.group(1)), int(match.group(2))


def get_cursor_position(in_fd: int, out_fd: int, read=os.read):
    """Ask the terminal where the cursor is. Returns (rows, cols) or None."""
    try:
        if os.write(out_fd, CURSOR_POSITION_QUERY) != len(CURSOR_POSITION_QUERY):
            return None
    except OSError:
        return None

    buf = bytearray()
    while len(buf) < _CURSOR_REPORT_MAX:
        try:
            c = read(in_fd, 1)
        except OSError as e:
            if e.errno in (errno.EAGAIN, errno.EINTR):
                break
            die("getWindowSize", _reason(e))
        if not c or c == b"R":
            break
        buf += c
    return parse_cursor_report(bytes(buf))


def get_window_size(in_fd: int, out_fd: int, read=os.read):
    """
    Return the terminal size as (rows, cols).

    When the OS cannot tell us, push the cursor to the bottom-right corner
    (C and B stop at the screen edge) and ask the terminal where it ended up.
    """
    try:
        size = os.get_terminal_size(out_fd)
    except OSError:
        size = None
    if size is not None and size.columns != 0:
        return size.lines, size.columns

    try:
        written = os.write(out_fd, CURSOR_FAR_CORNER)
    except OSError as e:
        die("getWindowSize", _reason(e))
    if written != len(CURSOR_FAR_CORNER):
        die("getWindowSize")
    position = get_cursor_position(in_fd, out_fd, read)
    if position is None:
        die("getWindowSize", "no cursor position report")
    return position


def clear_screen(fd: int) -> None:
    """Erase the display and home the cursor. Best effort."""
    try:
        os.write(fd, CLEAR_SCREEN + CURSOR_HOME)
    except OSError:
        pass


def write_frame(fd: int, data: bytes) -> None:
    """Write one complete frame with a single system call."""
    try:
        os.write(fd, data)
    except OSError as e:
        die("write", _reason(e))
