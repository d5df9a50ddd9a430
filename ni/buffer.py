"""
Buffer module for the ni editor.

Defines the Row class, holding one line of text together with its rendered
(tab-expanded) form, and the Buffer class, the ordered collection of rows loaded
from a file. Rows are addressed by index only.
"""
from ni import terminal

DEFAULT_TAB_STOP = 4


class Row:
    """One line of text and the way it is drawn on screen."""
    def __init__(self, chars: str, tab_stop: int = DEFAULT_TAB_STOP):
        self.tab_stop = tab_stop
        self.chars = chars
        self.render = ""
        self.update()

    @property
    def size(self) -> int:
        return len(self.chars)

    @property
    def rsize(self) -> int:
        return len(self.render)

    def update(self):
        """Rebuild the rendered form. Must be called after every change to chars."""
        out = []
        width = 0
        for ch in self.chars:
            if ch == "\t":
                spaces = self.tab_stop - (width % self.tab_stop)
                out.append(" " * spaces)
                width += spaces
            else:
                out.append(ch)
                width += 1
        self.render = "".join(out)

    def cx_to_rx(self, cx: int) -> int:
        """Convert a character offset into the matching rendered column."""
        rx = 0
        for ch in self.chars[:cx]:
            if ch == "\t":
                rx += self.tab_stop - (rx % self.tab_stop)
            else:
                rx += 1
        return rx


class Buffer:
    """Represents the text being viewed: an ordered list of rows."""
    def __init__(self, filename: str = None, lines=None, tab_stop: int = DEFAULT_TAB_STOP):
        self.filename = filename  # Path to file or None for an empty buffer
        self.tab_stop = tab_stop
        self.rows = []
        for line in lines or ():
            self.append_row(line)

    @property
    def numrows(self) -> int:
        return len(self.rows)

    def append_row(self, chars: str) -> Row:
        """Add a row at the end of the buffer and return it."""
        row = Row(chars, self.tab_stop)
        self.rows.append(row)
        return row

    def open_file(self, filename: str):
        """
        Append every line of `filename` as a row.
        Line terminators are stripped; undecodable bytes survive as surrogates.
        """
        try:
            f = open(filename, 'r', encoding='utf-8', errors='surrogateescape', newline='\n')
        except OSError as e:
            terminal.die("fopen", f"{filename}: {e.strerror}")
        with f:
            self.filename = filename
            for line in f:
                self.append_row(line.rstrip("\r\n"))
