"""
Main entry point and editor context for the ni editor.
"""
import sys
import time

import ni.ui.input as ui_input
import ni.ui.screen as ui_screen
from ni import buffer, config, keys, logger, terminal


class EditorContext:
    """
    Holds the state of the editor: the buffer, cursor, viewport, mode and
    message line. Every input handler and drawing function receives it.
    """
    def __init__(self, screenrows: int, screencols: int, settings: config.Config = None,
                 stdout_fd: int = 1):
        self.settings = settings or config.Config()
        self.stdout_fd = stdout_fd

        # Text area size; the status and message bars are not included
        self.screenrows = screenrows
        self.screencols = screencols

        self.current_buffer = buffer.Buffer(tab_stop=self.settings.tab_stop)

        # Cursor position in the file, and its rendered column
        self.cx = 0
        self.cy = 0
        self.rx = 0
        # Scroll offsets
        self.rowoff = 0
        self.coloff = 0

        # Editor modes: "normal", "insert", "command"
        self.mode = "normal"
        self.command_buffer = ""
        # Repeat count typed in normal mode
        self.cmdrep = 0

        self.status_message = ""
        # Not read yet; kept for expiring old messages
        self.status_message_time = 0.0

        # Running flag
        self.exit_flag = False

    @property
    def numrows(self) -> int:
        return self.current_buffer.numrows

    def current_row(self):
        """Row under the cursor, or None past the end of the buffer."""
        if self.cy < self.numrows:
            return self.current_buffer.rows[self.cy]
        return None

    def open_file(self, filename: str):
        self.current_buffer.open_file(filename)
        self.log_command(f"opened {filename} ({self.numrows} lines)")

    def set_status_message(self, msg: str):
        self.status_message = msg
        self.status_message_time = time.time()

    def log_command(self, msg: str):
        logger.log(msg)

    def graceful_exit(self):
        """Stop the main loop after the current key has been handled."""
        self.exit_flag = True


def main(argv=None, stdin_fd: int = None, stdout_fd: int = None) -> int:
    argv = sys.argv if argv is None else argv
    stdin_fd = sys.stdin.fileno() if stdin_fd is None else stdin_fd
    stdout_fd = sys.stdout.fileno() if stdout_fd is None else stdout_fd
    settings = config.load_config()
    logger.configure(settings.log_file)
    logger.log("Editor started.")

    try:
        with terminal.RawMode(stdin_fd):
            rows, cols = terminal.get_window_size(stdin_fd, stdout_fd)
            # Make room for a 1 line status bar and 1 line message
            context = EditorContext(rows - 2, cols, settings, stdout_fd)
            if len(argv) > 1:
                context.open_file(argv[1])
            context.set_status_message(settings.welcome_message)

            while not context.exit_flag:
                ui_screen.display(context)
                key = keys.read_key(stdin_fd)
                ui_input.process_keypress(context, key)
            terminal.clear_screen(stdout_fd)
    except terminal.FatalError as e:
        terminal.clear_screen(stdout_fd)
        logger.log(f"fatal: {e}")
        print(e, file=sys.stderr)
        return 1

    logger.log("Editor exited.")
    return 0


def run():
    """Console entry point."""
    sys.exit(main(sys.argv))


if __name__ == "__main__":
    run()
