"""
Logger module for the ni editor.

Provides a simple file-based logger for debugging and error tracking. The screen
belongs to the editor while raw mode is active, so the log file is the only place
diagnostics can go without corrupting the frame.
"""
import datetime

# Default log file path, relative to the working directory
LOG_FILE_PATH = "ni.log"
TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"

_log_path = LOG_FILE_PATH


def configure(path) -> None:
    """Set the log destination. A falsy path disables logging."""
    global _log_path
    _log_path = path or None


def format_line(message: str, now: datetime.datetime = None) -> str:
    now = now or datetime.datetime.now()
    return f"[{now.strftime(TIMESTAMP_FORMAT)}] {message}\n"


def log(message: str) -> None:
    """Append a timestamped line to the configured log file, if any."""
    if not _log_path:
        return
    line = format_line(message)
    try:
        with open(_log_path, 'a', encoding='utf-8') as f:
            f.write(line)
    except OSError:
        # A log that cannot be written must not take the editor down
        pass
