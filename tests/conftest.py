import pytest

from ni import logger
from ni.__main__ import EditorContext
from ni.config import Config


@pytest.fixture(autouse=True)
def log_to_tmp(tmp_path):
    logger.configure(str(tmp_path / "ni.log"))
    yield tmp_path / "ni.log"
    logger.configure(logger.LOG_FILE_PATH)


@pytest.fixture
def make_context():
    def _make(lines=(), screenrows=10, screencols=40, tab_stop=4):
        context = EditorContext(screenrows, screencols, Config(tab_stop=tab_stop))
        for line in lines:
            context.current_buffer.append_row(line)
        return context
    return _make
