import ni.ui.screen as screen
from ni import terminal


def _frame_lines(context):
    screen.scroll(context)
    frame = screen.compose_frame(context).decode("utf-8")
    assert frame.startswith(screen.HIDE_CURSOR + screen.CURSOR_HOME)
    body = frame[len(screen.HIDE_CURSOR + screen.CURSOR_HOME):]
    return body.split(screen.NEWLINE)


def test_scroll_down_keeps_cursor_on_last_visible_row(make_context):
    context = make_context([f"line {i}" for i in range(40)], screenrows=10)
    context.cy = 5
    screen.scroll(context)
    assert context.rowoff == 0
    context.cy = 25
    screen.scroll(context)
    assert context.rowoff == 16


def test_scroll_up_moves_viewport_to_cursor(make_context):
    context = make_context([f"line {i}" for i in range(40)], screenrows=10)
    context.rowoff = 16
    context.cy = 3
    screen.scroll(context)
    assert context.rowoff == 3


def test_scroll_uses_rendered_column(make_context):
    context = make_context(["\t\tx"], screencols=6)
    context.cx = 2
    screen.scroll(context)
    assert context.rx == 8
    assert context.coloff == 3
    context.cx = 0
    screen.scroll(context)
    assert context.rx == 0
    assert context.coloff == 0


def test_scroll_past_last_row_has_zero_rx(make_context):
    context = make_context(["abc"])
    context.cy = 1
    context.cx = 0
    screen.scroll(context)
    assert context.rx == 0


def test_scroll_is_idempotent(make_context):
    context = make_context([f"{i}" for i in range(40)], screenrows=10)
    context.cy = 25
    screen.scroll(context)
    first = (context.rowoff, context.coloff, context.rx)
    screen.scroll(context)
    assert (context.rowoff, context.coloff, context.rx) == first


def test_frame_has_a_line_per_screen_row_then_bars(make_context):
    context = make_context(["hello", "world"], screenrows=5, screencols=30)
    lines = _frame_lines(context)
    # 5 text rows, status bar, then the message bar with cursor escapes
    assert len(lines) == 7
    assert lines[0] == "hello" + screen.CLEAR_LINE
    assert lines[1] == "world" + screen.CLEAR_LINE
    assert lines[2] == "~" + screen.CLEAR_LINE
    assert lines[4] == "~" + screen.CLEAR_LINE


def test_welcome_banner_on_empty_buffer(make_context):
    context = make_context([], screenrows=9, screencols=40)
    lines = _frame_lines(context)
    banner = screen.WELCOME_BANNER
    padding = (40 - len(banner)) // 2
    assert lines[3] == "~" + " " * (padding - 1) + banner + screen.CLEAR_LINE
    assert lines[0] == "~" + screen.CLEAR_LINE


def test_welcome_banner_truncated_to_width(make_context):
    context = make_context([], screenrows=3, screencols=10)
    lines = _frame_lines(context)
    assert lines[1] == screen.WELCOME_BANNER[:10] + screen.CLEAR_LINE


def test_no_banner_when_buffer_has_rows(make_context):
    context = make_context(["only"], screenrows=9, screencols=40)
    lines = _frame_lines(context)
    assert lines[3] == "~" + screen.CLEAR_LINE


def test_rows_are_sliced_by_column_offset(make_context):
    context = make_context(["0123456789abcdef"], screenrows=2, screencols=5)
    context.cx = 12
    lines = _frame_lines(context)
    assert context.coloff == 8
    assert lines[0] == "89abc" + screen.CLEAR_LINE


def test_tabs_drawn_expanded(make_context):
    context = make_context(["a\tb"], screenrows=2)
    lines = _frame_lines(context)
    assert lines[0] == "a   b" + screen.CLEAR_LINE


def test_status_bar_layout(make_context):
    context = make_context(["one", "two"], screenrows=2, screencols=50)
    context.cy = 1
    context.cx = 2
    lines = _frame_lines(context)
    status = lines[2]
    assert status.startswith(screen.INVERT_ON)
    assert status.endswith(screen.INVERT_OFF)
    text = status[len(screen.INVERT_ON):-len(screen.INVERT_OFF)]
    assert len(text) == 50
    assert text.startswith(" NORMAL | [No name] | 2 lines")
    assert text.endswith(" 2:3 ")


def test_status_bar_truncates_filename_and_width(make_context):
    context = make_context(["x"], screenrows=1, screencols=20)
    context.current_buffer.filename = "a-very-long-file-name-indeed.txt"
    context.mode = "insert"
    lines = _frame_lines(context)
    text = lines[1][len(screen.INVERT_ON):-len(screen.INVERT_OFF)]
    assert text == " INSERT | a-very-lon"


def test_status_bar_filename_limited_to_twenty_chars(make_context):
    context = make_context([], screenrows=1, screencols=120)
    context.current_buffer.filename = "abcdefghijklmnopqrstuvwxyz"
    lines = _frame_lines(context)
    assert " | abcdefghijklmnopqrst | 0 lines" in lines[1]


def test_message_bar_shows_message_and_count(make_context):
    context = make_context([], screenrows=1, screencols=30)
    context.set_status_message("Welcome")
    context.cmdrep = 12
    lines = _frame_lines(context)
    message = lines[2]
    assert message.startswith(screen.CLEAR_LINE + "Welcome")
    bar = message[len(screen.CLEAR_LINE):message.index("\x1b[", len(screen.CLEAR_LINE))]
    assert len(bar) == 30
    assert bar.endswith(" 12 ")


def test_message_bar_truncated(make_context):
    context = make_context([], screenrows=1, screencols=8)
    context.set_status_message("a rather long message")
    lines = _frame_lines(context)
    assert lines[2].startswith(screen.CLEAR_LINE + "a rather\x1b[")


def test_cursor_placed_relative_to_viewport(make_context):
    context = make_context([f"row{i}\tx" for i in range(30)], screenrows=10)
    context.cy = 20
    context.cx = 4
    screen.scroll(context)
    frame = screen.compose_frame(context).decode("utf-8")
    assert context.rowoff == 11
    assert frame.endswith("\x1b[10;5H" + screen.SHOW_CURSOR)
    context.cx = 6
    screen.scroll(context)
    frame = screen.compose_frame(context).decode("utf-8")
    assert frame.endswith("\x1b[10;9H" + screen.SHOW_CURSOR)


def test_display_writes_one_frame(make_context, monkeypatch):
    writes = []
    monkeypatch.setattr(terminal, "write_frame", lambda fd, data: writes.append((fd, data)))
    context = make_context(["abc"], screenrows=3)
    context.cy = 0
    context.cx = 3
    screen.display(context)
    assert len(writes) == 1
    assert writes[0][0] == context.stdout_fd
    assert writes[0][1] == screen.compose_frame(context)


def test_fit_width_counts_wide_characters():
    assert screen.fit_width("日本語", 4) == "日本"
    assert screen.fit_width("abc", 10) == "abc"
    assert screen.text_width("日本") == 4


def test_align_right():
    assert screen.align_right(5, "1:1 ", 12) == "   1:1 "
    assert screen.align_right(10, "1:1 ", 12) == "  "
    assert screen.align_right(12, "1:1 ", 12) == ""
