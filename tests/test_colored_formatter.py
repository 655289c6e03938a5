"""Tests for ColoredFormatter."""

import logging
from io import StringIO
from unittest.mock import patch

import pytest

from studio_player.utils.logging import ColoredFormatter

RESET = "\033[0m"
DIM = "\033[2m"
LEVEL_COLORS = {
    logging.DEBUG: "\033[36m",
    logging.INFO: "\033[32m",
    logging.WARNING: "\033[33m",
    logging.ERROR: "\033[31m",
    logging.CRITICAL: "\033[1;31m",
}


def _make_record(level: int, message: str = "test") -> logging.LogRecord:
    return logging.LogRecord(
        name="studio_player.test",
        level=level,
        pathname="test.py",
        lineno=1,
        msg=message,
        args=(),
        exc_info=None,
    )


def _tty_stream() -> StringIO:
    stream = StringIO()
    stream.isatty = lambda: True  # type: ignore[method-assign]
    return stream


class TestColoredFormatter:
    """Tests for ANSI color formatting."""

    def _tty_formatter(self, fmt: str = "%(levelname)s | %(message)s") -> ColoredFormatter:
        return ColoredFormatter(fmt, stream=_tty_stream())

    @pytest.mark.parametrize(
        "level",
        [logging.DEBUG, logging.INFO, logging.WARNING, logging.ERROR, logging.CRITICAL],
    )
    def test_color_applied_per_level(self, level: int):
        """Should apply the correct ANSI color code for each level."""
        output = self._tty_formatter().format(_make_record(level))

        assert LEVEL_COLORS[level] in output
        assert RESET in output

    def test_logger_name_dimmed(self):
        fmt = self._tty_formatter("%(name)s %(message)s")

        output = fmt.format(_make_record(logging.INFO))

        assert output.startswith(f"{DIM}studio_player.test{RESET}")

    def test_no_color_when_no_color_env_set(self):
        """Should not apply colors when NO_COLOR env var is set."""
        fmt = self._tty_formatter()

        with patch.dict("os.environ", {"NO_COLOR": "1"}):
            output = fmt.format(_make_record(logging.INFO))

        assert "\033[" not in output

    def test_no_color_when_stream_not_tty(self):
        """Should not apply colors when stream is not a TTY."""
        fmt = ColoredFormatter("%(levelname)s | %(message)s")
        # StringIO.isatty() returns False
        fmt.stream = StringIO()

        output = fmt.format(_make_record(logging.ERROR))

        assert output == "ERROR | test"

    def test_default_stream_is_stderr(self, monkeypatch):
        """Without an explicit stream the TTY check follows stderr, not stdout."""
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.setattr("sys.stderr", _tty_stream())
        monkeypatch.setattr("sys.stdout", StringIO())
        fmt = ColoredFormatter("%(levelname)s | %(message)s")

        output = fmt.format(_make_record(logging.INFO))

        assert LEVEL_COLORS[logging.INFO] in output

    def test_original_record_not_mutated(self):
        """Should not mutate the original LogRecord."""
        fmt = self._tty_formatter()
        record = _make_record(logging.WARNING)

        fmt.format(record)

        assert record.levelname == "WARNING"
        assert record.name == "studio_player.test"
