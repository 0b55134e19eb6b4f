import re
import sys
from pathlib import Path
from unittest import mock

import pytest

from esurfing.logger import LogLevel, Logger, default_log_dir

ARCHIVE = re.compile(r"^\d{8}-\d{6}\.log$")
LINE = re.compile(
    r"\[\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2}\] \[(.+?)\] \[(test_logger\.py):\d+\] (.*)\n"
)


def _archives(directory):
    return sorted(p for p in directory.iterdir() if ARCHIVE.match(p.name))


def test_level_labels(tmp_path, capsys):
    assert [level.label for level in LogLevel] == ["调试", "信息", "警告", "错误", "致命"]
    assert LogLevel.DEBUG < LogLevel.INFO < LogLevel.WARN < LogLevel.ERROR < LogLevel.FATAL
    logger = Logger(tmp_path, debug=True)
    capsys.readouterr()
    for level in LogLevel:
        logger.log(level, "labelled")
    out = capsys.readouterr().out
    labels = [match.group(1) for match in LINE.finditer(out)]
    assert labels == ["调试", "信息", "警告", "错误", "致命"]
    logger.close()


def test_info_goes_to_console_and_file(tmp_path, capsys):
    logger = Logger(tmp_path, debug=False)
    logger.info("hello")
    out = capsys.readouterr().out
    content = (tmp_path / "run.log").read_text(encoding="utf-8")
    assert "[信息]" in out and "hello" in out
    assert content == out
    assert "[test_logger.py:" in content
    logger.close()


def test_line_format(tmp_path, capsys):
    logger = Logger(tmp_path)
    logger.warn("careful")
    line = capsys.readouterr().out
    match = LINE.fullmatch(line)
    assert match
    assert match.group(1) == "警告"
    assert match.group(2) == "test_logger.py"
    assert match.group(3) == "careful"
    logger.close()


def test_debug_suppressed_unless_debug_enabled(tmp_path, capsys):
    quiet = Logger(tmp_path / "quiet", debug=False)
    quiet.debug("hidden")
    assert "hidden" not in capsys.readouterr().out
    assert quiet.level == LogLevel.INFO
    quiet.close()

    loud = Logger(tmp_path / "loud", debug=True)
    loud.debug("shown")
    out = capsys.readouterr().out
    assert "shown" in out
    assert "日志等级: 调试" in out
    assert loud.level == LogLevel.DEBUG
    loud.close()


def test_rotation_after_max_lines(tmp_path):
    logger = Logger(tmp_path, max_lines=2)
    logger.info("one")
    logger.info("two")
    assert (tmp_path / "run.log").read_text(encoding="utf-8") == ""
    archives = _archives(tmp_path)
    assert len(archives) == 1
    archived = archives[0].read_text(encoding="utf-8")
    assert "one" in archived and "two" in archived
    logger.info("three")
    assert "three" in (tmp_path / "run.log").read_text(encoding="utf-8")


def test_close_archives_run_log(tmp_path):
    logger = Logger(tmp_path, debug=True)
    logger.error("boom")
    logger.close()
    assert not (tmp_path / "run.log").exists()
    archives = _archives(tmp_path)
    assert len(archives) == 1
    text = archives[0].read_text(encoding="utf-8")
    assert "boom" in text
    assert "正在关闭日志系统" in text


def test_logging_after_close_only_prints(tmp_path, capsys):
    logger = Logger(tmp_path)
    logger.close()
    capsys.readouterr()
    logger.fatal("late")
    assert "late" in capsys.readouterr().out
    assert not (tmp_path / "run.log").exists()


def test_context_manager_closes(tmp_path):
    with Logger(tmp_path) as logger:
        logger.info("inside")
    assert not (tmp_path / "run.log").exists()
    assert len(_archives(tmp_path)) == 1


def test_creates_missing_directory(tmp_path):
    target = tmp_path / "a" / "b"
    logger = Logger(target)
    assert (target / "run.log").is_file()
    logger.close()


def test_directory_path_that_is_a_file_raises(tmp_path):
    blocker = tmp_path / "file"
    blocker.write_text("x")
    with pytest.raises(OSError):
        Logger(blocker)


def test_invalid_max_lines(tmp_path):
    with pytest.raises(ValueError):
        Logger(tmp_path, max_lines=0)


def test_default_log_dir_plain(monkeypatch):
    monkeypatch.setattr(sys, "platform", "linux")
    with mock.patch("os.path.exists", return_value=False):
        assert default_log_dir(True, False) == Path("/var/log/esurfing/logs")


def test_default_log_dir_openwrt_debug(monkeypatch):
    monkeypatch.setattr(sys, "platform", "linux")
    with mock.patch("os.path.exists", return_value=True):
        assert default_log_dir(True, False) == Path("/usr/esurfing/logs")
        assert default_log_dir(True, True) == Path("/var/log/esurfing/logs")
        assert default_log_dir(False, False) == Path("/var/log/esurfing/logs")