import logging

import pytest

from sqd_assistant.commands import log_from_frontend
from sqd_assistant.logging_setup import LOG_FILE_NAME, current_log_file, setup_logging, shutdown_logging


@pytest.fixture()
def trace_log(tmp_path):
    root = logging.getLogger()
    previous_level = root.level
    log_file = setup_logging(tmp_path, level="TRACE", console=False)
    yield log_file
    shutdown_logging()
    root.setLevel(previous_level)


class TestFrontendLevels:
    @pytest.mark.parametrize(
        "level, level_name",
        [
            ("error", "ERROR"),
            ("warn", "WARNING"),
            ("info", "INFO"),
            ("debug", "DEBUG"),
            ("verbose", "TRACE"),
            ("", "TRACE"),
        ],
    )
    def test_level_mapping(self, trace_log, level, level_name):
        log_from_frontend(level, "x", "Ctx")
        text = trace_log.read_text(encoding="utf-8")
        assert f"{level_name} frontend" in text
        assert "[Ctx] x" in text

    def test_without_context(self, trace_log):
        log_from_frontend("info", "saved")
        lines = [line for line in trace_log.read_text(encoding="utf-8").splitlines() if " frontend " in line]
        assert len(lines) == 1
        assert lines[0].endswith(": saved")


class TestSetup:
    def test_log_file_location(self, trace_log, tmp_path):
        assert trace_log == tmp_path / LOG_FILE_NAME
        assert current_log_file() == trace_log

    def test_unknown_level_name_falls_back_to_info(self, tmp_path):
        root = logging.getLogger()
        previous_level = root.level
        try:
            setup_logging(tmp_path, level="LOUD", console=False)
            assert root.level == logging.INFO
        finally:
            shutdown_logging()
            root.setLevel(previous_level)

    def test_shutdown_removes_handlers(self, tmp_path):
        root = logging.getLogger()
        previous_level = root.level
        before = list(root.handlers)
        try:
            setup_logging(tmp_path, console=True)
            assert len(root.handlers) == len(before) + 2
        finally:
            shutdown_logging()
            root.setLevel(previous_level)
        assert root.handlers == before
        assert current_log_file() is None
