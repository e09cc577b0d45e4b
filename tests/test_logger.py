"""日志配置单元测试：模块日志器共享同一个滚动文件处理器，CLI 重复配置不叠加处理器"""

import logging
import logging.handlers

from rounded_ass.cli.logger import setup_logger as setup_cli_logger
from rounded_ass.utils.logger import (
    LOG_DIR_ENV,
    PACKAGE_LOGGER,
    add_file_handler,
    set_subtitle_context,
    setup_logger,
)


def _file_handlers():
    return [
        h for h in logging.getLogger(PACKAGE_LOGGER).handlers
        if isinstance(h, logging.handlers.RotatingFileHandler)
    ]


class TestModuleLoggers:

    def test_single_shared_file_handler(self, tmp_path, monkeypatch):
        """多个模块日志器只在包根日志器上挂载一个文件处理器"""
        monkeypatch.setenv(LOG_DIR_ENV, str(tmp_path))
        alpha = setup_logger("alpha")
        beta = setup_logger("beta")

        handlers = _file_handlers()
        assert len(handlers) == 1
        assert alpha.handlers == []
        assert beta.handlers == []

        set_subtitle_context("movie.srt")
        try:
            alpha.warning("first message")
            beta.warning("second message")
        finally:
            set_subtitle_context(None)
        handlers[0].flush()

        content = (tmp_path / "rounded_ass.log").read_text(encoding="utf-8")
        assert "first message" in content
        assert "second message" in content
        assert "[movie.srt]" in content
        assert "rounded_ass.alpha" in content

    def test_name_prefixed(self):
        assert setup_logger("gamma").name == "rounded_ass.gamma"
        assert setup_logger("rounded_ass.delta").name == "rounded_ass.delta"


class TestAddFileHandler:

    def test_same_file_reused(self, tmp_path):
        log_file = tmp_path / "logs" / "run.log"
        first = add_file_handler(str(log_file))
        second = add_file_handler(str(log_file))
        assert first is second
        assert len(_file_handlers()) == 1

    def test_records_without_context_filter(self, tmp_path):
        """直接写入包根日志器的记录也带有上下文字段"""
        handler = add_file_handler(str(tmp_path / "run.log"))
        logging.getLogger(PACKAGE_LOGGER).warning("from package root")
        handler.flush()
        content = (tmp_path / "run.log").read_text(encoding="utf-8")
        assert "[GLOBAL]" in content
        assert "from package root" in content

    def test_creation_failure_returns_none(self, tmp_path):
        blocker = tmp_path / "not_a_dir"
        blocker.write_text("", encoding="utf-8")
        assert add_file_handler(str(blocker / "run.log")) is None
        assert _file_handlers() == []


class TestCliLogger:

    def test_repeated_setup_keeps_single_handlers(self, tmp_path):
        log_file = str(tmp_path / "cli.log")
        setup_cli_logger(level="INFO", log_file=log_file)
        logger = setup_cli_logger(level="DEBUG", log_file=log_file)

        console = [
            h for h in logger.handlers
            if isinstance(h, logging.StreamHandler) and not isinstance(h, logging.FileHandler)
        ]
        assert len(console) == 1
        assert len(_file_handlers()) == 1
        assert logger.level == logging.DEBUG
        assert logger.propagate is False

    def test_module_records_reach_cli_log_file(self, tmp_path):
        log_file = tmp_path / "cli.log"
        setup_cli_logger(level="INFO", log_file=str(log_file))
        setup_logger("epsilon").info("converted")
        _file_handlers()[0].flush()
        assert "converted" in log_file.read_text(encoding="utf-8")
