"""
Tests for shared helpers: the list formatter and logging setup.
"""

import logging
import logging.handlers
from pathlib import Path

import pytest

from octopus_lookup.common import configure_logging, join_values


class TestJoinValues:
    def test_joins_with_commas(self):
        assert join_values(["a", "b", "c"]) == "a,b,c"

    def test_single_item_has_no_separator(self):
        assert join_values(["a"]) == "a"

    def test_empty_input_is_none(self):
        assert join_values([]) is None

    def test_consumes_generators(self):
        assert join_values(name for name in ("web-01", "db-01")) == "web-01,db-01"

    def test_items_are_not_escaped(self):
        assert join_values(["a,b", "c"]) == "a,b,c"

    def test_non_string_items(self):
        assert join_values([1, 2]) == "1,2"


class TestConfigureLogging:
    @pytest.fixture(autouse=True)
    def restore_logging(self):
        loggers = [logging.getLogger(n) for n in ("octopus_lookup", "urllib3")]
        saved = [(lg.handlers[:], lg.level, lg.propagate) for lg in loggers]
        root = logging.getLogger()
        root_handlers, root_level = root.handlers[:], root.level
        yield
        for lg, (handlers, level, propagate) in zip(loggers, saved):
            for handler in lg.handlers:
                if handler not in handlers:
                    handler.close()
            lg.handlers, lg.level, lg.propagate = handlers, level, propagate
        for handler in root.handlers[:]:
            if handler not in root_handlers:
                root.removeHandler(handler)
        root.setLevel(root_level)

    def test_stderr_only_by_default(self):
        config = configure_logging(level="DEBUG")
        assert list(config["handlers"]) == ["stderr"]
        assert logging.getLogger("octopus_lookup").level == logging.DEBUG

    def test_adds_rotating_file_handler(self, tmp_path: Path):
        log_file = tmp_path / "lookup.log"
        configure_logging(log_file, "INFO")
        logger = logging.getLogger("octopus_lookup")
        assert any(
            isinstance(h, logging.handlers.RotatingFileHandler) for h in logger.handlers
        )
        logger.info("hello")
        for handler in logger.handlers:
            handler.flush()
        assert "hello" in log_file.read_text(encoding="utf-8")

    def test_quiets_urllib3(self):
        configure_logging(level="DEBUG")
        assert logging.getLogger("urllib3").level == logging.WARNING
