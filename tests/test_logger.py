"""
Tests for logger: the epqinterp logging wrapper.
"""
import io
import logging

from epqinterp import logger


def _root():
    return logging.getLogger(logger.ROOT_NAME)


class TestLevels:
    def test_custom_level_names(self):
        assert logging.getLevelName(logger.DEBUG2) == "DEBUG2"
        assert logging.getLevelName(logger.DEBUG3) == "DEBUG3"

    def test_verbosity_levels(self):
        logger.set_level(0)
        assert _root().level == logging.ERROR
        logger.set_level(5)
        assert _root().level == logger.DEBUG2

    def test_verbosity_names(self):
        logger.set_level("repairs")
        assert _root().level == logging.WARNING
        logger.set_level("Windows")
        assert _root().level == logger.DEBUG3

    def test_resolve_passes_python_levels_through(self):
        assert logger.resolve_level(logging.CRITICAL) == logging.CRITICAL
        assert logger.resolve_level("INFO") == "INFO"

    def test_python_levels(self):
        logger.set_level(logging.INFO)
        assert _root().level == logging.INFO
        logger.set_level("DEBUG")
        assert _root().level == logging.DEBUG


class TestGetLogger:
    def test_module_logger_is_child(self):
        log = logger.get_logger("epqinterp.spliner")
        assert log.name == "epqinterp.spliner"
        assert log.parent is _root()

    def test_default_name(self):
        assert logger.get_logger().name == "epqinterp"

    def test_debug2_method(self, caplog):
        caplog.set_level(logger.DEBUG3, logger="epqinterp")
        log = logger.get_logger("epqinterp.test")
        log.debug2("level two %d", 2)
        log.debug3("level three")
        levels = [r.levelno for r in caplog.records if r.name == "epqinterp.test"]
        assert levels == [logger.DEBUG2, logger.DEBUG3]

    def test_debug2_suppressed_at_warning(self, caplog):
        caplog.set_level(logging.WARNING, logger="epqinterp")
        logger.get_logger("epqinterp.test").debug2("hidden")
        assert not [r for r in caplog.records if r.name == "epqinterp.test"]


class TestContextLogger:
    def test_label_prefixed(self, caplog):
        caplog.set_level(logging.WARNING, logger="epqinterp")
        logger.context_logger("epqinterp.test", "X collapse").warning("moved %d", 2)
        messages = [r.getMessage() for r in caplog.records if r.name == "epqinterp.test"]
        assert messages == ["X collapse: moved 2"]

    def test_no_label(self, caplog):
        caplog.set_level(logging.WARNING, logger="epqinterp")
        logger.context_logger("epqinterp.test").warning("plain")
        messages = [r.getMessage() for r in caplog.records if r.name == "epqinterp.test"]
        assert messages == ["plain"]

    def test_debug2_respects_level(self, caplog):
        caplog.set_level(logger.DEBUG2, logger="epqinterp")
        adapter = logger.context_logger("epqinterp.test", "row 1")
        adapter.debug2("solved")
        adapter.debug3("hidden")
        records = [r for r in caplog.records if r.name == "epqinterp.test"]
        assert [r.levelno for r in records] == [logger.DEBUG2]
        assert records[0].getMessage() == "row 1: solved"


class TestSetup:
    def test_setup_attaches_one_handler(self):
        root = _root()
        saved = list(root.handlers)
        for h in saved:
            root.removeHandler(h)
        try:
            stream = io.StringIO()
            logger.setup(logging.WARNING, stream=stream)
            logger.setup(logging.DEBUG, stream=stream)
            assert len(root.handlers) == 1
            assert root.level == logging.WARNING
            logger.get_logger("epqinterp.test").warning("repaired")
            assert "WARNING: epqinterp.test: repaired" in stream.getvalue()
        finally:
            for h in list(root.handlers):
                root.removeHandler(h)
            for h in saved:
                root.addHandler(h)
