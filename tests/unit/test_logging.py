"""
Unit tests for logging helpers.
"""

import logging

import pytest

from lucenesearch.query import QueryRunner
from lucenesearch.utils import LogContext, get_logger, parse_level, setup_logger


class TestLogging:
    
    def test_module_loggers_follow_package_level(self):
        package = logging.getLogger("lucenesearch")
        
        with LogContext(package, "ERROR"):
            child = get_logger("lucenesearch.query.runner")
            assert child.getEffectiveLevel() == logging.ERROR
    
    def test_get_logger_namespaced(self):
        assert get_logger("plugins").name == "lucenesearch.plugins"
        assert get_logger("lucenesearch.index").name == "lucenesearch.index"
        assert get_logger().name == "lucenesearch"
    
    def test_log_context_restores_level(self):
        logger = setup_logger("lucenesearch_tests", "INFO")
        
        with LogContext(logger, "DEBUG") as active:
            assert active.level == logging.DEBUG
        
        assert logger.level == logging.INFO
    
    def test_setup_replaces_own_handlers_only(self):
        logger = logging.getLogger("lucenesearch_tests_handlers")
        user_handler = logging.NullHandler()
        logger.addHandler(user_handler)
        
        setup_logger("lucenesearch_tests_handlers", "INFO")
        setup_logger("lucenesearch_tests_handlers", logging.WARNING)
        
        assert user_handler in logger.handlers
        assert len(logger.handlers) == 2
        assert logger.level == logging.WARNING
    
    def test_parse_level(self):
        assert parse_level("debug") == logging.DEBUG
        assert parse_level(logging.ERROR) == logging.ERROR
        with pytest.raises(ValueError):
            parse_level("LOUD")
    
    def test_execution_logged(self, fake_search, caplog):
        with caplog.at_level(logging.DEBUG, logger="lucenesearch"):
            QueryRunner(fake_search).raw_query("title:apple").get()
        
        assert "Executed query title:apple: 5 hits" in caplog.text
