"""Tests for structlog configuration."""

from __future__ import annotations

import logging
import os
from unittest.mock import patch

import pytest
import structlog

from depchecker.core.logging import setup_logging


@pytest.fixture(autouse=True)
def _restore_logging():
    yield
    logging.getLogger().handlers.clear()
    logging.getLogger().setLevel(logging.WARNING)
    logging.getLogger("depchecker").setLevel(logging.NOTSET)
    structlog.reset_defaults()


class TestSetupLogging:
    def test_default_level(self):
        with patch.dict(os.environ, {}, clear=False):
            os.environ.pop("DEPCHECKER_LOG_LEVEL", None)
            setup_logging()
        assert logging.getLogger("depchecker").level == logging.INFO

    def test_env_level(self):
        with patch.dict(os.environ, {"DEPCHECKER_LOG_LEVEL": "warning"}):
            setup_logging()
        assert logging.getLogger("depchecker").level == logging.WARNING

    def test_verbose_overrides_env(self):
        with patch.dict(os.environ, {"DEPCHECKER_LOG_LEVEL": "ERROR"}):
            setup_logging(verbose=True)
        assert logging.getLogger().level == logging.DEBUG

    def test_httpx_quieted(self):
        setup_logging(verbose=True)
        assert logging.getLogger("httpx").level == logging.WARNING

    def test_json_format_renders(self, capsys):
        with patch.dict(os.environ, {"DEPCHECKER_LOG_FORMAT": "json"}):
            setup_logging()
        structlog.get_logger("depchecker.test").info("test.event", package="Pkg")
        err = capsys.readouterr().err
        assert '"event": "test.event"' in err
        assert '"package": "Pkg"' in err
