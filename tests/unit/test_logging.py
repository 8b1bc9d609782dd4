"""Tests for logging setup."""

import structlog

from poportal.logging import setup_logging
from poportal.web.runner import build_log_config


def test_request_context_merged_into_events():
    try:
        setup_logging(debug=False)
        processors = structlog.get_config()["processors"]
        assert processors[0] is structlog.contextvars.merge_contextvars
        assert isinstance(processors[-1], structlog.processors.JSONRenderer)
    finally:
        structlog.reset_defaults()


def test_access_log_includes_client_address():
    log_config = build_log_config()

    assert "%(client_addr)s" in log_config["formatters"]["access"]["fmt"]
    assert log_config["formatters"]["default"]["use_colors"] is False
