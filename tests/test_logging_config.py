"""Tests for logging setup and secret masking."""

import logging

from common.logging_config import SensitiveDataFilter, resolve_log_level, setup_logging


def _record(msg, args=()):
    return logging.LogRecord('test', logging.INFO, __file__, 1, msg, args, None)


def test_bearer_tokens_are_masked():
    record = _record('Authorization: Bearer abcdef0123456789')

    SensitiveDataFilter().filter(record)

    assert record.msg == 'Authorization: Bearer ***MASKED***'
    assert 'abcdef0123456789' not in record.msg
    assert '***MASKED***' in record.msg


def test_authorization_header_value_is_masked():
    """Test the token after the Bearer scheme is masked, not just the scheme."""
    record = _record("headers %s", ("{'authorization': 'Bearer abcdef0123456789'}",))

    SensitiveDataFilter().filter(record)

    assert 'abcdef0123456789' not in record.args[0]
    assert record.args[0] == "{'authorization': 'Bearer ***MASKED***'}"


def test_secrets_in_args_are_masked():
    record = _record('settings %s', ('secret=hunter2',))

    SensitiveDataFilter().filter(record)

    assert record.args == ('secret=***MASKED***',)


def test_resolve_log_level(monkeypatch):
    monkeypatch.delenv('NEREST_LOG_LEVEL', raising=False)
    monkeypatch.setenv('LOG_LEVEL', 'warning')

    assert resolve_log_level() == logging.WARNING
    assert resolve_log_level('debug') == logging.DEBUG

    monkeypatch.setenv('NEREST_LOG_LEVEL', 'ERROR')

    assert resolve_log_level() == logging.ERROR
    assert resolve_log_level('bogus') == logging.INFO


def test_setup_logging_is_idempotent():
    first = setup_logging('nerest-test-component', log_level='DEBUG')
    second = setup_logging('nerest-test-component', log_level='DEBUG')

    assert first is second
    assert len(second.handlers) == 1
    assert second.level == logging.DEBUG
