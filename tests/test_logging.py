"""Tests for structured logging configuration."""

import structlog

from src.core.config import settings
from src.core.logging import _add_context_vars, client_slug_ctx, configure_logging, request_id_ctx


def _reset_structlog() -> None:
    """Reset structlog defaults to avoid test cross-talk."""
    structlog.reset_defaults()


def _renderers() -> list[object]:
    return structlog.get_config()["processors"]


def test_configure_logging_uses_json_when_log_format_json() -> None:
    """Use JSON logging when log_format=json, even in development."""
    original_env = settings.environment
    original_format = settings.log_format

    try:
        settings.environment = "development"
        settings.log_format = "json"
        configure_logging()

        processors = _renderers()
        assert any(isinstance(p, structlog.processors.JSONRenderer) for p in processors)
        assert any(isinstance(p, structlog.processors.EventRenamer) for p in processors)
    finally:
        settings.environment = original_env
        settings.log_format = original_format
        _reset_structlog()


def test_configure_logging_uses_console_when_log_format_console() -> None:
    """Console wins over the environment default when set explicitly."""
    original_env = settings.environment
    original_format = settings.log_format

    try:
        settings.environment = "production"
        settings.log_format = "console"
        configure_logging()

        processors = _renderers()
        assert any(isinstance(p, structlog.dev.ConsoleRenderer) for p in processors)
        assert not any(isinstance(p, structlog.processors.JSONRenderer) for p in processors)
    finally:
        settings.environment = original_env
        settings.log_format = original_format
        _reset_structlog()


def test_configure_logging_defaults_to_json_outside_development() -> None:
    original_env = settings.environment
    original_format = settings.log_format

    try:
        settings.environment = "staging"
        settings.log_format = None
        configure_logging()

        assert any(
            isinstance(p, structlog.processors.JSONRenderer) for p in _renderers()
        )
    finally:
        settings.environment = original_env
        settings.log_format = original_format
        _reset_structlog()


def test_context_vars_are_added_to_events() -> None:
    request_token = request_id_ctx.set("req-42")
    slug_token = client_slug_ctx.set("acme")
    try:
        event = _add_context_vars(None, "info", {"event": "client_created"})
    finally:
        request_id_ctx.reset(request_token)
        client_slug_ctx.reset(slug_token)

    assert event == {"event": "client_created", "request_id": "req-42", "client_slug": "acme"}


def test_context_vars_absent_when_unset() -> None:
    event = _add_context_vars(None, "info", {"event": "startup"})

    assert event == {"event": "startup"}
